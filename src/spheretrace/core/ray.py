"""Ray data structure and vector utilities for the path tracer.

This module provides the fundamental Ray dataclass, the 3-component vector
algebra used for positions, directions and linear RGB colours, and the random
sampling helpers that drive the Monte Carlo integrator. All operations are
Taichi functions and run inside kernels.

Vectors are 64-bit (``ti.f64``). Direction vectors are never normalized
implicitly; callers normalize where a formula needs a unit vector.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# 3D vector / linear RGB colour with double precision components
vec3 = ti.types.vector(3, ti.f64)

# Components with magnitude below this are treated as zero by near_zero()
NEAR_ZERO_EPSILON = 1e-8

# Upper bound on accept/reject draws for the rejection samplers
MAX_REJECTION_ATTEMPTS = 100


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    There is no zero-length guard: normalizing a zero vector yields
    non-finite components, so callers must not pass one.

    Args:
        v: The input vector.

    Returns:
        v / length(v).
    """
    return v / length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Used to detect degenerate scatter directions.

    Args:
        v: The vector to check.

    Returns:
        1 if every component's magnitude is below 1e-8, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * (incident . normal) * normal. The normal should be
    unit length; the result has the same length as the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f64) -> vec3:
    """Refract a unit incident vector through a surface using Snell's law.

    The refracted ray is split into the components perpendicular and parallel
    to the normal. Total internal reflection is not detected here: the caller
    must check that eta * sin(theta) <= 1 before refracting.

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal on the incident side (unit length).
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector.
    """
    cos_theta = tm.min(-tm.dot(incident, normal), 1.0)
    r_out_perp = eta * (incident + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def reflectance(cosine: ti.f64, ref_idx: ti.f64) -> ti.f64:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - ref_idx) / (1 + ref_idx))^2.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_double() -> ti.f64:
    """Uniform random number in [0, 1)."""
    return ti.random(ti.f64)


@ti.func
def random_double_range(min_value: ti.f64, max_value: ti.f64) -> ti.f64:
    """Uniform random number in [min_value, max_value)."""
    return min_value + (max_value - min_value) * random_double()


@ti.func
def random_vec3() -> vec3:
    """Vector with each component uniform in [0, 1)."""
    return vec3(random_double(), random_double(), random_double())


@ti.func
def random_vec3_range(min_value: ti.f64, max_value: ti.f64) -> vec3:
    """Vector with each component uniform in [min_value, max_value)."""
    return min_value + (max_value - min_value) * random_vec3()


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit ball.

    Uses rejection sampling: points are drawn from the cube [-1, 1]^3 until
    one falls strictly inside the ball. The loop is capped at
    MAX_REJECTION_ATTEMPTS draws; if every draw is rejected the origin is
    returned, and the assertion reports it when Taichi runs in debug mode.

    Returns:
        A random point with squared length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = random_vec3_range(-1.0, 1.0)
            if length_squared(candidate) < 1.0:
                p = candidate
                found = True
    assert found, "random_in_unit_sphere ran out of rejection attempts"
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    return normalize(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Same rejection technique as random_in_unit_sphere() restricted to two
    dimensions. Used for lens sampling in the thin-lens camera.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(random_double_range(-1.0, 1.0), random_double_range(-1.0, 1.0), 0.0)
            if length_squared(candidate) < 1.0:
                p = candidate
                found = True
    assert found, "random_in_unit_disk ran out of rejection attempts"
    return p
