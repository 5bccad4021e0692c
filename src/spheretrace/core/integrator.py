"""Path tracing integrator for Monte Carlo light transport.

This module implements the recursive radiance estimate as an iterative loop
and the parallel rendering kernel that accumulates it into an image buffer.

A camera ray is traced through the scene, bouncing off surfaces according to
their material. Each bounce multiplies the path throughput by the material's
attenuation. A path ends when it:
    - misses every sphere (it picks up the sky colour),
    - is absorbed by a material (black),
    - or runs out of bounces (black).

There are no emitters in the scene; all light comes from the sky gradient.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Sky gradient background from white at the horizon to light blue overhead
    - Bounce limit instead of Russian roulette
    - NaN/Inf sample rejection so a single bad path cannot poison a pixel

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.integrator import render_pass
    >>> from spheretrace.scene.random_spheres import create_random_spheres_scene
    >>> from spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=1)
    >>> setup_camera(camera)
    >>> accum = np.zeros((400, 225, 3), dtype=np.float64)
    >>> render_pass(accum, num_samples=100)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretrace.camera.thin_lens import get_ray_jittered, is_camera_ready
from spheretrace.core.ray import Ray, make_ray, normalize, vec3
from spheretrace.materials.dielectric import scatter_dielectric
from spheretrace.materials.lambertian import scatter_lambertian
from spheretrace.materials.material import MaterialKind
from spheretrace.materials.metal import scatter_metal
from spheretrace.scene.intersection import SceneHitRecord, intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# t_min and t_max for ray intersection; T_MIN keeps scattered rays from
# re-hitting the surface they left
T_MIN = 0.001
T_MAX = float("inf")

# Sky gradient endpoints
SKY_HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = vec3(0.5, 0.7, 1.0)


# =============================================================================
# Background
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    """Sky colour seen along a ray that escapes the scene.

    Blends linearly from white to light blue on the y component of the
    normalized direction.

    Args:
        direction: The ray direction (any non-zero length).

    Returns:
        The sky radiance (RGB).
    """
    unit_direction = normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * SKY_HORIZON_COLOR + t * SKY_ZENITH_COLOR


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(ray_in: Ray, rec: SceneHitRecord):
    """Dispatch to the scattering function of the hit material.

    Args:
        ray_in: The incoming ray.
        rec: The scene hit record, carrying a copy of the hit material.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if the ray scattered, 0 if absorbed.
        - attenuation: The colour attenuation for this bounce.
        - scattered: The scattered Ray. Only meaningful if did_scatter == 1.
    """
    mat = rec.material

    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    scattered = make_ray(rec.point, rec.normal)

    if mat.kind == int(MaterialKind.LAMBERTIAN):
        attenuation, scattered = scatter_lambertian(mat.albedo, rec.point, rec.normal)
        did_scatter = 1

    elif mat.kind == int(MaterialKind.METAL):
        did_scatter, attenuation, scattered = scatter_metal(
            mat.albedo, mat.fuzz, ray_in.direction, rec.point, rec.normal
        )

    elif mat.kind == int(MaterialKind.DIELECTRIC):
        attenuation, scattered = scatter_dielectric(
            mat.ior, ray_in.direction, rec.point, rec.normal, rec.front_face
        )
        did_scatter = 1

    return did_scatter, attenuation, scattered


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Number of scene queries allowed. 0 or less yields black.

    Returns:
        The estimated radiance (RGB) for this path sample.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = make_ray(ray.origin, ray.direction)

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background(current.direction)
                active = 0
            else:
                did_scatter, attenuation, scattered = scatter_material(current, rec)

                if did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    current = scattered

    return color


@ti.func
def render_sample_impl(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
) -> vec3:
    """Trace one jittered camera ray through a pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce limit for the path.

    Returns:
        The estimated radiance (RGB) for this sample.
    """
    return ray_color(get_ray_jittered(pixel_i, pixel_j, width, height), max_depth)


@ti.func
def _sanitize(color: vec3) -> vec3:
    """Replace NaN and Inf components with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pass(
    accum: ti.types.ndarray(dtype=ti.f64, ndim=3),
    width: ti.i32,
    height: ti.i32,
    num_samples: ti.i32,
    max_depth: ti.i32,
):
    """Trace num_samples paths through every pixel and add their sum.

    Pixels are independent, so the outer loop runs in parallel; the sample
    loop for a single pixel is serial and accumulates into a local sum.
    """
    for i, j in ti.ndrange(width, height):
        pixel_sum = vec3(0.0, 0.0, 0.0)
        for _ in range(num_samples):
            pixel_sum += _sanitize(render_sample_impl(i, j, width, height, max_depth))

        for c in ti.static(range(3)):
            accum[i, j, c] += pixel_sum[c]


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    # Keep the bounce loop inside a serial outer loop
    ti.loop_config(serialize=True)
    for _ in range(1):
        color = render_sample_impl(pixel_i, pixel_j, width, height, max_depth)
    return color


@ti.kernel
def _trace_ray(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    ti.loop_config(serialize=True)
    for _ in range(1):
        color = ray_color(make_ray(origin, direction), max_depth)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def _check_camera_ready() -> None:
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


def render_pass(accum: np.ndarray, num_samples: int = 1, max_depth: int = MAX_DEPTH) -> None:
    """Add num_samples samples per pixel to an accumulation buffer.

    The buffer holds the running sum of samples, indexed [i, j, channel]
    with i = 0 at the left and j = 0 at the bottom of the image. Divide by
    the total sample count to get the estimate.

    Args:
        accum: float64 array of shape (width, height, 3), updated in place.
        num_samples: Samples per pixel to add in this pass.
        max_depth: Bounce limit for every path.

    Raises:
        ValueError: If accum has the wrong shape or dtype.
        RuntimeError: If the camera has not been set up.
    """
    if accum.ndim != 3 or accum.shape[2] != 3 or accum.dtype != np.float64:
        raise ValueError(
            f"Accumulation buffer must be float64 with shape (width, height, 3), "
            f"got {accum.dtype} {accum.shape}"
        )
    _check_camera_ready()

    if num_samples <= 0:
        return

    width, height = accum.shape[0], accum.shape[1]
    _render_pass(accum, width, height, num_samples, max_depth)


def render_sample(
    pixel_i: int,
    pixel_j: int,
    width: int,
    height: int,
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_pass() which processes all pixels in parallel.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    _check_camera_ready()

    color = _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Estimate the radiance along an arbitrary ray (one sample).

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_ray(vec3(*origin), vec3(*direction), max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
