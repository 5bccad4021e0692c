"""Dielectric (glass/water) material implementation.

This module implements the dielectric scattering model for transparent
materials like glass and water.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when refraction_ratio * sin(theta) > 1

The material chooses between reflection and refraction at random, with the
reflection probability given by Schlick's approximation. Averaged over many
samples this yields the partial reflection seen on glass.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # attenuation, scattered = scatter_dielectric(
    >>> #     ior, incident_dir, point, normal, front_face
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import (
    make_ray,
    normalize,
    random_double,
    reflect,
    reflectance,
    refract,
    vec3,
)
from spheretrace.materials.material import MaterialKind, add_material


@ti.func
def refraction_ratio_for(ior: ti.f64, front_face: ti.i32) -> ti.f64:
    """Ratio of refractive indices for a hit.

    Entering the medium (front face) the ratio is 1 / ior; leaving it
    (back face) the ratio is ior.
    """
    ratio = 1.0 / ior
    if front_face == 0:
        ratio = ior
    return ratio


@ti.func
def cannot_refract(ior: ti.f64, incident_direction: vec3, normal: vec3, front_face: ti.i32) -> ti.i32:
    """Determine if total internal reflection will occur.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hit the outside of the surface.

    Returns:
        1 if the ray cannot refract, 0 otherwise.
    """
    ratio = refraction_ratio_for(ior, front_face)
    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(-tm.dot(unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    ior: ti.f64,
    incident_direction: vec3,
    point: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Scatter a ray off a dielectric surface.

    Dielectrics always scatter: the ray is either reflected or refracted.
    Reflection happens on total internal reflection, or when a uniform random
    draw falls below the Schlick reflectance.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        point: The intersection point, used as the scattered ray origin.
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hit the outside of the surface,
            0 if it hit from within the material.

    Returns:
        A tuple of (attenuation, scattered) where:
        - attenuation: Always white; dielectrics absorb nothing.
        - scattered: The reflected or refracted Ray.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    ratio = refraction_ratio_for(ior, front_face)
    unit_direction = normalize(incident_direction)

    # Clamp guards against dot products slightly above 1
    cos_theta = tm.min(-tm.dot(unit_direction, normal), 1.0)
    total_internal = cannot_refract(ior, incident_direction, normal, front_face)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if total_internal or random_double() < reflectance(cos_theta, ratio):
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, ratio)

    return attenuation, make_ray(point, scattered_direction)


def add_dielectric_material(ior: float = 1.5) -> int:
    """Register a dielectric material.

    Args:
        ior: Index of refraction. Default is 1.5 (typical glass).
            Must be positive. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Returns:
        The unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If ior is not positive.
    """
    if ior <= 0.0:
        raise ValueError(f"Index of refraction = {ior} must be positive.")

    return add_material(MaterialKind.DIELECTRIC, ior=ior)
