"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters every incoming ray. The outgoing direction is
the surface normal plus a random unit vector, which concentrates directions
around the normal (a cosine-like lobe) without building a local frame.

If the random unit vector almost exactly cancels the normal, the sum is a
degenerate near-zero direction; the normal itself is used instead.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # attenuation, scattered = scatter_lambertian(albedo, point, normal)
"""

import taichi as ti

from spheretrace.core.ray import (
    make_ray,
    near_zero,
    random_unit_vector,
    vec3,
)
from spheretrace.materials.material import MaterialKind, add_material, validate_albedo


@ti.func
def scatter_lambertian(albedo: vec3, point: vec3, normal: vec3):
    """Scatter a ray off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance colour (RGB, each component in [0, 1]).
        point: The intersection point, used as the scattered ray origin.
        normal: The unit surface normal facing the incoming ray.

    Returns:
        A tuple of (attenuation, scattered) where:
        - attenuation: The colour attenuation (the albedo).
        - scattered: The scattered Ray. Its direction is not normalized.
    """
    scatter_direction = normal + random_unit_vector()

    # Degenerate direction: the random vector cancelled the normal
    if near_zero(scatter_direction):
        scatter_direction = normal

    return albedo, make_ray(point, scatter_direction)


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Register a Lambertian material.

    Args:
        albedo: The diffuse reflectance colour as (R, G, B) tuple.
            Each component must be in [0, 1].

    Returns:
        The unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    validate_albedo(albedo)
    return add_material(MaterialKind.LAMBERTIAN, albedo=albedo)
