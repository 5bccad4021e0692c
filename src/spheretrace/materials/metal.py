"""Metal (specular reflective) material implementation.

This module implements the metal scattering model: mirror reflection of the
normalized incoming direction, perturbed by a random offset scaled by the fuzz
parameter. Perfect metals (fuzz=0) produce mirror-like reflections, while
fuzzier metals scatter reflected rays within a ball around the mirror
direction.

The reflection formula is:
    R = I - 2(I . N)N

If the perturbed direction points into the surface the ray is absorbed. This
is how fuzzy metals darken at grazing angles.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, point, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import (
    make_ray,
    normalize,
    random_in_unit_sphere,
    reflect,
    vec3,
)
from spheretrace.materials.material import MaterialKind, add_material, validate_albedo


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f64,
    incident_direction: vec3,
    point: vec3,
    normal: vec3,
):
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective colour (RGB, each component in [0, 1]).
        fuzz: The surface roughness in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any length).
        point: The intersection point, used as the scattered ray origin.
        normal: The unit surface normal facing the incoming ray.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if the ray left the surface, 0 if absorbed.
        - attenuation: The colour attenuation (the albedo).
        - scattered: The scattered Ray. Only meaningful if did_scatter == 1.
    """
    reflected = reflect(normalize(incident_direction), normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return did_scatter, albedo, make_ray(point, scattered_direction)


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzz: float = 0.0,
) -> int:
    """Register a metal material.

    Args:
        albedo: The reflective colour as (R, G, B) tuple.
            Each component must be in [0, 1].
        fuzz: The surface roughness in [0, 1]. Default is 0 (perfect mirror).

    Returns:
        The unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
        ValueError: If fuzz is outside [0, 1].
    """
    validate_albedo(albedo)

    if fuzz < 0.0 or fuzz > 1.0:
        raise ValueError(
            f"Fuzz = {fuzz} is outside [0, 1]. "
            "Fuzz must be between 0 (perfect mirror) and 1 (maximum roughness)."
        )

    return add_material(MaterialKind.METAL, albedo=albedo, fuzz=fuzz)
