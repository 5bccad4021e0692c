"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector algebra and random sampling helpers
    integrator: Radiance estimate along a ray and the parallel render pass
    progressive: Batched sample accumulation with progress reporting

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    MAX_REJECTION_ATTEMPTS,
    NEAR_ZERO_EPSILON,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_double,
    random_double_range,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    random_vec3_range,
    ray_at,
    reflect,
    reflectance,
    refract,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from spheretrace.core.integrator or spheretrace.core.progressive when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
    "reflectance",
    "random_double",
    "random_double_range",
    "random_vec3",
    "random_vec3_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "NEAR_ZERO_EPSILON",
    "MAX_REJECTION_ATTEMPTS",
]
