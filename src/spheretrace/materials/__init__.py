"""Materials module for light scattering models.

Components:
    material: Tagged Material struct and the material registry
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance

Each variant provides a ``scatter_*`` Taichi function and an ``add_*_material``
helper that validates parameters and registers the material.
"""

from .dielectric import (
    add_dielectric_material,
    cannot_refract,
    refraction_ratio_for,
    scatter_dielectric,
)
from .lambertian import add_lambertian_material, scatter_lambertian
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialKind,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
    get_material_kind,
    validate_albedo,
)
from .metal import add_metal_material, scatter_metal

__all__ = [
    # Registry
    "Material",
    "MaterialKind",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "get_material_kind",
    "validate_albedo",
    # Lambertian
    "scatter_lambertian",
    "add_lambertian_material",
    # Metal
    "scatter_metal",
    "add_metal_material",
    # Dielectric
    "scatter_dielectric",
    "add_dielectric_material",
    "cannot_refract",
    "refraction_ratio_for",
]
