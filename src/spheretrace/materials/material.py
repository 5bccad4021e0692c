"""Material variant and the scene-wide material registry.

Materials form a closed set of three variants: Lambertian, Metal and
Dielectric. Each variant is stored as a tagged Material struct whose ``kind``
field selects the scattering model; the parameters a variant does not use are
left at zero. The path tracer switches over ``kind`` in a single dispatch
function.

Materials are registered once, before rendering, and addressed by a unified
material ID. Primitives store the ID; intersection records carry a value copy
of the Material struct so the integrator never reads the registry again.
"""

from enum import IntEnum

import taichi as ti

from spheretrace.core.ray import vec3


class MaterialKind(IntEnum):
    """Enumeration of supported material variants.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Tagged material value.

    Attributes:
        kind: The MaterialKind of this material (as an integer).
        albedo: Reflectance colour for Lambertian and Metal (RGB in [0, 1]).
        fuzz: Roughness of a Metal in [0, 1].
        ior: Index of refraction of a Dielectric.
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f64
    ior: ti.f64


# Maximum number of materials across all variants
MAX_MATERIALS = 1024

# Structure of Arrays storage indexed by material ID
material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_iors = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all registered materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def validate_albedo(albedo: tuple[float, float, float]) -> None:
    """Check that an albedo has three components, each in [0, 1].

    Raises:
        ValueError: If the albedo does not have 3 components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


def add_material(
    kind: MaterialKind,
    albedo: tuple[float, float, float] = (0.0, 0.0, 0.0),
    fuzz: float = 0.0,
    ior: float = 1.0,
) -> int:
    """Store a material in the registry.

    Parameter validation is the job of the variant-specific helpers
    (add_lambertian_material, add_metal_material, add_dielectric_material).

    Returns:
        The unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_kinds[idx] = int(kind)
    material_albedos[idx] = [float(albedo[0]), float(albedo[1]), float(albedo[2])]
    material_fuzz[idx] = float(fuzz)
    material_iors[idx] = float(ior)
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


def get_material_kind(material_id: int) -> MaterialKind:
    """Get the variant of a registered material (Python side).

    Raises:
        ValueError: If material_id is not a registered material.
    """
    if material_id < 0 or material_id >= num_materials[None]:
        raise ValueError(f"Invalid material_id: {material_id}")
    return MaterialKind(int(material_kinds[material_id]))


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Copy a material out of the registry.

    Args:
        material_id: The unified material ID.

    Returns:
        The Material struct stored under material_id.
    """
    return Material(
        kind=material_kinds[material_id],
        albedo=material_albedos[material_id],
        fuzz=material_fuzz[material_id],
        ior=material_iors[material_id],
    )
