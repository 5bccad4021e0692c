"""Scene-level primitive storage and nearest-hit testing.

This module stores the scene's spheres in Taichi fields and provides the
scene-level ray query that returns the closest hit together with a copy of
the hit sphere's material.

The query is a linear scan over every sphere. Each accepted hit shrinks the
upper bound of the search interval, so later spheres are tested against an
ever-tighter interval and the surviving record is the nearest one. There is
no spatial acceleration structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.intersection import (
    ...     SceneHitRecord, add_sphere, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -1), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from spheretrace.core.ray import Ray, vec3
from spheretrace.geometry.sphere import HitRecord, Sphere, hit_sphere
from spheretrace.materials.material import Material, get_material


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Extends the basic HitRecord with a value copy of the hit material.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal, oriented against the incoming ray.
            Only valid if hit == 1.
        front_face: Whether the ray hit the front face (1) or back face (0).
            Only valid if hit == 1.
        material: The material of the hit primitive. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material: Material


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the sphere count to zero. The actual field data is not cleared but
    will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere. Negative values describe an
            inward-facing shell.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = float(radius)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def _hit_record_to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    """Attach a copy of the sphere's material to a primitive hit record."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material=get_material(material_id),
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material=Material(kind=-1, albedo=vec3(0.0, 0.0, 0.0), fuzz=0.0, ior=0.0),
    )


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f64, t_max: ti.f64) -> SceneHitRecord:
    """Find the nearest intersection of a ray with the scene.

    Iterates through all spheres in insertion order, testing each against
    (t_min, closest_so_far] and keeping the closest hit.

    Args:
        ray: The ray to test.
        t_min: Exclusive lower bound on t.
        t_max: Inclusive upper bound on t.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record (hit == 0) if no sphere was hit.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _hit_record_to_scene_hit_record(rec, sphere_material_ids[i])

    return result
