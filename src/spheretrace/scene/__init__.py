"""Scene module for scene management and hit records.

Components:
    intersection: Sphere storage and the nearest-hit scene query
    manager: Scene manager coordinating spheres, materials and camera
    random_spheres: Field of random small spheres around three feature spheres
    material_showcase: One sphere per material, including a hollow glass ball

Scene data is stored in Taichi fields using a Structure-of-Arrays layout.
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)
from .material_showcase import create_material_showcase_scene
from .random_spheres import create_random_spheres_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    # Scenes
    "create_random_spheres_scene",
    "create_material_showcase_scene",
]
