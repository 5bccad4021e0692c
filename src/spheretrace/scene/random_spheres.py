"""Random spheres scene configuration.

This module provides a factory function for the field-of-spheres scene: a
huge grey ground sphere covered by a grid of small randomly coloured spheres,
with three large feature spheres (glass, diffuse and metal) in the middle.

Layout:
- Ground: Lambertian grey sphere of radius 1000 centred 1000 units below y=0
- Small spheres: radius 0.2, one per grid cell (a, b) for a, b in [-11, 11),
  jittered inside the cell, skipped when too close to the metal feature sphere
- Feature spheres: radius 1 at (0, 1, 0), (-4, 1, 0) and (4, 1, 0)

The camera looks at the origin from (13, 2, 3) with a narrow field of view and
a small aperture focused at distance 10, which gives a soft depth of field.

Scene construction is deterministic for a given seed; the random choices use
NumPy's Generator and are independent of the Taichi render seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.random_spheres import create_random_spheres_scene
    >>> from spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=7)
    >>> setup_camera(camera)
"""

import numpy as np

from spheretrace.camera.thin_lens import ThinLensCamera
from spheretrace.scene.manager import SceneManager

# =============================================================================
# Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

# Small spheres are placed on the grid [-GRID_EXTENT, GRID_EXTENT)^2
GRID_EXTENT = 11
SMALL_SPHERE_RADIUS = 0.2
CELL_JITTER = 0.9

# Small spheres closer than this to KEEP_CLEAR_POINT are skipped
KEEP_CLEAR_POINT = (4.0, 0.2, 0.0)
KEEP_CLEAR_DISTANCE = 0.9

# Material mix: P(diffuse) = 0.8, P(metal) = 0.15, P(glass) = 0.05
DIFFUSE_THRESHOLD = 0.8
METAL_THRESHOLD = 0.95

GLASS_IOR = 1.5

# Camera
LOOKFROM = (13.0, 2.0, 3.0)
LOOKAT = (0.0, 0.0, 0.0)
VUP = (0.0, 1.0, 0.0)
VFOV = 20.0
APERTURE = 0.1
FOCUS_DIST = 10.0


# =============================================================================
# Random Spheres Factory
# =============================================================================


def create_random_spheres_scene(
    seed: int | None = None,
    aspect_ratio: float = 16.0 / 9.0,
) -> tuple[SceneManager, ThinLensCamera]:
    """Create the random spheres scene.

    Args:
        seed: Seed for the scene layout. None draws fresh entropy, so every
            call gives a different arrangement.
        aspect_ratio: Aspect ratio for the returned camera.

    Returns:
        A tuple of (SceneManager, ThinLensCamera). The camera is also
        attached to the scene.
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    scene.add_lambertian_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)

    keep_clear = np.array(KEEP_CLEAR_POINT)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = np.array(
                [
                    a + CELL_JITTER * rng.random(),
                    SMALL_SPHERE_RADIUS,
                    b + CELL_JITTER * rng.random(),
                ]
            )

            if np.linalg.norm(center - keep_clear) <= KEEP_CLEAR_DISTANCE:
                continue

            center_tuple = tuple(float(c) for c in center)
            if choose_mat < DIFFUSE_THRESHOLD:
                albedo = rng.random(3) * rng.random(3)
                scene.add_lambertian_sphere(center_tuple, SMALL_SPHERE_RADIUS, tuple(albedo))
            elif choose_mat < METAL_THRESHOLD:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = float(rng.uniform(0.0, 0.5))
                scene.add_metal_sphere(center_tuple, SMALL_SPHERE_RADIUS, tuple(albedo), fuzz)
            else:
                scene.add_dielectric_sphere(center_tuple, SMALL_SPHERE_RADIUS, GLASS_IOR)

    # Feature spheres
    scene.add_dielectric_sphere((0.0, 1.0, 0.0), 1.0, GLASS_IOR)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, (0.2, 0.2, 0.5))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, (0.7, 0.6, 0.5), 0.2)

    camera = ThinLensCamera(
        lookfrom=LOOKFROM,
        lookat=LOOKAT,
        vup=VUP,
        vfov=VFOV,
        aspect_ratio=aspect_ratio,
        aperture=APERTURE,
        focus_dist=FOCUS_DIST,
    )
    scene.set_camera(camera)

    return scene, camera
