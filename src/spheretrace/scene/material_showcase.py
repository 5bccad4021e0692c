"""Material showcase scene configuration.

Three spheres in a row on a large yellowish ground sphere, one per material:
- Left: a glass ball made hollow by a second, inward-facing glass sphere
  (negative radius) inside it, which renders as a thin bubble
- Centre: blue diffuse
- Right: polished gold metal

The camera sits at the origin looking down -z with no defocus blur.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.material_showcase import create_material_showcase_scene
    >>> scene, camera = create_material_showcase_scene()
"""

from spheretrace.camera.thin_lens import ThinLensCamera
from spheretrace.scene.manager import SceneManager

GROUND_ALBEDO = (0.8, 0.8, 0.0)
CENTER_ALBEDO = (0.1, 0.2, 0.5)
METAL_ALBEDO = (0.8, 0.6, 0.2)
GLASS_IOR = 1.5


def create_material_showcase_scene(
    aspect_ratio: float = 16.0 / 9.0,
) -> tuple[SceneManager, ThinLensCamera]:
    """Create the material showcase scene.

    Args:
        aspect_ratio: Aspect ratio for the returned camera.

    Returns:
        A tuple of (SceneManager, ThinLensCamera). The camera is also
        attached to the scene.
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    center = scene.add_lambertian_material(CENTER_ALBEDO)
    glass = scene.add_dielectric_material(GLASS_IOR)
    gold = scene.add_metal_material(METAL_ALBEDO, fuzz=0.0)

    scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.0), 0.5, center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, glass)
    # Inner surface of the bubble; shares the glass material
    scene.add_sphere((-1.0, 0.0, -1.0), -0.4, glass)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)

    camera = ThinLensCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=1.0,
    )
    scene.set_camera(camera)

    return scene, camera
