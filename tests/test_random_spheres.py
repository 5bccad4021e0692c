"""Tests for the scene factories.

Tests cover:
- Random spheres layout, determinism and camera
- Material showcase layout
"""

import numpy as np
import pytest


class TestRandomSpheresScene:
    """Tests for create_random_spheres_scene."""

    def test_sphere_count_bounds(self):
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=1)
        # Ground + at most 22 * 22 small spheres + 3 feature spheres
        assert 4 < scene.get_sphere_count() <= 1 + 22 * 22 + 3
        assert scene.get_sphere_count() == len(scene.spheres)

    def test_same_seed_same_scene(self):
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        first, _ = create_random_spheres_scene(seed=42)
        first_dict = first.to_dict()
        second, _ = create_random_spheres_scene(seed=42)
        assert second.to_dict() == first_dict

    def test_different_seed_different_scene(self):
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        first, _ = create_random_spheres_scene(seed=1)
        first_dict = first.to_dict()
        second, _ = create_random_spheres_scene(seed=2)
        assert second.to_dict() != first_dict

    def test_ground_and_feature_spheres(self):
        from spheretrace.materials.material import MaterialKind
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=3)
        ground = scene.spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0

        glass, diffuse, metal = scene.spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert scene.get_material_kind(glass.material_id) == MaterialKind.DIELECTRIC
        assert diffuse.center == (-4.0, 1.0, 0.0)
        assert scene.get_material_kind(diffuse.material_id) == MaterialKind.LAMBERTIAN
        assert metal.center == (4.0, 1.0, 0.0)
        assert scene.get_material_info(metal.material_id).params["fuzz"] == pytest.approx(0.2)

    def test_small_spheres_layout(self):
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=5)
        keep_clear = np.array([4.0, 0.2, 0.0])
        for sphere in scene.spheres[1:-3]:
            center = np.array(sphere.center)
            assert sphere.radius == 0.2
            assert center[1] == 0.2
            assert -11.0 <= center[0] < 11.0
            assert -11.0 <= center[2] < 11.0
            assert np.linalg.norm(center - keep_clear) > 0.9

    def test_small_sphere_materials_are_valid(self):
        from spheretrace.materials.material import MaterialKind
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene(seed=6)
        kinds = set()
        for sphere in scene.spheres[1:-3]:
            info = scene.get_material_info(sphere.material_id)
            kinds.add(info.kind)
            if info.kind == MaterialKind.METAL:
                assert all(0.5 <= c <= 1.0 for c in info.params["albedo"])
                assert 0.0 <= info.params["fuzz"] <= 0.5
            elif info.kind == MaterialKind.DIELECTRIC:
                assert info.params["ior"] == 1.5
        # Diffuse spheres dominate any sizeable sample
        assert MaterialKind.LAMBERTIAN in kinds

    def test_camera(self):
        from spheretrace.scene.random_spheres import create_random_spheres_scene

        scene, camera = create_random_spheres_scene(seed=1, aspect_ratio=1.5)
        assert scene.camera is camera
        assert camera.lookfrom == (13.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, 0.0)
        assert camera.vfov == 20.0
        assert camera.aperture == 0.1
        assert camera.focus_dist == 10.0
        assert camera.aspect_ratio == 1.5


class TestMaterialShowcaseScene:
    """Tests for create_material_showcase_scene."""

    def test_layout(self):
        from spheretrace.scene.material_showcase import create_material_showcase_scene

        scene, camera = create_material_showcase_scene()
        assert scene.get_sphere_count() == 5
        assert scene.get_material_count() == 4

        radii = [s.radius for s in scene.spheres]
        assert radii == [100.0, 0.5, 0.5, -0.4, 0.5]
        # Both bubble surfaces share the glass material
        assert scene.spheres[2].material_id == scene.spheres[3].material_id

        assert camera.lookfrom == (0.0, 0.0, 0.0)
        assert camera.vfov == 90.0
        assert camera.aperture == 0.0
