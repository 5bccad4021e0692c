"""Unit tests for the dielectric material module.

Tests cover:
- Refraction ratio selection by face
- Total internal reflection
- Fresnel (Schlick) reflection probability
- Material registry validation
"""

import math

import pytest
import taichi as ti

N_SAMPLES = 20000


class TestRefractionRatio:
    """Tests for refraction_ratio_for and cannot_refract."""

    def test_ratio_by_face(self):
        from spheretrace.materials.dielectric import refraction_ratio_for

        entering = ti.field(dtype=ti.f64, shape=())
        leaving = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            entering[None] = refraction_ratio_for(1.5, 1)
            leaving[None] = refraction_ratio_for(1.5, 0)

        test_kernel()
        assert entering[None] == pytest.approx(1.0 / 1.5)
        assert leaving[None] == pytest.approx(1.5)

    def test_cannot_refract(self):
        """Steep exit from glass is total internal reflection; entry never is."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import cannot_refract

        tir_inside = ti.field(dtype=ti.i32, shape=())
        tir_outside = ti.field(dtype=ti.i32, shape=())
        tir_normal = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            tir_inside[None] = cannot_refract(1.5, vec3(0.8, -0.6, 0.0), n, 0)
            tir_outside[None] = cannot_refract(1.5, vec3(0.8, -0.6, 0.0), n, 1)
            tir_normal[None] = cannot_refract(1.5, vec3(0.0, -1.0, 0.0), n, 0)

        test_kernel()
        assert tir_inside[None] == 1
        assert tir_outside[None] == 0
        assert tir_normal[None] == 0


class TestDielectricScatter:
    """Tests for scatter_dielectric."""

    def test_index_one_passes_straight_through(self):
        """With ior 1 at normal incidence the ray continues unchanged."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import scatter_dielectric

        attenuation = ti.Vector.field(3, dtype=ti.f64, shape=())
        direction = ti.Vector.field(3, dtype=ti.f64, shape=())
        origin = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            att, scattered = scatter_dielectric(
                1.0, vec3(0.0, 0.0, -3.0), vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1
            )
            attenuation[None] = att
            direction[None] = scattered.direction
            origin[None] = scattered.origin

        test_kernel()
        assert attenuation[None].to_numpy() == pytest.approx((1.0, 1.0, 1.0))
        assert direction[None].to_numpy() == pytest.approx((0.0, 0.0, -1.0))
        assert origin[None].to_numpy() == pytest.approx((0.0, 0.0, -1.0))

    def test_total_internal_reflection(self):
        """Leaving glass at a steep angle always reflects."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import scatter_dielectric

        mismatches = ti.field(dtype=ti.i32, shape=())
        sample_dir = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            for _k in range(1000):
                _att, scattered = scatter_dielectric(
                    1.5, vec3(0.8, -0.6, 0.0), vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), 0
                )
                d = scattered.direction
                if ti.abs(d.x - 0.8) > 1e-9 or ti.abs(d.y - 0.6) > 1e-9 or ti.abs(d.z) > 1e-9:
                    mismatches[None] += 1
                sample_dir[None] = d

        test_kernel()
        assert mismatches[None] == 0
        assert sample_dir[None].to_numpy() == pytest.approx((0.8, 0.6, 0.0))

    def test_reflects_whenever_cannot_refract(self):
        """Across exit angles, every ray past the critical angle stays inside."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import cannot_refract, scatter_dielectric

        tir_angles = ti.field(dtype=ti.i32, shape=())
        escaped = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for k in range(90):
                theta = (k + 0.5) * (math.pi / 180.0)
                d = vec3(ti.sin(theta), -ti.cos(theta), 0.0)
                if cannot_refract(1.5, d, normal, 0):
                    tir_angles[None] += 1
                    for _k in range(50):
                        _att, scattered = scatter_dielectric(1.5, d, vec3(0.0, 0.0, 0.0), normal, 0)
                        if scattered.direction.y <= 0.0:
                            escaped[None] += 1

        test_kernel()
        # Critical angle for glass to air is asin(1 / 1.5), about 41.8 degrees
        assert tir_angles[None] == 48
        assert escaped[None] == 0

    def test_normal_incidence_reflects_about_four_percent(self):
        """Schlick gives R0 = ((1 - 1.5) / (1 + 1.5))^2 = 0.04 head-on."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import scatter_dielectric

        reflected = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _k in range(N_SAMPLES):
                _att, scattered = scatter_dielectric(
                    1.5, vec3(0.0, -1.0, 0.0), vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), 1
                )
                if scattered.direction.y > 0.0:
                    reflected[None] += 1

        test_kernel()
        assert reflected[None] / N_SAMPLES == pytest.approx(0.04, abs=0.01)

    def test_refracted_ray_bends_toward_normal(self):
        """Entering glass the transmitted ray obeys Snell's law."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.dielectric import scatter_dielectric

        refracted_sin = ti.field(dtype=ti.f64, shape=())
        refracted_count = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            s = ti.sqrt(0.5)
            for _k in range(1000):
                _att, scattered = scatter_dielectric(
                    1.5, vec3(s, -s, 0.0), vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), 1
                )
                d = scattered.direction
                if d.y < 0.0:
                    refracted_sin[None] += d.x / d.norm()
                    refracted_count[None] += 1

        test_kernel()
        assert refracted_count[None] > 0
        mean_sin = refracted_sin[None] / refracted_count[None]
        assert mean_sin == pytest.approx(math.sqrt(0.5) / 1.5)


class TestDielectricRegistry:
    """Tests for dielectric material registration."""

    def test_add_dielectric_material(self):
        from spheretrace.materials.dielectric import add_dielectric_material
        from spheretrace.materials.material import MaterialKind, get_material_kind, material_iors

        mat_id = add_dielectric_material(1.33)
        assert get_material_kind(mat_id) == MaterialKind.DIELECTRIC
        assert material_iors[mat_id] == pytest.approx(1.33)

    def test_default_ior_is_glass(self):
        from spheretrace.materials.dielectric import add_dielectric_material
        from spheretrace.materials.material import material_iors

        mat_id = add_dielectric_material()
        assert material_iors[mat_id] == pytest.approx(1.5)

    def test_ior_below_one_is_allowed(self):
        """A negative-radius bubble or exotic medium may use ior < 1."""
        from spheretrace.materials.dielectric import add_dielectric_material

        assert add_dielectric_material(0.75) == 0

    @pytest.mark.parametrize("ior", [0.0, -1.5])
    def test_ior_must_be_positive(self, ior):
        from spheretrace.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError, match="must be positive"):
            add_dielectric_material(ior)
