"""Unit tests for the metal material module.

Tests cover:
- Mirror reflection for perfect metals
- Fuzzy reflection and absorption below the surface
- Material registry validation
"""

import math

import pytest
import taichi as ti

N_SAMPLES = 20000


def _scatter_once(albedo, fuzz, direction, normal):
    from spheretrace.core.ray import vec3
    from spheretrace.materials.metal import scatter_metal

    did_scatter = ti.field(dtype=ti.i32, shape=())
    attenuation = ti.Vector.field(3, dtype=ti.f64, shape=())
    out_dir = ti.Vector.field(3, dtype=ti.f64, shape=())
    out_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(a: vec3, f: ti.f64, d: vec3, n: vec3):
        ti.loop_config(serialize=True)
        for _ in range(1):
            ok, att, scattered = scatter_metal(a, f, d, vec3(1.0, 0.0, -1.0), n)
            did_scatter[None] = ok
            attenuation[None] = att
            out_dir[None] = scattered.direction
            out_origin[None] = scattered.origin

    test_kernel(vec3(*albedo), fuzz, vec3(*direction), vec3(*normal))
    return (
        did_scatter[None],
        attenuation[None].to_numpy(),
        out_dir[None].to_numpy(),
        out_origin[None].to_numpy(),
    )


class TestMetalScatter:
    """Tests for scatter_metal."""

    def test_perfect_mirror(self):
        """fuzz = 0 reflects the normalized incoming direction exactly."""
        ok, att, direction, origin = _scatter_once(
            (0.8, 0.6, 0.2), 0.0, (1.0, -1.0, 0.0), (0.0, 1.0, 0.0)
        )
        s = math.sqrt(0.5)
        assert ok == 1
        assert att == pytest.approx((0.8, 0.6, 0.2))
        assert direction == pytest.approx((s, s, 0.0))
        assert origin == pytest.approx((1.0, 0.0, -1.0))

    def test_mirror_direction_is_unit_length(self):
        """The incoming direction is normalized before reflecting."""
        ok, _, direction, _ = _scatter_once(
            (0.5, 0.5, 0.5), 0.0, (0.0, -7.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert ok == 1
        assert direction == pytest.approx((0.0, 1.0, 0.0))

    def test_fuzz_stays_within_ball(self):
        """Fuzzy reflections stay within fuzz of the mirror direction."""
        from spheretrace.core.ray import length, vec3
        from spheretrace.materials.metal import scatter_metal

        max_dev = ti.field(dtype=ti.f64, shape=())
        max_dev[None] = 0.0
        fuzz = 0.3

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for _k in range(N_SAMPLES):
                _ok, _att, scattered = scatter_metal(
                    vec3(0.5, 0.5, 0.5), fuzz, vec3(0.0, -1.0, 0.0), vec3(0.0, 0.0, 0.0), normal
                )
                ti.atomic_max(max_dev[None], length(scattered.direction - normal))

        test_kernel()
        assert max_dev[None] <= fuzz + 1e-12

    def test_grazing_fuzzy_reflection_is_sometimes_absorbed(self):
        """Near-grazing incidence with heavy fuzz pushes some rays below the surface."""
        from spheretrace.core.ray import vec3
        from spheretrace.materials.metal import scatter_metal

        absorbed = ti.field(dtype=ti.i32, shape=())
        scattered_count = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for _k in range(N_SAMPLES):
                ok, _att, _ray = scatter_metal(
                    vec3(0.5, 0.5, 0.5), 1.0, vec3(1.0, -0.05, 0.0), vec3(0.0, 0.0, 0.0), normal
                )
                if ok == 0:
                    absorbed[None] += 1
                else:
                    scattered_count[None] += 1

        test_kernel()
        assert absorbed[None] > 0
        assert scattered_count[None] > 0
        assert absorbed[None] + scattered_count[None] == N_SAMPLES

    def test_scattered_rays_leave_the_surface(self):
        from spheretrace.core.ray import vec3
        from spheretrace.materials.metal import scatter_metal

        bad = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for _k in range(N_SAMPLES):
                ok, _att, scattered = scatter_metal(
                    vec3(0.5, 0.5, 0.5), 0.8, vec3(1.0, -0.3, 0.2), vec3(0.0, 0.0, 0.0), normal
                )
                if ok == 1 and scattered.direction.dot(normal) <= 0.0:
                    bad[None] += 1

        test_kernel()
        assert bad[None] == 0


class TestMetalRegistry:
    """Tests for metal material registration."""

    def test_add_metal_material(self):
        from spheretrace.materials.material import (
            MaterialKind,
            get_material_kind,
            material_fuzz,
        )
        from spheretrace.materials.metal import add_metal_material

        mat_id = add_metal_material((0.7, 0.6, 0.5), fuzz=0.25)
        assert mat_id == 0
        assert get_material_kind(mat_id) == MaterialKind.METAL
        assert material_fuzz[mat_id] == pytest.approx(0.25)

    def test_default_fuzz_is_zero(self):
        from spheretrace.materials.material import material_fuzz
        from spheretrace.materials.metal import add_metal_material

        mat_id = add_metal_material((0.7, 0.6, 0.5))
        assert material_fuzz[mat_id] == 0.0

    @pytest.mark.parametrize("fuzz", [-0.1, 1.5])
    def test_fuzz_validation(self, fuzz):
        from spheretrace.materials.metal import add_metal_material

        with pytest.raises(ValueError, match="Fuzz"):
            add_metal_material((0.5, 0.5, 0.5), fuzz=fuzz)

    def test_fuzz_boundaries_valid(self):
        from spheretrace.materials.metal import add_metal_material

        assert add_metal_material((0.5, 0.5, 0.5), fuzz=0.0) == 0
        assert add_metal_material((0.5, 0.5, 0.5), fuzz=1.0) == 1

    def test_albedo_validation(self):
        from spheretrace.materials.material import get_material_count
        from spheretrace.materials.metal import add_metal_material

        with pytest.raises(ValueError, match="Albedo"):
            add_metal_material((1.2, 0.5, 0.5))
        assert get_material_count() == 0
