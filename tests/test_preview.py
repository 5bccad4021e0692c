"""Tests for the preview and export utilities.

Tests cover:
- Gamma correction
- 8-bit quantization
- PPM and Pillow writers
- Matplotlib preview (non-interactive backend)
"""

import io

import matplotlib
import numpy as np
import pytest
from PIL import Image as PILImage

matplotlib.use("Agg")


class TestApplyGamma:
    """Tests for apply_gamma."""

    def test_square_root_by_default(self):
        from spheretrace.preview.display import apply_gamma

        image = np.array([[[0.25, 0.0, 1.0]]])
        assert apply_gamma(image) == pytest.approx(np.array([[[0.5, 0.0, 1.0]]]))

    def test_gamma_one_is_clamp_only(self):
        from spheretrace.preview.display import apply_gamma

        image = np.array([[[0.25, -0.5, 3.0]]])
        assert apply_gamma(image, gamma=1.0) == pytest.approx(np.array([[[0.25, 0.0, 1.0]]]))

    def test_negative_values_do_not_produce_nan(self):
        from spheretrace.preview.display import apply_gamma

        result = apply_gamma(np.full((2, 2, 3), -1.0))
        assert np.all(np.isfinite(result))
        assert not result.any()


class TestImageToUint8:
    """Tests for image_to_uint8."""

    def test_quantization_formula(self):
        from spheretrace.preview.export import image_to_uint8

        image = np.array([[[0.0, 0.25, 1.0], [0.5, 0.7, 4.0]]])
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.tolist() == [[[0, 128, 255], [181, 214, 255]]]

    def test_values_in_range(self):
        from spheretrace.preview.export import image_to_uint8

        rng = np.random.default_rng(0)
        result = image_to_uint8(rng.uniform(-1.0, 2.0, size=(5, 7, 3)))
        assert result.shape == (5, 7, 3)
        assert result.min() >= 0
        assert result.max() <= 255


class TestPPMWriter:
    """Tests for the plain PPM writer."""

    def test_header_and_pixel_order(self):
        from spheretrace.preview.export import write_ppm

        image = np.array(
            [
                [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
                [[10, 11, 12], [13, 14, 15], [16, 17, 18]],
            ],
            dtype=np.uint8,
        )
        stream = io.StringIO()
        write_ppm(image, stream)
        assert stream.getvalue() == (
            "P3\n3 2\n255\n"
            "1 2 3\n4 5 6\n7 8 9\n"
            "10 11 12\n13 14 15\n16 17 18\n"
        )

    def test_rejects_grayscale(self):
        from spheretrace.preview.export import write_ppm

        with pytest.raises(ValueError, match="Expected an"):
            write_ppm(np.zeros((2, 2), dtype=np.uint8), io.StringIO())


class TestSaveImage:
    """Tests for save_image dispatch."""

    def test_ppm_extension_writes_plain_text(self, tmp_path):
        from spheretrace.preview.export import save_image

        path = tmp_path / "image.PPM"
        save_image(np.full((1, 2, 3), 7, dtype=np.uint8), str(path))
        assert path.read_text() == "P3\n2 1\n255\n7 7 7\n7 7 7\n"

    def test_png_extension_uses_pillow(self, tmp_path):
        from spheretrace.preview.export import save_image

        image = np.zeros((3, 4, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)
        path = tmp_path / "image.png"
        save_image(image, str(path))

        with PILImage.open(path) as loaded:
            assert loaded.size == (4, 3)
            assert loaded.mode == "RGB"
            assert np.array_equal(np.asarray(loaded), image)


class TestSinglePixelRender:
    """End-to-end check of a 1x1 render of the sky."""

    def test_straight_up_pixel(self):
        from spheretrace.camera.thin_lens import ThinLensCamera, setup_camera
        from spheretrace.core.progressive import ProgressiveRenderer

        setup_camera(
            ThinLensCamera(
                lookfrom=(0.0, 0.0, 0.0),
                lookat=(0.0, 1.0, 0.0),
                vup=(0.0, 0.0, -1.0),
                vfov=1.0,
                aspect_ratio=1.0,
            )
        )
        renderer = ProgressiveRenderer(1, 1)
        renderer.render(1)

        stream = io.StringIO()
        renderer.write_ppm(stream)
        assert stream.getvalue() == "P3\n1 1\n255\n181 214 255\n"


class TestShowPreview:
    """Tests for the Matplotlib preview."""

    def test_show_preview_default_title(self, monkeypatch):
        import matplotlib.pyplot as plt

        from spheretrace.core.progressive import ProgressiveRenderer
        from spheretrace.preview.display import show_preview

        monkeypatch.setattr(plt, "show", lambda **kwargs: None)
        renderer = ProgressiveRenderer(4, 2)
        show_preview(renderer, block=False)

        fig = plt.gcf()
        assert fig.axes[0].get_title() == "Render Preview - 0 SPP"
        plt.close(fig)
