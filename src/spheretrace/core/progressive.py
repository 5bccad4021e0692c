"""Progressive renderer for iterative sample accumulation.

This module provides a convenient wrapper around the core integrator that supports:
- Progressive rendering that refines over time
- Batch rendering (multiple SPP in one call)
- Progress callbacks for UI updates
- Easy reset and re-render functionality

The ProgressiveRenderer owns the accumulation buffer: a float64 NumPy array
holding the per-pixel sum of all samples traced so far. The averaged image is
that sum divided by the sample count.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>> from spheretrace.scene.random_spheres import create_random_spheres_scene
    >>> from spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=1)
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100)  # Render 100 SPP
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from spheretrace.core.integrator import MAX_DEPTH, render_pass
from spheretrace.preview.export import image_to_uint8, save_image, write_ppm

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce limit applied to every path.
    """

    def __init__(self, width: int, height: int, max_depth: int = MAX_DEPTH) -> None:
        """Initialize the progressive renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            max_depth: Bounce limit applied to every path.

        Raises:
            ValueError: If a dimension is not positive or max_depth is negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth = {max_depth} must not be negative")
        self.max_depth = max_depth
        self.resize(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return self._sample_count

    def reset(self) -> None:
        """Reset the accumulator for a new render.

        Clears the sum buffer and sample count, allowing a fresh render
        without changing the image dimensions.
        """
        self._accum.fill(0.0)
        self._sample_count = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset accumulator.

        Raises:
            ValueError: If a dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._accum = np.zeros((width, height, 3), dtype=np.float64)
        self._sample_count = 0

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Accumulates the specified number of samples into the existing buffer.
        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each callback.
                A larger batch size reduces callback overhead but provides
                less frequent updates.
            callback: Optional callback function called after each batch.
                Receives (current_total_samples, target_total_samples).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} samples")
            >>> renderer.render(100, batch_size=10, callback=progress)
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size = {batch_size} must be positive")
        if num_samples <= 0:
            return

        target_samples = self._sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_pass(self._accum, batch, self.max_depth)
            self._sample_count += batch
            remaining -= batch
            yield (self._sample_count, target_samples)

    def get_accumulation_buffer(self) -> npt.NDArray[np.float64]:
        """Get the raw sample sums, indexed [i, j, channel] with j = 0 at the bottom."""
        return self._accum

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the averaged linear image as a NumPy array.

        The array is in image order, top row first, with shape
        (height, width, 3). Before any sample is rendered it is all zeros.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float64.
        """
        if self._sample_count == 0:
            average = np.zeros_like(self._accum)
        else:
            average = self._accum / float(self._sample_count)

        # Transpose from (width, height, 3) to (height, width, 3) for standard image format
        image = np.transpose(average, (1, 0, 2))

        # Flip vertically (j = 0 is the bottom row, images start at the top)
        return np.ascontiguousarray(np.flipud(image))

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return image_to_uint8(self.get_image_numpy())

    def write_ppm(self, stream) -> None:
        """Write the rendered image to a text stream as a plain PPM."""
        write_ppm(self.get_image_uint8(), stream)

    def save_image(self, filepath: str) -> None:
        """Save the rendered image; ``.ppm`` is written as P3, others via Pillow."""
        save_image(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
