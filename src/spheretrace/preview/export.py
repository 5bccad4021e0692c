"""Image export utilities for rendered images.

This module converts averaged linear colours to 8-bit values and writes them
to files.

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and anything else Pillow can encode

Conversion to 8 bits takes the square root of each channel (gamma 2),
clamps it to [0, 0.999] and scales by 256, so every channel lands in
[0, 255] and the top bin is as wide as the others.

Example:
    >>> from spheretrace.preview.export import image_to_uint8, save_image
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100)
    >>> save_image(image_to_uint8(renderer.get_image_numpy()), "image.ppm")
"""

from __future__ import annotations

import os
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from spheretrace.preview.display import DEFAULT_GAMMA, apply_gamma

# Upper clamp before scaling by 256
MAX_INTENSITY = 0.999


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.uint8]:
    """Convert an averaged linear image to 8-bit values.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (default 2.0).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    encoded = np.clip(apply_gamma(image, gamma), 0.0, MAX_INTENSITY)
    return np.floor(256.0 * encoded).astype(np.uint8)


def write_ppm(image_uint8: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an 8-bit image to a text stream as a plain PPM (P3).

    The header is ``P3``, ``<width> <height>`` and ``255`` on separate lines,
    followed by one ``R G B`` line per pixel, top row first, left to right.

    Args:
        image_uint8: Image array of shape (H, W, 3), top row first.
        stream: Writable text stream.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image_uint8.ndim != 3 or image_uint8.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image_uint8.shape}")

    height, width = image_uint8.shape[0], image_uint8.shape[1]
    stream.write(f"P3\n{width} {height}\n255\n")
    for row in image_uint8:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def save_ppm(image_uint8: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an 8-bit image as a plain PPM file."""
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(image_uint8, f)


def save_png(image_uint8: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an 8-bit image using Pillow.

    The format is chosen by Pillow from the file extension.
    """
    # uint8 (H, W, 3) arrays are read as RGB
    pil_image = PILImage.fromarray(np.ascontiguousarray(image_uint8))
    pil_image.save(filepath)


def save_image(image_uint8: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an 8-bit image, picking the writer from the file extension.

    ``.ppm`` files are written as plain-text P3; everything else goes
    through Pillow.
    """
    ext = os.path.splitext(filepath)[1].lower()
    if ext == ".ppm":
        save_ppm(image_uint8, filepath)
    else:
        save_png(image_uint8, filepath)
