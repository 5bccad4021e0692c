"""Preview module for output and visualization.

Components:
    display: Gamma encoding and Matplotlib-based preview
    export: 8-bit conversion and PPM/PNG writers

Example:
    >>> from spheretrace.preview import image_to_uint8, save_image
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100)
    >>> save_image(image_to_uint8(renderer.get_image_numpy()), "image.ppm")
"""

from spheretrace.preview.display import DEFAULT_GAMMA, apply_gamma, show_preview
from spheretrace.preview.export import (
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "apply_gamma",
    "DEFAULT_GAMMA",
    # Export functions
    "image_to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
