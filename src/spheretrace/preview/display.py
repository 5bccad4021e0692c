"""Matplotlib-based preview display for rendered images.

This module provides functions for displaying rendered images using Matplotlib,
with the same gamma encoding the image writers use.

Example:
    >>> from spheretrace.preview.display import show_preview
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100)
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from spheretrace.core.progressive import ProgressiveRenderer

# Output encoding used throughout: square root of the linear value
DEFAULT_GAMMA = 2.0


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.float64]:
    """Apply gamma correction for display.

    Values are clamped to [0, 1] first, so negative inputs cannot produce NaN
    and over-bright pixels saturate.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.0, i.e. a square root).

    Returns:
        Gamma corrected float64 image in [0, 1].
    """
    result = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    if gamma == 1.0:
        return result
    return np.power(result, 1.0 / gamma)


def show_preview(
    renderer: ProgressiveRenderer,
    *,
    gamma: float = DEFAULT_GAMMA,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    The sample count is displayed in the title unless a custom title is given.

    Args:
        renderer: The ProgressiveRenderer instance to display.
        gamma: Gamma correction value.
        title: Custom title (default shows sample count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = apply_gamma(renderer.get_image_numpy(), gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.sample_count} SPP"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
