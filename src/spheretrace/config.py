"""Render settings and Taichi runtime initialization.

The scene, material, camera and integrator modules declare Taichi fields at
import time, so ``ti.init`` must run before they are imported. This module
imports none of them; ``init_taichi`` initializes the runtime with the
settings of a RenderConfig (double precision floats, backend, RNG seed).
"""

from dataclasses import dataclass

import taichi as ti

# Backends selectable by name
ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


@dataclass
class RenderConfig:
    """Settings for one render.

    Attributes:
        image_width: Output width in pixels.
        aspect_ratio: Width / height; height is int(image_width / aspect_ratio).
        samples_per_pixel: Paths traced per pixel.
        max_depth: Bounce limit per path.
        seed: Seed for the Taichi RNG, or None for Taichi's default.
        arch: Backend name, one of ARCHES.
        debug: Run Taichi in debug mode (enables kernel assertions).
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    seed: int | None = None
    arch: str = "cpu"
    debug: bool = False

    @property
    def image_height(self) -> int:
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check the settings.

        Raises:
            ValueError: If a setting is out of range.
        """
        if self.image_width <= 0:
            raise ValueError(f"image_width = {self.image_width} must be positive")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {self.aspect_ratio} must be positive")
        if self.image_height <= 0:
            raise ValueError(
                f"image_width {self.image_width} and aspect_ratio {self.aspect_ratio} "
                "give an image height of 0"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel = {self.samples_per_pixel} must be positive")
        if self.max_depth < 0:
            raise ValueError(f"max_depth = {self.max_depth} must not be negative")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed = {self.seed} must not be negative")
        if self.arch not in ARCHES:
            raise ValueError(f"Unknown arch {self.arch!r}, expected one of {sorted(ARCHES)}")


def init_taichi(config: RenderConfig) -> None:
    """Initialize the Taichi runtime for a render.

    Raises:
        ValueError: If the config is invalid.
    """
    config.validate()

    kwargs = {
        "arch": ARCHES[config.arch],
        "default_fp": ti.f64,
        "debug": config.debug,
    }
    if config.seed is not None:
        kwargs["random_seed"] = config.seed

    ti.init(**kwargs)
