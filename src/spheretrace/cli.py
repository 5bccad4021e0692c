"""Command-line renderer.

Renders one of the built-in scenes (or a JSON scene file) and writes the
result as a plain PPM, or any format Pillow supports, chosen by extension.

Usage:
    spheretrace [options]
    python -m spheretrace [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width / height (default: 1.7778)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Maximum bounces per path (default: 50)
    --seed SEED             Seed for the scene layout and the render RNG
    --arch ARCH             Taichi backend (default: cpu)
    --debug                 Run Taichi in debug mode
    --scene SCENE           "random", "showcase" or a JSON scene file
    --save-scene PATH       Write the scene as JSON before rendering
    --output OUTPUT         Output file, "-" for PPM on stdout (default: image.ppm)
    --batch-size SIZE       Samples per progress update (default: 10)
    --preview               Show the result in a Matplotlib window
    --quiet                 Suppress progress output

Example:
    spheretrace --width 200 --samples 20 --seed 1 --output spheres.ppm
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
import time
from pathlib import Path

from spheretrace.config import ARCHES, RenderConfig, init_taichi

BUILTIN_SCENES = ("random", "showcase")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        prog="spheretrace",
        description="Render a scene of spheres with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=defaults.image_width,
        help=f"Image width in pixels (default: {defaults.image_width})",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=defaults.aspect_ratio,
        help=f"Width / height (default: {defaults.aspect_ratio:.4f})",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=defaults.samples_per_pixel,
        help=f"Samples per pixel (default: {defaults.samples_per_pixel})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=defaults.max_depth,
        help=f"Maximum bounces per path (default: {defaults.max_depth})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the scene layout and the render RNG",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHES),
        default=defaults.arch,
        help=f"Taichi backend (default: {defaults.arch})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run Taichi in debug mode",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="random",
        help='"random", "showcase" or a path to a JSON scene file (default: random)',
    )
    parser.add_argument(
        "--save-scene",
        type=str,
        default=None,
        help="Write the scene as JSON to this path before rendering",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help='Output file path, "-" for PPM on stdout (default: image.ppm)',
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    """Build a validated RenderConfig from parsed arguments."""
    config = RenderConfig(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        seed=args.seed,
        arch=args.arch,
        debug=args.debug,
    )
    config.validate()
    return config


def load_scene(name: str, config: RenderConfig):
    """Build the scene named on the command line.

    Must be called after Taichi is initialized.

    Returns:
        A tuple of (SceneManager, ThinLensCamera). The camera's aspect ratio
        matches the render config.

    Raises:
        ValueError: If a scene file is invalid or has no camera.
    """
    from spheretrace.scene.manager import SceneManager
    from spheretrace.scene.material_showcase import create_material_showcase_scene
    from spheretrace.scene.random_spheres import create_random_spheres_scene

    if name == "random":
        return create_random_spheres_scene(seed=config.seed, aspect_ratio=config.aspect_ratio)
    if name == "showcase":
        return create_material_showcase_scene(aspect_ratio=config.aspect_ratio)

    path = Path(name)
    if not path.is_file():
        raise ValueError(
            f"Unknown scene {name!r}: expected one of {BUILTIN_SCENES} or a JSON file"
        )
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    scene = SceneManager()
    scene.from_dict(data)
    if scene.camera is None:
        raise ValueError(f"Scene file {name} has no camera")

    camera = dataclasses.replace(scene.camera, aspect_ratio=config.aspect_ratio)
    scene.set_camera(camera)
    return scene, camera


def render(
    config: RenderConfig,
    scene_name: str = "random",
    output_path: str = "image.ppm",
    batch_size: int = 10,
    save_scene: str | None = None,
    preview: bool = False,
    quiet: bool = False,
):
    """Render a scene and write the image.

    Taichi must already be initialized (see init_taichi).

    Returns:
        The ProgressiveRenderer holding the finished render.
    """
    # Lazy imports: these modules declare Taichi fields
    from spheretrace.camera.thin_lens import setup_camera
    from spheretrace.core.progressive import ProgressiveRenderer

    width, height = config.image_width, config.image_height

    if not quiet:
        print(f"Creating {scene_name} scene ({width}x{height})...", file=sys.stderr)

    scene, camera = load_scene(scene_name, config)
    setup_camera(camera)

    if save_scene is not None:
        with open(save_scene, "w", encoding="utf-8") as f:
            json.dump(scene.to_dict(), f, indent=2)

    renderer = ProgressiveRenderer(width, height, max_depth=config.max_depth)

    if not quiet:
        print(
            f"Rendering {scene.get_sphere_count()} spheres at "
            f"{config.samples_per_pixel} samples per pixel...",
            file=sys.stderr,
        )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                file=sys.stderr,
                flush=True,
            )

    renderer.render(
        num_samples=config.samples_per_pixel,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print(file=sys.stderr)  # Newline after progress

    if output_path == "-":
        renderer.write_ppm(sys.stdout)
        sys.stdout.flush()
    else:
        renderer.save_image(output_path)
        if not quiet:
            print(f"Saved to: {Path(output_path).absolute()}", file=sys.stderr)

    if not quiet:
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)

    if preview:
        from spheretrace.preview.display import show_preview

        show_preview(renderer)

    return renderer


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        if args.batch_size <= 0:
            raise ValueError(f"batch_size = {args.batch_size} must be positive")
        init_taichi(config)
        render(
            config,
            scene_name=args.scene,
            output_path=args.output,
            batch_size=args.batch_size,
            save_scene=args.save_scene,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
