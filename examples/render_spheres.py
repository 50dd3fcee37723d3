#!/usr/bin/env python3
"""Render the three-sphere demo scene, or a scene loaded from JSON.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 200)
    --height HEIGHT     Image height in pixels (default: 100)
    --scene PATH        JSON scene config (default: built-in demo scene)
    --output OUTPUT     Output file; .ppm writes plain PPM, anything else PNG
                        (default: spheres.png)
    --backend NAME      taichi (parallel kernel) or python (serial reference)
    --arch ARCH         Taichi arch, cpu or gpu (default: cpu)
    --gamma GAMMA       Gamma for PNG output (default: 1.0)
    --verbose           Enable debug logging
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 400 --height 200 --output spheres.ppm
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 200
DEFAULT_HEIGHT = 100


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a Phong-shaded sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH}, or the scene file's)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT}, or the scene file's)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene config (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path; .ppm writes PPM, otherwise PNG (default: spheres.png)",
    )
    parser.add_argument(
        "--backend",
        choices=("taichi", "python"),
        default="taichi",
        help="Render with the parallel Taichi kernel or the serial Python path (default: taichi)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend architecture (default: cpu)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction for PNG output (default: 1.0)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi, falling back to CPU when no GPU is available."""
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            if not quiet:
                print("Using GPU backend")
            return
        except Exception as e:
            logger.warning("GPU initialization failed (%s), falling back to CPU", e)
    ti.init(arch=ti.cpu)
    if not quiet:
        print("Using CPU backend")


def render_spheres(
    width: int | None = None,
    height: int | None = None,
    scene_path: str | None = None,
    output_path: str = "spheres.png",
    backend: str = "taichi",
    gamma: float = 1.0,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels; None keeps the scene's width.
        height: Image height in pixels; None keeps the scene's height.
        scene_path: JSON scene config, or None for the demo scene.
        output_path: Output file path (.ppm or PNG).
        backend: "taichi" or "python".
        gamma: Gamma correction for PNG output.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.caster.preview.canvas import Canvas
    from src.caster.preview.export import save_png, save_ppm
    from src.caster.scene.config import build_scene, load_scene_config
    from src.caster.scene.spheres import sphere_scene_config

    if scene_path is None:
        config = sphere_scene_config(DEFAULT_WIDTH, DEFAULT_HEIGHT)
    else:
        config = load_scene_config(scene_path)
    if width is not None:
        config.camera.width = width
    if height is not None:
        config.camera.height = height

    world, camera = build_scene(config)

    if not quiet:
        source = scene_path or "demo scene"
        print(f"Rendering {source} ({camera.hsize}x{camera.vsize}) with the {backend} backend...")

    start_time = time.time()

    if backend == "taichi":
        from src.caster.core.integrator import render_image

        canvas = Canvas.from_array(render_image(world, camera))
    elif backend == "python":
        canvas = camera.render(world)
    else:
        raise ValueError(f"Unknown backend: {backend}")

    output_file = Path(output_path)
    if output_file.suffix.lower() == ".ppm":
        save_ppm(canvas, output_file)
    else:
        save_png(canvas, output_file, gamma=gamma)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.backend == "taichi":
            init_taichi(args.arch, quiet=args.quiet)

        render_spheres(
            width=args.width,
            height=args.height,
            scene_path=args.scene,
            output_path=args.output,
            backend=args.backend,
            gamma=args.gamma,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
