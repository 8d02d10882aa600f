#!/usr/bin/env python3
"""Render a demo scene or a scene file to an image.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME        Demo scene to render (default: spheres)
    --scene-file PATH   JSON scene file (overrides --scene)
    --width WIDTH       Image width in pixels (default: 300)
    --height HEIGHT     Image height in pixels (default: 150)
    --depth DEPTH       Reflection / refraction recursion budget (default: 5)
    --output OUTPUT     Output file path, .ppm or .png (default: <scene>.png)
    --cpu               Force the CPU backend
    --list              List the demo scenes and exit
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python examples/render_scene.py --scene reflections --width 600 --height 300
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a Whitted ray tracer scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        default="spheres",
        help="Demo scene to render, see --list (default: spheres)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="JSON scene file with 'world' and 'camera' sections",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=300,
        help="Image width in pixels (default: 300)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=150,
        help="Image height in pixels (default: 150)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=5,
        help="Reflection / refraction recursion budget (default: 5)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path, .ppm or .png (default: <scene>.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the demo scenes and exit",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def list_scenes() -> list[str]:
    """Names of the demo scenes, in registration order."""
    # Lazy import: the scene modules declare Taichi fields
    from whitted.scene.demos import DEMO_SCENES

    return list(DEMO_SCENES)


def render_scene(args: argparse.Namespace) -> Path:
    """Build the requested scene, render it and save the image.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the demo scene name is unknown.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.camera.pinhole import Camera
    from whitted.core.integrator import render
    from whitted.preview.export import save_canvas
    from whitted.scene.demos import DEMO_SCENES, DemoParams, scene_from_dict

    if args.scene_file is not None:
        data = json.loads(Path(args.scene_file).read_text())
        world, camera = scene_from_dict(data)
        # Keep the file's view, resized to the requested canvas
        camera = Camera(args.width, args.height, camera.field_of_view, camera.transform)
        name = Path(args.scene_file).stem
    else:
        name = args.scene
        if name not in DEMO_SCENES:
            raise ValueError(f"Unknown scene {name!r}, expected one of: {', '.join(DEMO_SCENES)}")
        world, camera = DEMO_SCENES[name](DemoParams(width=args.width, height=args.height))

    if not args.quiet:
        print(f"Rendering '{name}' ({camera.hsize}x{camera.vsize}, depth {args.depth})...")

    start_time = time.time()
    canvas = render(camera, world, args.depth)

    output_file = Path(args.output if args.output is not None else f"{name}.png")
    save_canvas(canvas, output_file)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    if args.list:
        for name in list_scenes():
            print(name)
        return 0

    try:
        render_scene(args)
        return 0
    except (OSError, ValueError, KeyError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
