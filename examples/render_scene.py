#!/usr/bin/env python3
"""Render a single frame of a preset scene to PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 360)
    --fov DEGREES       Vertical field of view (default: 45)
    --scene NAME        Scene preset: default or single (default: default)
    --shading MODE      albedo or normal (default: albedo)
    --flip-y            Store rows bottom-to-top
    --output OUTPUT     Output file path (default: render.png)
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --scene single --shading normal --fov 90
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402

# Camera placement per preset
_CAMERA_POSITIONS = {
    "default": (0.0, 0.0, 6.0),
    "single": (0.0, 0.0, 0.0),
}


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a single frame of a preset scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=360, help="Image height in pixels (default: 360)")
    parser.add_argument("--fov", type=float, default=45.0, help="Vertical field of view (default: 45)")
    parser.add_argument(
        "--scene",
        choices=sorted(_CAMERA_POSITIONS),
        default="default",
        help="Scene preset (default: default)",
    )
    parser.add_argument(
        "--shading",
        choices=["albedo", "normal"],
        default="albedo",
        help="Surface shading (default: albedo)",
    )
    parser.add_argument("--flip-y", action="store_true", help="Store rows bottom-to-top")
    parser.add_argument("--output", type=str, default="render.png", help="Output file path (default: render.png)")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_scene(
    width: int = 640,
    height: int = 360,
    vertical_fov: float = 45.0,
    scene_name: str = "default",
    shading: str = "albedo",
    flip_y: bool = False,
    output_path: str = "render.png",
    quiet: bool = False,
) -> Path:
    """Render one frame and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.raytracer.camera.camera import Camera
    from src.raytracer.core.renderer import Renderer, RenderSettings
    from src.raytracer.core.shading import ShadingMode
    from src.raytracer.preview.export import save_png
    from src.raytracer.scene.presets import create_scene

    if not quiet:
        print(f"Creating '{scene_name}' scene ({width}x{height})...")

    scene = create_scene(scene_name)
    camera = Camera(vertical_fov, 0.1, 100.0, position=_CAMERA_POSITIONS[scene_name])
    settings = RenderSettings(
        flip_y=flip_y,
        shading=ShadingMode.NORMAL if shading == "normal" else ShadingMode.ALBEDO,
    )
    renderer = Renderer(settings)

    camera.on_resize(width, height)
    renderer.on_resize(width, height)
    renderer.render(camera, scene)

    if not quiet:
        print(f"Rendered in {renderer.last_render_time_ms:.3f}ms")

    output_file = Path(output_path)
    save_png(renderer, str(output_file))

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            vertical_fov=args.fov,
            scene_name=args.scene,
            shading=args.shading,
            flip_y=args.flip_y,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
