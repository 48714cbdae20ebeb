#!/usr/bin/env python3
"""Interactive sphere tracer with a fly-through camera and scene editor.

Usage:
    python -m examples.interactive_viewer [--width W] [--height H] [--scene NAME]

Controls:
    - Hold right mouse button to look around and enable movement
    - W/S, A/D, Q/E: move forward/back, left/right, down/up (Shift: faster)
    - Settings panel: last render time, Flip Y, normal shading, Export PNG
    - Scene panel: sphere position/radius/material, material albedo

The frame is re-rendered only when the camera moves or a value is edited.
"""

from __future__ import annotations

import argparse
import platform
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive sphere tracer.")
    parser.add_argument("--width", type=int, default=1280, help="Window width (default: 1280)")
    parser.add_argument("--height", type=int, default=720, help="Window height (default: 720)")
    parser.add_argument(
        "--scene",
        choices=["default", "single"],
        default="default",
        help="Scene preset (default: default)",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()

    # Initialize Taichi first (before creating any fields)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from src.raytracer.core.renderer import RenderSettings
    from src.raytracer.core.shading import ShadingMode
    from src.raytracer.preview.interactive import InteractiveViewer
    from src.raytracer.scene.presets import create_scene

    if not InteractiveViewer.is_display_available():
        print("Error: No display available. Cannot run interactive viewer.")
        print("This script requires a graphical display environment.")
        return 1

    shading = ShadingMode.NORMAL if args.scene == "single" else ShadingMode.ALBEDO
    viewer = InteractiveViewer(
        args.width,
        args.height,
        create_scene(args.scene),
        settings=RenderSettings(shading=shading),
    )

    print(f"Viewer {args.width}x{args.height}, scene '{args.scene}'")
    print("  - Hold right mouse button and use W/A/S/D/Q/E to fly")
    print("  - Close window to exit")

    try:
        viewer.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        viewer.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
