"""Render the SmallPT box from the command line.

Usage:
    python -m src.pathtracer.cli [options]

Options:
    --width WIDTH        Image width in pixels (default: 1024)
    --height HEIGHT      Image height in pixels (default: 768)
    --spp SPP            Samples per sub-pixel cell per pass (default: 10)
    --passes N           Number of passes (default: 1, or unbounded with --deadline)
    --deadline SECONDS   Stop starting new passes after this many seconds
    --seed SEED          Base random seed (default: 0)
    --output OUTPUT      Output PNG path (default: smallpt.png)
    --tone-map METHOD    none, reinhard, exposure or aces (default: none)
    --arch ARCH          Taichi backend: cpu, gpu, cuda, vulkan, metal (default: cpu)
    --verbose            Log every pass

Example:
    python -m src.pathtracer.cli --width 320 --height 240 --spp 4 --passes 8
"""

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)

ARCH_CHOICES = ("cpu", "gpu", "cuda", "vulkan", "metal")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="smallpt-taichi",
        description="Render the SmallPT scene with a Taichi path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=1024, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=768, help="Image height in pixels")
    parser.add_argument(
        "--spp",
        type=int,
        default=10,
        help="Samples per sub-pixel cell per pass (4x this many paths per pixel)",
    )
    parser.add_argument("--passes", type=int, default=None, help="Number of passes to render")
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Wall-clock budget in seconds, checked between passes",
    )
    parser.add_argument("--seed", type=int, default=0, help="Base random seed")
    parser.add_argument("--output", type=str, default="smallpt.png", help="Output PNG path")
    parser.add_argument(
        "--tone-map",
        choices=("none", "reinhard", "exposure", "aces"),
        default="none",
        help="Tone mapping applied before gamma encoding",
    )
    parser.add_argument("--arch", choices=ARCH_CHOICES, default="cpu", help="Taichi backend")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def render_smallpt(args: argparse.Namespace) -> Path:
    """Render the SmallPT scene and save it.

    Must be called after ti.init().

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the arguments describe an invalid configuration.
    """
    # Lazy imports: these modules declare Taichi fields
    from src.pathtracer.camera.pinhole import setup_camera
    from src.pathtracer.config import RenderConfig
    from src.pathtracer.core.progressive import ProgressiveRenderer
    from src.pathtracer.preview.export import save_png
    from src.pathtracer.scene.smallpt import create_smallpt_scene

    config = RenderConfig(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.spp,
        seed=args.seed,
    )
    config.validate()

    scene, camera = create_smallpt_scene()
    setup_camera(camera, config.width, config.height)
    logger.info("Scene: %r", scene)

    renderer = ProgressiveRenderer(config)

    def progress(current: int, target: int) -> None:
        if target > 0:
            logger.debug("Pass %d/%d", current, target)
        else:
            logger.debug("Pass %d", current)

    if args.deadline is not None:
        renderer.render_until(
            deadline_seconds=args.deadline, max_passes=args.passes, callback=progress
        )
    else:
        passes = args.passes if args.passes is not None else 1
        renderer.render(passes, callback=progress)

    output_file = Path(args.output)
    save_png(
        renderer.get_image_numpy(),
        output_file,
        tone_map=args.tone_map,
        encoding="gamma",
        gamma=2.2,
    )
    logger.info("Saved %r to %s", renderer, output_file.absolute())
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=getattr(ti, args.arch), default_fp=ti.f64, random_seed=args.seed)

    try:
        render_smallpt(args)
    except ValueError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
