#!/usr/bin/env python3
"""
PathForge - A Python Path Tracing Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from pathforge.color import PPMWriter, ImageBuffer
from pathforge.camera import CameraConfigError
from pathforge.config import RenderConfig, ConfigError, load_config
from pathforge.scenes import SCENES

logger = logging.getLogger("pathforge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Path Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene final --width 400 --samples 50 > final.ppm
  python main.py --scene three_spheres --output render.png
  python main.py --config scene.yaml --seed 7 --output render.png
        '''
    )

    parser.add_argument('--scene', type=str, choices=sorted(SCENES),
                        help='Built-in scene to render (default: final)')
    parser.add_argument('--config', type=str, help='JSON or YAML render configuration')
    parser.add_argument('--width', type=int, help='Image width in pixels')
    parser.add_argument('--aspect-ratio', type=float, help='Image width over height')
    parser.add_argument('--samples', type=int, help='Samples per pixel')
    parser.add_argument('--depth', type=int, help='Max ray bounces')
    parser.add_argument('--vfov', type=float, help='Vertical field of view in degrees')
    parser.add_argument('--defocus-angle', type=float, help='Defocus blur cone angle in degrees (0 = pinhole)')
    parser.add_argument('--focus-dist', type=float, help='Distance to the plane of perfect focus')
    parser.add_argument('--seed', type=int, help='Random seed for reproducible renders')
    parser.add_argument('--output', type=str,
                        help="Output file; '-' or omitted writes PPM to stdout, "
                             "otherwise the extension picks the format")
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug details')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Logs go to stderr so stdout can carry the image
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
        force=True
    )

    try:
        config = load_config(args.config) if args.config else RenderConfig()
        if args.scene:
            config.scene = args.scene
            config.world = None
        if args.seed is not None:
            config.seed = args.seed

        world = config.build_world()
        camera = config.build_camera(
            image_width=args.width,
            aspect_ratio=args.aspect_ratio,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            vfov=args.vfov,
            defocus_angle=args.defocus_angle,
            focus_dist=args.focus_dist,
        )
        camera.initialize()
    except (ConfigError, CameraConfigError) as e:
        logger.error("%s", e)
        return 1

    output = str(args.output or config.output or '-')
    if output != '-' and Path(output).suffix != '.ppm' and not ImageBuffer.supports(output):
        logger.error("Unsupported output format '%s' for %s", Path(output).suffix, output)
        return 1

    logger.info("Objects in scene: %d", len(world))
    logger.info("Resolution: %dx%d, samples: %d, max depth: %d",
                camera.image_width, camera.image_height,
                camera.samples_per_pixel, camera.max_depth)

    start_time = time.perf_counter()

    if output == '-':
        camera.render(world, PPMWriter(sys.stdout))
    elif Path(output).suffix == '.ppm':
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w') as f:
            camera.render(world, PPMWriter(f))
    else:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        buffer = ImageBuffer()
        camera.render(world, buffer)
        buffer.save(output)

    elapsed = time.perf_counter() - start_time
    rays = camera.image_width * camera.image_height * camera.samples_per_pixel
    logger.info("Render completed in %.2f seconds (%.0f camera rays/s)", elapsed, rays / elapsed if elapsed else 0.0)
    if output != '-':
        logger.info("Saved to: %s", output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
