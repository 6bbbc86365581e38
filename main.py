#!/usr/bin/env python3
"""
SphereCast - A Python Sphere Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import sys
import time
from pathlib import Path

from spherecast.errors import SceneConfigError
from spherecast.renderer import Renderer, RenderSettings
from spherecast.scene_parser import create_default_scene, load_scene


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SphereCast - A Python Sphere Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --width 320 --height 180 --output small.png
  python main.py --scene scenes/default.yaml --max-bounces 8 --output deep.png
        '''
    )

    parser.add_argument('--scene', type=str, default=None,
                        help='Scene file (YAML or JSON); default: built-in three-sphere scene')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 1920)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 1080)')
    parser.add_argument('--max-bounces', type=int, default=None,
                        help='Maximum reflections per pixel (default: 4)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--quiet', action='store_true', help='Do not print progress')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    def say(*values, **kwargs):
        if not args.quiet:
            print(*values, **kwargs)

    try:
        if args.scene:
            scene, settings = load_scene(args.scene)
        else:
            scene, settings = create_default_scene(), RenderSettings()

        overrides = {}
        if args.width is not None:
            overrides['width'] = args.width
        if args.height is not None:
            overrides['height'] = args.height
        if args.max_bounces is not None:
            overrides['max_bounces'] = args.max_bounces
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
    except SceneConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    say("=" * 60)
    say("SphereCast Ray Tracer")
    say("=" * 60)

    say(f"\nRender Settings:")
    say(f"  Resolution: {settings.width}x{settings.height}")
    say(f"  Screen distance: {settings.screen_distance}")
    say(f"  Max Bounces: {settings.max_bounces}")
    say(f"  Spheres in scene: {len(scene)}")

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            say(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    say("\nRendering...")
    start_time = time.time()

    try:
        image = renderer.render(scene)
    except SceneConfigError as exc:
        print(f"\nError: {exc}", file=sys.stderr)
        return 1

    elapsed = time.time() - start_time
    say(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        say(f"  Pixels per second: {(settings.width * settings.height) / elapsed:.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    say(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    say("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
