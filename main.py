#!/usr/bin/env python3
"""
CSGTracer - A Python Ray Tracing Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from csgtracer.renderer import Renderer, RenderSettings
from csgtracer.scene_parser import SceneParser, SceneParseError, save_scene
from csgtracer.scenes import demo_world, demo_camera
from csgtracer.world import MissingLightError


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='CSGTracer - A Python Ray Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --hsize 800 --vsize 600 --parallel --batch-size 200
  python main.py --input scene.json --parallel --processes
  python main.py --write-scene default_world.json
        '''
    )

    parser.add_argument('--input', '-i', type=str, default=None,
                        help='Scene file (JSON or YAML); default is the built-in demo scene')
    parser.add_argument('--output', '-o', type=str, default='out.png', help='Output filename')
    parser.add_argument('--hsize', type=int, default=None, help='Image width (default: 400)')
    parser.add_argument('--vsize', type=int, default=None, help='Image height (default: 400)')
    parser.add_argument('--parallel', '-p', action='store_true', help='Render with a worker pool')
    parser.add_argument('--batch-size', '-b', type=int, default=None,
                        help='Pixels per parallel work unit (default: 100)')
    parser.add_argument('--threads', type=int, default=0, help='Number of workers (0=auto)')
    parser.add_argument('--processes', action='store_true',
                        help='Use worker processes instead of threads')
    parser.add_argument('--write-scene', type=str, default=None, metavar='FILE',
                        help='Write the demo scene to FILE and exit')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.write_scene:
        save_scene(args.write_scene, demo_world(), demo_camera())
        print(f"Wrote demo scene to {args.write_scene}")
        return 0

    # Load scene
    settings = RenderSettings()
    camera = None
    if args.input:
        scene_parser = SceneParser()
        try:
            world, camera = scene_parser.parse_file(args.input)
        except SceneParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if scene_parser.settings is not None:
            settings = scene_parser.settings
        if camera is not None:
            settings.hsize = camera.hsize
            settings.vsize = camera.vsize
            settings.field_of_view = camera.field_of_view
    else:
        world = demo_world()

    # Command line overrides the scene file
    if args.hsize is not None:
        settings.hsize = args.hsize
    if args.vsize is not None:
        settings.vsize = args.vsize
    if args.batch_size is not None:
        if args.batch_size < 1:
            parser.error('--batch-size must be at least 1')
        settings.batch_size = args.batch_size
    if args.parallel:
        settings.parallel = True
    if args.processes:
        settings.use_processes = True
    if args.threads:
        settings.num_threads = args.threads

    renderer = Renderer(settings)
    if camera is None:
        camera = renderer.camera(demo_camera().transform)
    elif args.hsize is not None or args.vsize is not None:
        # Resize the scene camera but keep its view
        camera = renderer.camera(camera.transform, camera.field_of_view)

    print("=" * 60)
    print("CSGTracer")
    print("=" * 60)
    print(f"  Resolution: {camera.hsize}x{camera.vsize}")
    print(f"  Objects in scene: {len(world)}")
    if settings.parallel:
        kind = 'processes' if settings.use_processes else 'threads'
        print(f"  Parallel: {settings.num_threads} {kind}, batch size {settings.batch_size}")

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '#' * filled + '-' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    try:
        canvas = renderer.render(world, camera)
    except MissingLightError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    elapsed = time.time() - start_time
    print(f"\nElapsed seconds: {elapsed:.6f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"Saving to: {args.output}")
    canvas.save(output_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
