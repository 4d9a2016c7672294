"""
Renderer module - turns a world and a camera into a canvas.

Implements:
- Sequential rendering in row-major order
- Parallel rendering over contiguous batches of flattened pixel indices,
  on a thread pool or a process pool
- A settings object and a Renderer wrapper with progress callbacks

Both entry points produce identical canvases for the same inputs: a pixel's
color depends only on the world, the camera and the pixel's coordinates.
"""

from __future__ import annotations
import logging
import os
import time
from concurrent.futures import Future, ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import math

import numpy as np

from .camera import Camera
from .canvas import Canvas
from .world import World, MissingLightError

_LOGGER: logging.Logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    hsize: int = 400
    vsize: int = 400
    field_of_view: float = math.pi / 4
    parallel: bool = False
    batch_size: int = 100
    num_threads: int = 0  # 0 = auto-detect
    use_processes: bool = False

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")


def _validate_scene(world: World) -> None:
    """Fail before any pixel is computed if the scene cannot be shaded."""
    if world.objects and world.light is None:
        raise MissingLightError("World has objects but no light source; add a light before rendering")


def render_batch(world: World, camera: Camera, start: int, end: int) -> np.ndarray:
    """Compute colors for flattened pixel indices ``start`` to ``end``.

    Pixel index ``i`` maps to column ``i % hsize`` and row ``i // hsize``.

    Returns:
        Array of shape (end - start, 3)
    """
    colors = np.empty((end - start, 3), dtype=np.float64)
    width = camera.hsize

    for offset, index in enumerate(range(start, end)):
        y, x = divmod(index, width)
        ray = camera.ray_for_pixel(x, y)
        colors[offset] = world.color_at(ray).to_array()

    return colors


def generate_batches(total: int, batch_size: int) -> list[Tuple[int, int]]:
    """Split ``range(total)`` into contiguous ``(start, end)`` batches.

    Args:
        total: Number of pixels
        batch_size: Pixels per batch; the last batch may be shorter

    Returns:
        Batches in index order
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    return [(start, min(start + batch_size, total)) for start in range(0, total, batch_size)]


def render(world: World, camera: Camera, progress: Optional[ProgressCallback] = None) -> Canvas:
    """Render the world one pixel at a time in row-major order.

    Args:
        world: The scene to render
        camera: The camera to render from
        progress: Optional callback receiving the completed fraction per row

    Returns:
        A new canvas of size camera.hsize x camera.vsize
    """
    _validate_scene(world)
    canvas = Canvas(camera.hsize, camera.vsize)

    for y in range(camera.vsize):
        for x in range(camera.hsize):
            ray = camera.ray_for_pixel(x, y)
            canvas.pixels[y, x] = world.color_at(ray).to_array()
        if progress:
            progress((y + 1) / camera.vsize)

    return canvas


# Per-process copy of the scene for process-pool workers
_worker_scene: Optional[Tuple[World, Camera]] = None


def _init_worker(world: World, camera: Camera) -> None:
    global _worker_scene
    _worker_scene = (world, camera)


def _render_batch_in_worker(start: int, end: int) -> np.ndarray:
    world, camera = _worker_scene
    return render_batch(world, camera, start, end)


def render_parallel(
    world: World,
    camera: Camera,
    batch_size: int = 100,
    num_workers: int = 0,
    use_processes: bool = False,
    progress: Optional[ProgressCallback] = None
) -> Canvas:
    """Render the world with a pool of workers over pixel batches.

    The canvas is allocated up front and every batch writes only its own
    slice of it, so no locking is needed. A failing batch cancels the
    batches that have not started and its exception propagates.

    Args:
        world: The scene to render; must not be mutated during the call
        camera: The camera to render from
        batch_size: Number of consecutive pixels per work unit
        num_workers: Pool size (0 = CPU count)
        use_processes: Use a process pool, each worker holding its own copy
            of world and camera, instead of threads
        progress: Optional callback receiving the completed fraction

    Returns:
        A new canvas, equal pixel-for-pixel to ``render(world, camera)``
    """
    _validate_scene(world)
    canvas = Canvas(camera.hsize, camera.vsize)
    pixels = canvas.flat
    batches = generate_batches(camera.hsize * camera.vsize, batch_size)
    workers = num_workers or os.cpu_count() or 4

    _LOGGER.debug("Rendering %d batches of up to %d pixels on %d %s",
                  len(batches), batch_size, workers, "processes" if use_processes else "threads")

    completed = 0

    # Called from the collecting loop on this thread only
    def batch_done() -> None:
        nonlocal completed
        completed += 1
        if progress:
            progress(completed / len(batches))

    if use_processes:
        with ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                                 initargs=(world, camera)) as executor:
            futures = {executor.submit(_render_batch_in_worker, start, end): (start, end)
                       for start, end in batches}
            _collect(futures, pixels, batch_done)
    else:
        def run_batch(start: int, end: int) -> None:
            pixels[start:end] = render_batch(world, camera, start, end)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(run_batch, start, end): (start, end)
                       for start, end in batches}
            _collect(futures, None, batch_done)

    return canvas


def _collect(futures: dict[Future, Tuple[int, int]], pixels: Optional[np.ndarray],
             batch_done: Callable[[], None]) -> None:
    """Wait for every batch, copying returned colors into ``pixels`` if given."""
    try:
        for future in as_completed(futures):
            colors = future.result()
            if pixels is not None:
                start, end = futures[future]
                pixels[start:end] = colors
            batch_done()
    except BaseException:
        for future in futures:
            future.cancel()
        raise


class Renderer:
    """Renders scenes according to a RenderSettings."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[ProgressCallback] = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def camera(self, transform: np.ndarray, field_of_view: Optional[float] = None) -> Camera:
        """Build a camera with the configured size.

        Args:
            transform: World-to-camera view transform
            field_of_view: Overrides the configured field of view if given
        """
        s = self.settings
        fov = s.field_of_view if field_of_view is None else field_of_view
        return Camera(s.hsize, s.vsize, fov, transform)

    def render(self, world: World, camera: Camera) -> Canvas:
        """Render the scene sequentially or in parallel, per the settings."""
        s = self.settings
        start = time.perf_counter()

        if s.parallel:
            canvas = render_parallel(world, camera, s.batch_size, s.num_threads,
                                     s.use_processes, self._progress_callback)
        else:
            canvas = render(world, camera, self._progress_callback)

        _LOGGER.info("Rendered %dx%d in %.3f s", canvas.width, canvas.height,
                     time.perf_counter() - start)
        return canvas
