"""Progressive renderer for pass-by-pass sample accumulation.

This module wraps the integrator's render target with a small stateful
interface:
- Progressive rendering that refines the image one pass at a time
- Progress callbacks and a generator form for UI loops
- Wall-clock deadlines and pass budgets, checked between passes
- Reset, resize and image export

Passes are summed and divided by the pass count only when the image is
read, so stopping between any two passes leaves a correctly normalized
image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.config import RenderConfig
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>> from src.pathtracer.scene.smallpt import create_smallpt_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> config = RenderConfig(width=256, height=192, samples_per_pixel=2)
    >>> scene, camera = create_smallpt_scene()
    >>> setup_camera(camera, config.width, config.height)
    >>>
    >>> renderer = ProgressiveRenderer(config)
    >>> renderer.render_until(deadline_seconds=30.0, max_passes=50)
    >>> renderer.save_image("smallpt.png")
"""

import logging
import os
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.pathtracer.config import RenderConfig, apply_render_config
from src.pathtracer.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_pass_count,
    render_pass,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Callback receives (completed_passes, target_passes)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates passes into the shared render target.

    Creating a renderer loads its configuration into the integrator and
    resets the render target; only one renderer is live at a time.

    Attributes:
        config: The render configuration in use.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            config: Render settings; defaults to RenderConfig().

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config if config is not None else RenderConfig()
        apply_render_config(self.config)
        setup_render_target(self.config.width, self.config.height)

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def pass_count(self) -> int:
        """Number of passes accumulated since the last reset."""
        return get_pass_count()

    @property
    def paths_per_pixel(self) -> int:
        """Total paths traced per pixel so far."""
        return self.pass_count * self.config.paths_per_pixel

    def reset(self) -> None:
        """Discard accumulated passes, keeping the image size."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Change the image size and reset the accumulator.

        The camera basis depends on the aspect ratio, so setup_camera()
        should be called again with the new size.

        Raises:
            ValueError: If the new size is invalid.
        """
        config = RenderConfig(**{**self.config.to_dict(), "width": width, "height": height})
        config.validate()
        self.config = config
        setup_render_target(width, height)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(
        self,
        num_passes: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add num_passes passes to the image.

        Args:
            num_passes: Number of passes to render.
            batch_size: Passes rendered between callbacks.
            callback: Optional function called after each batch with
                (completed_passes, target_passes).
        """
        for current, target in self.render_progressive(num_passes, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_passes: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render passes in batches, yielding progress after each batch.

        Yields:
            Tuple of (completed_passes, target_passes).

        Example:
            >>> for current, target in renderer.render_progressive(20, batch_size=5):
            ...     print(f"{current}/{target} passes")
        """
        if num_passes <= 0:
            return

        target = self.pass_count + num_passes
        remaining = num_passes
        while remaining > 0:
            batch = min(max(batch_size, 1), remaining)
            for _ in range(batch):
                render_pass()
            remaining -= batch
            yield (self.pass_count, target)

    def render_until(
        self,
        deadline_seconds: float | None = None,
        max_passes: int | None = None,
        min_passes: int = 1,
        callback: ProgressCallback | None = None,
    ) -> int:
        """Render passes until a time or pass budget runs out.

        Budgets are checked between passes, never inside one, so the
        deadline can be overrun by up to one pass. The first min_passes
        passes are rendered regardless of the deadline.

        Args:
            deadline_seconds: Wall-clock budget measured from the call.
            max_passes: Maximum number of passes to add.
            min_passes: Passes to render even if the deadline has passed.
            callback: Optional function called after each pass with
                (completed_passes, target_passes); target is -1 when only
                a deadline is set.

        Returns:
            Number of passes rendered by this call.

        Raises:
            ValueError: If neither budget is given, or a budget is negative.
        """
        if deadline_seconds is None and max_passes is None:
            raise ValueError("render_until needs deadline_seconds or max_passes")
        if deadline_seconds is not None and deadline_seconds < 0.0:
            raise ValueError(f"deadline_seconds must be non-negative, got {deadline_seconds}")
        if max_passes is not None and max_passes < 0:
            raise ValueError(f"max_passes must be non-negative, got {max_passes}")

        start = time.monotonic()
        start_passes = self.pass_count
        target = start_passes + max_passes if max_passes is not None else -1
        rendered = 0

        while True:
            if max_passes is not None and rendered >= max_passes:
                break
            if (
                deadline_seconds is not None
                and rendered >= min_passes
                and time.monotonic() - start >= deadline_seconds
            ):
                break
            render_pass()
            rendered += 1
            if callback is not None:
                callback(self.pass_count, target)

        elapsed = time.monotonic() - start
        logger.info(
            "Rendered %d passes in %.2fs (%d paths per pixel total)",
            rendered,
            elapsed,
            self.paths_per_pixel,
        )
        return rendered

    # =========================================================================
    # Output
    # =========================================================================

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the image as a float array of shape (height, width, 3).

        Args:
            gamma: Power-law gamma to apply. Default 1.0 (linear).
        """
        image = get_image_numpy()
        if gamma != 1.0:
            image = np.power(image, 1.0 / gamma).astype(np.float32)
        return image

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the image as 8-bit values, rounded half up."""
        image = self.get_image_numpy(gamma=gamma).astype(np.float64)
        return (image * 255.0 + 0.5).astype(np.uint8)

    def save_image(self, filepath: str | os.PathLike, gamma: float = 2.2) -> None:
        """Save the image as a PNG with power-law gamma."""
        from src.pathtracer.preview.export import save_png

        save_png(self.get_image_numpy(), filepath, encoding="gamma", gamma=gamma)

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"passes={self.pass_count})"
        )
