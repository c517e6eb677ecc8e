"""Render configuration.

RenderConfig gathers every tunable the renderer reads: image size, sample
count, Russian roulette start depth, the Phong exponent, the dielectric
indices of refraction and the depth up to which dielectric hits evaluate
both the reflected and refracted branch.

The dataclass is plain Python. apply_render_config() pushes the integrator
settings into Taichi fields, so it must run after ti.init().

Example:
    >>> from src.pathtracer.config import RenderConfig
    >>> config = RenderConfig(width=320, height=240, samples_per_pixel=4)
    >>> config.validate()
    >>> RenderConfig.from_dict(config.to_dict()) == config
    True
"""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

# Maximum supported image dimensions (render buffers are preallocated)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Pending-branch slots in the integrator's path stack. Each dielectric hit at
# or below the full-split depth parks one branch, so the split depth may not
# exceed this.
MAX_BRANCH_STACK = 8


@dataclass
class RenderConfig:
    """Settings for one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples per sub-pixel quadrant per pass. Each pixel
            has 2x2 quadrants, so a pass traces 4 * samples_per_pixel paths.
        roulette_start_depth: Russian roulette applies once the path depth
            exceeds this value.
        phong_exponent: Exponent of the glossy Phong lobe.
        ior_outside: Index of refraction outside dielectric spheres.
        ior_inside: Index of refraction inside dielectric spheres.
        dielectric_full_split_depth: Dielectric hits at this depth or less
            follow both branches; deeper hits pick one at random.
        max_depth: Hard cap on path depth, independent of roulette.
        seed: Base seed mixed into every per-sample random state.
    """

    width: int = 1024
    height: int = 768
    samples_per_pixel: int = 10
    roulette_start_depth: int = 5
    phong_exponent: float = 20.0
    ior_outside: float = 1.0
    ior_inside: float = 1.5
    dielectric_full_split_depth: int = 2
    max_depth: int = 128
    seed: int = 0

    def validate(self) -> None:
        """Check every field, raising on the first invalid one.

        Raises:
            ValueError: If any setting is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.roulette_start_depth < 0:
            raise ValueError(
                f"roulette_start_depth must be non-negative, got {self.roulette_start_depth}"
            )
        if not math.isfinite(self.phong_exponent) or self.phong_exponent < 0.0:
            raise ValueError(f"phong_exponent must be finite and >= 0, got {self.phong_exponent}")
        for name in ("ior_outside", "ior_inside"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be finite and positive, got {value}")
        if not 0 <= self.dielectric_full_split_depth <= MAX_BRANCH_STACK:
            raise ValueError(
                f"dielectric_full_split_depth must be in [0, {MAX_BRANCH_STACK}], "
                f"got {self.dielectric_full_split_depth}"
            )
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if not 0 <= self.seed < 2**31:
            raise ValueError(f"seed must be in [0, 2**31), got {self.seed}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def paths_per_pixel(self) -> int:
        """Paths traced for one pixel in one pass."""
        return 4 * self.samples_per_pixel

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderConfig":
        """Build a config from a dictionary, validating the result.

        Raises:
            ValueError: If the dictionary has unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown render config keys: {sorted(unknown)}")
        config = cls(**data)
        config.validate()
        return config


def apply_render_config(config: RenderConfig) -> None:
    """Validate config and load its integrator settings into Taichi fields.

    Raises:
        ValueError: If the configuration is invalid.
    """
    from src.pathtracer.core.integrator import set_integrator_settings

    config.validate()
    set_integrator_settings(
        roulette_start_depth=config.roulette_start_depth,
        phong_exponent=config.phong_exponent,
        ior_outside=config.ior_outside,
        ior_inside=config.ior_inside,
        dielectric_full_split_depth=config.dielectric_full_split_depth,
        max_depth=config.max_depth,
        samples_per_pixel=config.samples_per_pixel,
        seed=config.seed,
    )
