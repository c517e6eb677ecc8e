"""Scene manager for building validated sphere scenes.

This module provides the Python-side view of a scene: a list of immutable
SphereRecord entries, validated on construction, mirrored into the Taichi
scene fields as they are added. Scene order matters, since the nearest-hit
query breaks distance ties in favour of the earlier sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_diffuse_sphere((0, 0, -10), 1.0, albedo=(0.8, 0.3, 0.3))
    0
    >>> scene.add_light((0, 10, -10), 2.0, emission=(12, 12, 12))
    1
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from src.pathtracer.materials.types import MaterialType
from src.pathtracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

Triple = tuple[float, float, float]


def _as_triple(name: str, value) -> Triple:
    values = tuple(float(v) for v in value)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return values  # type: ignore[return-value]


@dataclass(frozen=True)
class SphereRecord:
    """A sphere with its radiometric properties and material tag.

    Attributes:
        radius: Sphere radius; must be positive and finite.
        center: Center point.
        emission: Emitted radiance per channel (zero for non-emitters).
        albedo: Reflectance per channel, conventionally in [0, 1].
        material: Material tag.

    Raises:
        ValueError: On a non-positive or non-finite radius, a non-finite
            center, or negative/non-finite emission or albedo.
    """

    radius: float
    center: Triple
    emission: Triple = (0.0, 0.0, 0.0)
    albedo: Triple = (0.0, 0.0, 0.0)
    material: MaterialType = MaterialType.DIFFUSE_LAMBERTIAN

    def __post_init__(self) -> None:
        radius = float(self.radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive and finite, got {self.radius}")
        object.__setattr__(self, "radius", radius)

        center = _as_triple("center", self.center)
        if not all(math.isfinite(c) for c in center):
            raise ValueError(f"Sphere center must be finite, got {center}")
        object.__setattr__(self, "center", center)

        for name in ("emission", "albedo"):
            value = _as_triple(name, getattr(self, name))
            if not all(math.isfinite(c) and c >= 0.0 for c in value):
                raise ValueError(f"Sphere {name} must be finite and non-negative, got {value}")
            object.__setattr__(self, name, value)

        if isinstance(self.material, str):
            object.__setattr__(self, "material", MaterialType.from_name(self.material))
        else:
            try:
                object.__setattr__(self, "material", MaterialType(self.material))
            except ValueError:
                raise ValueError(f"Unknown material: {self.material!r}") from None

    @property
    def is_emissive(self) -> bool:
        return any(c > 0.0 for c in self.emission)

    def to_dict(self) -> dict[str, Any]:
        return {
            "radius": self.radius,
            "center": list(self.center),
            "emission": list(self.emission),
            "albedo": list(self.albedo),
            "material": self.material.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SphereRecord":
        missing = {"radius", "center"} - set(data)
        if missing:
            raise ValueError(f"Sphere entry is missing {sorted(missing)}")
        return cls(
            radius=data["radius"],
            center=tuple(data["center"]),
            emission=tuple(data.get("emission", (0.0, 0.0, 0.0))),
            albedo=tuple(data.get("albedo", (0.0, 0.0, 0.0))),
            material=data.get("material", MaterialType.DIFFUSE_LAMBERTIAN.name),
        )


class SceneManager:
    """Ordered, validated sphere scene backed by the Taichi scene fields.

    Creating a SceneManager clears the scene fields; only one scene is live
    at a time.

    Attributes:
        spheres: SphereRecord entries in scene order.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_mirror_sphere((27, 16.5, 47), 16.5)
        0
        >>> len(scene)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereRecord] = []
        clear_scene()

    def clear(self) -> None:
        """Remove every sphere, from both the record list and the fields."""
        self.spheres.clear()
        clear_scene()

    def __len__(self) -> int:
        return len(self.spheres)

    # =========================================================================
    # Adding Spheres
    # =========================================================================

    def add(self, record: SphereRecord) -> int:
        """Append a validated sphere.

        Returns:
            The sphere index.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        index = add_sphere(
            record.center, record.radius, record.emission, record.albedo, int(record.material)
        )
        self.spheres.append(record)
        return index

    def add_sphere(
        self,
        center,
        radius: float,
        emission=(0.0, 0.0, 0.0),
        albedo=(0.0, 0.0, 0.0),
        material: MaterialType = MaterialType.DIFFUSE_LAMBERTIAN,
    ) -> int:
        """Validate and append a sphere.

        Raises:
            ValueError: If the sphere parameters are invalid.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        record = SphereRecord(
            radius=radius,
            center=tuple(center),
            emission=tuple(emission),
            albedo=tuple(albedo),
            material=material,
        )
        return self.add(record)

    def add_diffuse_sphere(self, center, radius: float, albedo, emission=(0.0, 0.0, 0.0)) -> int:
        return self.add_sphere(center, radius, emission, albedo, MaterialType.DIFFUSE_LAMBERTIAN)

    def add_glossy_sphere(self, center, radius: float, albedo=(0.999, 0.999, 0.999)) -> int:
        return self.add_sphere(center, radius, (0.0, 0.0, 0.0), albedo, MaterialType.GLOSSY_PHONG)

    def add_mirror_sphere(self, center, radius: float, albedo=(0.999, 0.999, 0.999)) -> int:
        return self.add_sphere(center, radius, (0.0, 0.0, 0.0), albedo, MaterialType.REFLECTIVE)

    def add_glass_sphere(self, center, radius: float, albedo=(0.999, 0.999, 0.999)) -> int:
        return self.add_sphere(
            center, radius, (0.0, 0.0, 0.0), albedo, MaterialType.REFLECTIVE_AND_REFRACTIVE
        )

    def add_light(self, center, radius: float, emission, albedo=(0.0, 0.0, 0.0)) -> int:
        """Add an emissive diffuse sphere."""
        return self.add_sphere(center, radius, emission, albedo, MaterialType.DIFFUSE_LAMBERTIAN)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_sphere(self, index: int) -> SphereRecord:
        return self.spheres[index]

    def get_sphere_count(self) -> int:
        """Number of spheres currently in the Taichi fields."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        return sum(1 for s in self.spheres if s.is_emissive)

    def upload(self) -> None:
        """Rewrite the Taichi fields from the record list.

        Useful after another SceneManager replaced the live scene.
        """
        clear_scene()
        for record in self.spheres:
            add_sphere(
                record.center, record.radius, record.emission, record.albedo, int(record.material)
            )
        logger.debug("Uploaded %d spheres (%d emissive)", len(self.spheres), self.get_light_count())

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize the scene to a dictionary."""
        return {"spheres": [s.to_dict() for s in self.spheres]}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene with spheres from a dictionary.

        Every record is validated before the current scene is touched.

        Raises:
            ValueError: If any sphere entry is invalid.
        """
        records = [SphereRecord.from_dict(entry) for entry in data.get("spheres", [])]
        self.clear()
        for record in records:
            self.add(record)

    def __repr__(self) -> str:
        return f"SceneManager(spheres={len(self.spheres)}, lights={self.get_light_count()})"
