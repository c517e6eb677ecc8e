"""Material tags.

A sphere's material is a pure classification. All behaviour lives in the
per-material sampling functions, selected by dispatch_material().
"""

from enum import IntEnum


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Stored per sphere in the scene fields and matched in the integrator to
    pick the scattering function.
    """

    DIFFUSE_LAMBERTIAN = 0
    GLOSSY_PHONG = 1
    REFLECTIVE = 2
    REFLECTIVE_AND_REFRACTIVE = 3

    @classmethod
    def from_name(cls, name: str) -> "MaterialType":
        """Look up a material by case-insensitive name.

        Raises:
            ValueError: If the name is not a known material.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(f"Unknown material {name!r}; expected one of {valid}") from None
