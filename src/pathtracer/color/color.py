"""Immutable linear-radiance color values.

This module provides the Color value type used on the Python side of the
renderer: the integrator hands its per-path estimates back as Color instances,
and image assembly, packing and tone mapping all consume them.

Colors carry three linear channels (r, g, b) plus an alpha/coverage channel
that defaults to fully opaque. Every operation returns a new instance.

Components:
    Color: frozen dataclass with arithmetic operators
    blend / blend_bilinear / blend_over: interpolation and compositing
    average / lightness / relative_luminance: scalar reductions
    invert / sepia / saturate / grayscale_*: per-color transforms

Channels may hold NaN or infinity. Nothing in this module clamps such values
away: saturate() propagates NaN and the packing layer rejects it.

Example:
    >>> from src.pathtracer.color.color import Color, blend
    >>> red = Color(1.0, 0.0, 0.0)
    >>> blue = Color(0.0, 0.0, 1.0)
    >>> blend(red, blue, 0.5)
    Color(r=0.5, g=0.0, b=0.5, a=1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Default tolerance for Color.is_close
COLOR_TOLERANCE = 1e-6

# Relative luminance weights for linear sRGB primaries
LUMINANCE_R = 0.212671
LUMINANCE_G = 0.715160
LUMINANCE_B = 0.072169

# Rows of the sepia transform applied to (r, g, b)
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)


@dataclass(frozen=True)
class Color:
    """A linear RGB color with an alpha channel.

    Equality and hashing are exact so that a Color can key a dictionary
    (see ColorCache). Use is_close() for tolerant comparisons.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
        a: Alpha (coverage) channel. 1.0 is fully opaque.
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_ints(cls, r: int, g: int, b: int, a: int = 255) -> Color:
        """Create a color from 0-255 integer channels (each divided by 255)."""
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    @classmethod
    def gray(cls, value: float, a: float = 1.0) -> Color:
        """Create a color with all three color channels set to value."""
        return cls(value, value, value, a)

    @classmethod
    def from_sequence(cls, values) -> Color:
        """Create a color from a sequence of 3 or 4 floats.

        Raises:
            ValueError: If the sequence does not have 3 or 4 entries.
        """
        values = tuple(float(v) for v in values)
        if len(values) in (3, 4):
            return cls(*values)
        raise ValueError(f"Color needs 3 or 4 channels, got {len(values)}")

    # -------------------------------------------------------------------------
    # Arithmetic (alpha always follows the left-hand operand)
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if isinstance(other, Color):
            return Color(self.r + other.r, self.g + other.g, self.b + other.b, self.a)
        if isinstance(other, (int, float)):
            return Color(self.r + other, self.g + other, self.b + other, self.a)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Color):
            return Color(self.r - other.r, self.g - other.g, self.b - other.b, self.a)
        if isinstance(other, (int, float)):
            return Color(self.r - other, self.g - other, self.b - other, self.a)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b, self.a)
        if isinstance(other, (int, float)):
            return Color(self.r * other, self.g * other, self.b * other, self.a)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)):
            return Color(self.r * other, self.g * other, self.b * other, self.a)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Color):
            return Color(self.r / other.r, self.g / other.g, self.b / other.b, self.a)
        if isinstance(other, (int, float)):
            return Color(self.r / other, self.g / other, self.b / other, self.a)
        return NotImplemented

    def __neg__(self) -> Color:
        return Color(-self.r, -self.g, -self.b, self.a)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_close(self, other: Color, tolerance: float = COLOR_TOLERANCE) -> bool:
        """Check whether all four channels are within tolerance of other."""
        return (
            abs(self.r - other.r) <= tolerance
            and abs(self.g - other.g) <= tolerance
            and abs(self.b - other.b) <= tolerance
            and abs(self.a - other.a) <= tolerance
        )

    def is_black(self) -> bool:
        """Check whether the color channels are exactly zero."""
        return self.r == 0.0 and self.g == 0.0 and self.b == 0.0

    def is_finite(self) -> bool:
        """Check that no channel is NaN or infinite."""
        return all(math.isfinite(c) for c in (self.r, self.g, self.b, self.a))

    def has_nan(self) -> bool:
        return any(math.isnan(c) for c in (self.r, self.g, self.b, self.a))

    def to_rgb_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def to_rgba_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def with_alpha(self, a: float) -> Color:
        return Color(self.r, self.g, self.b, a)


# =============================================================================
# Common Colors
# =============================================================================

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)


# =============================================================================
# Blending and Compositing
# =============================================================================


def _lerp(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b


def blend(a: Color, b: Color, t: float) -> Color:
    """Linearly interpolate every channel (alpha included) from a to b.

    Args:
        a: Color returned when t == 0.
        b: Color returned when t == 1.
        t: Interpolation factor, normally in [0, 1].

    Returns:
        The blended color. blend(c, c, t) == c for any t.
    """
    if a == b:
        return a
    return Color(
        _lerp(a.r, b.r, t),
        _lerp(a.g, b.g, t),
        _lerp(a.b, b.b, t),
        _lerp(a.a, b.a, t),
    )


def blend_bilinear(
    c11: Color, c12: Color, c21: Color, c22: Color, tx: float, ty: float
) -> Color:
    """Bilinearly interpolate four corner colors.

    c11 and c12 are blended along tx, as are c21 and c22; the two results
    are then blended along ty.
    """
    return blend(blend(c11, c12, tx), blend(c21, c22, tx), ty)


def blend_over(front: Color, back: Color) -> Color:
    """Composite front over back (Porter-Duff "over").

    Args:
        front: Color in front; its alpha is its coverage.
        back: Color behind it.

    Returns:
        The composited color. An opaque front (alpha == 1) is returned as is.
        A fully transparent result (both alphas zero) is TRANSPARENT.
    """
    out_a = front.a + back.a * (1.0 - front.a)
    if out_a == 0.0:
        return TRANSPARENT
    if front.a == 1.0:
        return front

    back_weight = back.a * (1.0 - front.a)
    return Color(
        (front.r * front.a + back.r * back_weight) / out_a,
        (front.g * front.a + back.g * back_weight) / out_a,
        (front.b * front.a + back.b * back_weight) / out_a,
        out_a,
    )


# =============================================================================
# Reductions
# =============================================================================


def average(color: Color) -> float:
    """Mean of the three color channels."""
    return (color.r + color.g + color.b) / 3.0


def min_component(color: Color) -> float:
    return min(color.r, color.g, color.b)


def max_component(color: Color) -> float:
    return max(color.r, color.g, color.b)


def lightness(color: Color) -> float:
    """HSL lightness: the midpoint of the largest and smallest channel."""
    return (max_component(color) + min_component(color)) / 2.0


def relative_luminance(color: Color) -> float:
    """Relative luminance of a linear color.

    The weights assume linear (not gamma-encoded) sRGB primaries.
    """
    return LUMINANCE_R * color.r + LUMINANCE_G * color.g + LUMINANCE_B * color.b


def minimum(a: Color, b: Color) -> Color:
    """Channel-wise minimum. Alpha follows a."""
    return Color(min(a.r, b.r), min(a.g, b.g), min(a.b, b.b), a.a)


def maximum(a: Color, b: Color) -> Color:
    """Channel-wise maximum. Alpha follows a."""
    return Color(max(a.r, b.r), max(a.g, b.g), max(a.b, b.b), a.a)


# =============================================================================
# Transforms
# =============================================================================


def invert(color: Color) -> Color:
    """Return 1 - channel for r, g and b. Alpha is left untouched."""
    return Color(1.0 - color.r, 1.0 - color.g, 1.0 - color.b, color.a)


def sepia(color: Color) -> Color:
    """Apply the classic sepia matrix to the color channels."""
    rows = SEPIA_MATRIX
    r, g, b = color.r, color.g, color.b
    return Color(
        rows[0][0] * r + rows[0][1] * g + rows[0][2] * b,
        rows[1][0] * r + rows[1][1] * g + rows[1][2] * b,
        rows[2][0] * r + rows[2][1] * g + rows[2][2] * b,
        color.a,
    )


def _clamp(value: float, lo: float, hi: float) -> float:
    # Comparisons with NaN are false, so NaN falls through unchanged.
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def saturate(color: Color, lo: float = 0.0, hi: float = 1.0) -> Color:
    """Clamp every channel independently to [lo, hi].

    The bounds may be given in either order. NaN channels stay NaN.
    """
    if lo > hi:
        lo, hi = hi, lo
    return Color(
        _clamp(color.r, lo, hi),
        _clamp(color.g, lo, hi),
        _clamp(color.b, lo, hi),
        _clamp(color.a, lo, hi),
    )


def max_to_1(color: Color) -> Color:
    """Scale the color down so that its largest channel is at most 1."""
    m = max_component(color)
    if m > 1.0:
        return Color(color.r / m, color.g / m, color.b / m, color.a)
    return color


def min_to_0(color: Color) -> Color:
    """Shift the color up so that its smallest channel is at least 0."""
    m = min_component(color)
    if m < 0.0:
        return Color(color.r - m, color.g - m, color.b - m, color.a)
    return color


def grayscale_average(color: Color) -> Color:
    return Color.gray(average(color), color.a)


def grayscale_lightness(color: Color) -> Color:
    return Color.gray(lightness(color), color.a)


def grayscale_luminance(color: Color) -> Color:
    return Color.gray(relative_luminance(color), color.a)


def grayscale_r(color: Color) -> Color:
    return Color.gray(color.r, color.a)


def grayscale_g(color: Color) -> Color:
    return Color.gray(color.g, color.a)


def grayscale_b(color: Color) -> Color:
    return Color.gray(color.b, color.a)
