"""Tests for the Color value type and its operations.

Tests cover:
- Construction helpers and equality/hashing
- Arithmetic with alpha following the left operand
- Blending and compositing
- Reductions, transforms and saturation
- The ColorCache
"""

import math

import pytest

from src.pathtracer.color import (
    BLACK,
    TRANSPARENT,
    WHITE,
    Color,
    ColorCache,
    average,
    blend,
    blend_bilinear,
    blend_over,
    grayscale_luminance,
    invert,
    lightness,
    max_to_1,
    maximum,
    min_to_0,
    minimum,
    relative_luminance,
    saturate,
    sepia,
)


class TestColorConstruction:
    """Tests for constructors and value semantics."""

    def test_default_alpha_is_opaque(self):
        assert Color(0.1, 0.2, 0.3).a == 1.0

    def test_from_ints_divides_by_255(self):
        c = Color.from_ints(255, 0, 51, 255)
        assert c == Color(1.0, 0.0, 0.2, 1.0)

    def test_gray(self):
        assert Color.gray(0.5) == Color(0.5, 0.5, 0.5, 1.0)

    def test_from_sequence(self):
        assert Color.from_sequence([0.1, 0.2, 0.3]) == Color(0.1, 0.2, 0.3)
        assert Color.from_sequence((0.1, 0.2, 0.3, 0.4)).a == 0.4

    def test_from_sequence_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="3 or 4"):
            Color.from_sequence([1.0, 2.0])

    def test_equality_is_exact(self):
        """Colors compare channel-for-channel; is_close handles tolerance."""
        a = Color(0.1, 0.2, 0.3)
        b = Color(0.1, 0.2, 0.3 + 1e-12)
        assert a != b
        assert a.is_close(b)

    def test_equal_colors_hash_equal(self):
        assert hash(Color(0.5, 0.25, 1.0)) == hash(Color(0.5, 0.25, 1.0))
        assert len({Color(0.5, 0.25, 1.0), Color(0.5, 0.25, 1.0)}) == 1

    def test_immutable(self):
        c = Color(0.1, 0.2, 0.3)
        with pytest.raises(AttributeError):
            c.r = 1.0


class TestColorArithmetic:
    """Tests for arithmetic operators."""

    def test_add_and_subtract(self):
        assert Color(0.25, 0.5, 0.75) + Color(0.25, 0.25, 0.25) == Color(0.5, 0.75, 1.0)
        assert Color(0.5, 0.5, 0.5) - 0.25 == Color(0.25, 0.25, 0.25)

    def test_multiply_by_color_and_scalar(self):
        assert Color(0.5, 1.0, 2.0) * Color(2.0, 0.5, 0.25) == Color(1.0, 0.5, 0.5)
        assert 2.0 * Color(0.25, 0.5, 1.0) == Color(0.5, 1.0, 2.0)

    def test_divide(self):
        assert Color(1.0, 2.0, 4.0) / 2.0 == Color(0.5, 1.0, 2.0)

    def test_alpha_follows_left_operand(self):
        left = Color(0.5, 0.5, 0.5, 0.25)
        right = Color(0.5, 0.5, 0.5, 0.75)
        assert (left + right).a == 0.25
        assert (left * right).a == 0.25
        assert (-left).a == 0.25

    def test_negate(self):
        assert -Color(0.5, -1.0, 0.0) == Color(-0.5, 1.0, -0.0)


class TestColorQueries:
    """Tests for predicates and conversions."""

    def test_is_black(self):
        assert BLACK.is_black()
        assert not Color(0.0, 1e-9, 0.0).is_black()

    def test_non_finite_detection(self):
        assert not Color(math.nan, 0.0, 0.0).is_finite()
        assert Color(math.nan, 0.0, 0.0).has_nan()
        assert not Color(math.inf, 0.0, 0.0).has_nan()
        assert WHITE.is_finite()

    def test_tuples_and_with_alpha(self):
        c = Color(0.1, 0.2, 0.3, 0.4)
        assert c.to_rgb_tuple() == (0.1, 0.2, 0.3)
        assert c.to_rgba_tuple() == (0.1, 0.2, 0.3, 0.4)
        assert c.with_alpha(1.0) == Color(0.1, 0.2, 0.3, 1.0)


class TestBlending:
    """Tests for blend, blend_bilinear and blend_over."""

    def test_blend_endpoints(self):
        a = Color(0.0, 0.2, 0.4, 1.0)
        b = Color(1.0, 0.6, 0.8, 0.0)
        assert blend(a, b, 0.0) == a
        assert blend(a, b, 1.0) == b

    def test_blend_midpoint_includes_alpha(self):
        c = blend(Color(0.0, 0.0, 0.0, 0.0), Color(1.0, 1.0, 1.0, 1.0), 0.5)
        assert c == Color(0.5, 0.5, 0.5, 0.5)

    def test_blend_same_color_is_identity(self):
        c = Color(0.1, 0.7, 0.3)
        for t in (0.0, 0.3, 1.7, -2.0):
            assert blend(c, c, t) == c

    def test_blend_bilinear_center(self):
        c = blend_bilinear(BLACK, WHITE, WHITE, BLACK, 0.5, 0.5)
        assert c.is_close(Color(0.5, 0.5, 0.5))

    def test_blend_over_opaque_front_wins(self):
        front = Color(0.2, 0.4, 0.6, 1.0)
        assert blend_over(front, Color(1.0, 1.0, 1.0, 1.0)) == front

    def test_blend_over_half_transparent(self):
        result = blend_over(Color(1.0, 0.0, 0.0, 0.5), Color(0.0, 0.0, 1.0, 1.0))
        assert result.is_close(Color(0.5, 0.0, 0.5, 1.0))

    def test_blend_over_both_transparent(self):
        assert blend_over(TRANSPARENT, Color(0.5, 0.5, 0.5, 0.0)) == TRANSPARENT


class TestReductionsAndTransforms:
    """Tests for reductions and whole-color transforms."""

    def test_average_and_lightness(self):
        c = Color(0.0, 0.5, 1.0)
        assert average(c) == pytest.approx(0.5)
        assert lightness(c) == pytest.approx(0.5)

    def test_relative_luminance_of_white(self):
        assert relative_luminance(WHITE) == pytest.approx(1.0, abs=1e-6)

    def test_grayscale_luminance_keeps_alpha(self):
        g = grayscale_luminance(Color(1.0, 0.0, 0.0, 0.3))
        assert g.r == g.g == g.b
        assert g.a == 0.3

    def test_minimum_and_maximum(self):
        a = Color(0.1, 0.9, 0.5)
        b = Color(0.4, 0.2, 0.5)
        assert minimum(a, b) == Color(0.1, 0.2, 0.5)
        assert maximum(a, b) == Color(0.4, 0.9, 0.5)

    def test_invert(self):
        assert invert(Color(0.25, 0.5, 1.0, 0.3)) == Color(0.75, 0.5, 0.0, 0.3)

    def test_sepia_of_black_is_black(self):
        assert sepia(BLACK) == BLACK

    def test_saturate(self):
        c = saturate(Color(-0.5, 0.5, 1.5, 2.0))
        assert c == Color(0.0, 0.5, 1.0, 1.0)

    def test_saturate_accepts_reversed_bounds(self):
        assert saturate(Color(2.0, -1.0, 0.5), 1.0, 0.0) == Color(1.0, 0.0, 0.5, 1.0)

    def test_saturate_keeps_nan(self):
        assert math.isnan(saturate(Color(math.nan, 0.0, 0.0)).r)

    def test_max_to_1_and_min_to_0(self):
        assert max_to_1(Color(2.0, 1.0, 0.5)) == Color(1.0, 0.5, 0.25)
        assert min_to_0(Color(-0.5, 0.0, 0.5)) == Color(0.0, 0.5, 1.0)
        c = Color(0.2, 0.3, 0.4)
        assert max_to_1(c) is c


class TestColorCache:
    """Tests for ColorCache."""

    def test_get_returns_canonical_instance(self):
        cache = ColorCache()
        first = cache.get(Color(0.1, 0.2, 0.3))
        second = cache.get(Color(0.1, 0.2, 0.3))
        assert first is second
        assert len(cache) == 1

    def test_contains_and_clear(self):
        cache = ColorCache()
        cache.get(WHITE)
        assert WHITE in cache
        cache.clear()
        assert WHITE not in cache
        assert len(cache) == 0

    def test_non_finite_colors_are_not_stored(self):
        cache = ColorCache()
        nan_color = Color(math.nan, 0.0, 0.0)
        for _ in range(3):
            assert cache.get(nan_color) is nan_color
        assert cache.get(Color(math.inf, 0.0, 0.0)).r == math.inf
        assert len(cache) == 0
