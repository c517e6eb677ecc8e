"""Tests for gamma transfer curves and tone mapping of single colors."""

import pytest

from src.pathtracer.color import (
    BLACK,
    WHITE,
    Color,
    redo_gamma,
    redo_gamma_power,
    tone_map_exposure,
    tone_map_filmic_aces,
    tone_map_reinhard,
    tone_map_unreal3,
    undo_gamma,
    undo_gamma_power,
)
from src.pathtracer.color.transfer import (
    SRGB_BREAK_POINT,
    SRGB_SLOPE,
    redo_gamma_channel,
    undo_gamma_channel,
)


class TestSrgbCurve:
    """Tests for the sRGB encode/decode pair."""

    def test_endpoints(self):
        assert redo_gamma_channel(0.0) == 0.0
        assert redo_gamma_channel(1.0) == pytest.approx(1.0, abs=1e-3)

    def test_linear_segment(self):
        x = SRGB_BREAK_POINT / 2.0
        assert redo_gamma_channel(x) == pytest.approx(x * SRGB_SLOPE)

    def test_curve_is_continuous_at_break_point(self):
        below = redo_gamma_channel(SRGB_BREAK_POINT)
        above = redo_gamma_channel(SRGB_BREAK_POINT * (1.0 + 1e-9))
        assert above == pytest.approx(below, rel=1e-6)

    def test_decode_inverts_encode(self):
        for x in (0.001, 0.01, 0.18, 0.5, 0.9):
            assert undo_gamma_channel(redo_gamma_channel(x)) == pytest.approx(x, rel=1e-9)

    def test_encode_brightens_mid_gray(self):
        assert redo_gamma_channel(0.18) > 0.4

    def test_color_versions_keep_alpha(self):
        c = Color(0.2, 0.4, 0.6, 0.5)
        assert redo_gamma(c).a == 0.5
        assert undo_gamma(redo_gamma(c)).is_close(c, 1e-9)


class TestPowerGamma:
    """Tests for the plain power-law curve."""

    def test_power_round_trip(self):
        c = Color(0.25, 0.5, 0.75)
        assert undo_gamma_power(redo_gamma_power(c, 2.2), 2.2).is_close(c, 1e-9)

    def test_negative_channels_clamp_to_zero(self):
        assert redo_gamma_power(Color(-1.0, 0.0, 1.0)) == Color(0.0, 0.0, 1.0)


class TestToneMapping:
    """Tests for the tone mapping operators."""

    def test_reinhard(self):
        assert tone_map_reinhard(WHITE) == Color(0.5, 0.5, 0.5)
        assert tone_map_reinhard(BLACK) == BLACK

    def test_exposure_is_bounded(self):
        c = tone_map_exposure(Color(100.0, 1.0, 0.0))
        assert c.r <= 1.0
        assert 0.0 < c.g < 1.0
        assert c.b == 0.0

    def test_aces_saturates(self):
        c = tone_map_filmic_aces(Color(1000.0, 0.0, 0.5))
        assert c.r == 1.0
        assert c.g == pytest.approx(0.0, abs=1e-6)
        assert 0.0 < c.b < 1.0

    def test_unreal3_known_value(self):
        c = tone_map_unreal3(Color(1.0, 0.0, 2.0, 0.25))
        assert c.r == pytest.approx(1.019 / 1.155)
        assert c.g == 0.0
        assert c.b == pytest.approx(2.0 / 2.155 * 1.019)
        assert c.a == 0.25

    def test_unreal3_exposure_scales_input(self):
        assert tone_map_unreal3(Color.gray(0.5), exposure=2.0).is_close(
            tone_map_unreal3(Color.gray(1.0))
        )
