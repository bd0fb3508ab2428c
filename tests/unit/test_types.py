"""
STARCATALOG Unit Tests - Types

Unit tests for the angle helpers and RaDec in starcatalog/types.py.
"""

import math

import pytest

from starcatalog.types import (
    MAS_TO_RADIANS,
    TWO_PI,
    RaDec,
    degrees_to_radians,
    hours_to_radians,
    radians_to_degrees,
    radians_to_hours,
    reduce_angle,
    sexagesimal,
)


class TestAngleConversion:
    """Tests for the unit conversions."""

    def test_hours(self):
        """Test 24 hours are a full circle."""
        assert hours_to_radians(24.0) == pytest.approx(TWO_PI)
        assert radians_to_hours(math.pi) == pytest.approx(12.0)

    def test_degrees(self):
        """Test 180 degrees are pi."""
        assert degrees_to_radians(180.0) == pytest.approx(math.pi)
        assert radians_to_degrees(math.pi / 2) == pytest.approx(90.0)

    def test_mas(self):
        """Test milliarcseconds to radians."""
        assert 3600000 * MAS_TO_RADIANS == pytest.approx(degrees_to_radians(1.0))


class TestReduceAngle:
    """Tests for reduce_angle."""

    @pytest.mark.parametrize("angle,expected", [
        (0.0, 0.0),
        (TWO_PI + 1.0, 1.0),
        (-1.0, TWO_PI - 1.0),
        (5 * TWO_PI + 0.5, 0.5),
    ])
    def test_default_interval(self, angle, expected):
        """Test reduction into [0, 2pi)."""
        assert reduce_angle(angle) == pytest.approx(expected)

    def test_full_circle_is_zero(self):
        """Test 2pi reduces to 0, not 2pi."""
        assert reduce_angle(TWO_PI) == pytest.approx(0.0)

    def test_shifted_interval(self):
        """Test reduction into [left, left + 2pi)."""
        left = -1.0
        assert reduce_angle(TWO_PI - 0.5, left) == pytest.approx(-0.5)
        assert reduce_angle(0.5, left) == pytest.approx(0.5)


class TestSexagesimal:
    """Tests for sexagesimal splitting."""

    def test_split(self):
        """Test 6.75 is 6:45:00."""
        d, m, s = sexagesimal(6.75)
        assert (d, m) == (6, 45)
        assert s == pytest.approx(0.0, abs=1e-6)


class TestRaDec:
    """Tests for RaDec."""

    def test_default_origin(self):
        """Test the default position is RA 0, Dec 0."""
        assert RaDec() == RaDec(0.0, 0.0)

    def test_from_hours_degrees(self):
        """Test construction from hours and degrees."""
        position = RaDec.from_hours_degrees(6.75, -16.7)
        assert position.ra_hours == pytest.approx(6.75)
        assert position.dec_degrees == pytest.approx(-16.7)
        assert position.ra_degrees == pytest.approx(101.25)

    def test_from_degrees(self):
        """Test construction from degrees."""
        position = RaDec.from_degrees(90.0, 45.0)
        assert position.ra == pytest.approx(math.pi / 2)
        assert position.dec == pytest.approx(math.pi / 4)

    def test_hms_dms(self):
        """Test sexagesimal formatting."""
        position = RaDec.from_hours_degrees(6.75, -16.7)
        assert position.ra_hms == "06:45:00.00"
        assert position.dec_dms == "-16:42:00.0"

    def test_str(self):
        """Test str() carries both coordinates."""
        text = str(RaDec.from_hours_degrees(6.75, -16.7))
        assert "06:45:00.00" in text
        assert "-16:42:00.0" in text
