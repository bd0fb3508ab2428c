"""
STARCATALOG Unit Tests - Sky Window

Unit tests for SkyWindow and MagnitudeRange.
"""

import math

import pytest

from services.catalog.sky_window import MagnitudeRange, SkyWindow
from starcatalog.types import (
    RIGHT_ANGLE,
    TWO_PI,
    RaDec,
    degrees_to_radians,
    hours_to_radians,
)


class TestSkyWindowConstruction:
    """Tests for window construction."""

    def test_default_is_whole_sky(self):
        """Test the default window covers everything."""
        window = SkyWindow()
        assert window == SkyWindow.all()
        assert window.is_whole_ra
        assert window.contains(RaDec(0.0, RIGHT_ANGLE))
        assert window.contains(RaDec(6.0, -RIGHT_ANGLE))

    def test_width_clamped(self):
        """Test RA widths beyond a full circle are clamped."""
        window = SkyWindow(RaDec(1.0, 0.0), 3 * TWO_PI, 0.5)
        assert window.rawidth == TWO_PI
        assert window.is_whole_ra

    def test_negative_dimensions(self):
        """Test negative width or height is rejected."""
        with pytest.raises(ValueError):
            SkyWindow(RaDec(), -0.1, 0.5)
        with pytest.raises(ValueError):
            SkyWindow(RaDec(), 0.1, -0.5)

    def test_immutable(self):
        """Test windows are frozen values."""
        window = SkyWindow()
        with pytest.raises(AttributeError):
            window.rawidth = 1.0

    def test_str(self):
        """Test the readable form gives hours, degrees and center."""
        window = SkyWindow(
            RaDec.from_hours_degrees(6.75, -16.7),
            hours_to_radians(1.0),
            degrees_to_radians(15.0),
        )
        assert str(window).startswith("1.000[h]x15.000[deg]@")


class TestSkyWindowContains:
    """Tests for window membership."""

    def test_ra_half_open(self):
        """Test the left RA edge is inside, the right one outside."""
        window = SkyWindow(RaDec(1.0, 0.0), 1.0, 1.0)
        assert window.contains(RaDec(0.5, 0.0))
        assert window.contains(RaDec(1.4999, 0.0))
        assert not window.contains(RaDec(1.5, 0.0))
        assert not window.contains(RaDec(0.4999, 0.0))

    def test_dec_half_open(self):
        """Test the bottom Dec edge is inside, the top one outside."""
        window = SkyWindow(RaDec(1.0, 0.0), 1.0, 1.0)
        assert window.contains(RaDec(1.0, -0.5))
        assert not window.contains(RaDec(1.0, 0.5))
        assert not window.contains(RaDec(1.0, -0.5001))

    def test_top_closed_at_pole(self):
        """Test the pole itself belongs to a window reaching it."""
        window = SkyWindow(RaDec(1.0, 1.4), 1.0, 0.4)
        assert window.contains(RaDec(1.0, RIGHT_ANGLE - 1e-12))
        window = SkyWindow(RaDec(1.0, RIGHT_ANGLE - 0.1), TWO_PI, 0.2)
        assert window.topdec() == pytest.approx(RIGHT_ANGLE)
        assert window.contains(RaDec(1.0, RIGHT_ANGLE))

    def test_wraparound(self):
        """Test a window straddling RA 0h."""
        window = SkyWindow(RaDec(0.0, 0.0), hours_to_radians(2.0), 0.2)
        assert window.contains(RaDec.from_hours_degrees(23.5, 0.0))
        assert window.contains(RaDec.from_hours_degrees(0.5, 0.0))
        assert not window.contains(RaDec.from_hours_degrees(1.5, 0.0))
        assert not window.contains(RaDec.from_hours_degrees(22.5, 0.0))

    def test_ra_beyond_full_circle(self):
        """Test positions are reduced before the RA test."""
        window = SkyWindow(RaDec(1.0, 0.0), 1.0, 1.0)
        assert window.contains(RaDec(1.0 + TWO_PI, 0.0))
        assert window.contains(RaDec(1.0 - TWO_PI, 0.0))


class TestSkyWindowBounds:
    """Tests for the derived bounds."""

    def test_left_right_reduced(self):
        """Test leftra and rightra lie in [0, 2pi)."""
        window = SkyWindow(RaDec(0.0, 0.0), 1.0, 1.0)
        assert window.leftra() == pytest.approx(TWO_PI - 0.5)
        assert window.rightra() == pytest.approx(0.5)

    def test_decinterval(self):
        """Test the Dec interval is centered on the window."""
        window = SkyWindow(RaDec(1.0, 0.2), 1.0, 0.4)
        bottom, top = window.decinterval()
        assert bottom == pytest.approx(0.0)
        assert top == pytest.approx(0.4)

    def test_decinterval_clamped(self):
        """Test the Dec interval does not go beyond the poles."""
        window = SkyWindow(RaDec(1.0, 1.5), 1.0, 0.4)
        assert window.topdec() == RIGHT_ANGLE
        window = SkyWindow(RaDec(1.0, -1.5), 1.0, 0.4)
        assert window.bottomdec() == -RIGHT_ANGLE


class TestSkyWindowHull:
    """Tests for SkyWindow.hull."""

    def test_small_equatorial_rectangle(self):
        """Test a small rectangle on the equator barely grows."""
        window = SkyWindow.hull(RaDec(1.0, 0.0), 0.1, 0.1)
        assert window.center.ra == 1.0
        assert window.rawidth >= 0.1
        assert window.rawidth == pytest.approx(0.1, abs=1e-3)
        assert window.decheight == pytest.approx(0.1)

    def test_wider_at_high_declination(self):
        """Test the RA extent grows towards the pole."""
        window = SkyWindow.hull(RaDec(1.0, 1.0), 0.1, 0.1)
        assert window.rawidth > 0.1 / math.cos(1.0) * 0.99

    def test_pole_inside(self):
        """Test a rectangle containing the pole covers all of RA."""
        window = SkyWindow.hull(RaDec(1.0, 1.5), 0.2, 0.2)
        assert window.is_whole_ra
        assert window.topdec() == pytest.approx(RIGHT_ANGLE)
        assert window.contains(RaDec(4.0, RIGHT_ANGLE))

    def test_south_pole_inside(self):
        """Test the same near the south pole."""
        window = SkyWindow.hull(RaDec(1.0, -1.5), 0.2, 0.2)
        assert window.is_whole_ra
        assert window.bottomdec() == pytest.approx(-RIGHT_ANGLE)


class TestMagnitudeRange:
    """Tests for MagnitudeRange."""

    def test_default_all(self):
        """Test the default range accepts any real magnitude."""
        magrange = MagnitudeRange()
        assert magrange.contains(-26.7)
        assert magrange.contains(21.0)

    def test_inclusive(self):
        """Test both limits are inside."""
        magrange = MagnitudeRange(4.5, 7.0)
        assert magrange.contains(4.5)
        assert magrange.contains(7.0)
        assert not magrange.contains(4.49)
        assert not magrange.contains(7.01)

    def test_str(self):
        """Test the readable form."""
        assert str(MagnitudeRange(-30, 6)) == "[-30.00,6.00]"
