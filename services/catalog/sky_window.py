"""
STARCATALOG Sky Window and Magnitude Range

Geometric and photometric predicates used to bound catalog queries.

A SkyWindow is an RA/Dec box given by its center, its full RA width and its
full Dec height. RA membership is decided by reducing the RA of a position
into the interval [left, left + 2*pi), so windows straddling 0h need no
special case. A window whose RA width reaches 2*pi covers all of RA.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from starcatalog.types import (
    RIGHT_ANGLE,
    TWO_PI,
    Magnitude,
    RaDec,
    Radians,
    radians_to_degrees,
    radians_to_hours,
    reduce_angle,
)

logger = logging.getLogger("STARCATALOG.SkyWindow")

# RA widths this close to a full circle are treated as the whole sky
WHOLE_RA_TOLERANCE = 1e-9
# windows whose top is this close to the north pole include the pole
POLE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class SkyWindow:
    """Rectangular RA/Dec region of the sky.

    Attributes:
        center: Window center
        rawidth: Full width in right ascension (radians), at most 2*pi
        decheight: Full height in declination (radians)
    """
    center: RaDec = RaDec(math.pi, 0.0)
    rawidth: Radians = TWO_PI
    decheight: Radians = math.pi

    def __post_init__(self) -> None:
        if self.rawidth >= TWO_PI:
            object.__setattr__(self, "rawidth", TWO_PI)
        if self.rawidth < 0 or self.decheight < 0:
            raise ValueError("window dimensions must not be negative")
        logger.debug(
            f"window dimensions: RA = {radians_to_hours(self.rawidth):.3f} hours, "
            f"DEC = {radians_to_degrees(self.decheight):.3f} degrees"
        )

    @classmethod
    def all(cls) -> "SkyWindow":
        """Window containing the complete sky."""
        return cls(RaDec(math.pi, 0.0), TWO_PI, math.pi)

    @property
    def is_whole_ra(self) -> bool:
        return self.rawidth >= TWO_PI - WHOLE_RA_TOLERANCE

    def contains(self, position: RaDec) -> bool:
        """Whether position lies inside the window."""
        if not self.is_whole_ra:
            left = self.center.ra - self.rawidth / 2
            right = self.center.ra + self.rawidth / 2
            if reduce_angle(position.ra, left) >= right:
                return False

        bottom = self.center.dec - self.decheight / 2
        top = self.center.dec + self.decheight / 2
        dec = position.dec
        if dec < bottom:
            return False
        if dec >= top and top < RIGHT_ANGLE - POLE_TOLERANCE:
            return False
        return True

    def leftra(self) -> Radians:
        return reduce_angle(self.center.ra - self.rawidth / 2)

    def rightra(self) -> Radians:
        return reduce_angle(self.center.ra + self.rawidth / 2)

    def topdec(self) -> Radians:
        return min(self.center.dec + self.decheight / 2, RIGHT_ANGLE)

    def bottomdec(self) -> Radians:
        return max(self.center.dec - self.decheight / 2, -RIGHT_ANGLE)

    def decinterval(self) -> Tuple[Radians, Radians]:
        """Dec interval covered by the window, clamped to +/- 90 degrees."""
        return self.bottomdec(), self.topdec()

    @classmethod
    def hull(cls, center: RaDec, rawidth: Radians, decheight: Radians) -> "SkyWindow":
        """Smallest window containing a centrally projected rectangle.

        The rectangle is rawidth wide and decheight high, measured along the
        great circles through its center. Near the poles its corners reach
        further in RA than its center row, so the window is widened to the
        RA extent of the top or bottom edge, whichever is larger.
        """
        top = center.dec + decheight / 2
        if top >= RIGHT_ANGLE:
            dectop = RIGHT_ANGLE
            width_top = TWO_PI
        else:
            a, beta = _corner(rawidth / 2, RIGHT_ANGLE - top)
            width_top = 2 * beta
            dectop = top if top >= 0 else RIGHT_ANGLE - a

        bottom = center.dec - decheight / 2
        if bottom <= -RIGHT_ANGLE:
            decbottom = -RIGHT_ANGLE
            width_bottom = TWO_PI
        else:
            a, beta = _corner(rawidth / 2, RIGHT_ANGLE + bottom)
            width_bottom = 2 * beta
            decbottom = bottom if bottom < 0 else a - RIGHT_ANGLE

        window = cls(
            RaDec(center.ra, (dectop + decbottom) / 2),
            max(width_top, width_bottom),
            dectop - decbottom,
        )
        logger.debug(f"hull sky window: {window}")
        return window

    def __str__(self) -> str:
        return (
            f"{radians_to_hours(self.rawidth):.3f}[h]x"
            f"{radians_to_degrees(self.decheight):.3f}[deg]@{self.center}"
        )


def _corner(b: Radians, c: Radians) -> Tuple[Radians, Radians]:
    """Hypotenuse and angle at the pole of a right spherical triangle.

    b is the half width of the rectangle, c the polar distance of its edge.
    """
    cosa = max(-1.0, min(1.0, math.cos(b) * math.cos(c)))
    a = math.acos(cosa)
    if math.sin(a) * math.sin(c) == 0:
        return a, 0.0
    cosbeta = (math.cos(b) - math.cos(a) * math.cos(c)) / (math.sin(a) * math.sin(c))
    return a, math.acos(max(-1.0, min(1.0, cosbeta)))


@dataclass(frozen=True)
class MagnitudeRange:
    """Inclusive magnitude interval [brightest, faintest]."""
    brightest: Magnitude = -30.0
    faintest: Magnitude = 30.0

    def contains(self, mag: Magnitude) -> bool:
        return self.brightest <= mag <= self.faintest

    def __str__(self) -> str:
        return f"[{self.brightest:.2f},{self.faintest:.2f}]"
