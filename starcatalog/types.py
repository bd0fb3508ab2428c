"""
STARCATALOG Shared Type Definitions

Angle helpers and the equatorial position type shared by all catalogs.
Angles are carried as radians throughout the engine; conversion to hours,
degrees and sexagesimal strings happens at the edges (parsers, database,
command line).

Usage:
    from starcatalog.types import RaDec, hours_to_radians

    sirius = RaDec.from_hours_degrees(6.7525, -16.7161)
    print(sirius.ra_hms, sirius.dec_dms)
"""

import math
from typing import NamedTuple, TypeAlias


# =============================================================================
# Basic Type Aliases
# =============================================================================

Radians: TypeAlias = float
Degrees: TypeAlias = float
Hours: TypeAlias = float
Magnitude: TypeAlias = float

TWO_PI = 2 * math.pi
RIGHT_ANGLE = math.pi / 2
MAS_TO_RADIANS = math.pi / (180 * 60 * 60 * 1000)


# =============================================================================
# Conversions
# =============================================================================

def hours_to_radians(hours: Hours) -> Radians:
    return hours * math.pi / 12


def radians_to_hours(radians: Radians) -> Hours:
    return radians * 12 / math.pi


def degrees_to_radians(degrees: Degrees) -> Radians:
    return math.radians(degrees)


def radians_to_degrees(radians: Radians) -> Degrees:
    return math.degrees(radians)


def reduce_angle(x: Radians, left: Radians = 0.0) -> Radians:
    """Reduce an angle into the interval [left, left + 2*pi)."""
    return x - TWO_PI * math.floor((x - left) / TWO_PI)


def sexagesimal(value: float, digits: int = 6) -> tuple[int, int, float]:
    """Split a non-negative value into (units, minutes, seconds).

    Seconds are rounded to `digits` decimals before splitting, so 16.7
    becomes (16, 42, 0.0) rather than (16, 41, 59.99...).
    """
    total = round(value * 3600, digits)
    units = int(total // 3600)
    minutes = int(total % 3600 // 60)
    seconds = total % 60
    return units, minutes, seconds


# =============================================================================
# Coordinate Types
# =============================================================================

class RaDec(NamedTuple):
    """Equatorial coordinates (Right Ascension / Declination).

    Attributes:
        ra: Right Ascension in radians
        dec: Declination in radians
    """
    ra: Radians = 0.0
    dec: Radians = 0.0

    @classmethod
    def from_hours_degrees(cls, ra_hours: Hours, dec_degrees: Degrees) -> "RaDec":
        return cls(hours_to_radians(ra_hours), degrees_to_radians(dec_degrees))

    @classmethod
    def from_degrees(cls, ra_degrees: Degrees, dec_degrees: Degrees) -> "RaDec":
        return cls(degrees_to_radians(ra_degrees), degrees_to_radians(dec_degrees))

    @property
    def ra_hours(self) -> Hours:
        return radians_to_hours(self.ra)

    @property
    def ra_degrees(self) -> Degrees:
        return radians_to_degrees(self.ra)

    @property
    def dec_degrees(self) -> Degrees:
        return radians_to_degrees(self.dec)

    @property
    def ra_hms(self) -> str:
        """RA in HH:MM:SS.SS format."""
        h, m, s = sexagesimal(radians_to_hours(reduce_angle(self.ra)), 2)
        return f"{h:02d}:{m:02d}:{s:05.2f}"

    @property
    def dec_dms(self) -> str:
        """DEC in sDD:MM:SS.S format."""
        sign = "+" if self.dec >= 0 else "-"
        d, m, s = sexagesimal(abs(self.dec_degrees), 1)
        return f"{sign}{d:02d}:{m:02d}:{s:04.1f}"

    def __str__(self) -> str:
        return f"{self.ra_hms} {self.dec_dms}"
