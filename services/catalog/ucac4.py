"""
STARCATALOG UCAC4 Catalog

Backend for the fourth USNO CCD Astrograph Catalog (Zacharias et al. 2013).

The catalog directory contains:
    u4b/z001 .. u4b/z900    one binary file per 0.2 degree Dec zone, from
                            the south pole northwards, 78 byte little
                            endian records sorted by RA
    u4i/u4index.asc         index file (only checked for presence)

Zones are mapped on demand and records are decoded through a numpy
structured dtype when a star is accessed. The catalog keeps the most
recently used zone open.
"""

import logging
import math
import os
import struct
from pathlib import Path
from typing import Any, List, Optional, Tuple

import numpy as np

from starcatalog.exceptions import CatalogIOError, CatalogRangeError, StarNotFoundError
from starcatalog.types import MAS_TO_RADIANS, RIGHT_ANGLE, RaDec, Radians

from .catalog import Catalog, star_set, window_condition
from .iterators import CatalogIterator, ConditionIterator, IteratorImplementation
from .mapped_file import MappedFile
from .models import UCAC4_ZONES, DuplicateRef, Star, Ucac4Star, Ucac4StarNumber
from .sky_window import MagnitudeRange, SkyWindow

logger = logging.getLogger("STARCATALOG.Ucac4")

CATALOG_LETTER = "U"
RECORD_LENGTH = 78
ZONE_HEIGHT = math.radians(0.2)

UCAC4_DTYPE = np.dtype([
    ("ra", "<i4"),                  # mas, J2000 ICRS
    ("spd", "<i4"),                 # south pole distance, mas
    ("mag1", "<u2"),                # UCAC fit model magnitude, mmag
    ("mag2", "<u2"),                # UCAC aperture magnitude, mmag
    ("mag_sigma", "u1"),
    ("obj_type", "u1"),
    ("double_star_flag", "u1"),
    ("ra_sigma", "i1"),
    ("dec_sigma", "i1"),
    ("n_ucac_total", "u1"),
    ("n_ucac_used", "u1"),
    ("n_cats_used", "u1"),
    ("epoch_ra", "<u2"),
    ("epoch_dec", "<u2"),
    ("pm_ra", "<i2"),               # 0.1 mas/yr, times cos(dec)
    ("pm_dec", "<i2"),              # 0.1 mas/yr
    ("pm_ra_sigma", "i1"),
    ("pm_dec_sigma", "i1"),
    ("twomass_id", "<u4"),
    ("mag_j", "<u2"),
    ("mag_h", "<u2"),
    ("mag_k", "<u2"),
    ("icq_flag", "u1", (3,)),
    ("e2mpho", "u1", (3,)),
    ("apass_mag", "<u2", (5,)),     # B, V, g, r, i in mmag
    ("apass_mag_sigma", "u1", (5,)),
    ("yale_gc_flags", "u1"),
    ("catalog_flags", "<u4"),       # nine decimal digits icf(1..9)
    ("leda_flag", "u1"),
    ("twomass_ext_flag", "u1"),
    ("id_number", "<u4"),
    ("ucac2_zone", "<u2"),
    ("ucac2_number", "<u4"),
])

# RA is the first field of every record
_RA = struct.Struct("<i")


def decode_record(zone: int, number: int, raw: bytes) -> Ucac4Star:
    """Build a Ucac4Star from one 78 byte zone record."""
    if len(raw) != UCAC4_DTYPE.itemsize:
        raise CatalogRangeError(
            f"short UCAC4 record ({len(raw)} bytes)", catalog="UCAC4"
        )
    record = np.frombuffer(raw, dtype=UCAC4_DTYPE)[0]
    star_number = Ucac4StarNumber(zone, number)

    dec = MAS_TO_RADIANS * int(record["spd"]) - RIGHT_ANGLE
    position = RaDec(MAS_TO_RADIANS * int(record["ra"]), dec)

    pm_ra = MAS_TO_RADIANS * int(record["pm_ra"]) * 0.1
    cosdec = math.cos(dec)
    if cosdec > 0:
        pm_ra /= cosdec
    pm = RaDec(pm_ra, MAS_TO_RADIANS * int(record["pm_dec"]) * 0.1)

    # icf(1) is the most significant digit: 1 or 3 means Hipparcos/Tycho-2
    icf1 = int(record["catalog_flags"]) // 100000000
    hiptyc2 = icf1 in (1, 3)

    return Ucac4Star(
        name=str(star_number),
        catalog=CATALOG_LETTER,
        catalognumber=star_number.catalognumber,
        position=position,
        pm=pm,
        mag=int(record["mag1"]) * 0.001,
        duplicate=DuplicateRef("T", "") if hiptyc2 else None,
        number=star_number,
        id_number=int(record["id_number"]),
        mag2=int(record["mag2"]) * 0.001,
        magsigma=int(record["mag_sigma"]) * 0.001,
        obj_type=int(record["obj_type"]),
        double_star_flag=int(record["double_star_flag"]),
        pm_ra_sigma=int(record["pm_ra_sigma"]),
        pm_dec_sigma=int(record["pm_dec_sigma"]),
        twomass_id=int(record["twomass_id"]),
        mag_j=int(record["mag_j"]) * 0.001,
        mag_h=int(record["mag_h"]) * 0.001,
        mag_k=int(record["mag_k"]) * 0.001,
        apass_mag=tuple(float(m) * 0.001 for m in record["apass_mag"]),
        hiptyc2=hiptyc2,
    )


# =============================================================================
# Zone
# =============================================================================

class Ucac4Zone:
    """One declination zone file of UCAC4.

    Star numbers are 1-based (as in the UCAC4 star names), record indices
    0-based.
    """

    def __init__(self, zone: int, path: str | Path):
        self.zone = zone
        self.path = Path(path)
        self._file = MappedFile(self.path, RECORD_LENGTH)

    def number_of_stars(self) -> int:
        return self._file.nrecords

    def __len__(self) -> int:
        return self._file.nrecords

    def record(self, index: int) -> Ucac4Star:
        """Star at record index (0-based)."""
        return decode_record(self.zone, index + 1, self._file.get(index))

    def get(self, number: int) -> Ucac4Star:
        """Star with number (1-based) in this zone."""
        if number < 1:
            raise CatalogRangeError(
                f"cannot get star number {number}", catalog="UCAC4"
            )
        return self.record(number - 1)

    def ra(self, index: int) -> Radians:
        return MAS_TO_RADIANS * _RA.unpack_from(self._file.get(index))[0]

    def first(self, ra: Radians) -> int:
        """Index of the first record with RA >= ra, or the record count."""
        low, high = 0, self._file.nrecords
        while low < high:
            middle = (low + high) // 2
            if self.ra(middle) < ra:
                low = middle + 1
            else:
                high = middle
        return low

    def ranges(self, window: SkyWindow) -> List[Tuple[int, int]]:
        """Half open index ranges of the records in the RA range of window."""
        count = self._file.nrecords
        if window.is_whole_ra:
            return [(0, count)]
        left, right = window.leftra(), window.rightra()
        minindex, maxindex = self.first(left), self.first(right)
        if left < right:
            return [(minindex, maxindex)] if minindex < maxindex else []
        # window straddles RA 0h
        return [(0, maxindex), (minindex, count)]

    def add(self, stars: List[Star], window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        """Append the stars of this zone inside window and magrange."""
        condition = window_condition(window, magrange)
        before = len(stars)
        for start, end in self.ranges(window):
            for index in range(start, end):
                star = self.record(index)
                if condition(star):
                    stars.append(star)
        logger.debug(f"{len(stars) - before} stars from zone {self.zone}")
        return stars

    def find(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        return star_set(self.add([], window, magrange))

    def touches(self, window: SkyWindow) -> bool:
        return Ucac4.touches(self.zone, window)

    def close(self) -> None:
        self._file.close()

    def __repr__(self) -> str:
        return f"<Ucac4Zone {self.zone:03d}: {len(self)} stars>"


# =============================================================================
# Catalog
# =============================================================================

class Ucac4(Catalog):
    """UCAC4 catalog over the 900 zone files.

    Args:
        directory: Catalog directory containing u4b and u4i

    Raises:
        CatalogIOError: If the index file or any zone file is missing
    """

    name = "UCAC4"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._check(self.indexfilename())
        for zone in range(1, UCAC4_ZONES + 1):
            self._check(self.zonefilename(zone))
        self._cachedzone: Optional[Ucac4Zone] = None
        self._count: Optional[int] = None
        logger.info(f"UCAC4 opened at {self.directory}")

    def _check(self, filename: Path) -> None:
        if not filename.is_file():
            logger.error(f"cannot stat {filename}")
            raise CatalogIOError(
                f"cannot stat {filename}", catalog=self.name, path=str(filename)
            )

    def zonefilename(self, zone: int) -> Path:
        return self.directory / "u4b" / f"z{zone:03d}"

    def indexfilename(self) -> Path:
        return self.directory / "u4i" / "u4index.asc"

    # -------------------------------------------------------------------------
    # Zones
    # -------------------------------------------------------------------------

    def zone(self, zone: int) -> Ucac4Zone:
        """Open a zone, bypassing the cache."""
        if not 1 <= zone <= UCAC4_ZONES:
            raise CatalogRangeError(f"no UCAC4 zone {zone}", catalog=self.name)
        return Ucac4Zone(zone, self.zonefilename(zone))

    def getzone(self, zone: int) -> Ucac4Zone:
        """Zone from the single entry cache, opening it if necessary."""
        if self._cachedzone is None or self._cachedzone.zone != zone:
            logger.debug(f"opening zone {zone}")
            if self._cachedzone is not None:
                self._cachedzone.close()
            self._cachedzone = self.zone(zone)
        return self._cachedzone

    @staticmethod
    def zoneinterval(window: SkyWindow) -> Tuple[int, int]:
        """First and last zone touched by the Dec interval of window."""
        bottom, top = window.decinterval()
        minzone = 1 + math.floor((bottom + RIGHT_ANGLE) / ZONE_HEIGHT)
        maxzone = 1 + math.floor((top + RIGHT_ANGLE) / ZONE_HEIGHT)
        return max(1, min(minzone, UCAC4_ZONES)), max(1, min(maxzone, UCAC4_ZONES))

    @staticmethod
    def touches(zone: int, window: SkyWindow) -> bool:
        minzone, maxzone = Ucac4.zoneinterval(window)
        return minzone <= zone <= maxzone

    # -------------------------------------------------------------------------
    # Catalog interface
    # -------------------------------------------------------------------------

    def number_of_stars(self) -> int:
        if self._count is None:
            self._count = sum(
                os.path.getsize(self.zonefilename(zone)) // RECORD_LENGTH
                for zone in range(1, UCAC4_ZONES + 1)
            )
        return self._count

    def find_number(self, number: Ucac4StarNumber) -> Ucac4Star:
        zone = self.getzone(number.zone)
        if number.number > zone.number_of_stars():
            raise StarNotFoundError(
                f"zone {number.zone} has no star {number.number}",
                star_name=str(number),
                catalog=self.name,
            )
        return zone.get(number.number)

    def find_name(self, name: str) -> Star:
        return self.find_number(Ucac4StarNumber.parse(name))

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        minzone, maxzone = self.zoneinterval(window)
        stars: List[Star] = []
        for zoneno in range(minzone, maxzone + 1):
            self.getzone(zoneno).add(stars, window, magrange)
        result = star_set(stars)
        logger.debug(f"{len(stars)} stars found, {len(result)} in set")
        return result

    def find_iter(self, window: SkyWindow, magrange: MagnitudeRange) -> CatalogIterator:
        return CatalogIterator(
            ConditionIterator(
                Ucac4WindowIterator(self, window), window_condition(window, magrange)
            )
        )

    def begin(self) -> CatalogIterator:
        return CatalogIterator(Ucac4Iterator(self))

    def close(self) -> None:
        if self._cachedzone is not None:
            self._cachedzone.close()
            self._cachedzone = None


# =============================================================================
# Iterators
# =============================================================================

class Ucac4Iterator(IteratorImplementation):
    """Walks all stars, zone by zone, as (zone, index) pairs."""

    def __init__(self, catalog: Ucac4, zone: int = 1, index: int = 0):
        self.owner = catalog
        self._zone = zone
        self._index = index
        self._normalize()

    def _normalize(self) -> None:
        # move past the end of exhausted or empty zones
        while self._zone <= UCAC4_ZONES:
            if self._index < self.owner.getzone(self._zone).number_of_stars():
                return
            self._zone += 1
            self._index = 0

    @property
    def is_end(self) -> bool:
        return self._zone > UCAC4_ZONES

    def current(self) -> Star:
        self._check_end()
        return self.owner.getzone(self._zone).record(self._index)

    def increment(self) -> None:
        self._check_end()
        self._index += 1
        self._normalize()

    def position(self) -> Any:
        return (self._zone, self._index)


class Ucac4WindowIterator(IteratorImplementation):
    """Walks the records in the RA ranges of a window, touched zones only.

    Candidates are only RA filtered; wrap the iterator in a
    ConditionIterator for exact window and magnitude checks.
    """

    def __init__(self, catalog: Ucac4, window: SkyWindow):
        self.owner = catalog
        self.window = window
        self._zone, self._maxzone = catalog.zoneinterval(window)
        self._ranges: List[Tuple[int, int]] = []
        self._index = 0
        self._load_zone()
        self._normalize()

    def _load_zone(self) -> None:
        self._ranges = [r for r in self.owner.getzone(self._zone).ranges(self.window) if r[0] < r[1]]
        self._index = self._ranges[0][0] if self._ranges else 0

    def _normalize(self) -> None:
        while self._zone <= self._maxzone:
            while self._ranges:
                start, end = self._ranges[0]
                if self._index < end:
                    self._index = max(self._index, start)
                    return
                self._ranges.pop(0)
            self._zone += 1
            if self._zone <= self._maxzone:
                self._load_zone()

    @property
    def is_end(self) -> bool:
        return self._zone > self._maxzone

    def current(self) -> Star:
        self._check_end()
        return self.owner.getzone(self._zone).record(self._index)

    def increment(self) -> None:
        self._check_end()
        self._index += 1
        self._normalize()

    def position(self) -> Any:
        return (self._zone, self._index)
