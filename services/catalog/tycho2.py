"""
STARCATALOG Tycho-2 Catalog

Backend for the Tycho-2 catalog (Hog et al. 2000, file tyc2.dat, 207 byte
records). The file is mapped, records are parsed only when accessed; a
record that does not parse raises CatalogParseError to the caller of that
lookup.

Records are sorted by their TYC identifier "ZZZZ RRRRR S" in columns 1-12,
which makes name lookup a binary search over the mapped file.
"""

import logging
import math
from pathlib import Path
from typing import Any, List

from starcatalog.exceptions import (
    CatalogError,
    CatalogIOError,
    CatalogParseError,
    CatalogRangeError,
    StarNotFoundError,
)
from starcatalog.types import RaDec, degrees_to_radians

from . import records
from .catalog import Catalog, star_set, window_condition
from .hipparcos import hipparcos_name
from .iterators import CatalogIterator, IteratorImplementation
from .mapped_file import MappedFile
from .models import DuplicateRef, Star, Tycho2Star
from .sky_window import MagnitudeRange, SkyWindow

logger = logging.getLogger("STARCATALOG.Tycho2")

CATALOG_LETTER = "T"
RECORD_LENGTH = 207
KEY_LENGTH = 12
DEFAULT_FILENAME = "tyc2.dat"


def parse_tycho2_record(line: str) -> Tycho2Star:
    """Build a Tycho2Star from one tyc2.dat record.

    The visual magnitude is derived from the Tycho photometry as
    V = VT - 0.090 * (BT - VT). Stars with a Hipparcos number are flagged
    as duplicates of the Hipparcos star.

    Raises:
        CatalogParseError: no mean position, bad length, fields do not parse
    """
    if line[13:14] == "X":
        raise CatalogParseError("record has no position", catalog="Tycho2", field="pflag")
    if len(line) != RECORD_LENGTH:
        raise CatalogParseError(
            f"bad record length {len(line)}", catalog="Tycho2", field="record"
        )

    catalognumber = records.integer(
        line[0:4] + line[5:10] + line[11:12], 0, KEY_LENGTH, "Tycho2", "tyc"
    )

    bt = records.optional_real(line, 110, 116)
    vt = records.optional_real(line, 123, 129)
    if vt is None and bt is None:
        raise CatalogParseError("no magnitude", catalog="Tycho2", field="VTmag")
    if vt is None:
        mag = bt
    else:
        mag = vt - 0.090 * ((bt if bt is not None else vt) - vt)

    position = RaDec.from_degrees(
        records.real(line, 15, 27, "Tycho2", "ra"),
        records.real(line, 28, 40, "Tycho2", "dec"),
    )

    # mas/yr, RA component multiplied by cos(dec)
    pm = RaDec()
    pmra = records.optional_real(line, 41, 48)
    pmdec = records.optional_real(line, 49, 56)
    if pmra is not None and pmdec is not None:
        pmra_rad = degrees_to_radians(pmra / 3600000.0)
        cosdec = math.cos(position.dec)
        if cosdec > 0:
            pmra_rad /= cosdec
        pm = RaDec(pmra_rad, degrees_to_radians(pmdec / 3600000.0))

    hip = records.optional_int(line, 142, 148)
    duplicate = None
    if hip is not None:
        duplicate = DuplicateRef("H", hipparcos_name(hip))

    return Tycho2Star(
        name="T" + line[0:KEY_LENGTH],
        catalog=CATALOG_LETTER,
        catalognumber=catalognumber,
        position=position,
        pm=pm,
        mag=mag,
        duplicate=duplicate,
        hip=hip,
        bt=bt,
        vt=vt,
    )


def tycho2_filename(path: str | Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise CatalogIOError(f"cannot access '{path}'", catalog="Tycho2", path=str(path))
    if path.is_dir():
        path = path / DEFAULT_FILENAME
        if not path.exists():
            raise CatalogIOError(
                f"cannot access '{path}'", catalog="Tycho2", path=str(path)
            )
    if not path.is_file():
        raise CatalogIOError(
            f"'{path}' is not a regular file", catalog="Tycho2", path=str(path)
        )
    return path


class Tycho2(Catalog):
    """Tycho-2 catalog over a mapped tyc2.dat.

    Args:
        path: tyc2.dat, or the directory containing it

    Raises:
        CatalogIOError: If the file is missing or cannot be mapped
    """

    name = "Tycho2"

    def __init__(self, path: str | Path):
        self.filename = tycho2_filename(path)
        self._file = MappedFile(self.filename, RECORD_LENGTH)
        logger.info(f"Tycho2 opened: {self._file.nrecords} records in {self.filename}")

    def number_of_stars(self) -> int:
        return self._file.nrecords

    def find_index(self, index: int) -> Tycho2Star:
        """Star of record index (0-based)."""
        if not 0 <= index < self._file.nrecords:
            raise CatalogRangeError(
                f"not that many stars in Tycho2: {index}", catalog=self.name
            )
        return parse_tycho2_record(self._file.get_text(index))

    def key(self, index: int) -> str:
        return self._file.get_text(index)[0:KEY_LENGTH]

    def index(self, name: str) -> int:
        """Record index of a star name "T<zone> <run> <sequence>".

        Binary search on the record key. If the key is not present, the
        index where the search ended is returned and the star found there
        will carry a different name.
        """
        if not name.startswith("T"):
            raise StarNotFoundError(
                f"'{name}' is not a Tycho2 name", star_name=name, catalog=self.name
            )
        if self._file.nrecords == 0:
            raise StarNotFoundError("Tycho2 catalog is empty", star_name=name, catalog=self.name)
        key = name[1:]
        low, high = 0, self._file.nrecords - 1
        lowkey, highkey = self.key(low), self.key(high)
        logger.debug(
            f"looking for '{key}' between record {low} and {high}, "
            f"'{lowkey}' and '{highkey}'"
        )
        while low < high:
            if lowkey == key:
                return low
            if highkey == key:
                return high
            current = (low + high) // 2
            if current == low:
                break
            currentkey = self.key(current)
            if currentkey <= key:
                low, lowkey = current, currentkey
            else:
                high, highkey = current, currentkey
        return low

    def find_name(self, name: str) -> Star:
        logger.debug(f"retrieve star '{name}'")
        return self.find_index(self.index(name))

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        """Scan all records; records that do not parse are ignored."""
        condition = window_condition(window, magrange)
        found = []
        for index in range(self._file.nrecords):
            try:
                star = self.find_index(index)
            except CatalogError:
                continue
            if condition(star):
                found.append(star)
        result = star_set(found)
        logger.debug(f"found {len(result)} stars")
        return result

    def begin(self) -> CatalogIterator:
        return CatalogIterator(Tycho2Iterator(self))

    def close(self) -> None:
        self._file.close()


class Tycho2Iterator(IteratorImplementation):
    """Record counter over the Tycho-2 file."""

    def __init__(self, catalog: Tycho2, index: int = 0):
        self.owner = catalog
        self._index = min(index, catalog.number_of_stars())

    @property
    def is_end(self) -> bool:
        return self._index >= self.owner.number_of_stars()

    def current(self) -> Star:
        self._check_end()
        return self.owner.find_index(self._index)

    def increment(self) -> None:
        self._index = min(self._index + 1, self.owner.number_of_stars())

    def position(self) -> Any:
        return self._index
