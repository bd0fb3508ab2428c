"""
STARCATALOG Bright Star Catalog

Backend for the Yale Bright Star Catalog (5th revised edition). The
directory holds two text files:

    catalog     one star per line, fixed columns
    notes       remarks, "<number> <text>", appended to the star

All stars are parsed at construction. Lines that do not parse (the catalog
contains entries for novae and galaxies without a position or magnitude)
are skipped and counted.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians

from . import records
from .catalog import MapCatalog
from .models import BSCStar

logger = logging.getLogger("STARCATALOG.BSC")

CATALOG_LETTER = "B"


def bsc_name(number: int) -> str:
    return f"BSC{number:04d}"


def parse_bsc_line(line: str) -> BSCStar:
    """Build a BSCStar from one line of the catalog file.

    Raises:
        CatalogParseError: number, magnitude or position do not parse
    """
    number = records.integer(line, 0, 4, "BSC", "number")
    longname = line[5:14].rstrip()
    sao = records.optional_int(line, 31, 37) or 0
    mag = records.real(line, 102, 107, "BSC", "magnitude")

    ra_hours = records.hms(
        records.real(line, 75, 77, "BSC", "ra_hours"),
        records.real(line, 77, 79, "BSC", "ra_minutes"),
        records.real(line, 79, 83, "BSC", "ra_seconds"),
    )
    dec_degrees = records.sign(line, 83) * records.hms(
        records.real(line, 84, 86, "BSC", "dec_degrees"),
        records.real(line, 86, 88, "BSC", "dec_minutes"),
        records.real(line, 88, 90, "BSC", "dec_seconds"),
    )

    # proper motion in arcsec/yr, missing for some stars
    pm = RaDec()
    pmra = records.optional_real(line, 148, 154)
    pmdec = records.optional_real(line, 154, 160)
    if pmra is not None and pmdec is not None:
        pm = RaDec(degrees_to_radians(pmra / 3600), degrees_to_radians(pmdec / 3600))

    return BSCStar(
        name=bsc_name(number),
        catalog=CATALOG_LETTER,
        catalognumber=number,
        longname=longname,
        position=RaDec.from_hours_degrees(ra_hours, dec_degrees),
        pm=pm,
        mag=mag,
        number=number,
        sao=sao,
    )


class BSC(MapCatalog):
    """Yale Bright Star Catalog.

    Args:
        path: Directory containing "catalog" and "notes", or the catalog
              file itself if notes is given
        notes: Explicit path of the notes file

    Raises:
        CatalogIOError: If the catalog or notes file is missing
    """

    name = "BSC"
    prefix = "BSC"

    def __init__(self, path: str | Path, notes: Optional[str | Path] = None):
        super().__init__()
        if notes is None:
            self.filename = Path(path) / "catalog"
            self.notesfile = Path(path) / "notes"
        else:
            self.filename = Path(path)
            self.notesfile = Path(notes)

        for filename in (self.filename, self.notesfile):
            if not filename.is_file():
                raise CatalogIOError(
                    f"cannot stat {filename}", catalog=self.name, path=str(filename)
                )

        notes_by_number = self._read_notes()
        self._read_catalog(notes_by_number)
        self._finish_loading()
        logger.info(f"BSC loaded: {len(self._stars)} stars from {self.filename}")

    def _read_notes(self) -> Dict[int, List[str]]:
        notes: Dict[int, List[str]] = defaultdict(list)
        with open(self.notesfile, "r", encoding="latin-1") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                try:
                    number = int(line[0:5])
                except ValueError:
                    logger.debug(f"notes line skipped: '{line[:10]}'")
                    continue
                notes[number].append(line[6:])
        return notes

    def _read_catalog(self, notes: Dict[int, List[str]]) -> None:
        with open(self.filename, "r", encoding="latin-1") as f:
            for line in f:
                line = line.rstrip("\r\n")
                try:
                    star = parse_bsc_line(line)
                except CatalogParseError as e:
                    logger.debug(f"object '{line[:4]}' skipped: {e}")
                    self.rejected += 1
                    continue
                if star.number in notes:
                    star = star.with_notes(tuple(notes[star.number]))
                self._stars[star.number] = star
