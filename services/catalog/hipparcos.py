"""
STARCATALOG Hipparcos Catalog

Backend for the Hipparcos main catalog (ESA 1997, file hip_main.dat,
451 byte records). All records are parsed at construction.
"""

import logging
import math
from pathlib import Path

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians

from . import records
from .catalog import MapCatalog
from .mapped_file import MappedFile
from .models import HipparcosStar

logger = logging.getLogger("STARCATALOG.Hipparcos")

CATALOG_LETTER = "H"
RECORD_LENGTH = 451
DEFAULT_FILENAME = "hip_main.dat"


def hipparcos_name(hip: int) -> str:
    return f"HIP{hip:06d}"


def parse_hipparcos_record(line: str) -> HipparcosStar:
    """Build a HipparcosStar from one hip_main.dat record.

    Proper motion in the catalog is given in mas/yr, the RA component
    already multiplied by cos(dec); it is converted to a rate of RA.
    """
    hip = records.integer(line, 8, 14, "Hipparcos", "hip")
    ra_hours = records.hms(
        records.integer(line, 17, 19, "Hipparcos", "ra_hours"),
        records.integer(line, 20, 22, "Hipparcos", "ra_minutes"),
        records.real(line, 23, 28, "Hipparcos", "ra_seconds"),
    )
    dec_degrees = records.sign(line, 29) * records.hms(
        records.integer(line, 30, 32, "Hipparcos", "dec_degrees"),
        records.integer(line, 33, 35, "Hipparcos", "dec_minutes"),
        records.real(line, 36, 40, "Hipparcos", "dec_seconds"),
    )
    position = RaDec.from_hours_degrees(ra_hours, dec_degrees)
    mag = records.real(line, 41, 46, "Hipparcos", "magnitude")

    pmra = records.real(line, 87, 95, "Hipparcos", "pm_ra")
    pmdec = records.real(line, 96, 104, "Hipparcos", "pm_dec")
    pmra_rad = degrees_to_radians(pmra / 3600000.0)
    cosdec = math.cos(position.dec)
    if cosdec > 0:
        pmra_rad /= cosdec

    return HipparcosStar(
        name=hipparcos_name(hip),
        catalog=CATALOG_LETTER,
        catalognumber=hip,
        position=position,
        pm=RaDec(pmra_rad, degrees_to_radians(pmdec / 3600000.0)),
        mag=mag,
        hip=hip,
    )


def hipparcos_filename(path: str | Path) -> Path:
    """Resolve the catalog file, appending hip_main.dat to a directory."""
    path = Path(path)
    if not path.exists():
        raise CatalogIOError(f"cannot access '{path}'", catalog="Hipparcos", path=str(path))
    if path.is_dir():
        path = path / DEFAULT_FILENAME
        if not path.exists():
            raise CatalogIOError(
                f"cannot access '{path}'", catalog="Hipparcos", path=str(path)
            )
    if not path.is_file():
        raise CatalogIOError(
            f"'{path}' is not a regular file", catalog="Hipparcos", path=str(path)
        )
    return path


class Hipparcos(MapCatalog):
    """Hipparcos main catalog.

    Args:
        path: hip_main.dat, or the directory containing it

    Raises:
        CatalogIOError: If the file is missing or not a regular file
    """

    name = "Hipparcos"
    prefix = "HIP"

    def __init__(self, path: str | Path):
        super().__init__()
        self.filename = hipparcos_filename(path)
        with MappedFile(self.filename, RECORD_LENGTH) as mapped:
            for recno in range(mapped.nrecords):
                record = mapped.get_text(recno)
                try:
                    star = parse_hipparcos_record(record)
                except CatalogParseError as e:
                    logger.debug(f"record {recno} skipped: {e}")
                    self.rejected += 1
                    continue
                self._stars[star.hip] = star
        self._finish_loading()
        logger.info(
            f"Hipparcos loaded: {len(self._stars)} stars, "
            f"{self.rejected} records skipped"
        )
