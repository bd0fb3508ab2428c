"""
STARCATALOG SAO Catalog

Backend for the Smithsonian Astrophysical Observatory star catalog
(J2000 edition, CDS I/131A, file sao.dat, 205 byte records). Records
flagged as deleted are skipped like unparseable ones.
"""

import logging
from pathlib import Path

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians, hours_to_radians

from . import records
from .catalog import MapCatalog
from .mapped_file import MappedFile
from .models import SAOStar

logger = logging.getLogger("STARCATALOG.SAO")

CATALOG_LETTER = "S"
RECORD_LENGTH = 205
DEFAULT_FILENAME = "sao.dat"


def sao_name(number: int) -> str:
    return f"SAO{number:06d}"


def parse_sao_record(line: str) -> SAOStar:
    """Build an SAOStar from one sao.dat record (J2000 columns)."""
    number = records.integer(line, 0, 6, "SAO", "sao")
    if line[6:7] == "D":
        raise CatalogParseError("deleted record", catalog="SAO", field="delFlag")

    pmag = records.optional_real(line, 60, 64)
    vmag = records.optional_real(line, 65, 69)
    mag = vmag if vmag is not None else pmag
    if mag is None:
        raise CatalogParseError("no magnitude", catalog="SAO", field="magnitude")

    ra_hours = records.hms(
        records.integer(line, 150, 152, "SAO", "ra_hours"),
        records.integer(line, 152, 154, "SAO", "ra_minutes"),
        records.real(line, 154, 160, "SAO", "ra_seconds"),
    )
    dec_degrees = records.sign(line, 167) * records.hms(
        records.integer(line, 168, 170, "SAO", "dec_degrees"),
        records.integer(line, 170, 172, "SAO", "dec_minutes"),
        records.real(line, 172, 177, "SAO", "dec_seconds"),
    )

    # seconds of time per year and arcsec per year
    pmra = records.optional_real(line, 160, 167) or 0.0
    pmdec = records.optional_real(line, 177, 183) or 0.0

    return SAOStar(
        name=sao_name(number),
        catalog=CATALOG_LETTER,
        catalognumber=number,
        position=RaDec.from_hours_degrees(ra_hours, dec_degrees),
        pm=RaDec(hours_to_radians(pmra / 3600), degrees_to_radians(pmdec / 3600)),
        mag=mag,
        sao=number,
        photographic_mag=pmag,
        spectral_type=records.text(line, 84, 87),
    )


class SAO(MapCatalog):
    """SAO star catalog.

    Args:
        path: sao.dat, or the directory containing it

    Raises:
        CatalogIOError: If the file is missing
    """

    name = "SAO"
    prefix = "SAO"

    def __init__(self, path: str | Path):
        super().__init__()
        path = Path(path)
        if path.is_dir():
            path = path / DEFAULT_FILENAME
        if not path.is_file():
            raise CatalogIOError(
                f"cannot access '{path}'", catalog=self.name, path=str(path)
            )
        self.filename = path
        with MappedFile(self.filename, RECORD_LENGTH) as mapped:
            for recno in range(mapped.nrecords):
                try:
                    star = parse_sao_record(mapped.get_text(recno))
                except CatalogParseError as e:
                    logger.debug(f"record {recno} skipped: {e}")
                    self.rejected += 1
                    continue
                self._stars[star.sao] = star
        self._finish_loading()
        logger.info(
            f"SAO loaded: {len(self._stars)} stars, {self.rejected} records skipped"
        )
