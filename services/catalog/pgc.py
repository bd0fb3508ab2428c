"""
STARCATALOG PGC

Principal Galaxy Catalogue (HYPERLEDA extract, pgc.dat). One galaxy per
line, fixed columns, followed by a variable number of 22 column alternate
designations. Records that do not parse are logged and skipped.
"""

import logging
import math
from pathlib import Path

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians

from . import records
from .deepsky import DeepSkyCatalog
from .models import DeepSkyClass, DeepSkyObject

logger = logging.getLogger("STARCATALOG.PGC")

# column at which the alternate names start, and their width
NAMES_START = 78
NAME_WIDTH = 22
MIN_RECORD_LENGTH = 77

CLASSIFICATIONS = {
    "G": DeepSkyClass.GALAXY,
    "M": DeepSkyClass.MULTIPLE_SYSTEM,
    "GM": DeepSkyClass.GALAXY_IN_MULTIPLE_SYSTEM,
}


def pgc_name(number: int) -> str:
    return f"PGC{number:07d}"


def parse_pgc_record(record: str) -> DeepSkyObject:
    """Build a DeepSkyObject from one pgc.dat line.

    Raises:
        CatalogParseError: short record or unparseable number or position
    """
    if len(record) < MIN_RECORD_LENGTH:
        raise CatalogParseError(
            f"record too short ({len(record)} characters)", catalog="PGC", value=record[:10]
        )
    number = records.integer(record, 3, 10, "PGC", "number")
    ra_hours = records.hms(
        records.real(record, 12, 14, "PGC", "ra_hours"),
        records.real(record, 14, 16, "PGC", "ra_minutes"),
        records.real(record, 16, 20, "PGC", "ra_seconds"),
    )
    dec_degrees = records.sign(record, 20) * records.hms(
        records.real(record, 21, 23, "PGC", "dec_degrees"),
        records.real(record, 23, 25, "PGC", "dec_minutes"),
        records.real(record, 25, 27, "PGC", "dec_seconds"),
    )

    # logD25 in 0.1 arcmin, logR25 is log(major/minor); 9.99 flags missing values
    major = math.nan
    logd25 = records.text(record, 36, 41)
    if logd25 and logd25 != "9.99":
        major = degrees_to_radians(10 ** float(logd25) * 0.1 / 60)
    minor = math.nan
    logr25 = records.text(record, 50, 54)
    if logr25 and logr25 != "9.99" and not math.isnan(major):
        minor = 10 ** -float(logr25) * major
    position_angle = math.nan
    pa = records.text(record, 63, 67)
    if pa and pa != "999.":
        position_angle = degrees_to_radians(float(pa))

    obj = DeepSkyObject(
        name=pgc_name(number),
        number=number,
        position=RaDec.from_hours_degrees(ra_hours, dec_degrees),
        axes=(major, minor),
        position_angle=position_angle,
        classification=CLASSIFICATIONS.get(
            records.text(record, 28, 30), DeepSkyClass.UNIDENTIFIED
        ),
    )

    nnames = records.optional_int(record, 75, 77) or 0
    for i in range(nnames):
        start = NAMES_START + i * NAME_WIDTH
        obj.addname(records.text(record, start, start + NAME_WIDTH))
    return obj


class PGC(DeepSkyCatalog):
    """Principal Galaxy Catalogue.

    Args:
        path: Directory containing pgc.dat, or the file itself

    Raises:
        CatalogIOError: If the file cannot be read
    """

    name = "PGC"

    def __init__(self, path: str | Path):
        super().__init__()
        path = Path(path)
        self.filename = path / "pgc.dat" if path.is_dir() else path
        if not self.filename.is_file():
            raise CatalogIOError(
                f"cannot open {self.filename}", catalog=self.name, path=str(self.filename)
            )
        with open(self.filename, "r", encoding="latin-1") as f:
            for lineno, line in enumerate(f, 1):
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                try:
                    self.insert(parse_pgc_record(line))
                except (CatalogParseError, ValueError) as e:
                    logger.debug(f"line {lineno} skipped: {e}")
                    self.rejected += 1
        logger.info(f"{len(self)} objects in PGC, {self.rejected} rejected")
