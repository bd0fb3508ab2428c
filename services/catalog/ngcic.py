"""
STARCATALOG NGC/IC

Revised New General Catalogue and Index Catalogue (NGC 2000.0). The
directory holds two fixed column files:

    ngc2000.dat     one object per line
    names.dat       common names and Messier numbers of NGC/IC objects

Designations are stored without blanks: "NGC7000", "IC1805", "M31".
"""

import logging
import re
from pathlib import Path
from typing import Optional

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians

from . import records
from .deepsky import DeepSkyCatalog
from .models import DeepSkyClass, DeepSkyObject

logger = logging.getLogger("STARCATALOG.NGCIC")

CLASSIFICATIONS = {
    "Gx": DeepSkyClass.GALAXY,
    "OC": DeepSkyClass.OPEN_CLUSTER,
    "Gb": DeepSkyClass.GLOBULAR_CLUSTER,
    "Nb": DeepSkyClass.BRIGHT_NEBULA,
    "Pl": DeepSkyClass.PLANETARY_NEBULA,
    "C+N": DeepSkyClass.CLUSTER_NEBULOSITY,
    "Ast": DeepSkyClass.ASTERISM,
    "Kt": DeepSkyClass.KNOT,
    "***": DeepSkyClass.TRIPLE_STAR,
    "D*": DeepSkyClass.DOUBLE_STAR,
    "*": DeepSkyClass.SINGLE_STAR,
    "?": DeepSkyClass.UNCERTAIN,
    "": DeepSkyClass.UNIDENTIFIED,
    "-": DeepSkyClass.NONEXISTENT,
    "PD": DeepSkyClass.PLATE_DEFECT,
}

_MESSIER = re.compile(r"^M\s+(\d+)$")


def ngcic_name(field: str) -> Optional[str]:
    """Compact designation of a 5 column NGC/IC name field.

    "I1805" and "I 342" are IC objects, anything else is NGC.
    """
    field = field.rstrip()
    if not field.strip():
        return None
    if field.startswith("I"):
        return "IC" + field[1:].strip()
    return "NGC" + field.strip()


def common_name(field: str) -> str:
    """Normalized common name, "M 31" becomes "M31"."""
    name = field.strip()
    match = _MESSIER.match(name)
    if match:
        return f"M{match.group(1)}"
    return name


def parse_ngc_record(record: str) -> DeepSkyObject:
    """Build a DeepSkyObject from one ngc2000.dat line.

    Raises:
        CatalogParseError: name or position do not parse
    """
    name = ngcic_name(record[0:5])
    if name is None:
        raise CatalogParseError("record without name", catalog="NGCIC", value=record[:10])
    number = records.integer(record, 1, 5, "NGCIC", "number")

    ra_hours = records.hms(
        records.real(record, 10, 12, "NGCIC", "ra_hours"),
        records.real(record, 13, 17, "NGCIC", "ra_minutes"),
        0,
    )
    dec_degrees = records.sign(record, 19) * records.hms(
        records.real(record, 20, 22, "NGCIC", "dec_degrees"),
        records.real(record, 23, 25, "NGCIC", "dec_minutes"),
        0,
    )

    size = records.optional_real(record, 33, 38)
    axis = degrees_to_radians(size / 60) if size is not None else float("nan")
    mag = records.optional_real(record, 40, 44)

    return DeepSkyObject(
        name=name,
        number=number,
        position=RaDec.from_hours_degrees(ra_hours, dec_degrees),
        mag=mag if mag is not None else float("nan"),
        axes=(axis, axis),
        classification=CLASSIFICATIONS.get(
            records.text(record, 6, 9), DeepSkyClass.UNIDENTIFIED
        ),
        constellation=records.text(record, 29, 32),
    )


class NGCIC(DeepSkyCatalog):
    """NGC 2000.0 catalog with common names.

    Args:
        directory: Directory containing ngc2000.dat and names.dat

    Raises:
        CatalogIOError: If ngc2000.dat is missing
    """

    name = "NGCIC"

    def __init__(self, directory: str | Path):
        super().__init__()
        self.directory = Path(directory)
        self.filename = self.directory / "ngc2000.dat"
        self.namesfile = self.directory / "names.dat"
        if not self.filename.is_file():
            raise CatalogIOError(
                f"cannot open {self.filename}", catalog=self.name, path=str(self.filename)
            )
        self._read_objects()
        if self.namesfile.is_file():
            self._read_names()
        else:
            logger.warning(f"no names file {self.namesfile}, common names not available")
        logger.info(f"{len(self)} objects in NGC/IC, {self.rejected} rejected")

    def _read_objects(self) -> None:
        with open(self.filename, "r", encoding="latin-1") as f:
            for lineno, line in enumerate(f, 1):
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                try:
                    self.insert(parse_ngc_record(line))
                except CatalogParseError as e:
                    logger.debug(f"line {lineno} skipped: {e}")
                    self.rejected += 1

    def _read_names(self) -> None:
        count = 0
        with open(self.namesfile, "r", encoding="latin-1") as f:
            for line in f:
                line = line.rstrip("\r\n")
                name = ngcic_name(line[36:41])
                alias = common_name(line[0:35])
                if name is None or not alias:
                    continue
                if name not in self:
                    logger.debug(f"name '{alias}' for unknown object {name}")
                    continue
                self.alias(alias, name)
                count += 1
        logger.debug(f"{count} common names read from {self.namesfile}")
