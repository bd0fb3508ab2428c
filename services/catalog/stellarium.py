"""
STARCATALOG Stellarium DSO Catalog

Deep sky catalog shipped with Stellarium (catalog.txt). Tab separated, one
object per line, '#' starts a comment line. The leading columns hold
position, photometry and shape; the trailing columns are cross references
into other catalogs, 0 or blank meaning "not in that catalog".

The primary name of an object is its first cross reference in column
order (NGC before IC before Messier ...), "DSO<id>" if it has none; all
other cross references become alternate names.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple

from starcatalog.exceptions import CatalogIOError, CatalogParseError
from starcatalog.types import RaDec, degrees_to_radians

from .deepsky import DeepSkyCatalog
from .models import DeepSkyClass, DeepSkyObject

logger = logging.getLogger("STARCATALOG.Stellarium")

# index of the first cross reference column
XREF_START = 16
UNKNOWN_MAG = 99.0

# name format of the cross reference columns, in column order
XREF_FORMATS: Tuple[str, ...] = (
    "NGC{}", "IC{}", "M{}", "C{}", "B{}", "Sh2-{}", "vdB{}", "RCW{}",
    "LDN{}", "LBN{}", "Cr{}", "Mel{}", "PGC{}", "UGC{}", "Ced{}", "Arp{}",
    "VV{}", "PK {}", "PN G{}", "SNR G{}", "ACO{}", "HCG{}", "ESO {}",
    "vdBH{}", "DWB{}", "Tr{}", "St{}", "Ru{}", "vdB-Ha{}",
)

CLASSIFICATIONS = {
    "G": DeepSkyClass.GALAXY,
    "GX": DeepSkyClass.GALAXY,
    "AGX": DeepSkyClass.GALAXY,
    "RG": DeepSkyClass.GALAXY,
    "IG": DeepSkyClass.GALAXY,
    "OC": DeepSkyClass.OPEN_CLUSTER,
    "GC": DeepSkyClass.GLOBULAR_CLUSTER,
    "PN": DeepSkyClass.PLANETARY_NEBULA,
    "N": DeepSkyClass.BRIGHT_NEBULA,
    "EN": DeepSkyClass.BRIGHT_NEBULA,
    "RN": DeepSkyClass.BRIGHT_NEBULA,
    "HII": DeepSkyClass.BRIGHT_NEBULA,
    "BN": DeepSkyClass.BRIGHT_NEBULA,
    "ISM": DeepSkyClass.BRIGHT_NEBULA,
    "DN": DeepSkyClass.DARK_NEBULA,
    "SNR": DeepSkyClass.SUPERNOVA_REMNANT,
    "CL+N": DeepSkyClass.CLUSTER_NEBULOSITY,
    "CN": DeepSkyClass.CLUSTER_NEBULOSITY,
    "AST": DeepSkyClass.ASTERISM,
    "**": DeepSkyClass.DOUBLE_STAR,
    "*": DeepSkyClass.SINGLE_STAR,
    "MUL": DeepSkyClass.MULTIPLE_STAR,
}


def _number(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


def _magnitude(vmag: str, bmag: str) -> float:
    for value in (_number(vmag), _number(bmag)):
        if value is not None and value != 0 and value < UNKNOWN_MAG:
            return value
    return math.nan


def _axis(value: str) -> float:
    arcmin = _number(value)
    if not arcmin:
        return math.nan
    return degrees_to_radians(arcmin / 60)


def cross_references(fields: List[str]) -> List[str]:
    """Designations of the nonzero cross reference columns, in column order."""
    names = []
    for fmt, value in zip(XREF_FORMATS, fields[XREF_START:]):
        value = value.strip()
        if not value or value == "0":
            continue
        names.append(fmt.format(value))
    return names


def parse_stellarium_line(line: str) -> DeepSkyObject:
    """Build a DeepSkyObject from one catalog.txt line.

    Raises:
        CatalogParseError: too few columns, id or position do not parse
    """
    fields = line.split("\t")
    if len(fields) < XREF_START:
        raise CatalogParseError(
            f"only {len(fields)} columns", catalog="Stellarium", value=line[:20]
        )
    try:
        number = int(fields[0])
        position = RaDec.from_degrees(float(fields[1]), float(fields[2]))
    except ValueError as e:
        raise CatalogParseError(
            f"bad id or position: {e}", catalog="Stellarium", value=line[:20]
        ) from e

    names = cross_references(fields)
    name = names[0] if names else f"DSO{number}"
    orientation = _number(fields[9])

    obj = DeepSkyObject(
        name=name,
        number=number,
        position=position,
        mag=_magnitude(fields[4], fields[3]),
        axes=(_axis(fields[7]), _axis(fields[8])),
        position_angle=(
            degrees_to_radians(orientation) if orientation is not None else math.nan
        ),
        classification=CLASSIFICATIONS.get(
            fields[5].strip().upper(), DeepSkyClass.UNIDENTIFIED
        ),
    )
    for alias in names[1:]:
        obj.addname(alias)
    return obj


class Stellarium(DeepSkyCatalog):
    """Stellarium deep sky object catalog.

    Args:
        path: Directory containing catalog.txt, or the file itself

    Raises:
        CatalogIOError: If the file is missing
    """

    name = "Stellarium"

    def __init__(self, path: str | Path):
        super().__init__()
        path = Path(path)
        self.filename = path / "catalog.txt" if path.is_dir() else path
        if not self.filename.is_file():
            raise CatalogIOError(
                f"cannot open {self.filename}", catalog=self.name, path=str(self.filename)
            )
        # decoded per line, an undecodable line only loses that record
        with open(self.filename, "rb") as f:
            for lineno, raw in enumerate(f, 1):
                raw = raw.rstrip(b"\r\n")
                if not raw.strip() or raw.startswith(b"#"):
                    continue
                try:
                    self.insert(parse_stellarium_line(raw.decode("utf-8")))
                except (CatalogParseError, UnicodeDecodeError) as e:
                    logger.debug(f"line {lineno} skipped: {e}")
                    self.rejected += 1
        logger.info(f"{len(self)} objects in Stellarium catalog, {self.rejected} rejected")
