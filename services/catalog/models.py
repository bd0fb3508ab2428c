"""
STARCATALOG Catalog Data Model

Value objects produced by the catalog backends:
- Star and its catalog specific subtypes (BSC, Hipparcos, SAO, Tycho-2, UCAC4)
- Ucac4StarNumber, the composite zone/number identity of UCAC4 stars
- DeepSkyObject for the NGC/IC, PGC and Stellarium catalogs

Stars are immutable once parsed. Two stars are equal when they carry the
same catalog letter, catalog number and name; they sort by catalog letter
and catalog number.
"""

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering
from typing import Optional, Tuple

from starcatalog.exceptions import StarNotFoundError
from starcatalog.types import RaDec, Radians, reduce_angle


@dataclass(frozen=True)
class DuplicateRef:
    """Reference to the star of a shallower catalog that supersedes a star."""
    catalog: str
    name: str


# =============================================================================
# Stars
# =============================================================================

@total_ordering
@dataclass(frozen=True, eq=False)
class Star:
    """Star from any catalog.

    Attributes:
        name: Catalog prefixed name, e.g. "HIP032349", unique within a backend
        catalog: Single letter catalog code (B, H, S, T, U)
        catalognumber: Number unique within the catalog letter
        longname: Traditional designation, if the catalog has one
        position: J2000 position
        pm: Proper motion in radians per year (RA, Dec)
        mag: Apparent visual magnitude
        duplicate: Star of a shallower catalog this star duplicates
    """
    name: str
    catalog: str = ""
    catalognumber: int = 0
    longname: str = ""
    position: RaDec = RaDec()
    pm: RaDec = RaDec()
    mag: float = 0.0
    duplicate: Optional[DuplicateRef] = None

    @property
    def ra(self) -> Radians:
        return self.position.ra

    @property
    def dec(self) -> Radians:
        return self.position.dec

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate is not None

    def duplicate_of(self, catalog: str) -> bool:
        """Whether this star is flagged as duplicate of a star in catalog."""
        return self.duplicate is not None and self.duplicate.catalog == catalog

    def position_at(self, years: float) -> RaDec:
        """Position after `years` years of linear proper motion."""
        return RaDec(
            reduce_angle(self.position.ra + years * self.pm.ra),
            self.position.dec + years * self.pm.dec,
        )

    def as_star(self) -> "Star":
        """Strip the catalog specific fields."""
        return Star(
            name=self.name,
            catalog=self.catalog,
            catalognumber=self.catalognumber,
            longname=self.longname,
            position=self.position,
            pm=self.pm,
            mag=self.mag,
            duplicate=self.duplicate,
        )

    def _key(self) -> Tuple[str, int, str]:
        return (self.catalog, self.catalognumber, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Star):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Star") -> bool:
        if not isinstance(other, Star):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return (
            f"{self.name} {self.position.ra_hms} {self.position.dec_dms} "
            f"{self.mag:6.2f}"
        )


@dataclass(frozen=True, eq=False)
class BSCStar(Star):
    """Star from the Yale Bright Star Catalog."""
    number: int = 0
    sao: int = 0
    notes: Tuple[str, ...] = ()

    def with_notes(self, notes: Tuple[str, ...]) -> "BSCStar":
        return replace(self, notes=notes)


@dataclass(frozen=True, eq=False)
class HipparcosStar(Star):
    """Star from the Hipparcos main catalog."""
    hip: int = 0


@dataclass(frozen=True, eq=False)
class SAOStar(Star):
    """Star from the Smithsonian Astrophysical Observatory catalog."""
    sao: int = 0
    photographic_mag: Optional[float] = None
    spectral_type: str = ""


@dataclass(frozen=True, eq=False)
class Tycho2Star(Star):
    """Star from the Tycho-2 catalog.

    hip is the Hipparcos number of the star if Tycho-2 cross references it,
    in which case the star is flagged as duplicate of that Hipparcos star.
    """
    hip: Optional[int] = None
    bt: Optional[float] = None
    vt: Optional[float] = None


# =============================================================================
# UCAC4
# =============================================================================

UCAC4_ZONES = 900
_UCAC4_NAME = re.compile(r"^UCAC4-(\d{1,3})-(\d{1,6})$")


@dataclass(frozen=True, order=True)
class Ucac4StarNumber:
    """Composite identity of a UCAC4 star: zone and 1-based number in zone."""
    zone: int
    number: int

    def __post_init__(self) -> None:
        if not 1 <= self.zone <= UCAC4_ZONES:
            raise StarNotFoundError(
                f"UCAC4 zone {self.zone} out of range", catalog="UCAC4"
            )
        if self.number < 1:
            raise StarNotFoundError(
                f"UCAC4 star number {self.number} out of range", catalog="UCAC4"
            )

    @classmethod
    def parse(cls, name: str) -> "Ucac4StarNumber":
        match = _UCAC4_NAME.match(name.strip())
        if match is None:
            raise StarNotFoundError(
                f"cannot parse UCAC4 star number '{name}'",
                star_name=name,
                catalog="UCAC4",
            )
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_catalognumber(cls, catalognumber: int) -> "Ucac4StarNumber":
        return cls(catalognumber // 1000000, catalognumber % 1000000)

    @property
    def catalognumber(self) -> int:
        return self.zone * 1000000 + self.number

    def __str__(self) -> str:
        return f"UCAC4-{self.zone:03d}-{self.number:06d}"


@dataclass(frozen=True, eq=False)
class Ucac4Star(Star):
    """Star from one UCAC4 zone file, with its photometry and flags."""
    number: Optional[Ucac4StarNumber] = None
    id_number: int = 0
    mag2: float = 0.0
    magsigma: float = 0.0
    obj_type: int = 0
    double_star_flag: int = 0
    pm_ra_sigma: int = 0
    pm_dec_sigma: int = 0
    twomass_id: int = 0
    mag_j: float = 0.0
    mag_h: float = 0.0
    mag_k: float = 0.0
    apass_mag: Tuple[float, ...] = ()
    hiptyc2: bool = False

    def __str__(self) -> str:
        return (
            f"{self.number} {self.position.ra_hours:8.4f} "
            f"{self.position.dec_degrees:8.4f} {self.mag:6.3f}"
        )


# =============================================================================
# Deep Sky Objects
# =============================================================================

class DeepSkyClass(Enum):
    """Morphological classification of deep sky objects."""
    GALAXY = "galaxy"
    OPEN_CLUSTER = "open_cluster"
    GLOBULAR_CLUSTER = "globular_cluster"
    BRIGHT_NEBULA = "bright_nebula"
    PLANETARY_NEBULA = "planetary_nebula"
    CLUSTER_NEBULOSITY = "cluster_nebulosity"
    DARK_NEBULA = "dark_nebula"
    SUPERNOVA_REMNANT = "supernova_remnant"
    ASTERISM = "asterism"
    KNOT = "knot"
    TRIPLE_STAR = "triple_star"
    DOUBLE_STAR = "double_star"
    SINGLE_STAR = "single_star"
    MULTIPLE_STAR = "multiple_star"
    UNCERTAIN = "uncertain"
    UNIDENTIFIED = "unidentified"
    NONEXISTENT = "nonexistent"
    PLATE_DEFECT = "plate_defect"
    MULTIPLE_SYSTEM = "multiple_system"
    GALAXY_IN_MULTIPLE_SYSTEM = "galaxy_in_multiple_system"


@total_ordering
@dataclass(eq=False)
class DeepSkyObject:
    """Deep sky object (galaxy, cluster, nebula, ...).

    Attributes:
        name: Primary designation, e.g. "NGC7000", "PGC0000001"
        number: Running number in the source catalog
        position: J2000 position
        mag: Magnitude, NaN if unknown
        axes: Major and minor axis in radians, NaN if unknown
        position_angle: Position angle of the major axis in radians
        classification: Morphological class
        constellation: Three letter constellation code
        names: Alternate designations
    """
    name: str
    number: int = 0
    position: RaDec = RaDec()
    mag: float = math.nan
    axes: Tuple[float, float] = (math.nan, math.nan)
    position_angle: float = math.nan
    classification: DeepSkyClass = DeepSkyClass.UNIDENTIFIED
    constellation: str = ""
    names: frozenset = field(default_factory=frozenset)

    def addname(self, name: str) -> None:
        if name and name != self.name:
            self.names = self.names | {name}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeepSkyObject):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other: "DeepSkyObject") -> bool:
        if not isinstance(other, DeepSkyObject):
            return NotImplemented
        return self.name < other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return (
            f"{self.name} {self.classification.value} {self.position} "
            f"{self.constellation}"
        )
