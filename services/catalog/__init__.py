"""
STARCATALOG Catalog Service

Star and deep sky catalog backends with window, magnitude and name queries.

Usage:
    from services.catalog import FileBackend, SkyWindow, MagnitudeRange
    from starcatalog.types import RaDec

    with FileBackend("/usr/local/starcatalogs") as catalog:
        window = SkyWindow.hull(RaDec.from_hours_degrees(6.75, -16.7), 0.26, 0.26)
        for star in catalog.find(window, MagnitudeRange(-30, 8)):
            print(star)
"""

from .models import (
    DuplicateRef,
    Star,
    BSCStar,
    HipparcosStar,
    SAOStar,
    Tycho2Star,
    Ucac4Star,
    Ucac4StarNumber,
    DeepSkyClass,
    DeepSkyObject,
)
from .sky_window import SkyWindow, MagnitudeRange
from .mapped_file import MappedFile
from .iterators import (
    CatalogIterator,
    IteratorImplementation,
    EndIterator,
    SequenceIterator,
    ConditionIterator,
)
from .catalog import Catalog, MapCatalog, star_set
from .bsc import BSC
from .hipparcos import Hipparcos
from .sao import SAO
from .tycho2 import Tycho2
from .ucac4 import Ucac4, Ucac4Zone
from .conditions import (
    CutoverCondition,
    BSCCondition,
    HipparcosCondition,
    Tycho2Condition,
    Ucac4Condition,
)
from .file_backend import FileBackend, FileBackendIterator, MergeState
from .database import DatabaseBackend, DatabaseBackendCreator, DatabaseLoader
from .factory import CatalogFactory, CatalogKind
from .deepsky import DeepSkyCatalog, DeepSkyCatalogFactory, DeepSkyKind
from .ngcic import NGCIC
from .pgc import PGC
from .pgc_database import PGCDatabase
from .stellarium import Stellarium

__all__ = [
    # Data model
    "DuplicateRef",
    "Star",
    "BSCStar",
    "HipparcosStar",
    "SAOStar",
    "Tycho2Star",
    "Ucac4Star",
    "Ucac4StarNumber",
    "DeepSkyClass",
    "DeepSkyObject",
    "SkyWindow",
    "MagnitudeRange",
    # Infrastructure
    "MappedFile",
    "CatalogIterator",
    "IteratorImplementation",
    "EndIterator",
    "SequenceIterator",
    "ConditionIterator",
    "Catalog",
    "MapCatalog",
    "star_set",
    # Star catalogs
    "BSC",
    "Hipparcos",
    "SAO",
    "Tycho2",
    "Ucac4",
    "Ucac4Zone",
    # Merge
    "CutoverCondition",
    "BSCCondition",
    "HipparcosCondition",
    "Tycho2Condition",
    "Ucac4Condition",
    "FileBackend",
    "FileBackendIterator",
    "MergeState",
    # Database
    "DatabaseBackend",
    "DatabaseBackendCreator",
    "DatabaseLoader",
    "CatalogFactory",
    "CatalogKind",
    # Deep sky
    "DeepSkyCatalog",
    "DeepSkyCatalogFactory",
    "DeepSkyKind",
    "NGCIC",
    "PGC",
    "PGCDatabase",
    "Stellarium",
]
