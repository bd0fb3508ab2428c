"""
STARCATALOG - Star and Deep Sky Catalog Query Engine

Answers "which stars are in this patch of sky, down to this magnitude?"
and "where is star X?" against the classic astronomical catalogs (BSC,
Hipparcos, SAO, Tycho-2, UCAC4) and deep sky catalogs (NGC/IC, PGC,
Stellarium), either straight from the catalog files or from an SQLite
database built from them.

Architecture:
    - starcatalog: exceptions, logging, configuration, angle types, CLI
    - services.catalog: catalog backends, merge layer, database backend
"""

__version__ = "0.1.0"

# Version tuple for programmatic comparison
VERSION_INFO = (0, 1, 0)

# Core exceptions (import base class for convenience)
from starcatalog.exceptions import StarCatalogError

# Core types (import commonly used types for convenience)
from starcatalog.types import RaDec

__all__ = [
    "__version__",
    "VERSION_INFO",
    "StarCatalogError",
    "RaDec",
]
