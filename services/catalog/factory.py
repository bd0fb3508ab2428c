"""
STARCATALOG Catalog Factory

Opens a star catalog backend by kind. Paths follow the directory layout of
the file backend: a catalog directory for the single catalogs, the base
directory for the merged catalog, the database file for the database.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from starcatalog.config import MergeConfig

from .bsc import BSC
from .catalog import Catalog
from .database import DatabaseBackend
from .file_backend import FileBackend
from .hipparcos import Hipparcos
from .sao import SAO
from .tycho2 import Tycho2
from .ucac4 import Ucac4

logger = logging.getLogger("STARCATALOG.Factory")


class CatalogKind(Enum):
    """Star catalog backends."""
    BSC = "bsc"
    HIPPARCOS = "hipparcos"
    SAO = "sao"
    TYCHO2 = "tycho2"
    UCAC4 = "ucac4"
    COMBINED = "combined"
    DATABASE = "database"


class CatalogFactory:
    """Creates catalog backends.

    Args:
        merge: Cutover magnitudes for the combined backend
    """

    def __init__(self, merge: Optional[MergeConfig] = None):
        self.merge = merge or MergeConfig()

    def get(self, kind: CatalogKind, path: str | Path) -> Catalog:
        """Open the backend of the given kind at path.

        Raises:
            CatalogIOError: If the catalog files cannot be opened
        """
        logger.debug(f"opening {kind.name} catalog at {path}")
        if kind is CatalogKind.BSC:
            return BSC(path)
        if kind is CatalogKind.HIPPARCOS:
            return Hipparcos(path)
        if kind is CatalogKind.SAO:
            return SAO(path)
        if kind is CatalogKind.TYCHO2:
            return Tycho2(path)
        if kind is CatalogKind.UCAC4:
            return Ucac4(path)
        if kind is CatalogKind.COMBINED:
            return FileBackend(path, self.merge)
        return DatabaseBackend(path)
