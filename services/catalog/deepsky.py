"""
STARCATALOG Deep Sky Catalogs

Common base of the deep sky object catalogs (NGC/IC, PGC, Stellarium) and
the factory that loads them.

A deep sky catalog is parsed completely at construction. Objects are
indexed under their primary name and under every alternate name, so
"M31", "NGC224" and "Andromeda Galaxy" all resolve to the same object.
"""

import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List

from starcatalog.exceptions import ObjectNotFoundError

from .models import DeepSkyObject
from .sky_window import SkyWindow

logger = logging.getLogger("STARCATALOG.DeepSky")

DEFAULT_MAX_OBJECTS = 100


class DeepSkyCatalog:
    """Name indexed collection of deep sky objects."""

    name = "DeepSky"

    def __init__(self) -> None:
        self._names: Dict[str, DeepSkyObject] = {}
        self._objects: Dict[str, DeepSkyObject] = {}
        self.rejected = 0

    def insert(self, obj: DeepSkyObject) -> None:
        """Add an object under its name and alternate names.

        A name already taken by an earlier object keeps pointing there.
        """
        self._objects.setdefault(obj.name, obj)
        self._names.setdefault(obj.name, obj)
        for alias in obj.names:
            self._names.setdefault(alias, obj)

    def alias(self, alias: str, name: str) -> None:
        """Make alias an additional name of the object called name."""
        obj = self._names.get(name)
        if obj is None:
            return
        obj.addname(alias)
        self._names.setdefault(alias, obj)

    def find(self, name: str) -> DeepSkyObject:
        """Object with primary or alternate name."""
        logger.debug(f"searching {self.name} for '{name}'")
        obj = self._names.get(name)
        if obj is None:
            raise ObjectNotFoundError(
                f"object {name} not found", object_name=name, catalog=self.name
            )
        return replace(obj)

    def find_window(self, window: SkyWindow) -> List[DeepSkyObject]:
        """Objects inside window, sorted by name."""
        return sorted(
            replace(obj) for obj in self._objects.values() if window.contains(obj.position)
        )

    def find_like(self, prefix: str, maxobjects: int = DEFAULT_MAX_OBJECTS) -> List[str]:
        """Up to maxobjects names starting with prefix, sorted."""
        result = []
        for name in sorted(self._names):
            if name.startswith(prefix):
                result.append(name)
                if len(result) >= maxobjects:
                    break
        logger.debug(f"search complete, {len(result)} objects like '{prefix}'")
        return result

    def names(self) -> List[str]:
        return sorted(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[DeepSkyObject]:
        return iter(sorted(self._objects.values()))

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {len(self)} objects>"


# =============================================================================
# Factory
# =============================================================================

class DeepSkyKind(Enum):
    """Deep sky catalogs and their directory below the factory base."""
    NGCIC = "ngcic"
    PGC = "pgc"
    STELLARIUM = "stellarium"


class DeepSkyCatalogFactory:
    """Loads each deep sky catalog once and keeps it for later requests.

    Args:
        basedir: Directory containing ngcic/, pgc/ and stellarium/

    Example:
        factory = DeepSkyCatalogFactory("/usr/local/starcatalogs/deepsky")
        ngc = factory.get(DeepSkyKind.NGCIC)
        print(ngc.find("NGC7000").constellation)
    """

    def __init__(self, basedir: str | Path):
        self.basedir = Path(basedir)
        self._cache: Dict[DeepSkyKind, DeepSkyCatalog] = {}

    def get(self, kind: DeepSkyKind) -> DeepSkyCatalog:
        catalog = self._cache.get(kind)
        if catalog is None:
            catalog = self._load(kind)
            self._cache[kind] = catalog
        return catalog

    def _load(self, kind: DeepSkyKind) -> DeepSkyCatalog:
        from .ngcic import NGCIC
        from .pgc import PGC
        from .stellarium import Stellarium

        directory = self.basedir / kind.value
        logger.info(f"loading {kind.name} catalog from {directory}")
        loaders = {
            DeepSkyKind.NGCIC: NGCIC,
            DeepSkyKind.PGC: PGC,
            DeepSkyKind.STELLARIUM: Stellarium,
        }
        return loaders[kind](directory)

    def loaded(self) -> List[DeepSkyKind]:
        return list(self._cache)

    def find(self, name: str) -> DeepSkyObject:
        """Look name up in the NGC/IC, Stellarium and PGC catalogs, in this order."""
        for kind in (DeepSkyKind.NGCIC, DeepSkyKind.STELLARIUM, DeepSkyKind.PGC):
            catalog = self.get(kind)
            if name in catalog:
                return catalog.find(name)
        raise ObjectNotFoundError(f"object {name} not found", object_name=name)
