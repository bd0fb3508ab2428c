"""
STARCATALOG File Backend

Merges the file based catalogs into one catalog that is complete down to
the faintest UCAC4 stars. Catalogs are consulted in order of increasing
depth, each one only for the magnitude slice it is responsible for:

    BSC         brighter than BSC_CUTOVER (4.5)
    Hipparcos   from BSC_CUTOVER on, needed while brightest <= 7.0
    Tycho-2     needed once faintest reaches 7.0, Hipparcos duplicates dropped
    UCAC4       needed once faintest reaches 10.0, Tycho-2 duplicates dropped

SAO is opened as well so SAO names resolve, but it does not take part in
the merge.

Directory layout below the base directory:
    bsc/ hipparcos/ sao/ tycho2/ u4/
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from starcatalog.config import MergeConfig
from starcatalog.exceptions import CatalogError, CatalogLogicError, StarNotFoundError

from .bsc import BSC
from .catalog import Catalog, star_set
from .conditions import (
    NO_BRIGHT_LIMIT,
    BSCCondition,
    CutoverCondition,
    HipparcosCondition,
    Tycho2Condition,
    Ucac4Condition,
)
from .hipparcos import Hipparcos
from .iterators import CatalogIterator, IteratorImplementation
from .models import Star
from .sao import SAO
from .sky_window import MagnitudeRange, SkyWindow
from .tycho2 import Tycho2
from .ucac4 import Ucac4

logger = logging.getLogger("STARCATALOG.FileBackend")


class MergeState(Enum):
    """Catalogs of the merge, in the order they are consulted."""
    BSC = "BSC"
    HIPPARCOS = "Hipparcos"
    TYCHO2 = "Tycho2"
    UCAC4 = "UCAC4"
    END = "end"


class FileBackend(Catalog):
    """Merged view of BSC, Hipparcos, Tycho-2 and UCAC4.

    Args:
        basedir: Directory containing the catalog subdirectories
        merge: Cutover magnitudes, the defaults if omitted

    Raises:
        CatalogIOError: If any of the catalogs cannot be opened
    """

    name = "FileBackend"

    def __init__(self, basedir: str | Path, merge: Optional[MergeConfig] = None):
        self.basedir = Path(basedir)
        merge = merge or MergeConfig()
        self.bsc_cutover = merge.bsc_cutover
        self.hipparcos_cutover = merge.hipparcos_cutover
        self.tycho2_cutover = merge.tycho2_cutover

        logger.info(f"Opening catalogs below {self.basedir}")
        self.bsc = BSC(self.basedir / "bsc")
        self.hipparcos = Hipparcos(self.basedir / "hipparcos")
        self.sao = SAO(self.basedir / "sao")
        self.tycho2 = Tycho2(self.basedir / "tycho2")
        self.ucac4 = Ucac4(self.basedir / "u4")

    def backend(self, state: MergeState) -> Catalog:
        return {
            MergeState.BSC: self.bsc,
            MergeState.HIPPARCOS: self.hipparcos,
            MergeState.TYCHO2: self.tycho2,
            MergeState.UCAC4: self.ucac4,
        }[state]

    # -------------------------------------------------------------------------
    # Merge policy
    # -------------------------------------------------------------------------

    def plan(self, magrange: MagnitudeRange) -> List[MergeState]:
        """Catalogs that can contribute stars in magrange, in merge order."""
        states = []
        if magrange.brightest <= self.bsc_cutover:
            states.append(MergeState.BSC)
        if magrange.brightest <= self.hipparcos_cutover:
            states.append(MergeState.HIPPARCOS)
        if magrange.faintest < self.hipparcos_cutover:
            return states
        states.append(MergeState.TYCHO2)
        if magrange.faintest < self.tycho2_cutover:
            return states
        states.append(MergeState.UCAC4)
        return states

    def condition(
        self, state: MergeState, plan: List[MergeState], magrange: MagnitudeRange
    ) -> CutoverCondition:
        """Fresh cutover condition for one catalog of a merge plan.

        Duplicates are only dropped when the catalog supplying the original
        star is part of the plan.
        """
        if state is MergeState.BSC:
            return BSCCondition(min(magrange.faintest, self.bsc_cutover))
        if state is MergeState.HIPPARCOS:
            cutover = self.bsc_cutover if MergeState.BSC in plan else NO_BRIGHT_LIMIT
            return HipparcosCondition(cutover, magrange.faintest)
        if state is MergeState.TYCHO2:
            if MergeState.HIPPARCOS in plan:
                return Tycho2Condition(limit=magrange.faintest)
            return CutoverCondition(None, limit=magrange.faintest)
        if state is MergeState.UCAC4:
            return Ucac4Condition(limit=magrange.faintest)
        raise CatalogLogicError(f"no condition for state {state.name}")

    # -------------------------------------------------------------------------
    # Catalog interface
    # -------------------------------------------------------------------------

    def find_name(self, name: str) -> Star:
        """Dispatch a star name to the catalog its prefix names."""
        if name.startswith("UCAC4"):
            return self.ucac4.find_name(name)
        if name.startswith("BSC"):
            return self.bsc.find_name(name)
        if name.startswith("HIP"):
            return self.hipparcos.find_name(name)
        if name.startswith("SAO"):
            return self.sao.find_name(name)
        if name.startswith("T"):
            return self.tycho2.find_name(name)
        raise StarNotFoundError(f"unknown name '{name}'", star_name=name, catalog=self.name)

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        plan = self.plan(magrange)
        stars: List[Star] = []
        for state in plan:
            condition = self.condition(state, plan, magrange)
            stars.extend(
                star
                for star in self.backend(state).find_window(window, magrange)
                if condition(star)
            )
            logger.debug(f"{state.value}: {condition}")
        result = star_set(stars)
        logger.debug(f"merged {len(result)} stars in {window}, {magrange}")
        return result

    def find_iter(self, window: SkyWindow, magrange: MagnitudeRange) -> CatalogIterator:
        return CatalogIterator(FileBackendIterator(self, window, magrange))

    def number_of_stars(self) -> int:
        """Sum over all five catalogs, duplicates included."""
        return (
            self.bsc.number_of_stars()
            + self.hipparcos.number_of_stars()
            + self.sao.number_of_stars()
            + self.tycho2.number_of_stars()
            + self.ucac4.number_of_stars()
        )

    def begin(self) -> CatalogIterator:
        return CatalogIterator(FileBackendIterator(self))

    def close(self) -> None:
        for catalog in (self.bsc, self.hipparcos, self.sao, self.tycho2, self.ucac4):
            catalog.close()


class FileBackendIterator(IteratorImplementation):
    """Walks the merged catalog one source catalog after the other.

    Each state has its own inner iterator and cutover condition, both
    created when the state is entered. A star that cannot be read or
    evaluated is logged and skipped.

    Args:
        backend: Merged catalog
        window: Restrict to window, None for a full scan
        magrange: Restrict to magrange, all magnitudes if omitted
    """

    def __init__(
        self,
        backend: FileBackend,
        window: Optional[SkyWindow] = None,
        magrange: Optional[MagnitudeRange] = None,
    ):
        self.owner = backend
        self.window = window
        self.magrange = magrange or MagnitudeRange()
        self._plan = backend.plan(self.magrange)
        self._remaining = list(self._plan)
        self.state = MergeState.END
        self.condition: Optional[CutoverCondition] = None
        self.statistics: Dict[MergeState, str] = {}
        self._inner: Optional[IteratorImplementation] = None
        self._current: Optional[Star] = None
        self._next_state()
        self._advance()

    def _next_state(self) -> None:
        if self.condition is not None:
            self.statistics[self.state] = str(self.condition)
            logger.debug(f"{self.state.value} done: {self.condition}")
        if not self._remaining:
            self.state = MergeState.END
            self._inner = None
            self.condition = None
            return
        self.state = self._remaining.pop(0)
        catalog = self.owner.backend(self.state)
        if self.window is None:
            self._inner = catalog.begin().implementation
        else:
            self._inner = catalog.find_iter(self.window, self.magrange).implementation
        self.condition = self.owner.condition(self.state, self._plan, self.magrange)

    def _advance(self) -> None:
        """Move to the next accepted star at or after the inner position."""
        while self.state is not MergeState.END:
            inner = self._inner
            while True:
                try:
                    if inner.is_end:
                        break
                    star = inner.current()
                    accepted = self.condition(star)
                except CatalogError as e:
                    logger.debug(f"{self.state.value}: star skipped: {e}")
                    inner.skip()
                    continue
                if accepted:
                    self._current = star
                    return
                inner.increment()
            self._next_state()
        self._current = None

    @property
    def is_end(self) -> bool:
        return self.state is MergeState.END

    def current(self) -> Star:
        if self._current is None:
            raise CatalogLogicError("cannot dereference merged iterator at end")
        return self._current

    def increment(self) -> None:
        if self.state is MergeState.END:
            raise CatalogLogicError("cannot increment merged iterator at end")
        self._inner.increment()
        self._advance()

    def position(self) -> Any:
        if self._inner is None:
            return (self.state, None)
        return (self.state, self._inner.position())

    def __str__(self) -> str:
        return f"FileBackendIterator({self.state.value}, {self._inner})"
