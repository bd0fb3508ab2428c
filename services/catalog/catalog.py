"""
STARCATALOG Catalog Base

Common contract of all star catalog backends:

    find(name)                      -> Star
    find(window, magrange)          -> list[Star]   (sorted, no duplicates)
    find_iter(window, magrange)     -> CatalogIterator
    number_of_stars()               -> int
    begin() / end()                 -> CatalogIterator

Backends are context managers; leaving the context releases their mapped
files or database connections.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from starcatalog.exceptions import StarNotFoundError

from .iterators import CatalogIterator, ConditionIterator, SequenceIterator
from .models import Star
from .sky_window import MagnitudeRange, SkyWindow

logger = logging.getLogger("STARCATALOG.Catalog")


def star_set(stars: Iterable[Star]) -> List[Star]:
    """Collapse duplicates and sort into natural star order."""
    return sorted(set(stars))


def window_condition(window: SkyWindow, magrange: MagnitudeRange):
    """Predicate accepting the stars inside window and magrange."""
    def condition(star: Star) -> bool:
        return magrange.contains(star.mag) and window.contains(star.position)
    return condition


class Catalog(ABC):
    """Abstract star catalog backend.

    Attributes:
        name: Human readable catalog name, e.g. "Hipparcos"
    """

    name: str = "Catalog"

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find(
        self,
        what: Union[str, SkyWindow],
        magrange: Optional[MagnitudeRange] = None,
    ) -> Union[Star, List[Star]]:
        """Find a star by name, or all stars in a window.

        Args:
            what: Star name or SkyWindow
            magrange: Magnitude range for window queries, all magnitudes
                      if omitted

        Raises:
            StarNotFoundError: Name unknown or malformed for this catalog
        """
        if isinstance(what, SkyWindow):
            return self.find_window(what, magrange or MagnitudeRange())
        return self.find_name(what)

    @abstractmethod
    def find_name(self, name: str) -> Star:
        ...

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        """All stars inside window and magrange, sorted and de-duplicated."""
        result = star_set(self.find_iter(window, magrange))
        logger.debug(f"{self.name}: {len(result)} stars in {window}, {magrange}")
        return result

    def find_iter(self, window: SkyWindow, magrange: MagnitudeRange) -> CatalogIterator:
        """Iterator over the stars inside window and magrange."""
        return CatalogIterator(
            ConditionIterator(
                self.begin().implementation, window_condition(window, magrange)
            )
        )

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    @abstractmethod
    def number_of_stars(self) -> int:
        ...

    @abstractmethod
    def begin(self) -> CatalogIterator:
        ...

    def end(self) -> CatalogIterator:
        return CatalogIterator.end()

    def __iter__(self) -> CatalogIterator:
        return self.begin()

    def __len__(self) -> int:
        return self.number_of_stars()

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class MapCatalog(Catalog):
    """Catalog parsed completely into memory, keyed by catalog number.

    Subclasses fill self._stars during construction, in any order; call
    _finish_loading() afterwards to fix the iteration order.
    """

    #: Name prefix, e.g. "HIP"
    prefix: str = ""

    def __init__(self) -> None:
        self._stars: dict = {}
        self._ordered: List[Star] = []
        self.rejected = 0

    def _finish_loading(self) -> None:
        self._stars = dict(sorted(self._stars.items()))
        self._ordered = list(self._stars.values())
        logger.debug(
            f"{self.name}: {self.rejected} stars rejected, "
            f"{len(self._stars)} stars in catalog"
        )

    def find_number(self, number: int) -> Star:
        try:
            return self._stars[number]
        except KeyError:
            raise StarNotFoundError(
                f"star number {number} not in {self.name}",
                star_name=f"{self.prefix}{number}",
                catalog=self.name,
            ) from None

    def find_name(self, name: str) -> Star:
        if not name.startswith(self.prefix):
            raise StarNotFoundError(
                f"'{name}' is not a {self.name} name",
                star_name=name,
                catalog=self.name,
            )
        try:
            number = int(name[len(self.prefix):])
        except ValueError:
            raise StarNotFoundError(
                f"malformed {self.name} name '{name}'",
                star_name=name,
                catalog=self.name,
            ) from None
        return self.find_number(number)

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        condition = window_condition(window, magrange)
        return star_set(star for star in self._ordered if condition(star))

    def number_of_stars(self) -> int:
        return len(self._stars)

    def begin(self) -> CatalogIterator:
        return CatalogIterator(SequenceIterator(self._ordered, self, self.name))
