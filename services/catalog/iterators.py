"""
STARCATALOG Catalog Iterators

One sequence type for all catalog backends. Each backend supplies an
IteratorImplementation that knows how to walk its own storage (an in-memory
map, a record counter over a mapped file, a zone/index pair, a database
cursor). CatalogIterator wraps exactly one implementation and turns it into
a Python iterator.

Iterators are single use and forward only. Comparing iterators of different
implementation kinds is a programming error and raises CatalogLogicError,
with the exception of the end sentinel, which compares equal to any
exhausted iterator.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from starcatalog.exceptions import CatalogLogicError, CatalogRangeError

from .models import Star

logger = logging.getLogger("STARCATALOG.Iterator")

StarCondition = Callable[[Star], bool]


# =============================================================================
# Implementation Protocol
# =============================================================================

class IteratorImplementation(ABC):
    """Backend specific iterator state.

    Subclasses implement current(), increment(), is_end and position().
    position() returns a value identifying the location in the backend, two
    implementations of the same kind over the same backend are equal when
    their positions are equal.
    """

    #: Backend the iterator walks, kept alive as long as the iterator
    owner: Any = None

    @property
    @abstractmethod
    def is_end(self) -> bool:
        ...

    @abstractmethod
    def current(self) -> Star:
        """Star at the current position.

        Raises:
            CatalogRangeError: If the iterator is exhausted
        """

    @abstractmethod
    def increment(self) -> None:
        ...

    @abstractmethod
    def position(self) -> Any:
        ...

    def skip(self) -> None:
        """Step over the current star without reading it."""
        self.increment()

    def equals(self, other: "IteratorImplementation") -> bool:
        if type(self) is not type(other):
            raise CatalogLogicError(
                f"cannot compare {type(self).__name__} with "
                f"{type(other).__name__}"
            )
        if self.is_end or other.is_end:
            return self.is_end == other.is_end
        return self.owner is other.owner and self.position() == other.position()

    def _check_end(self) -> None:
        if self.is_end:
            raise CatalogRangeError(f"{type(self).__name__} past end")

    def __str__(self) -> str:
        if self.is_end:
            return f"{type(self).__name__}(end)"
        return f"{type(self).__name__}({self.position()})"


class EndIterator(IteratorImplementation):
    """Sentinel that is always exhausted."""

    @property
    def is_end(self) -> bool:
        return True

    def current(self) -> Star:
        raise CatalogRangeError("cannot dereference end iterator")

    def increment(self) -> None:
        raise CatalogRangeError("cannot increment end iterator")

    def position(self) -> Any:
        return None

    def equals(self, other: IteratorImplementation) -> bool:
        return other.is_end


class SequenceIterator(IteratorImplementation):
    """Iterates over stars held in memory, in the order given.

    Used by the eagerly parsed backends (BSC, Hipparcos, SAO), which keep
    their stars in a map ordered by catalog number.
    """

    def __init__(self, stars: Sequence[Star], owner: Any = None, label: str = ""):
        self._stars = stars
        self._index = 0
        self.owner = owner
        self.label = label

    @property
    def is_end(self) -> bool:
        return self._index >= len(self._stars)

    def current(self) -> Star:
        self._check_end()
        return self._stars[self._index]

    def increment(self) -> None:
        self._check_end()
        self._index += 1

    def position(self) -> Any:
        return self._index

    def __str__(self) -> str:
        return f"{self.label or 'Sequence'}Iterator({self._index}/{len(self._stars)})"


class ConditionIterator(IteratorImplementation):
    """Passes only the stars of an inner iterator that satisfy a condition.

    Filtering happens on demand: the first access after construction or
    increment() moves the inner iterator to the next accepted star. If
    reading a star fails there, the inner iterator stays on that star and
    skip() steps over it.
    """

    def __init__(self, inner: IteratorImplementation, condition: StarCondition):
        self.inner = inner
        self.condition = condition
        self.owner = inner.owner
        self._settled = False

    def _settle(self) -> None:
        if self._settled:
            return
        while not self.inner.is_end and not self.condition(self.inner.current()):
            self.inner.increment()
        self._settled = True

    @property
    def is_end(self) -> bool:
        self._settle()
        return self.inner.is_end

    def current(self) -> Star:
        self._settle()
        return self.inner.current()

    def increment(self) -> None:
        self._settle()
        self.inner.increment()
        self._settled = False

    def skip(self) -> None:
        self.inner.skip()
        self._settled = False

    def position(self) -> Any:
        return self.inner.position()

    def equals(self, other: IteratorImplementation) -> bool:
        if not isinstance(other, ConditionIterator):
            raise CatalogLogicError(
                f"cannot compare ConditionIterator with {type(other).__name__}"
            )
        return self.inner.equals(other.inner)

    def __str__(self) -> str:
        return f"ConditionIterator({self.inner})"


# =============================================================================
# Wrapper
# =============================================================================

class CatalogIterator:
    """Python iterator over the stars of one catalog backend.

    Example:
        for star in catalog.find_iter(window, MagnitudeRange(-30, 6)):
            print(star)
    """

    def __init__(self, implementation: Optional[IteratorImplementation] = None):
        self._implementation = implementation or EndIterator()

    @classmethod
    def end(cls) -> "CatalogIterator":
        return cls(EndIterator())

    @property
    def implementation(self) -> IteratorImplementation:
        return self._implementation

    @property
    def is_end(self) -> bool:
        return self._implementation.is_end

    def current(self) -> Star:
        return self._implementation.current()

    def increment(self) -> "CatalogIterator":
        self._implementation.increment()
        return self

    def __iter__(self) -> "CatalogIterator":
        return self

    def __next__(self) -> Star:
        if self._implementation.is_end:
            raise StopIteration
        star = self._implementation.current()
        self._implementation.increment()
        return star

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogIterator):
            return NotImplemented
        mine, theirs = self._implementation, other._implementation
        if isinstance(theirs, EndIterator):
            return mine.is_end
        if isinstance(mine, EndIterator):
            return theirs.is_end
        return mine.equals(theirs)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return str(self._implementation)
