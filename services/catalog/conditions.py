"""
STARCATALOG Cutover Conditions

Predicates deciding which stars of one catalog enter a merged result.

Each catalog of the merge covers a magnitude slice: stars brighter than
the cutover are supplied by a shallower catalog, stars fainter than the
limit by a deeper one, and stars cross referenced to the shallower catalog
are duplicates. A condition counts every rejection, so the merge can report
what it dropped.
"""

import logging
from dataclasses import dataclass, field

from .models import Star

logger = logging.getLogger("STARCATALOG.Conditions")

BSC_CUTOVER = 4.5
HIPPARCOS_CUTOVER = 7.0
TYCHO2_CUTOVER = 10.0

NO_BRIGHT_LIMIT = -30.0
NO_FAINT_LIMIT = 30.0


@dataclass
class CutoverCondition:
    """Stateful star filter for one merged catalog.

    Attributes:
        duplicate_catalog: Stars flagged as duplicate of this catalog letter
                           are rejected, None to accept all
        cutover: Stars brighter than this are rejected
        limit: Stars fainter than this are rejected
        exclusive: Also reject stars exactly at the cutover, which the
                   shallower catalog already supplied
    """
    duplicate_catalog: str | None = None
    cutover: float = NO_BRIGHT_LIMIT
    limit: float = NO_FAINT_LIMIT
    exclusive: bool = False
    tried: int = field(default=0, init=False)
    duplicates: int = field(default=0, init=False)
    toobright: int = field(default=0, init=False)
    toofaint: int = field(default=0, init=False)

    def __call__(self, star: Star) -> bool:
        self.tried += 1
        if self.duplicate_catalog is not None and star.duplicate_of(self.duplicate_catalog):
            self.duplicates += 1
            return False
        if star.mag < self.cutover or (self.exclusive and star.mag == self.cutover):
            self.toobright += 1
            return False
        if star.mag > self.limit:
            self.toofaint += 1
            return False
        return True

    @property
    def accepted(self) -> int:
        return self.tried - self.duplicates - self.toobright - self.toofaint

    def __str__(self) -> str:
        return (
            f"{self.tried} tried, {self.accepted} accepted, "
            f"{self.duplicates} duplicates, {self.toobright} too bright, "
            f"{self.toofaint} too faint"
        )


class BSCCondition(CutoverCondition):
    """BSC supplies everything down to its cutover."""

    def __init__(self, limit: float = BSC_CUTOVER):
        super().__init__(None, NO_BRIGHT_LIMIT, limit)


class HipparcosCondition(CutoverCondition):
    """Hipparcos supplies the stars fainter than the BSC cutover.

    A star exactly at the cutover belongs to BSC.
    """

    def __init__(self, cutover: float = BSC_CUTOVER, limit: float = NO_FAINT_LIMIT):
        super().__init__(None, cutover, limit, exclusive=True)


class Tycho2Condition(CutoverCondition):
    """Tycho-2 stars with a Hipparcos number are duplicates."""

    def __init__(self, cutover: float = NO_BRIGHT_LIMIT, limit: float = NO_FAINT_LIMIT):
        super().__init__("H", cutover, limit)


class Ucac4Condition(CutoverCondition):
    """UCAC4 stars matched to Hipparcos/Tycho-2 are duplicates."""

    def __init__(self, cutover: float = NO_BRIGHT_LIMIT, limit: float = NO_FAINT_LIMIT):
        super().__init__("T", cutover, limit)
