"""
STARCATALOG Unit Tests - Iterators

Unit tests for the iterator protocol, the condition filter and the
CatalogIterator wrapper.
"""

import pytest

from services.catalog.iterators import (
    CatalogIterator,
    ConditionIterator,
    EndIterator,
    SequenceIterator,
)
from services.catalog.models import Star
from starcatalog.exceptions import CatalogLogicError, CatalogParseError, CatalogRangeError


def make_stars(count):
    return [
        Star(name=f"HIP{i:06d}", catalog="H", catalognumber=i, mag=float(i))
        for i in range(1, count + 1)
    ]


class FailingIterator(SequenceIterator):
    """Sequence whose star at one index cannot be read."""

    def __init__(self, stars, bad_index):
        super().__init__(stars)
        self.bad_index = bad_index

    def current(self):
        if self._index == self.bad_index:
            raise CatalogParseError("unreadable record", catalog="Test")
        return super().current()


class TestSequenceIterator:
    """Tests for SequenceIterator."""

    def test_walk(self):
        """Test stars come out in order."""
        stars = make_stars(3)
        assert list(CatalogIterator(SequenceIterator(stars))) == stars

    def test_empty(self):
        """Test an empty sequence starts at the end."""
        iterator = SequenceIterator([])
        assert iterator.is_end
        with pytest.raises(CatalogRangeError):
            iterator.current()

    def test_increment_past_end(self):
        """Test incrementing at the end raises CatalogRangeError."""
        iterator = SequenceIterator(make_stars(1))
        iterator.increment()
        with pytest.raises(CatalogRangeError):
            iterator.increment()


class TestEndIterator:
    """Tests for the end sentinel."""

    def test_always_end(self):
        """Test the sentinel is exhausted and cannot be used."""
        end = EndIterator()
        assert end.is_end
        with pytest.raises(CatalogRangeError):
            end.current()
        with pytest.raises(CatalogRangeError):
            end.increment()


class TestConditionIterator:
    """Tests for ConditionIterator."""

    def test_filters(self):
        """Test only accepted stars are produced."""
        stars = make_stars(6)
        iterator = ConditionIterator(SequenceIterator(stars), lambda s: s.mag % 2 == 0)
        assert [s.catalognumber for s in CatalogIterator(iterator)] == [2, 4, 6]

    def test_nothing_accepted(self):
        """Test a condition rejecting everything gives an exhausted iterator."""
        iterator = ConditionIterator(SequenceIterator(make_stars(3)), lambda s: False)
        assert iterator.is_end

    def test_lazy_settle(self):
        """Test the condition is not evaluated before first access."""
        calls = []

        def condition(star):
            calls.append(star.catalognumber)
            return True

        iterator = ConditionIterator(SequenceIterator(make_stars(3)), condition)
        assert calls == []
        assert iterator.current().catalognumber == 1
        assert calls == [1]

    def test_skip_unreadable(self):
        """Test skip() steps over a star that cannot be read."""
        stars = make_stars(3)
        iterator = ConditionIterator(FailingIterator(stars, 1), lambda s: True)
        assert iterator.current() == stars[0]
        iterator.increment()
        with pytest.raises(CatalogParseError):
            iterator.current()
        iterator.skip()
        assert iterator.current() == stars[2]

    def test_keeps_owner(self):
        """Test the filter keeps the backend of its inner iterator."""
        owner = object()
        inner = SequenceIterator(make_stars(1), owner)
        assert ConditionIterator(inner, lambda s: True).owner is owner


class TestCatalogIterator:
    """Tests for the CatalogIterator wrapper."""

    def test_default_is_end(self):
        """Test a wrapper without implementation is an end iterator."""
        assert CatalogIterator().is_end
        assert CatalogIterator() == CatalogIterator.end()

    def test_end_equality(self):
        """Test any exhausted iterator equals the end sentinel."""
        iterator = CatalogIterator(SequenceIterator(make_stars(1)))
        assert iterator != CatalogIterator.end()
        iterator.increment()
        assert iterator == CatalogIterator.end()
        assert CatalogIterator.end() == iterator

    def test_position_equality(self):
        """Test iterators over the same backend compare by position."""
        owner = object()
        stars = make_stars(3)
        first = CatalogIterator(SequenceIterator(stars, owner))
        second = CatalogIterator(SequenceIterator(stars, owner))
        assert first == second
        second.increment()
        assert first != second
        first.increment()
        assert first == second

    def test_different_backends(self):
        """Test iterators over different backends are not equal."""
        stars = make_stars(2)
        assert CatalogIterator(SequenceIterator(stars, object())) != CatalogIterator(
            SequenceIterator(stars, object())
        )

    def test_incompatible_kinds(self):
        """Test comparing different iterator kinds is a logic error."""
        stars = make_stars(2)
        plain = CatalogIterator(SequenceIterator(stars))
        filtered = CatalogIterator(ConditionIterator(SequenceIterator(stars), lambda s: True))
        with pytest.raises(CatalogLogicError):
            plain == filtered

    def test_manual_protocol(self):
        """Test current/increment/is_end used directly."""
        stars = make_stars(2)
        iterator = CatalogIterator(SequenceIterator(stars))
        seen = []
        while not iterator.is_end:
            seen.append(iterator.current())
            iterator.increment()
        assert seen == stars

    def test_not_hashable(self):
        """Test iterators cannot be used as dict keys."""
        with pytest.raises(TypeError):
            hash(CatalogIterator())
