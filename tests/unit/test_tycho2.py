"""
STARCATALOG Unit Tests - Tycho-2

Unit tests for the memory mapped Tycho-2 backend, including the binary
search on the record key and lazily failing records.
"""

import math

import pytest

from services.catalog.tycho2 import Tycho2, parse_tycho2_record
from starcatalog.exceptions import (
    CatalogIOError,
    CatalogParseError,
    CatalogRangeError,
    StarNotFoundError,
)
from starcatalog.types import degrees_to_radians
from tests.fixtures.catalog_files import TYCHO2_STARS, tycho2_line, write_tycho2


@pytest.fixture
def tycho2(star_catalog_dir):
    with Tycho2(star_catalog_dir / "tycho2") as catalog:
        yield catalog


class TestParseTycho2Record:
    """Tests for parse_tycho2_record."""

    def test_fields(self):
        """Test identity, position and derived magnitude."""
        star = parse_tycho2_record(tycho2_line(TYCHO2_STARS[1]))
        assert star.name == "T0001 00002 1"
        assert star.catalog == "T"
        assert star.catalognumber == 1000021
        assert star.mag == pytest.approx(8.6 - 0.09 * 0.4)
        assert star.bt == pytest.approx(9.0)
        assert star.vt == pytest.approx(8.6)
        assert star.position.ra_degrees == pytest.approx(101.6)
        assert star.position.dec_degrees == pytest.approx(-16.8)
        assert not star.is_duplicate

    def test_proper_motion(self):
        """Test RA proper motion is divided by cos(dec)."""
        star = parse_tycho2_record(tycho2_line(TYCHO2_STARS[1]))
        cosdec = math.cos(degrees_to_radians(-16.8))
        assert star.pm.ra == pytest.approx(degrees_to_radians(1.5 / 3600000) / cosdec)
        assert star.pm.dec == pytest.approx(degrees_to_radians(2.5 / 3600000))

    def test_hipparcos_duplicate(self):
        """Test stars with a HIP number duplicate the Hipparcos star."""
        star = parse_tycho2_record(tycho2_line(TYCHO2_STARS[0]))
        assert star.hip == 200
        assert star.duplicate_of("H")
        assert star.duplicate.name == "HIP000200"

    def test_bt_only(self):
        """Test BT is used when VT is missing."""
        star = parse_tycho2_record(tycho2_line(TYCHO2_STARS[2]))
        assert star.vt is None
        assert star.mag == pytest.approx(11.0)

    def test_no_position(self):
        """Test records flagged X are rejected."""
        with pytest.raises(CatalogParseError):
            parse_tycho2_record(tycho2_line(TYCHO2_STARS[4]))

    def test_bad_length(self):
        """Test records of the wrong length are rejected."""
        with pytest.raises(CatalogParseError):
            parse_tycho2_record(tycho2_line(TYCHO2_STARS[1]).rstrip("\n"))


class TestTycho2Lookup:
    """Tests for name and index lookup."""

    def test_number_of_stars(self, tycho2):
        """Test every record counts, parseable or not."""
        assert tycho2.number_of_stars() == len(TYCHO2_STARS)

    @pytest.mark.parametrize("index", [0, 1, 2, 3])
    def test_find_name(self, tycho2, index):
        """Test binary search finds every key."""
        name = "T" + TYCHO2_STARS[index].key
        assert tycho2.find(name).name == name

    def test_last_record(self, tycho2):
        """Test the last key is found and its parse error surfaces."""
        assert tycho2.index("T0002 00002 1") == 4
        with pytest.raises(CatalogParseError):
            tycho2.find("T0002 00002 1")

    def test_missing_key(self, tycho2):
        """Test a missing key ends the search on a neighbouring record."""
        assert tycho2.index("T0001 00002 2") == 1
        assert tycho2.find("T0001 00002 2").name == "T0001 00002 1"

    def test_foreign_name(self, tycho2):
        """Test names without the T prefix."""
        with pytest.raises(StarNotFoundError):
            tycho2.find("HIP000200")

    @pytest.mark.parametrize("index", [-1, 5])
    def test_find_index_range(self, tycho2, index):
        """Test record indexes outside the file."""
        with pytest.raises(CatalogRangeError):
            tycho2.find_index(index)

    def test_empty_catalog(self, tmp_path):
        """Test lookup in an empty file."""
        directory = write_tycho2(tmp_path / "tycho2", [])
        catalog = Tycho2(directory)
        assert catalog.number_of_stars() == 0
        with pytest.raises(StarNotFoundError):
            catalog.find("T0001 00001 1")
        catalog.close()

    def test_missing(self, tmp_path):
        """Test a directory without tyc2.dat."""
        with pytest.raises(CatalogIOError):
            Tycho2(tmp_path)


class TestTycho2Window:
    """Tests for window queries and iteration."""

    def test_find_window(self, tycho2, test_window, all_magnitudes):
        """Test the window scan ignores records that do not parse."""
        stars = tycho2.find(test_window, all_magnitudes)
        assert [star.name for star in stars] == [
            "T0001 00001 1",
            "T0001 00002 1",
            "T0001 00003 1",
        ]

    def test_iterator_parse_error(self, tycho2):
        """Test iteration raises on the record without position."""
        iterator = tycho2.begin()
        names = [next(iterator).name for _ in range(4)]
        assert names[-1] == "T0002 00001 1"
        with pytest.raises(CatalogParseError):
            next(iterator)

    def test_iterator_skip(self, tycho2):
        """Test skipping the failing record reaches the end."""
        iterator = tycho2.begin()
        for _ in range(4):
            iterator.increment()
        iterator.implementation.skip()
        assert iterator == tycho2.end()

    def test_iterator_equality(self, tycho2):
        """Test iterators at the same record compare equal."""
        first, second = tycho2.begin(), tycho2.begin()
        assert first == second
        first.increment()
        assert first != second
        second.increment()
        assert first == second
