"""
STARCATALOG Unit Tests - PGC Database

Unit tests for the SQLite copy of the Principal Galaxy Catalogue.
"""

import math
import sqlite3

import pytest

from services.catalog.models import DeepSkyClass, DeepSkyObject
from services.catalog.pgc import PGC
from services.catalog.pgc_database import PGCDatabase
from services.catalog.sky_window import SkyWindow
from starcatalog.exceptions import CatalogIOError, ObjectNotFoundError
from starcatalog.types import RaDec, degrees_to_radians


@pytest.fixture(scope="module")
def pgc(deepsky_dir):
    return PGC(deepsky_dir / "pgc")


@pytest.fixture
def database(pgc, tmp_path):
    with PGCDatabase(tmp_path / "pgc.db") as db:
        db.load(pgc)
        yield db


class TestCreate:
    """Tests for opening and filling the database."""

    def test_new_database(self, tmp_path):
        """Test the pgc table is created empty."""
        with PGCDatabase(tmp_path / "new.db") as db:
            assert db.size() == 0
        tables = sqlite3.connect(str(tmp_path / "new.db")).execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
        assert tables == [("pgc",)]

    def test_load(self, database, pgc):
        """Test every catalog object is stored once, alternate names aside."""
        assert database.size() == len(pgc) == 3
        assert len(database) == 3

    def test_load_twice(self, database, pgc):
        """Test loading the same objects again replaces them."""
        assert database.load(pgc) == 3
        assert database.size() == 3

    def test_reopen(self, database, tmp_path):
        """Test the data survives closing the database."""
        database.close()
        with PGCDatabase(tmp_path / "pgc.db") as db:
            assert db.size() == 3

    def test_add(self, database):
        """Test adding one object with unknown size."""
        obj = DeepSkyObject(
            name="PGC0000010",
            number=10,
            position=RaDec.from_hours_degrees(12.0, 0.0),
        )
        obj.addname("UGC09999")
        database.add(obj)
        assert database.size() == 4
        found = database.find("UGC09999")
        assert found.name == "PGC0000010"
        assert math.isnan(found.axes[0])
        assert math.isnan(found.position_angle)
        assert found.classification is DeepSkyClass.UNIDENTIFIED

    def test_unwritable(self, tmp_path):
        """Test a database in a missing directory."""
        with pytest.raises(CatalogIOError):
            PGCDatabase(tmp_path / "missing" / "pgc.db")

    def test_closed(self, database):
        """Test queries on a closed database."""
        database.close()
        with pytest.raises(CatalogIOError, match="closed"):
            database.find("PGC0000001")


class TestFindName:
    """Tests for lookup by primary and alternate name."""

    def test_primary_name(self, database, pgc):
        """Test the stored object matches the catalog object."""
        found = database.find("PGC0002557")
        expected = pgc.find("PGC0002557")
        assert found == expected
        assert found.number == 2557
        assert found.names == frozenset({"MESSIER031", "NGC0224"})
        assert found.classification is DeepSkyClass.GALAXY
        assert found.position.ra == pytest.approx(expected.position.ra)
        assert found.position.dec == pytest.approx(expected.position.dec)
        assert found.axes[0] == pytest.approx(expected.axes[0])
        assert found.axes[1] == pytest.approx(expected.axes[1])
        assert found.position_angle == pytest.approx(expected.position_angle)

    def test_alternate_name(self, database):
        """Test alternate names resolve to the PGC object."""
        assert database.find("NGC0224").name == "PGC0002557"
        assert "MESSIER031" in database

    def test_class_preserved(self, database):
        """Test the classification survives the round trip."""
        assert database.find("PGC0000004").classification is (
            DeepSkyClass.GALAXY_IN_MULTIPLE_SYSTEM
        )

    def test_missing_values(self, database):
        """Test unknown sizes come back as NaN."""
        found = database.find("PGC0000001")
        assert math.isnan(found.axes[0])
        assert math.isnan(found.axes[1])
        assert math.isnan(found.position_angle)

    def test_not_found(self, database):
        """Test unknown names."""
        with pytest.raises(ObjectNotFoundError):
            database.find("PGC9999999")
        assert "PGC9999999" not in database


class TestFindWindow:
    """Tests for window queries."""

    def test_window(self, database):
        """Test a small window around M31."""
        window = SkyWindow(
            RaDec.from_degrees(10.68, 41.27), degrees_to_radians(2), degrees_to_radians(2)
        )
        assert [obj.name for obj in database.find_window(window)] == ["PGC0002557"]

    def test_window_across_zero_hours(self, database):
        """Test a window straddling RA 0h finds objects on both sides."""
        window = SkyWindow(
            RaDec.from_degrees(0.0, 45.0), degrees_to_radians(30), degrees_to_radians(20)
        )
        assert [obj.name for obj in database.find_window(window)] == [
            "PGC0000001",
            "PGC0002557",
        ]

    def test_whole_sky(self, database):
        """Test the whole sky returns each object once."""
        assert [obj.name for obj in database.find_window(SkyWindow.all())] == [
            "PGC0000001",
            "PGC0000004",
            "PGC0002557",
        ]

    def test_matches_catalog(self, database, pgc):
        """Test the database and the file catalog agree."""
        window = SkyWindow(
            RaDec.from_degrees(0.0, 20.0), degrees_to_radians(40), degrees_to_radians(60)
        )
        assert database.find_window(window) == pgc.find_window(window)


class TestFindLike:
    """Tests for prefix queries."""

    def test_prefix(self, database):
        """Test names with a prefix, sorted and limited."""
        assert database.find_like("PGC000") == ["PGC0000001", "PGC0000004", "PGC0002557"]
        assert database.find_like("PGC000", 2) == ["PGC0000001", "PGC0000004"]

    def test_alternate_names(self, database):
        """Test alternate names are searched too."""
        assert database.find_like("MESS") == ["MESSIER031"]

    def test_pattern(self, database):
        """Test a prefix with a wildcard is used as pattern."""
        assert database.find_like("NGC%224") == ["NGC0224"]

    def test_no_match(self, database):
        """Test prefixes without matches."""
        assert database.find_like("UGC") == []
