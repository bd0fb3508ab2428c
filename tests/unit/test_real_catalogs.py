"""
STARCATALOG Unit Tests - Real Catalog Data

Checks against the published catalog files. Skipped unless the environment
variable STARCATALOG_TEST_DATA names a directory laid out like the file
backend base directory (bsc/, hipparcos/, ...), optionally with deepsky/
and a prebuilt stars.db.
"""

import pytest

from services.catalog import (
    BSC,
    DatabaseBackend,
    DeepSkyCatalogFactory,
    MagnitudeRange,
    SkyWindow,
)
from starcatalog.types import RaDec, degrees_to_radians, hours_to_radians

pytestmark = pytest.mark.slow


def required(path):
    if not path.exists():
        pytest.skip(f"{path} not available")
    return path


@pytest.fixture
def window():
    return SkyWindow(
        RaDec.from_hours_degrees(6.75, -16.7),
        hours_to_radians(1.0),
        degrees_to_radians(15.0),
    )


class TestRealBSC:
    """Tests on the Yale Bright Star Catalog."""

    @pytest.fixture(scope="class")
    def bsc(self, real_catalog_dir):
        return BSC(required(real_catalog_dir / "bsc"))

    def test_count(self, bsc):
        """Test the number of stars with position and magnitude."""
        assert bsc.number_of_stars() == 9096

    def test_names(self, bsc):
        """Test traditional designations."""
        assert bsc.find("BSC0003").longname == "33    Psc"
        assert list(bsc)[14].longname == "21Alp And"

    def test_window(self, bsc, window):
        """Test the bright stars around Sirius."""
        assert len(bsc.find(window, MagnitudeRange(-30, 4.5))) == 10


class TestRealDatabase:
    """Tests on a star database built from the real catalogs."""

    def test_window(self, real_catalog_dir, window):
        """Test the merged naked eye stars around Sirius."""
        with DatabaseBackend(required(real_catalog_dir / "stars.db")) as database:
            assert len(database.find(window, MagnitudeRange(-30, 6.0))) == 27


class TestRealDeepSky:
    """Tests on the NGC/IC catalog."""

    def test_north_america_nebula(self, real_catalog_dir):
        """Test constellation of NGC 7000."""
        factory = DeepSkyCatalogFactory(required(real_catalog_dir / "deepsky"))
        assert factory.find("NGC7000").constellation == "Cyg"
