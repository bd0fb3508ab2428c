"""
Pytest Fixtures for STARCATALOG Testing.

Synthetic catalog directories are written once per session and shared by
all tests; tests must not modify them. Tests that write (database builds)
use their own tmp_path.

Usage:
    def test_window(star_catalog_dir):
        backend = FileBackend(star_catalog_dir)
"""

import os
from pathlib import Path

import pytest

from services.catalog import FileBackend, MagnitudeRange, SkyWindow
from starcatalog.types import RaDec, degrees_to_radians, hours_to_radians
from tests.fixtures.catalog_files import (
    load_database,
    write_deepsky_catalogs,
    write_star_catalogs,
)

TEST_DATA_ENV = "STARCATALOG_TEST_DATA"


# =============================================================================
# Synthetic Catalogs
# =============================================================================

@pytest.fixture(scope="session")
def star_catalog_dir(tmp_path_factory) -> Path:
    """Base directory with bsc/, hipparcos/, sao/, tycho2/ and u4/."""
    return write_star_catalogs(tmp_path_factory.mktemp("starcatalogs"))


@pytest.fixture(scope="session")
def deepsky_dir(tmp_path_factory) -> Path:
    """Base directory with ngcic/, pgc/ and stellarium/."""
    return write_deepsky_catalogs(tmp_path_factory.mktemp("deepsky"))


@pytest.fixture(scope="session")
def star_database(star_catalog_dir, tmp_path_factory) -> Path:
    """Star database loaded from the synthetic catalogs."""
    path = tmp_path_factory.mktemp("database") / "stars.db"
    load_database(path, star_catalog_dir)
    return path


@pytest.fixture
def file_backend(star_catalog_dir):
    """Merged backend over the synthetic catalogs, closed after the test."""
    backend = FileBackend(star_catalog_dir)
    yield backend
    backend.close()


@pytest.fixture
def test_window() -> SkyWindow:
    """1h x 15 deg window at RA 6h45m, Dec -16.7 deg."""
    return SkyWindow(
        RaDec.from_hours_degrees(6.75, -16.7),
        hours_to_radians(1.0),
        degrees_to_radians(15.0),
    )


@pytest.fixture
def all_magnitudes() -> MagnitudeRange:
    return MagnitudeRange(-30.0, 30.0)


# =============================================================================
# Real Catalogs
# =============================================================================

@pytest.fixture(scope="session")
def real_catalog_dir() -> Path:
    """Directory with the real catalog files, skips if not configured."""
    value = os.environ.get(TEST_DATA_ENV)
    if not value or not Path(value).is_dir():
        pytest.skip(f"{TEST_DATA_ENV} not set, real catalog data not available")
    return Path(value)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep configuration discovery away from the user's files."""
    for key in list(os.environ):
        if key.startswith("STARCATALOG_") and key != TEST_DATA_ENV:
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
