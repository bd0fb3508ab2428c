"""
STARCATALOG Unit Tests - Mapped File

Unit tests for MappedFile.
"""

import pytest

from services.catalog.mapped_file import MappedFile
from starcatalog.exceptions import CatalogIOError, CatalogRangeError


@pytest.fixture
def record_file(tmp_path):
    """File of three 8 byte records."""
    path = tmp_path / "records.dat"
    path.write_bytes(b"AAAAAAA\nBBBBBBB\nCCCCCCC\n")
    return path


class TestMappedFile:
    """Tests for record access."""

    def test_nrecords(self, record_file):
        """Test the record count."""
        with MappedFile(record_file, 8) as mapped:
            assert mapped.nrecords == 3
            assert len(mapped) == 3

    def test_get(self, record_file):
        """Test raw record access."""
        with MappedFile(record_file, 8) as mapped:
            assert mapped.get(0) == b"AAAAAAA\n"
            assert mapped.get(2) == b"CCCCCCC\n"

    def test_get_text(self, record_file):
        """Test records decoded as text."""
        with MappedFile(record_file, 8) as mapped:
            assert mapped.get_text(1) == "BBBBBBB\n"

    def test_out_of_range(self, record_file):
        """Test indices outside [0, nrecords) raise CatalogRangeError."""
        with MappedFile(record_file, 8) as mapped:
            with pytest.raises(CatalogRangeError):
                mapped.get(3)
            with pytest.raises(CatalogRangeError):
                mapped.get(-1)

    def test_trailing_partial_record(self, tmp_path):
        """Test a trailing partial record is not counted."""
        path = tmp_path / "partial.dat"
        path.write_bytes(b"AAAAAAA\nBBBBBBB\nCCC")
        with MappedFile(path, 8) as mapped:
            assert mapped.nrecords == 2
            with pytest.raises(CatalogRangeError):
                mapped.get(2)

    def test_empty_file(self, tmp_path):
        """Test an empty file has no records."""
        path = tmp_path / "empty.dat"
        path.write_bytes(b"")
        with MappedFile(path, 8) as mapped:
            assert mapped.nrecords == 0

    def test_closed(self, record_file):
        """Test access after close fails."""
        mapped = MappedFile(record_file, 8)
        mapped.close()
        with pytest.raises(CatalogIOError):
            mapped.get(0)
        mapped.close()


class TestMappedFileErrors:
    """Tests for construction failures."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises CatalogIOError."""
        with pytest.raises(CatalogIOError):
            MappedFile(tmp_path / "missing.dat", 8)

    def test_directory(self, tmp_path):
        """Test a directory is not a regular file."""
        with pytest.raises(CatalogIOError, match="not a regular file"):
            MappedFile(tmp_path, 8)

    def test_invalid_record_length(self, record_file):
        """Test record lengths must be positive."""
        with pytest.raises(ValueError):
            MappedFile(record_file, 0)
