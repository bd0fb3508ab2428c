"""
STARCATALOG Mapped File

Random access to files of fixed length records. The file is mapped read-only
once at construction, record i starts at byte offset i * record_length.
"""

import logging
import mmap
import os
from pathlib import Path
from typing import Optional

from starcatalog.exceptions import CatalogIOError, CatalogRangeError

logger = logging.getLogger("STARCATALOG.MappedFile")


class MappedFile:
    """Read-only memory map of a fixed record length file.

    A trailing partial record (several catalog files end with a short line
    or a missing newline) is not counted.

    Args:
        path: File to map
        record_length: Length of one record in bytes, including any
                       line terminator

    Raises:
        CatalogIOError: If the file does not exist, is not a regular file,
                        or cannot be mapped
    """

    def __init__(self, path: str | Path, record_length: int):
        if record_length <= 0:
            raise ValueError(f"invalid record length {record_length}")
        self.path = Path(path)
        self.record_length = record_length
        self._file = None
        self._map: Optional[mmap.mmap] = None

        if not self.path.is_file():
            raise CatalogIOError(
                f"cannot map {self.path}: not a regular file", path=str(self.path)
            )
        try:
            size = os.path.getsize(self.path)
            self._file = open(self.path, "rb")
            if size > 0:
                self._map = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as e:
            self.close()
            raise CatalogIOError(
                f"cannot map {self.path}: {e}", path=str(self.path)
            ) from e

        self._nrecords = size // record_length
        if size % record_length:
            logger.debug(
                f"{self.path}: size {size} not a multiple of {record_length}, "
                f"ignoring {size % record_length} trailing bytes"
            )
        logger.debug(f"mapped {self.path}: {self._nrecords} records")

    @property
    def nrecords(self) -> int:
        return self._nrecords

    def __len__(self) -> int:
        return self._nrecords

    def get(self, index: int) -> bytes:
        """Raw bytes of record index (0-based)."""
        if not 0 <= index < self._nrecords:
            raise CatalogRangeError(
                f"record {index} out of range [0, {self._nrecords})",
                path=str(self.path),
            )
        if self._map is None:
            raise CatalogIOError(f"{self.path} is closed", path=str(self.path))
        offset = index * self.record_length
        return self._map[offset:offset + self.record_length]

    def get_text(self, index: int) -> str:
        """Record index decoded as latin-1 text."""
        return self.get(index).decode("latin-1")

    def close(self) -> None:
        if self._map is not None:
            self._map.close()
            self._map = None
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "MappedFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"MappedFile({str(self.path)!r}, record_length={self.record_length}, "
            f"nrecords={self._nrecords})"
        )
