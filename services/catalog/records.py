"""
STARCATALOG Fixed-Width Record Fields

Helpers to pull numeric fields out of fixed-width catalog records. Column
ranges are 0-based and half open, as in Python slices. Every failure raises
CatalogParseError naming the catalog and the field.
"""

from typing import Optional

from starcatalog.exceptions import CatalogParseError


def text(line: str, start: int, end: int) -> str:
    """Stripped text of columns [start, end)."""
    return line[start:end].strip()


def integer(line: str, start: int, end: int, catalog: str, field: str) -> int:
    value = line[start:end]
    try:
        return int(value)
    except ValueError as e:
        raise CatalogParseError(
            f"cannot parse {field}", catalog=catalog, field=field, value=value
        ) from e


def real(line: str, start: int, end: int, catalog: str, field: str) -> float:
    value = line[start:end]
    try:
        return float(value)
    except ValueError as e:
        raise CatalogParseError(
            f"cannot parse {field}", catalog=catalog, field=field, value=value
        ) from e


def optional_real(line: str, start: int, end: int) -> Optional[float]:
    """Float value of the columns, or None if blank or unparseable."""
    try:
        return float(line[start:end])
    except ValueError:
        return None


def optional_int(line: str, start: int, end: int) -> Optional[int]:
    try:
        return int(line[start:end])
    except ValueError:
        return None


def sign(line: str, column: int) -> int:
    return -1 if line[column:column + 1] == "-" else 1


def hms(h: float, m: float, s: float) -> float:
    """Sexagesimal hours (or degrees) to decimal."""
    return h + m / 60 + s / 3600
