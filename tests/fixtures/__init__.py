"""
Test fixtures for STARCATALOG.

Writers that produce small synthetic catalog files in the real on-disk
formats, so every backend can be exercised without the catalog data.
"""

from tests.fixtures.catalog_files import (
    write_bsc,
    write_hipparcos,
    write_sao,
    write_tycho2,
    write_ucac4,
    write_star_catalogs,
    write_ngcic,
    write_pgc,
    write_stellarium,
    write_deepsky_catalogs,
)

__all__ = [
    "write_bsc",
    "write_hipparcos",
    "write_sao",
    "write_tycho2",
    "write_ucac4",
    "write_star_catalogs",
    "write_ngcic",
    "write_pgc",
    "write_stellarium",
    "write_deepsky_catalogs",
]
