"""
STARCATALOG Database Backend

Star catalog stored in a single SQLite table, built offline from the file
catalogs. Window queries become one indexed range query instead of a scan.

Column units:
    ra      hours           pmra    hours per year
    dec     degrees         pmdec   degrees per year

The window query binds the reduced left and right RA of the window
directly; a window straddling RA 0h therefore finds nothing on either
side of the boundary.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from starcatalog.config import MergeConfig
from starcatalog.exceptions import CatalogError, CatalogIOError, StarNotFoundError
from starcatalog.types import (
    RaDec,
    degrees_to_radians,
    hours_to_radians,
    radians_to_degrees,
    radians_to_hours,
)

from .catalog import Catalog, star_set
from .conditions import (
    BSCCondition,
    CutoverCondition,
    HipparcosCondition,
    Tycho2Condition,
    Ucac4Condition,
)
from .iterators import CatalogIterator, IteratorImplementation
from .models import Star
from .sky_window import MagnitudeRange, SkyWindow

logger = logging.getLogger("STARCATALOG.Database")

INDEX_NAME = "staridx1"

SCHEMA = """
CREATE TABLE IF NOT EXISTS star (
    id INTEGER NOT NULL,
    ra DOUBLE NOT NULL,
    dec DOUBLE NOT NULL,
    pmra DOUBLE NOT NULL,
    pmdec DOUBLE NOT NULL,
    mag DOUBLE NOT NULL,
    catalog CHAR(1) NOT NULL,
    catalognumber INTEGER NOT NULL,
    name VARCHAR(16) NOT NULL,
    longname VARCHAR(16) NOT NULL DEFAULT '',
    PRIMARY KEY(id)
);
"""

STAR_COLUMNS = "id, ra, dec, pmra, pmdec, mag, catalog, catalognumber, name, longname"

# Catalog letter of a star name, checked in this order
NAME_PREFIXES = (("UCAC4", "U"), ("BSC", "B"), ("HIP", "H"), ("SAO", "S"), ("T", "T"))


def catalog_of(name: str) -> Optional[str]:
    for prefix, letter in NAME_PREFIXES:
        if name.startswith(prefix):
            return letter
    return None


def row_to_star(row: tuple) -> Star:
    """Convert a star table row (STAR_COLUMNS order) to a Star."""
    _, ra, dec, pmra, pmdec, mag, catalog, catalognumber, name, longname = row
    return Star(
        name=name,
        catalog=catalog,
        catalognumber=catalognumber,
        longname=longname or "",
        position=RaDec.from_hours_degrees(ra, dec),
        pm=RaDec(hours_to_radians(pmra), degrees_to_radians(pmdec)),
        mag=mag,
    )


class DatabaseBackend(Catalog):
    """Star catalog in an SQLite database.

    The star table is created if the database does not have one yet.

    Args:
        path: SQLite database file

    Raises:
        CatalogIOError: If the database cannot be opened or created
    """

    name = "Database"

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None
        self.connect()

    def connect(self) -> None:
        """Open the database and make sure the star table exists."""
        try:
            self._conn = sqlite3.connect(str(self.path))
            cursor = self._conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = 'star'"
            )
            if cursor.fetchone()[0] == 1:
                logger.debug(f"star table already exists in {self.path}")
            else:
                self._conn.executescript(SCHEMA)
                self._conn.commit()
                logger.info(f"created star table in {self.path}")
        except sqlite3.Error as e:
            self.close()
            raise CatalogIOError(
                f"cannot open/create database: {e}", catalog=self.name, path=str(self.path)
            ) from e

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        if self._conn is None:
            raise CatalogIOError("database is closed", catalog=self.name, path=str(self.path))
        try:
            cursor = self._conn.cursor()
            cursor.execute(sql, params)
            return cursor
        except sqlite3.Error as e:
            raise CatalogIOError(
                f"query failed: {e}", catalog=self.name, path=str(self.path)
            ) from e

    # -------------------------------------------------------------------------
    # Catalog interface
    # -------------------------------------------------------------------------

    def find_name(self, name: str) -> Star:
        catalog = catalog_of(name)
        if catalog is None:
            raise StarNotFoundError(f"unknown name '{name}'", star_name=name, catalog=self.name)
        cursor = self._execute(
            f"SELECT {STAR_COLUMNS} FROM star WHERE catalog = ? AND name = ?",
            (catalog, name),
        )
        row = cursor.fetchone()
        if row is None:
            raise StarNotFoundError(
                f"star '{name}' not in database", star_name=name, catalog=self.name
            )
        return row_to_star(row)

    def find_window(self, window: SkyWindow, magrange: MagnitudeRange) -> List[Star]:
        if window.is_whole_ra:
            ramin, ramax = 0.0, 24.0
        else:
            ramin = radians_to_hours(window.leftra())
            ramax = radians_to_hours(window.rightra())
        decmin, decmax = (radians_to_degrees(d) for d in window.decinterval())
        cursor = self._execute(
            f"""
            SELECT {STAR_COLUMNS} FROM star
            WHERE mag <= ? AND mag >= ?
              AND ? <= ra AND ra <= ?
              AND ? <= dec AND dec <= ?
            """,
            (magrange.faintest, magrange.brightest, ramin, ramax, decmin, decmax),
        )
        result = star_set(row_to_star(row) for row in cursor)
        logger.debug(f"{len(result)} stars in {window}, {magrange}")
        return result

    def number_of_stars(self) -> int:
        return self._execute("SELECT COUNT(*) FROM star").fetchone()[0]

    def begin(self) -> CatalogIterator:
        return CatalogIterator(DatabaseIterator(self))


class DatabaseIterator(IteratorImplementation):
    """Cursor over the star table in id order."""

    def __init__(self, backend: DatabaseBackend):
        self.owner = backend
        self._cursor = backend._execute(f"SELECT {STAR_COLUMNS} FROM star ORDER BY id")
        self._row = self._cursor.fetchone()

    @property
    def is_end(self) -> bool:
        return self._row is None

    def current(self) -> Star:
        self._check_end()
        return row_to_star(self._row)

    def increment(self) -> None:
        self._check_end()
        self._row = self._cursor.fetchone()

    def position(self) -> Any:
        return None if self._row is None else self._row[0]


# =============================================================================
# Creation
# =============================================================================

class DatabaseBackendCreator(DatabaseBackend):
    """Bulk writer for the star table.

    Usage:
        creator = DatabaseBackendCreator("stars.db")
        creator.clear()
        creator.prepare()
        for star in stars:
            creator.add(star)
        creator.finalize()
        creator.createindex()
    """

    INSERT_SQL = f"INSERT INTO star ({STAR_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"

    def __init__(self, path: str | Path):
        super().__init__(path)
        self.next_id = self._execute("SELECT COALESCE(MAX(id), 0) + 1 FROM star").fetchone()[0]
        logger.debug(f"next star id: {self.next_id}")

    def count(self) -> int:
        return self.number_of_stars()

    def prepare(self) -> None:
        """Start a transaction for a batch of add() calls."""
        if not self._conn.in_transaction:
            self._execute("BEGIN")

    def add(self, star: Star) -> int:
        """Insert a star and return its id."""
        star_id = self.next_id
        self._execute(
            self.INSERT_SQL,
            (
                star_id,
                radians_to_hours(star.position.ra),
                radians_to_degrees(star.position.dec),
                radians_to_hours(star.pm.ra),
                radians_to_degrees(star.pm.dec),
                star.mag,
                star.catalog,
                star.catalognumber,
                star.name,
                star.longname,
            ),
        )
        self.next_id += 1
        return star_id

    def finalize(self) -> None:
        """Commit the current batch."""
        try:
            self._conn.commit()
        except sqlite3.Error as e:
            raise CatalogIOError(
                f"commit failed: {e}", catalog=self.name, path=str(self.path)
            ) from e

    def clear(self) -> None:
        """Remove all stars and the position index."""
        self._execute("DELETE FROM star")
        self._execute(f"DROP INDEX IF EXISTS {INDEX_NAME}")
        self.finalize()
        self.next_id = 1
        logger.info(f"cleared star table in {self.path}")

    def createindex(self) -> None:
        self._execute(f"CREATE INDEX IF NOT EXISTS {INDEX_NAME} ON star (dec, ra)")
        self.finalize()


class DatabaseLoader:
    """Fills a star database from the file catalogs.

    Each catalog is loaded through the cutover condition of the merge, so
    the database holds the same stars as a FileBackend scan. Stars that
    cannot be read are skipped.

    Args:
        creator: Database to fill
        merge: Cutover magnitudes
        log_interval: Report progress every log_interval stars
    """

    def __init__(
        self,
        creator: DatabaseBackendCreator,
        merge: Optional[MergeConfig] = None,
        log_interval: int = 100000,
    ):
        self.creator = creator
        self.merge = merge or MergeConfig()
        self.log_interval = log_interval

    def add_catalog(self, catalog: Catalog, condition: CutoverCondition) -> int:
        """Add the stars of catalog accepted by condition."""
        counter = 0
        steps = 0
        iterator = catalog.begin().implementation
        while not iterator.is_end:
            steps += 1
            try:
                star = iterator.current()
                accepted = condition(star)
            except CatalogError as e:
                logger.debug(f"{catalog.name}: record {steps} skipped: {e}")
                iterator.skip()
                continue
            if accepted:
                self.creator.add(star)
                counter += 1
                if counter % self.log_interval == 0:
                    logger.info(
                        f"{counter} stars added from {catalog.name}, "
                        f"{steps - counter} skipped"
                    )
            iterator.increment()
        logger.info(f"{counter} stars added from {catalog.name}, {condition}")
        return counter

    def load(
        self,
        bsc: Optional[Catalog] = None,
        hipparcos: Optional[Catalog] = None,
        tycho2: Optional[Catalog] = None,
        ucac4: Optional[Catalog] = None,
    ) -> Dict[str, int]:
        """Load the given catalogs, then rebuild the index.

        Returns:
            Number of stars added per catalog name
        """
        logger.info(f"number of stars already present: {self.creator.count()}")
        added: Dict[str, int] = {}
        sources = (
            (bsc, BSCCondition(self.merge.bsc_cutover)),
            (hipparcos, HipparcosCondition(self.merge.bsc_cutover)),
            (tycho2, Tycho2Condition()),
            (ucac4, Ucac4Condition()),
        )
        self.creator.prepare()
        for catalog, condition in sources:
            if catalog is None:
                continue
            added[catalog.name] = self.add_catalog(catalog, condition)
        self.creator.finalize()

        try:
            logger.info("creating index")
            self.creator.createindex()
        except CatalogIOError as e:
            logger.error(f"error while creating index: {e}")
        return added
