"""
STARCATALOG PGC Database

Principal Galaxy Catalogue stored in an SQLite table, so that single
galaxies and small windows can be looked up without parsing pgc.dat.

Every object occupies one row per designation: the row with
name = pgcname carries the primary PGC name, the other rows carry the
alternate names and repeat the object data.

Column units:
    ra      hours           major   degrees
    dec     degrees         minor   degrees
    pa      degrees
Unknown sizes and position angles are stored as NULL.
"""

import logging
import math
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from starcatalog.exceptions import CatalogIOError, ObjectNotFoundError
from starcatalog.types import (
    RaDec,
    degrees_to_radians,
    radians_to_degrees,
    radians_to_hours,
)

from .deepsky import DEFAULT_MAX_OBJECTS
from .models import DeepSkyClass, DeepSkyObject
from .sky_window import SkyWindow

logger = logging.getLogger("STARCATALOG.PGCDatabase")

SCHEMA = """
CREATE TABLE IF NOT EXISTS pgc (
    id INTEGER NOT NULL,
    name VARCHAR(32) NOT NULL,
    pgcname CHAR(10) NOT NULL,
    ra DOUBLE NOT NULL,
    dec DOUBLE NOT NULL,
    major DOUBLE,
    minor DOUBLE,
    pa DOUBLE,
    class VARCHAR(32) NOT NULL DEFAULT 'unidentified',
    PRIMARY KEY(id, name)
);
CREATE INDEX IF NOT EXISTS pgcidx1 ON pgc (name);
CREATE INDEX IF NOT EXISTS pgcidx2 ON pgc (dec, ra);
"""

PGC_COLUMNS = "id, name, pgcname, ra, dec, major, minor, pa, class"


def _nullable(value: float) -> Optional[float]:
    return None if math.isnan(value) else value


def _angle(degrees: Optional[float]) -> float:
    return math.nan if degrees is None else degrees_to_radians(degrees)


class PGCDatabase:
    """PGC objects in an SQLite database.

    The pgc table is created if the database does not have one yet.

    Args:
        path: SQLite database file

    Raises:
        CatalogIOError: If the database cannot be opened or created

    Example:
        with PGCDatabase("pgc.db") as db:
            db.load(PGC("/usr/local/starcatalogs/deepsky/pgc"))
            print(db.find("MESSIER031"))
    """

    name = "PGCDatabase"

    INSERT_SQL = (
        f"INSERT OR REPLACE INTO pgc ({PGC_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"
    )

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None
        try:
            self._conn = sqlite3.connect(str(self.path))
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            self.close()
            raise CatalogIOError(
                f"cannot open/create db on file '{self.path}': {e}",
                catalog=self.name,
                path=str(self.path),
            ) from e
        logger.debug(f"pgc table ready in {self.path}")

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "PGCDatabase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        if self._conn is None:
            raise CatalogIOError("database is closed", catalog=self.name, path=str(self.path))
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise CatalogIOError(
                f"query failed: {e}", catalog=self.name, path=str(self.path)
            ) from e

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def _insert(self, obj: DeepSkyObject) -> None:
        data = (
            radians_to_hours(obj.position.ra),
            radians_to_degrees(obj.position.dec),
            _nullable(radians_to_degrees(obj.axes[0])),
            _nullable(radians_to_degrees(obj.axes[1])),
            _nullable(radians_to_degrees(obj.position_angle)),
            obj.classification.value,
        )
        for name in [obj.name, *sorted(obj.names)]:
            self._execute(self.INSERT_SQL, (obj.number, name, obj.name, *data))

    def add(self, obj: DeepSkyObject) -> None:
        """Store an object under its PGC name and all alternate names."""
        self._insert(obj)
        self._conn.commit()

    def load(self, objects: Iterable[DeepSkyObject]) -> int:
        """Store all objects in one transaction, e.g. a complete PGC catalog.

        Returns:
            Number of objects stored
        """
        count = 0
        for obj in objects:
            self._insert(obj)
            count += 1
            if count % 100000 == 0:
                logger.info(f"{count} objects stored")
        self._conn.commit()
        logger.info(f"{count} objects stored in {self.path}")
        return count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _object(self, number: int) -> DeepSkyObject:
        rows = self._execute(
            f"SELECT {PGC_COLUMNS} FROM pgc WHERE id = ? ORDER BY name", (number,)
        ).fetchall()
        _, _, pgcname, ra, dec, major, minor, pa, classification = rows[0]
        obj = DeepSkyObject(
            name=pgcname,
            number=number,
            position=RaDec.from_hours_degrees(ra, dec),
            axes=(_angle(major), _angle(minor)),
            position_angle=_angle(pa),
            classification=DeepSkyClass(classification),
        )
        for row in rows:
            obj.addname(row[1])
        return obj

    def find(self, name: str) -> DeepSkyObject:
        """Object with primary or alternate name."""
        row = self._execute("SELECT id FROM pgc WHERE name = ? LIMIT 1", (name,)).fetchone()
        if row is None:
            raise ObjectNotFoundError(
                f"object {name} not found", object_name=name, catalog=self.name
            )
        return self._object(row[0])

    def find_window(self, window: SkyWindow) -> List[DeepSkyObject]:
        """Objects inside window, sorted by name."""
        decmin, decmax = (radians_to_degrees(d) for d in window.decinterval())
        if window.is_whole_ra:
            left, right = 0.0, 24.0
        else:
            left = radians_to_hours(window.leftra())
            right = radians_to_hours(window.rightra())
        # a window across 0h has left > right
        cursor = self._execute(
            """
            SELECT id FROM pgc
            WHERE name = pgcname
              AND ? <= dec AND dec <= ?
              AND ((? <= ra AND ra <= ?) OR (? > ? AND (ra <= ? OR ? <= ra)))
            """,
            (decmin, decmax, left, right, left, right, right, left),
        )
        candidates = [self._object(number) for (number,) in cursor.fetchall()]
        result = sorted(obj for obj in candidates if window.contains(obj.position))
        logger.debug(f"{len(result)} objects in {window}")
        return result

    def find_like(self, prefix: str, maxobjects: int = DEFAULT_MAX_OBJECTS) -> List[str]:
        """Up to maxobjects names starting with prefix, sorted.

        A prefix containing '%' is used as LIKE pattern unchanged. As
        with any SQLite LIKE, ASCII letters match regardless of case.
        """
        pattern = prefix if "%" in prefix else prefix + "%"
        cursor = self._execute(
            "SELECT DISTINCT name FROM pgc WHERE name LIKE ? ORDER BY name LIMIT ?",
            (pattern, maxobjects),
        )
        return [name for (name,) in cursor]

    def size(self) -> int:
        """Number of objects, not counting alternate names."""
        return self._execute("SELECT COUNT(*) FROM pgc WHERE name = pgcname").fetchone()[0]

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, name: str) -> bool:
        return (
            self._execute("SELECT 1 FROM pgc WHERE name = ? LIMIT 1", (name,)).fetchone()
            is not None
        )
