"""
STARCATALOG Command Line Entry Point

Queries the star and deep sky catalogs and builds the star and PGC databases.

Usage:
    starcatalog star BSC0001 HIP032349 UCAC4-350-012345
    starcatalog area --ra 6.75 --dec -16.7 --width 15 --height 15 8
    starcatalog --database stars.db area --ra 6.75 --dec -16.7 6
    starcatalog build stars.db --all /usr/local/starcatalogs
    starcatalog dso NGC7000 M31
    starcatalog dso --like NGC70
    starcatalog pgcdb pgc.db --pgc /usr/local/starcatalogs/deepsky/pgc
    starcatalog dso --catalog pgc --pgc-database pgc.db MESSIER031

Entry Points:
    - CLI: `starcatalog` command (via pyproject.toml)
    - Direct: `python -m starcatalog.main`
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from starcatalog import __version__
from starcatalog.config import StarCatalogConfig, load_config
from starcatalog.exceptions import (
    CatalogNotFoundError,
    ConfigurationError,
    StarCatalogError,
)
from starcatalog.logging_config import get_logger, setup_logging
from starcatalog.types import RaDec, degrees_to_radians

__all__ = ["main", "create_parser", "run"]

# Module logger
logger = get_logger("CLI")


# =============================================================================
# Argument Parser
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="starcatalog",
        description="STARCATALOG star and deep sky catalog queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Configuration
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file (default: auto-discover)",
    )
    parser.add_argument(
        "-p",
        "--path",
        type=str,
        metavar="BASEDIR",
        help="Catalog base directory (overrides config file)",
    )
    parser.add_argument(
        "--database",
        type=str,
        metavar="DBFILE",
        help="Query this star database instead of the catalog files",
    )

    # Logging
    parser.add_argument(
        "-l",
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (overrides config file)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Path to log file (default: stderr only)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    star = commands.add_parser("star", help="Look up stars by name")
    star.add_argument("names", nargs="+", metavar="NAME", help="Star name, e.g. HIP032349")

    area = commands.add_parser("area", help="List the stars in a sky window")
    area.add_argument("--ra", type=float, default=0.0, help="Center RA in hours")
    area.add_argument("--dec", type=float, default=0.0, help="Center Dec in degrees")
    area.add_argument("--width", type=float, default=1.0, help="RA width in degrees")
    area.add_argument("--height", type=float, default=1.0, help="Dec height in degrees")
    area.add_argument(
        "maxmag", type=float, nargs="?", default=10.0, help="Faintest magnitude (default 10)"
    )

    build = commands.add_parser("build", help="Build the star database")
    build.add_argument("dbfile", metavar="DBFILE", help="SQLite database to fill")
    build.add_argument("--bsc", metavar="DIR", help="Load BSC from DIR")
    build.add_argument("--hipparcos", metavar="DIR", help="Load Hipparcos from DIR")
    build.add_argument("--tycho2", metavar="DIR", help="Load Tycho-2 from DIR")
    build.add_argument("--ucac4", metavar="DIR", help="Load UCAC4 from DIR")
    build.add_argument(
        "--all",
        metavar="DIR",
        help="Load all catalogs from the subdirectories of DIR",
    )
    build.add_argument(
        "--clear", action="store_true", help="Remove existing stars before loading"
    )

    dso = commands.add_parser("dso", help="Look up deep sky objects")
    dso.add_argument("names", nargs="*", metavar="NAME", help="Object name, e.g. M31")
    dso.add_argument("--like", metavar="PREFIX", help="List names starting with PREFIX")
    dso.add_argument(
        "--catalog",
        choices=["ngcic", "pgc", "stellarium"],
        default=None,
        help="Restrict to one deep sky catalog",
    )
    dso.add_argument(
        "--max", type=int, default=100, dest="maxobjects", help="Maximum names for --like"
    )
    dso.add_argument(
        "--pgc-database",
        metavar="DBFILE",
        help="Use this PGC database for --catalog pgc instead of pgc.dat",
    )

    pgcdb = commands.add_parser("pgcdb", help="Build the PGC database")
    pgcdb.add_argument("dbfile", metavar="DBFILE", help="SQLite database to fill")
    pgcdb.add_argument(
        "--pgc", metavar="DIR", help="Directory of pgc.dat (default: DEEPSKY_DIR/pgc)"
    )

    return parser


# =============================================================================
# Commands
# =============================================================================


def open_star_catalog(args: argparse.Namespace, config: StarCatalogConfig):
    """Database backend if requested, merged file backend otherwise."""
    from services.catalog import DatabaseBackend, FileBackend

    if args.database:
        return DatabaseBackend(args.database)
    return FileBackend(config.catalogs.basedir, config.merge)


def cmd_star(args: argparse.Namespace, config: StarCatalogConfig) -> int:
    missing = 0
    with open_star_catalog(args, config) as catalog:
        for name in args.names:
            try:
                star = catalog.find(name)
            except CatalogNotFoundError as e:
                logger.error(f"{name}: {e}")
                missing += 1
                continue
            longname = f" ({star.longname})" if star.longname else ""
            print(f"{star}{longname}")
    return 1 if missing else 0


def cmd_area(args: argparse.Namespace, config: StarCatalogConfig) -> int:
    from services.catalog import MagnitudeRange, SkyWindow

    window = SkyWindow(
        RaDec.from_hours_degrees(args.ra, args.dec),
        degrees_to_radians(args.width),
        degrees_to_radians(args.height),
    )
    magrange = MagnitudeRange(-30.0, args.maxmag)
    with open_star_catalog(args, config) as catalog:
        stars = catalog.find(window, magrange)
    for star in stars:
        print(star)
    logger.info(f"{len(stars)} stars in {window}, magnitude {magrange}")
    return 0


def cmd_build(args: argparse.Namespace, config: StarCatalogConfig) -> int:
    from services.catalog import (
        BSC,
        DatabaseBackendCreator,
        DatabaseLoader,
        Hipparcos,
        Tycho2,
        Ucac4,
    )

    directories = {
        "bsc": args.bsc,
        "hipparcos": args.hipparcos,
        "tycho2": args.tycho2,
        "ucac4": args.ucac4,
    }
    if args.all:
        base = Path(args.all)
        subdirs = {"bsc": "bsc", "hipparcos": "hipparcos", "tycho2": "tycho2", "ucac4": "u4"}
        for key, subdir in subdirs.items():
            directories[key] = directories[key] or str(base / subdir)
    if not any(directories.values()):
        logger.error("no catalogs to load, use --bsc, --hipparcos, --tycho2, --ucac4 or --all")
        return 1

    openers = {"bsc": BSC, "hipparcos": Hipparcos, "tycho2": Tycho2, "ucac4": Ucac4}
    catalogs = {
        key: openers[key](directory)
        for key, directory in directories.items()
        if directory
    }
    try:
        with DatabaseBackendCreator(args.dbfile) as creator:
            if args.clear:
                creator.clear()
            loader = DatabaseLoader(creator, config.merge, config.database.log_interval)
            added = loader.load(**catalogs)
            total = creator.count()
    finally:
        for catalog in catalogs.values():
            catalog.close()

    for name, count in added.items():
        print(f"{name:10s} {count:10d}")
    print(f"{'total':10s} {total:10d}")
    return 0


def cmd_dso(args: argparse.Namespace, config: StarCatalogConfig) -> int:
    from services.catalog import DeepSkyCatalogFactory, DeepSkyKind, PGCDatabase

    kind: Optional[DeepSkyKind] = DeepSkyKind(args.catalog) if args.catalog else None
    if args.pgc_database and kind is DeepSkyKind.PGC:
        with PGCDatabase(args.pgc_database) as database:
            return show_objects(args, database.find, database.find_like)

    factory = DeepSkyCatalogFactory(config.catalogs.deepsky_dir)
    if kind is None:
        return show_objects(
            args,
            factory.find,
            lambda prefix, maxobjects: factory.get(DeepSkyKind.NGCIC).find_like(
                prefix, maxobjects
            ),
        )
    catalog = factory.get(kind)
    return show_objects(args, catalog.find, catalog.find_like)


def show_objects(
    args: argparse.Namespace,
    find: Callable[[str], Any],
    find_like: Callable[[str, int], list[str]],
) -> int:
    """Print the objects named in args, or the names matching --like."""
    if args.like is not None:
        for name in find_like(args.like, args.maxobjects):
            print(name)
        return 0

    if not args.names:
        logger.error("no object names given")
        return 1

    missing = 0
    for name in args.names:
        try:
            obj = find(name)
        except CatalogNotFoundError as e:
            logger.error(f"{name}: {e}")
            missing += 1
            continue
        print(f"{obj} {obj.mag:5.1f}")
        if obj.names:
            print(f"    also known as: {', '.join(sorted(obj.names))}")
    return 1 if missing else 0


def cmd_pgcdb(args: argparse.Namespace, config: StarCatalogConfig) -> int:
    from services.catalog import PGC, PGCDatabase

    directory = args.pgc or str(Path(config.catalogs.deepsky_dir) / "pgc")
    catalog = PGC(directory)
    with PGCDatabase(args.dbfile) as database:
        database.load(catalog)
        total = database.size()
    print(f"{'PGC':10s} {total:10d}")
    return 0


COMMANDS = {
    "star": cmd_star,
    "area": cmd_area,
    "build": cmd_build,
    "dso": cmd_dso,
    "pgcdb": cmd_pgcdb,
}


# =============================================================================
# Main Entry Points
# =============================================================================


def run(argv: Optional[list[str]] = None) -> int:
    """Parse argv, load configuration and run the selected command.

    Returns:
        Exit code (0 for success)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging (basic setup before config is loaded)
    setup_logging(args.log_level or "INFO", args.log_file)

    try:
        logger.debug(f"Loading configuration from: {args.config or 'auto-discover'}")
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    # Apply log level and file from config if not overridden
    if args.log_level is None or (args.log_file is None and config.log_file):
        setup_logging(args.log_level or config.log_level, args.log_file or config.log_file)
    if args.path:
        config.catalogs.basedir = args.path

    try:
        return COMMANDS[args.command](args, config)
    except StarCatalogError as e:
        logger.error(f"STARCATALOG error: {e}")
        return 1


def main() -> int:
    """Main entry point for the starcatalog command.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
