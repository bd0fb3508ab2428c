"""
STARCATALOG Services Package

Catalog Engine (services.catalog)
---------------------------------
- Star catalog backends: BSC, Hipparcos, SAO, Tycho-2, UCAC4
- FileBackend: merged view of the star catalogs
- DatabaseBackend: SQLite star table built from the merged catalogs
- Deep sky catalogs: NGC/IC, PGC, Stellarium
"""
