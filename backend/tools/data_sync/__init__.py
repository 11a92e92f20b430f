"""
Data sync tools for moving field notes between databases.

Usage:
    python -m tools.data_sync.cli export --output data-export.json
    python -m tools.data_sync.cli import --input data-export.json --merge
    python -m tools.data_sync.cli cleanup-orphans --base-url http://localhost:8000
    python -m tools.data_sync.cli backfill-exif
"""

from .service import DataSyncService, ImportReport, OrphanedPhoto, BackfillReport

__all__ = [
    "DataSyncService",
    "ImportReport",
    "OrphanedPhoto",
    "BackfillReport",
]
