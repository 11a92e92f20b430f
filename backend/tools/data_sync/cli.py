"""
CLI interface for data sync tools.

Usage:
    python -m tools.data_sync.cli export
    python -m tools.data_sync.cli import --merge
    python -m tools.data_sync.cli cleanup-orphans --delete
    python -m tools.data_sync.cli backfill-exif
"""

import asyncio
import json
import sys
from pathlib import Path

import click
import httpx

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Windows console encoding fix
if sys.platform == 'win32':
    sys.stdout.reconfigure(encoding='utf-8')

from app.db.session import AsyncSessionLocal
from app.features.storage import ObjectStorageService
from .service import DataSyncService

DEFAULT_EXPORT_FILE = "data-export.json"


@click.group()
def cli():
    """Data sync tools for Field Notes."""
    pass


@cli.command("export")
@click.option("--output", default=DEFAULT_EXPORT_FILE, help="Path of the JSON file to write")
def export_command(output):
    """Export all field notes and photos to JSON."""
    data = asyncio.run(_run_export())
    Path(output).write_text(json.dumps(data, indent=2), encoding="utf-8")
    click.echo(
        f"Exported {data['totalFieldNotes']} field notes "
        f"and {data['totalPhotos']} photos"
    )
    click.echo(f"Export saved to: {output}")


async def _run_export() -> dict:
    async with AsyncSessionLocal() as session:
        return await DataSyncService(session).export_data()


@cli.command("import")
@click.option("--input", "input_path", default=DEFAULT_EXPORT_FILE, help="Export file to load")
@click.option("--merge", is_flag=True, help="Keep existing data and skip duplicate ids")
def import_command(input_path, merge):
    """
    Import field notes and photos from JSON.

    Without --merge all existing data is removed first.
    """
    path = Path(input_path)
    if not path.exists():
        click.echo(f"Export file not found: {path}", err=True)
        click.echo("Run the export command first to create one.", err=True)
        sys.exit(1)

    data = json.loads(path.read_text(encoding="utf-8"))
    click.echo(f"Import data from: {data.get('exportedAt', 'unknown')}")
    click.echo(f"Field notes: {data.get('totalFieldNotes', len(data.get('fieldNotes', [])))}")
    click.echo(f"Photos: {data.get('totalPhotos', len(data.get('photos', [])))}")
    click.echo(f"Mode: {'MERGE' if merge else 'REPLACE'}")

    report = asyncio.run(_run_import(data, merge))

    click.echo(
        f"Field notes: {report.imported_field_notes} imported, "
        f"{report.skipped_field_notes} skipped"
    )
    click.echo(f"Photos: {report.imported_photos} imported, {report.skipped_photos} skipped")


async def _run_import(data: dict, merge: bool):
    async with AsyncSessionLocal() as session:
        return await DataSyncService(session).import_data(data, merge=merge)


@cli.command("cleanup-orphans")
@click.option("--base-url", default="http://localhost:8000", help="Server that serves photo urls")
@click.option("--delete", "delete_orphans", is_flag=True, help="Delete orphaned photo records")
@click.option("--timeout", default=10.0, type=float, help="Request timeout in seconds")
def cleanup_orphans_command(base_url, delete_orphans, timeout):
    """Find photo records whose files can no longer be fetched."""
    asyncio.run(_run_cleanup(base_url, delete_orphans, timeout))


async def _run_cleanup(base_url: str, delete_orphans: bool, timeout: float):
    async with AsyncSessionLocal() as session, httpx.AsyncClient(timeout=timeout) as client:
        service = DataSyncService(session)
        orphans = await service.find_orphans(client, base_url)

        if not orphans:
            click.echo("No orphaned photos found!")
            return

        for orphan in orphans:
            click.echo(f"Orphaned photo: {orphan.filename} ({orphan.url}) - {orphan.reason}")
        click.echo(f"\nFound {len(orphans)} orphaned photo records")

        if delete_orphans:
            removed = await service.delete_photos([o.id for o in orphans])
            click.echo(f"Deleted {removed} photo records")
        else:
            click.echo("Run again with --delete to remove them.")


@cli.command("backfill-exif")
def backfill_exif_command():
    """Extract EXIF for stored photos that have no metadata yet."""
    report = asyncio.run(_run_backfill())
    click.echo(f"Checked {report.checked} photos, updated {report.updated}")
    if report.missing:
        click.echo(f"{len(report.missing)} photos have no stored object")


async def _run_backfill():
    async with AsyncSessionLocal() as session:
        service = DataSyncService(session)
        return await service.backfill_exif(ObjectStorageService.from_settings())


if __name__ == "__main__":
    cli()
