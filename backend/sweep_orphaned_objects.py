#!/usr/bin/env python3
"""
Script to delete storage objects that no photo or document row points to.

Objects become orphaned when a browser uploads a file but never confirms
it, or when a storage delete failed during asset deletion.

Usage:
    # Show what would be deleted:
    docker exec portal-api python sweep_orphaned_objects.py --dry-run

    # Non-interactive mode (skip confirmation):
    docker exec portal-api python sweep_orphaned_objects.py --yes

    # Limit the sweep to one organization:
    python sweep_orphaned_objects.py --prefix org-<organization_id>/
"""
import argparse
import asyncio
import sys
from typing import Iterable, List, Set

from sqlalchemy import select

from app.config import settings
from app.database import AsyncSessionLocal, engine
from app.models.document import Document
from app.models.photo import Photo
from app.storage.r2_client import R2Client


def find_orphaned_keys(stored_keys: Iterable[str], known_keys: Set[str]) -> List[str]:
    """Keys present in storage with no metadata row, in listing order."""
    return [key for key in stored_keys if key not in known_keys]


async def load_known_keys() -> Set[str]:
    """Every file_key referenced by a photo or document row."""
    async with AsyncSessionLocal() as db:
        photo_keys = await db.execute(select(Photo.file_key))
        document_keys = await db.execute(select(Document.file_key))
        known = set(photo_keys.scalars().all()) | set(document_keys.scalars().all())
    await engine.dispose()
    return known


def main():
    parser = argparse.ArgumentParser(description='Delete storage objects with no photo or document row')
    parser.add_argument('--yes', '-y', action='store_true',
                        help='Skip confirmation prompt (non-interactive mode)')
    parser.add_argument('--dry-run', action='store_true',
                        help='List orphaned objects without deleting them')
    parser.add_argument('--prefix', default='',
                        help='Only sweep keys under this prefix')
    args = parser.parse_args()

    storage = R2Client(settings.storage_config())
    if not storage.is_configured:
        print("ERROR: Missing R2 configuration!")
        print("Required environment variables: R2_ENDPOINT (or R2_ACCOUNT_ID), R2_ACCESS_KEY, R2_SECRET_KEY")
        sys.exit(1)

    print("=" * 50)
    print("CLOUDFLARE R2 - SWEEP ORPHANED OBJECTS")
    print("=" * 50)
    print(f"Bucket: {storage.bucket}")
    print(f"Prefix: {args.prefix or '(all)'}")
    print()

    known_keys = asyncio.run(load_known_keys())
    orphaned = find_orphaned_keys(storage.iter_keys(args.prefix), known_keys)

    if not orphaned:
        print("No orphaned objects found.")
        return

    print(f"Found {len(orphaned)} orphaned objects:")
    for key in orphaned[:10]:
        print(f"  - {key}")
    if len(orphaned) > 10:
        print(f"  ... and {len(orphaned) - 10} more")

    if args.dry_run:
        print("\nDry run, nothing deleted.")
        return

    if not args.yes:
        confirm = input(f"\nDelete {len(orphaned)} objects? (yes/no): ")
        if confirm.lower() != 'yes':
            print("Aborted.")
            sys.exit(0)

    deleted, failed = storage.delete_objects_batch(orphaned)

    print(f"\n{'=' * 50}")
    print("SUMMARY:")
    print(f"  Orphaned objects: {len(orphaned)}")
    print(f"  Deleted: {deleted}")
    print(f"  Failed: {failed}")
    print(f"{'=' * 50}")


if __name__ == '__main__':
    main()
