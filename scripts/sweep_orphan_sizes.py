#!/usr/bin/env python3
"""Delete custom_sizes rows that no order item references.

Reconciliation removes the previous size when an item moves off it, but it leaves
the row behind if that cleanup could not run safely (e.g. a concurrent edit). This
sweeps whatever is left.

Usage:
    python scripts/sweep_orphan_sizes.py           # Interactive mode
    python scripts/sweep_orphan_sizes.py --dry-run # Preview only
    python scripts/sweep_orphan_sizes.py --yes     # Delete without confirmation
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from scripts._db_utils import database_url, script_session  # noqa: E402


def sweep(s: Session, *, dry_run: bool = False) -> tuple[int, int]:
    """Returns (orphans_found, deleted). Each delete re-checks references."""
    from app.crm.audit import record_event
    from app.crm.modules.custom_sizes import store

    orphans = store.find_orphans(s)
    if dry_run:
        return len(orphans), 0
    deleted = 0
    for size in orphans:
        size_id = size.id
        if store.delete_if_unreferenced(s, size_id):
            record_event(
                s,
                action="custom_size.orphan_delete",
                entity_type="CustomSize",
                entity_id=str(size_id),
                metadata={"reason": "sweep"},
            )
            deleted += 1
    return len(orphans), deleted


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Delete unreferenced custom sizes")
    parser.add_argument("--dry-run", action="store_true", help="Preview only, don't delete")
    parser.add_argument("--yes", "-y", action="store_true", help="Delete without confirmation")
    parser.add_argument("--database-url", default=None)
    args = parser.parse_args()

    db_url = database_url(args.database_url)
    print(f"Database: {db_url[:50]}...")

    from app.crm.modules.custom_sizes import store

    with script_session(db_url) as s:
        orphans = store.find_orphans(s)
        if not orphans:
            print("OK: No orphaned custom sizes found.")
            return

        print(f"Found {len(orphans)} orphaned custom sizes:")
        print("-" * 60)
        for i, size in enumerate(orphans[:50], 1):
            print(f"  {i:3}. chest={size.chest} waist={size.waist} hips={size.hips} (ID: {size.id})")
        if len(orphans) > 50:
            print(f"  ... and {len(orphans) - 50} more")
        print("-" * 60)

        if args.dry_run:
            print("\n[DRY RUN] No changes made.")
            return

        if not args.yes:
            response = input(f"\nDelete these {len(orphans)} custom sizes? (yes/no): ")
            if response.lower() != "yes":
                print("Cancelled.")
                return

        _found, deleted = sweep(s)
        print(f"\nOK: Deleted {deleted} custom sizes.")


if __name__ == "__main__":
    main()
