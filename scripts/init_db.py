#!/usr/bin/env python3
"""Seed lookup tables (idempotent) and optionally generate demo data.

Usage:
    python scripts/init_db.py                 # statuses + categories only
    python scripts/init_db.py --demo 100      # plus 100 demo customers with orders
    python scripts/init_db.py --demo 20 --seed 7
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv  # noqa: E402

from scripts._db_utils import database_url, script_session  # noqa: E402


def seed_only(*, database_url_override: str | None = None) -> dict[str, int]:
    from app.crm.seed import ensure_lookups

    with script_session(database_url(database_url_override)) as s:
        return ensure_lookups(s)


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Seed CRM lookup tables and demo data")
    parser.add_argument("--demo", type=int, default=0, metavar="N", help="Generate N demo customers")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for demo data")
    parser.add_argument("--database-url", default=None)
    args = parser.parse_args()

    added = seed_only(database_url_override=args.database_url)
    print(f"Lookups: +{added['customer_statuses']} statuses, +{added['order_item_categories']} categories")

    if args.demo > 0:
        from app.crm.seed import generate_demo_data

        with script_session(database_url(args.database_url)) as s:
            n = generate_demo_data(s, customers=args.demo, seed=args.seed)
        print(f"Demo data: {n} customers")


if __name__ == "__main__":
    main()
