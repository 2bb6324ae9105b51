#!/usr/bin/env python3
"""Seed the default categories for a user. Run with: python scripts/seed_categories.py --user-id <uid>"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.errors import FinanceError
from app.database import init_db
from app.logging_setup import configure_logging
from app.services import build_services


async def main():
    parser = argparse.ArgumentParser(description="Seed default categories for a user")
    parser.add_argument("--user-id", dest="user_id", required=True)
    args = parser.parse_args()

    configure_logging()
    await init_db()
    services = build_services()
    try:
        created = await services.categories.initialize_default_categories(args.user_id)
    except FinanceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"Created {len(created)} default categories for {args.user_id}")
    else:
        print(f"Default categories already present for {args.user_id}")


if __name__ == "__main__":
    asyncio.run(main())
