#!/usr/bin/env python3
"""
Create (or recreate) the merge record table.

Usage:
    python init_db.py                      # create merge_records if missing
    python init_db.py --reset --yes        # drop and recreate, no prompt
    python init_db.py --database-url sqlite:///other.db
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from data.database import DatabaseManager
from serving.storage_service import MergeStorageService


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Create the merge record table')
    parser.add_argument('--database-url', default=None, help='Database URL (default: DATABASE_URL setting)')
    parser.add_argument('--reset', action='store_true', help='Drop merge_records first (destroys stored records)')
    parser.add_argument('--yes', action='store_true', help='Do not ask before --reset')
    args = parser.parse_args(argv)

    manager = DatabaseManager(args.database_url)
    print(f"Database: {manager.database_url}")

    if args.reset and manager.has_tables():
        if not args.yes:
            answer = input("Drop merge_records and all stored records? (yes/no): ")
            if answer.strip().lower() != 'yes':
                print("Aborted.")
                return 1
        manager.drop_tables()
        print("✓ Dropped merge_records")

    existed = manager.has_tables()
    manager.create_tables()

    with manager.session() as session:
        stored = MergeStorageService(session).count_records()

    state = "already present" if existed else "created"
    print(f"✓ merge_records {state} ({stored} records)")
    print("Start the API with: uvicorn serving.workflow_api:app --port 8002")
    return 0


if __name__ == '__main__':
    sys.exit(main())
