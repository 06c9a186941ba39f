#!/usr/bin/env python3
"""
CLI workflow runner for PDF merging.

Provides command-line interface for merging, inspecting and listing merges.
"""
import argparse
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from core.exceptions import MergeError
from data.database import init_database, session_scope
from serving.storage_service import MergeStorageService
from services.merge_service import MergeService
from utils.pdf_utils import get_pdf_summary


def merge_cli(files, output_path: str, compress: bool = True, store: bool = False) -> int:
    """Merge PDF files into output_path."""
    print("=" * 60)
    print(f"Merging {len(files)} files -> {output_path}")
    print("=" * 60)

    for file_path in files:
        if not os.path.exists(file_path):
            print(f"❌ Error: File not found: {file_path}")
            return 1

    service = MergeService(compress=compress)

    try:
        if store:
            init_database()
            with session_scope() as session:
                outcome = service.merge_paths(files, session=session, store_to_db=True)
        else:
            outcome = service.merge_paths(files)
    except MergeError as e:
        where = f" [input {e.input_index}: {e.filename}]" if e.input_index is not None else ""
        print(f"❌ {type(e).__name__}{where}: {e.message}")
        return 1

    Path(output_path).write_bytes(outcome.pdf_bytes)

    for title, filename in zip(outcome.bookmark_titles, outcome.filenames):
        print(f"  ✓ {title:<10} {filename}")

    print(f"\n✓ Merged {outcome.input_count} files")
    print(f"  Pages: {outcome.page_count}")
    print(f"  Size: {len(outcome.pdf_bytes)} bytes")
    if outcome.record_id:
        print(f"  Record ID: {outcome.record_id}")
    print("=" * 60)
    return 0


def inspect_cli(file_path: str) -> int:
    """Show pages and outline of a PDF."""
    if not os.path.exists(file_path):
        print(f"❌ Error: File not found: {file_path}")
        return 1

    try:
        summary = get_pdf_summary(Path(file_path).read_bytes())
    except MergeError as e:
        print(f"❌ {type(e).__name__}: {e.message}")
        return 1

    print(f"\nFile: {file_path}")
    print(f"Pages: {summary['page_count']}")
    print("-" * 60)
    for page in summary['pages']:
        print(f"  Page {page['page_number']:<5} {page['width']} x {page['height']}")

    print("\nOutline:")
    print("-" * 60)
    if not summary['outline']:
        print("  (none)")
    for entry in summary['outline']:
        indent = "  " * entry['level']
        print(f"{indent}├─ {entry['title']} -> page {entry['page']}")
    return 0


def list_merges_cli() -> int:
    """List stored merge records."""
    init_database()
    with session_scope() as session:
        records = MergeStorageService(session).list_records(limit=50)

        if not records:
            print("No merge records found in database.")
            return 0

        print(f"\nFound {len(records)} merge records:")
        print("-" * 80)
        print(f"{'ID':<38} {'Inputs':<7} {'Pages':<6} {'Created'}")
        print("-" * 80)

        for record in records:
            created = record.created_at.strftime("%Y-%m-%d %H:%M")
            print(f"{record.id:<38} {record.input_count:<7} {record.total_pages:<6} {created}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='PDF merge CLI workflow'
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Merge command
    merge_parser = subparsers.add_parser('merge', help='Merge PDF files in the given order')
    merge_parser.add_argument('files', nargs='+', help='PDF files to merge')
    merge_parser.add_argument('-o', '--output', type=str, default='merged.pdf', help='Output file path')
    merge_parser.add_argument('--no-compress', action='store_true', help='Do not compress output streams')
    merge_parser.add_argument('--store', action='store_true', help='Store a merge record to database')

    # Inspect command
    inspect_parser = subparsers.add_parser('inspect', help='Show pages and outline of a PDF')
    inspect_parser.add_argument('file', type=str, help='PDF file')

    # List command
    subparsers.add_parser('list', help='List stored merge records')

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())

    if args.command == 'merge':
        return merge_cli(
            files=args.files,
            output_path=args.output,
            compress=not args.no_compress,
            store=args.store
        )
    elif args.command == 'inspect':
        return inspect_cli(args.file)
    elif args.command == 'list':
        return list_merges_cli()
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
