#!/usr/bin/env python3
"""
One-off script to run list generation outside the nightly schedule.

Shows every event that is due today with its ranked attendee and waiting
lists, then commits them after confirmation.

Usage:
    python scripts/generate_lists.py [--dry-run] [--yes]

Options:
    --dry-run    Show the lists that would be generated without saving them
    --yes        Do not ask for confirmation before saving
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from roster.core.database import create_db_and_tables, engine
from roster.lists.generator import generate_lists, local_today, preview_lists
from roster.lists.store import SqlRecordStore


def print_preview(previews) -> None:
    """Print ranked lists for each due event."""
    for due, result in previews:
        print(f"{due.description or '(no description)'} [{due.event_id}]")
        print(f"  Date: {due.event_date}  Spots: {due.spots}")
        print("  Attendees:")
        for p in result.confirmed:
            organizer = " (organizer)" if p.is_organizer else ""
            last = p.last_attended.isoformat() if p.last_attended else "never"
            print(f"    - {p.display_name}{organizer}, last attended: {last}")
        if not result.confirmed:
            print("    (none)")
        print("  Waiting list:")
        for p in result.waiting:
            print(f"    - {p.display_name}")
        if not result.waiting:
            print("    (none)")
        print()


def main(dry_run: bool = False, assume_yes: bool = False):
    """Preview due events and generate their lists."""
    create_db_and_tables()

    with Session(engine) as session:
        store = SqlRecordStore(session)
        today = local_today()
        previews = preview_lists(store, today=today)

        if not previews:
            print(f"No events due on {today}.")
            return

        print(f"Found {len(previews)} event(s) due on {today}:\n")
        print_preview(previews)

        if dry_run:
            print("--- DRY RUN: No changes made ---")
            return

        if not assume_yes:
            response = input(f"Save lists for {len(previews)} event(s)? [y/N]: ")
            if response.lower() != "y":
                print("Aborted.")
                return

        stats = generate_lists(store, today=today)
        print(
            f"\nComplete: {stats['processed']} processed, {stats['skipped']} skipped, "
            f"{stats['invalid']} invalid, {stats['failed']} failed"
        )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate attendee and waiting lists now")
    parser.add_argument("--dry-run", action="store_true", help="Show lists without saving")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()
    main(dry_run=args.dry_run, assume_yes=args.yes)
