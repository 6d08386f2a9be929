#!/usr/bin/env python3
"""Export or import the completion log as a ``{"YYYY-MM-DD": [names]}`` JSON object."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

from sqlmodel import Session

from habit_tracker.core.config import DATABASE_URL
from habit_tracker.core.db import build_engine, upgrade_schema
from habit_tracker.core.errors import StorageUnavailable
from habit_tracker.core.logging_setup import configure_logging
from habit_tracker.services.kv_store import KeyValueStore
from habit_tracker.services.progress_service import ProgressStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export or import habit completion history")
    parser.add_argument(
        "--database-url",
        default=os.environ.get("DATABASE_URL", DATABASE_URL),
        help="Database holding the completion log",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write the log as JSON")
    export_parser.add_argument("--output", "-o", default="-", help="Target file, '-' for stdout")

    import_parser = subparsers.add_parser("import", help="Record every day of a JSON export")
    import_parser.add_argument("source", help="JSON file produced by 'export', '-' for stdin")
    import_parser.add_argument(
        "--force",
        action="store_true",
        help="Import even if the log already has days",
    )
    return parser


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8") as handle:
        return handle.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    upgrade_schema(args.database_url)
    engine = build_engine(args.database_url)

    with Session(engine) as db:
        store = ProgressStore(KeyValueStore(db))

        if args.command == "export":
            payload = json.dumps(store.export_payload(), ensure_ascii=False, indent=2)
            if args.output == "-":
                print(payload)
            else:
                with open(args.output, "w", encoding="utf-8") as handle:
                    handle.write(payload + "\n")
            return 0

        try:
            raw = _read_source(args.source)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Could not read {args.source}: {exc}", file=sys.stderr)
            return 1

        if store.load_all() and not args.force:
            print("Completion log already has data. Use --force to import anyway.", file=sys.stderr)
            return 1

        try:
            imported = store.import_payload(raw)
        except StorageUnavailable as exc:
            print(f"Import failed: {exc}", file=sys.stderr)
            return 1

    print(f"Imported {imported} days.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
