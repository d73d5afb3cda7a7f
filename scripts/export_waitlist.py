#!/usr/bin/env python3
"""
Export the waitlist snapshot as CSV or JSON (newest first).

Usage:
  python scripts/export_waitlist.py [--file data/waitlist.json] [--format csv|json] [--output out.csv]
"""
from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

# Ensure the sendrec package is importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sendrec.core.config import get_settings  # noqa: E402
from sendrec.domain.entries import WaitlistEntry  # noqa: E402
from sendrec.repositories.json_storage import (  # noqa: E402
    JsonWaitlistStorage,
    PersistenceError,
    SnapshotNotFoundError,
)


def write_csv(entries: Sequence[WaitlistEntry], out: TextIO) -> None:
    writer = csv.writer(out)
    writer.writerow(["id", "email", "created_at"])
    for entry in entries:
        writer.writerow([entry.id, entry.email, entry.created_at.isoformat()])


def write_json(entries: Sequence[WaitlistEntry], out: TextIO) -> None:
    json.dump([entry.to_dict() for entry in entries], out, ensure_ascii=False, indent=2)
    out.write("\n")


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Export waitlist entries")
    ap.add_argument("--file", help="Snapshot path (default: WAITLIST_DATA_FILE or ./data/waitlist.json)")
    ap.add_argument("--format", choices=("csv", "json"), default="csv")
    ap.add_argument("--output", help="Destination file (default: stdout)")
    args = ap.parse_args(argv)

    path = args.file or get_settings().data_file
    try:
        entries = JsonWaitlistStorage(path).load()
    except SnapshotNotFoundError:
        raise SystemExit(f"Snapshot not found: {path}")
    except PersistenceError as exc:
        raise SystemExit(f"Unreadable snapshot: {exc}")
    entries = entries[::-1]

    writer = write_csv if args.format == "csv" else write_json
    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as handle:
            writer(entries, handle)
        print(f"OK: {len(entries)} entries written to {args.output}", file=sys.stderr)
    else:
        writer(entries, sys.stdout)


if __name__ == "__main__":
    main()
