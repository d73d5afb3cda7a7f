"""
JSON snapshot persistence for waitlist entries.

The whole collection is written on every save: a temporary file is filled in
the target directory and then swapped in with ``os.replace`` so readers only
ever see the previous or the new complete document.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable
import json
import logging
import os
import re
import tempfile

from sendrec.domain.entries import WaitlistEntry

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path("data") / "waitlist.json"
# fractional seconds, as written with anywhere from 1 to 9 digits
_FRACTION = re.compile(r"\.(\d+)")


class PersistenceError(Exception):
    """Base class for snapshot load failures."""


class SnapshotNotFoundError(PersistenceError):
    """Raised when no snapshot exists at the configured location."""


class SnapshotDecodeError(PersistenceError):
    """Raised when a snapshot exists but cannot be read or parsed."""


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat only learned the "Z" suffix in 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # 3.10 fromisoformat only takes 3 or 6 fractional digits
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def entry_from_dict(raw: object) -> WaitlistEntry:
    """Build an entry from one decoded JSON record, validating field types."""
    if not isinstance(raw, dict):
        raise SnapshotDecodeError(f"record must be an object, got {type(raw).__name__}")
    missing = [key for key in ("id", "email", "created_at") if key not in raw]
    if missing:
        raise SnapshotDecodeError(f"record is missing {', '.join(missing)}")
    entry_id = raw["id"]
    email = raw["email"]
    created_at = raw["created_at"]
    if isinstance(entry_id, bool) or not isinstance(entry_id, int):
        raise SnapshotDecodeError(f"id must be an integer, got {entry_id!r}")
    if not isinstance(email, str):
        raise SnapshotDecodeError(f"email must be a string, got {email!r}")
    if not isinstance(created_at, str):
        raise SnapshotDecodeError(f"created_at must be a string, got {created_at!r}")
    try:
        timestamp = _parse_timestamp(created_at)
    except ValueError as exc:
        raise SnapshotDecodeError(f"invalid created_at {created_at!r}") from exc
    return WaitlistEntry(id=entry_id, email=email, created_at=timestamp)


def _check_unique(entries: list[WaitlistEntry]) -> None:
    seen_ids: set[int] = set()
    seen_emails: set[str] = set()
    for entry in entries:
        if entry.id in seen_ids:
            raise SnapshotDecodeError(f"duplicate id {entry.id}")
        if entry.email in seen_emails:
            raise SnapshotDecodeError(f"duplicate email {entry.email!r}")
        seen_ids.add(entry.id)
        seen_emails.add(entry.email)


def _fsync_directory(directory: Path) -> None:
    """Make a rename inside ``directory`` durable. No-op where directories cannot be opened."""
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(str(directory), os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class JsonWaitlistStorage:
    """Reads and writes the full entry collection as one JSON array."""

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_DATA_FILE) -> None:
        self.path = Path(path)

    def load(self) -> list[WaitlistEntry]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"no snapshot at {self.path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotDecodeError(f"cannot read {self.path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotDecodeError(f"invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise SnapshotDecodeError(f"{self.path} must contain a JSON array")
        entries = [entry_from_dict(item) for item in data]
        _check_unique(entries)
        return entries

    def save(self, entries: Iterable[WaitlistEntry]) -> None:
        payload = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
            _fsync_directory(self.path.parent)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("Saved waitlist snapshot to %s", self.path)
