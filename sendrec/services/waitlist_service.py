"""
Waitlist use cases: deduplicated signups with sequential ids.

The store keeps the authoritative list in memory. Every accepted signup
schedules a full snapshot write on a single background worker; the caller is
never blocked on disk I/O and a failed write is only logged. The next
successful write covers any entries a failed one missed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence
import logging
import os
import threading

from sendrec.core.locks import ReadWriteLock
from sendrec.domain.entries import WaitlistEntry
from sendrec.repositories.json_storage import JsonWaitlistStorage, SnapshotNotFoundError

logger = logging.getLogger(__name__)


class WaitlistStorage(Protocol):
    def load(self) -> list[WaitlistEntry]:
        ...

    def save(self, entries: Sequence[WaitlistEntry]) -> None:
        ...


class WaitlistStore:
    """Concurrency-safe in-memory table of waitlist entries."""

    def __init__(self, storage: WaitlistStorage) -> None:
        self.storage = storage
        self._lock = ReadWriteLock()
        self._entries: list[WaitlistEntry] = []
        self._next_id = 1
        self._save_lock = threading.Lock()
        self._save_pending = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="waitlist-save")
        self._load()

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "WaitlistStore":
        """Load the snapshot at ``path``; a corrupt file raises PersistenceError."""
        return cls(JsonWaitlistStorage(path))

    def _load(self) -> None:
        try:
            entries = self.storage.load()
        except SnapshotNotFoundError:
            logger.info("No waitlist snapshot found; starting empty")
            entries = []
        with self._lock.write_locked():
            self._entries = list(entries)
            self._next_id = max((entry.id for entry in self._entries), default=0) + 1
        logger.info("Loaded %d waitlist entries (next id %d)", len(entries), self._next_id)

    @property
    def next_id(self) -> int:
        with self._lock.read_locked():
            return self._next_id

    def add(self, email: str) -> tuple[WaitlistEntry, bool]:
        """Insert ``email`` unless already present.

        Returns ``(entry, True)`` for a new signup and ``(existing, False)`` for
        a duplicate. Duplicates do not consume an id.
        """
        with self._lock.write_locked():
            for existing in self._entries:
                if existing.email == email:
                    return existing, False
            entry = WaitlistEntry(
                id=self._next_id,
                email=email,
                created_at=datetime.now(timezone.utc),
            )
            self._entries.append(entry)
            self._next_id += 1
        self._schedule_save()
        return entry, True

    def get_all(self) -> list[WaitlistEntry]:
        """Entries newest first."""
        with self._lock.read_locked():
            return self._entries[::-1]

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def _snapshot(self) -> list[WaitlistEntry]:
        with self._lock.read_locked():
            return list(self._entries)

    def _schedule_save(self) -> None:
        with self._save_lock:
            if self._save_pending:
                return
            self._save_pending = True
        try:
            self._executor.submit(self._run_save)
        except RuntimeError:
            # executor already shut down
            with self._save_lock:
                self._save_pending = False
            logger.warning("Waitlist store is closed; snapshot not scheduled")

    def _run_save(self) -> None:
        with self._save_lock:
            self._save_pending = False
        entries = self._snapshot()
        try:
            self.storage.save(entries)
        except Exception:
            logger.exception("Failed to persist waitlist snapshot (%d entries)", len(entries))

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every save scheduled so far has run."""
        try:
            marker = self._executor.submit(lambda: None)
        except RuntimeError:
            return
        marker.result(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
