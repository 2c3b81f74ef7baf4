"""
Database - A JSON document kept in memory and flushed to disk.

The document holds every session and leaderboard:

    {"version": 2, "sessions": {id: record}, "leaderboards": {game: {name: entry}}}

Design decisions:
- One file, rewritten atomically (temp file + os.replace) on each write
- All access goes through a re-entrant lock
- A failed transaction (block or disk write) leaves memory as it was
- path=None keeps the document in memory only (tests, throwaway servers)
- Legacy documents are migrated once, on load
"""

from __future__ import annotations
import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from .migrations import empty_document, migrate

logger = logging.getLogger(__name__)


class Database:
    """
    Lock-guarded JSON document store.

    Usage:
        db = Database("data/db.json")

        with db.transaction() as doc:
            doc["sessions"][session_id] = record   # flushed on exit

        with db.read() as doc:
            record = doc["sessions"].get(session_id)
    """

    def __init__(
        self,
        path: str | Path | None = None,
        default_game_type: str = "chess",
    ):
        self.path = Path(path) if path is not None else None
        self.default_game_type = default_game_type
        self._lock = threading.RLock()
        self._depth = 0
        self._document = self._load()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @contextmanager
    def read(self) -> Iterator[dict[str, Any]]:
        """Yield the live document under the lock. Callers must not mutate it."""
        with self._lock:
            yield self._document

    @contextmanager
    def transaction(self) -> Iterator[dict[str, Any]]:
        """
        Yield the live document for mutation and flush it afterwards.

        If the block or the write raises, the in-memory document is
        restored to its state before the transaction and nothing is
        flushed. Nested transactions join the outermost one.
        """
        with self._lock:
            if self._depth:
                # Nested: the outermost transaction flushes or rolls back
                self._depth += 1
                try:
                    yield self._document
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy(self._document)
            self._depth = 1
            try:
                yield self._document
                self._flush()
            except BaseException:
                self._document = snapshot
                raise
            finally:
                self._depth = 0

    def _load(self) -> dict[str, Any]:
        if self.path is None:
            return empty_document()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            document = empty_document()
            self._write(document)
            logger.info("Created database at %s", self.path)
            return document

        with open(self.path, "r", encoding="utf-8") as f:
            raw = f.read()
        document = json.loads(raw) if raw.strip() else empty_document()

        before = document.get("version")
        document = migrate(document, self.default_game_type)
        if document.get("version") != before:
            self._write(document)
        logger.info(
            "Loaded database from %s (%d sessions)",
            self.path,
            len(document.get("sessions", {})),
        )
        return document

    def _flush(self):
        if self.path is not None:
            self._write(self._document)

    def _write(self, document: dict[str, Any]):
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent),
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
