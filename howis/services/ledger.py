"""Append-only record file of decided names.

One line per decision, ``<name>: <status>``. Replaying the file at startup
gives the names to skip and seeds the counters, so an interrupted batch picks
up where it stopped.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Set, Tuple

from howis.domain.counters import Counters
from howis.domain.outcome import Outcome, classify_status
from howis.exceptions import LedgerError, LedgerLockedError
from howis.services.source_resolver import Source

try:
    import fcntl
except ImportError:  # Windows
    fcntl = None
    import msvcrt

logger = logging.getLogger(__name__)

SEPARATOR = ": "


def _lock(f, path: str) -> None:
    """Take a non-blocking exclusive lock on the open record file."""
    try:
        if fcntl is not None:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        else:
            f.seek(0)
            msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK, 1)
    except OSError as e:
        logger.error("Could not lock record file %s: %s", path, e)
        raise LedgerLockedError(path) from e


class Ledger:
    def __init__(self, path: str, file=None):
        self.path = path
        self._file = file
        self._needs_newline = False

    @classmethod
    def open(cls, path: str) -> "Ledger":
        """Open (creating if absent, never truncating) and lock the record file."""
        try:
            f = open(path, "a+b")
        except OSError as e:
            raise LedgerError(path, f"failed to open record file: {e}") from e
        try:
            _lock(f, path)
        except LedgerError:
            f.close()
            raise
        logger.info("Opened record file %s", path)
        return cls(path, f)

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def _require_open(self):
        if self._file is None:
            raise LedgerError(self.path, "record file is not open")
        return self._file

    def replay(self, source: Optional[Source] = None) -> Tuple[Set[str], Counters]:
        """Read every recorded decision.

        Returns the names to skip and counters seeded from recorded statuses.
        Each recorded name is also discarded from `source` so it is not probed
        again. Lines without the separator are ignored.
        """
        f = self._require_open()
        skip: Set[str] = set()
        counters = Counters()
        f.seek(0)
        data = f.read()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise LedgerError(self.path, f"record file is not valid UTF-8: {e}") from e

        malformed = 0
        for line in text.split("\n"):
            if line.endswith("\r"):
                line = line[:-1]
            if not line:
                continue
            name, sep, status = line.partition(SEPARATOR)
            if not sep:
                malformed += 1
                continue
            skip.add(name)
            if source is not None:
                source.discard(name)
            kind = classify_status(status)
            if kind is None:
                logger.debug("Unrecognized status for %s: %r", name, status)
                continue
            counters.add(kind)

        if malformed:
            logger.warning("Ignored %d malformed line(s) in %s", malformed, self.path)
        # an interrupted write may have left a partial last line
        self._needs_newline = bool(data) and not data.endswith(b"\n")
        logger.info("Replayed %d recorded name(s) from %s", len(skip), self.path)
        return skip, counters

    def append(self, name: str, outcome: Outcome) -> None:
        """Write one decision and make it durable before returning."""
        f = self._require_open()
        # one record per line, whatever the transport error text holds
        status = outcome.render().replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
        line = f"{name}{SEPARATOR}{status}\n"
        if self._needs_newline:
            line = "\n" + line
        try:
            f.write(line.encode("utf-8"))
            f.flush()
            os.fsync(f.fileno())
        except OSError as e:
            raise LedgerError(self.path, f"failed to write record: {e}") from e
        self._needs_newline = False
