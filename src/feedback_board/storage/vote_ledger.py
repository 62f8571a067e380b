"""
Per-device ledger of record numbers this device has voted for.

The ledger is a client-side guard only. The remote vote count stays
authoritative; the ledger just stops this device from sending a second
increment. Entries never expire, and removing one never decrements the
remote counter.
"""

import threading
from typing import Optional, Set

from loguru import logger

from ..exceptions import InvalidRequest
from .ledger_storage import LedgerStorage


def _validate_number(record_number: int) -> int:
    if isinstance(record_number, bool) or not isinstance(record_number, int) or record_number < 0:
        raise InvalidRequest(f"Invalid record number: {record_number!r}")
    return record_number


class VoteLedger:
    """Durable set of voted record numbers with serialized access."""

    def __init__(self, storage: LedgerStorage):
        """
        Initialize the ledger.

        Args:
            storage: Backend the set is loaded from and written to
        """
        self.storage = storage
        self._lock = threading.RLock()
        self._voted: Optional[Set[int]] = None

    def _entries(self) -> Set[int]:
        # Caller holds the lock
        if self._voted is None:
            self._voted = self.storage.load()
        return self._voted

    def _persist(self) -> None:
        try:
            self.storage.save(set(self._entries()))
        except OSError as e:
            # Membership stays in memory so this process still refuses duplicates
            logger.error(f"Failed to persist vote ledger: {e}")

    def has_voted(self, record_number: int) -> bool:
        _validate_number(record_number)
        with self._lock:
            return record_number in self._entries()

    def record_vote(self, record_number: int) -> None:
        """Add a record number; recording it twice leaves the set unchanged."""
        _validate_number(record_number)
        with self._lock:
            entries = self._entries()
            if record_number in entries:
                return
            entries.add(record_number)
            self._persist()
        logger.info(f"Recorded vote for #{record_number} in ledger")

    def discard(self, record_number: int) -> None:
        """Forget a single vote locally. The remote count is not touched."""
        _validate_number(record_number)
        with self._lock:
            entries = self._entries()
            if record_number not in entries:
                return
            entries.discard(record_number)
            self._persist()
        logger.info(f"Removed #{record_number} from vote ledger")

    def clear(self) -> None:
        with self._lock:
            self._voted = set()
            self._persist()
        logger.info("Cleared vote ledger")

    def list_voted(self) -> Set[int]:
        with self._lock:
            return set(self._entries())
