"""
Feedback orchestration.

Combines the record store with the local vote ledger: submissions go straight
to the store, votes are guarded by the ledger so a device votes at most once
per record.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Set, Tuple

from loguru import logger

from ..exceptions import AlreadyVoted
from ..models.record import Category
from ..storage.vote_ledger import VoteLedger
from .record_store import RecordStore


class FeedbackService:
    """
    Entry point for submitting feedback and casting votes.

    Votes for the same record from this process are serialized, so two
    overlapping ``cast_vote`` calls cannot both pass the ledger check.
    """

    def __init__(self, store: RecordStore, ledger: VoteLedger):
        """
        Initialize the feedback service.

        Args:
            store: Record store backed by the issue tracker
            ledger: Local ledger of records this device voted for
        """
        self.store = store
        self.ledger = ledger
        # record number -> (lock, number of callers holding or awaiting it)
        self._vote_locks: Dict[int, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _record_lock(self, record_number: int) -> AsyncIterator[None]:
        lock, users = self._vote_locks.get(record_number, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._vote_locks[record_number] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._vote_locks[record_number]
            if users == 1:
                del self._vote_locks[record_number]
            else:
                self._vote_locks[record_number] = (lock, users - 1)

    async def submit_feedback(
        self,
        title: str,
        description: str,
        category: Category,
        device_info: str,
        contact_email: Optional[str] = None,
    ) -> int:
        """
        Submit a new bug report or feature request.

        Returns:
            int: Number of the created record
        """
        return await self.store.create_record(title, description, category, device_info, contact_email)

    async def cast_vote(self, record_number: int) -> int:
        """
        Vote for a record once from this device.

        The ledger entry is written only after the remote update succeeded,
        so a failed vote can be retried.

        Returns:
            int: The vote count written to the record

        Raises:
            AlreadyVoted: If this device already voted; nothing is sent
            FetchError: If the record cannot be retrieved
            UpdateError: If the updated count cannot be written
        """
        async with self._record_lock(record_number):
            if self.ledger.has_voted(record_number):
                logger.info(f"Skipping duplicate vote for #{record_number}")
                raise AlreadyVoted(record_number)

            new_count = await self.store.upvote(record_number)
            self.ledger.record_vote(record_number)
            return new_count

    def has_voted(self, record_number: int) -> bool:
        return self.ledger.has_voted(record_number)

    def voted_records(self) -> Set[int]:
        return self.ledger.list_voted()

    def reset_votes(self, record_number: Optional[int] = None) -> None:
        """Forget local votes. Remote counts are left as they are."""
        if record_number is None:
            self.ledger.clear()
        else:
            self.ledger.discard(record_number)
