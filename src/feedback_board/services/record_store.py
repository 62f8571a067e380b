"""
Remote-backed record store.

This module owns the cached list of feedback records and the vote
read-modify-write sequence. The cache lives in a ``StoreState`` value that is
replaced wholesale on every change and pushed to subscribers.

The upvote sequence is not atomic. The tracker has no compare-and-swap over
issue bodies, so two devices voting on the same record at the same moment can
both read count N and both write N + 1, losing one vote. This is a known
consistency gap; the store only guarantees that a failed write changes
nothing locally.
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from ..api.tracker import IssueTracker
from ..core.vote_codec import compose_body, parse_vote_count, rewrite_vote_count
from ..exceptions import InvalidRequest, UpdateConflict
from ..models.record import (
    BUG_LABEL,
    FEATURE_REQUEST_LABEL,
    USER_SUBMITTED_LABEL,
    Category,
    Comment,
    ReactionKind,
    Record,
    RecordFilter,
)

_SERVER_LABELS = {
    RecordFilter.ALL: None,
    RecordFilter.BUGS: [BUG_LABEL],
    RecordFilter.FEATURES: [FEATURE_REQUEST_LABEL],
}


@dataclass(frozen=True)
class StoreState:
    """Snapshot of the store as seen by the presentation layer."""
    records: Tuple[Record, ...] = ()
    is_loading: bool = False
    error_message: Optional[str] = None


StateListener = Callable[[StoreState], None]


def _matches(record: Record, record_filter: RecordFilter) -> bool:
    if record_filter is RecordFilter.BUGS:
        return record.is_bug
    if record_filter is RecordFilter.FEATURES:
        return record.is_feature_request
    return record.is_bug or record.is_feature_request


def sort_records(records: Sequence[Record]) -> List[Record]:
    """
    Order records by vote count, highest first, then newest first.

    ISO-8601 timestamps from the tracker are fixed width, so comparing them
    as strings orders them chronologically.
    """
    return sorted(records, key=lambda record: (record.vote_count, record.created_at), reverse=True)


class RecordStore:
    """
    Cache of feedback records backed by the issue tracker.

    Args:
        tracker: Remote issue tracker
        verify_before_write: Re-fetch a record right before writing a vote and
            raise ``UpdateConflict`` if its body changed since the snapshot.
            This narrows the lost-update window but cannot close it.
    """

    def __init__(self, tracker: IssueTracker, verify_before_write: bool = False):
        self.tracker = tracker
        self.verify_before_write = verify_before_write
        self._state = StoreState()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._state.records

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a callback invoked with every new state.

        Returns:
            A function that removes the callback again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: StoreState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}")

    async def list_records(self, record_filter: RecordFilter = RecordFilter.ALL) -> List[Record]:
        """
        Fetch open records and replace the cache with them.

        Args:
            record_filter: all, bugs or features

        Returns:
            List[Record]: Matching records sorted by votes, then creation date

        Raises:
            FetchError: If the tracker cannot be reached. On this or any other
                failure the previous records are kept, loading ends and the
                error message is published.
        """
        try:
            record_filter = RecordFilter(record_filter)
        except ValueError as e:
            raise InvalidRequest(f"Unknown filter: {record_filter!r}") from e
        self._publish(replace(self._state, is_loading=True, error_message=None))

        try:
            fetched = await self.tracker.list_issues(_SERVER_LABELS[record_filter])
            records = sort_records([record for record in fetched if _matches(record, record_filter)])
        except Exception as e:
            logger.error(f"Error loading records: {e}")
            self._publish(replace(self._state, is_loading=False, error_message=str(e)))
            raise

        skipped = len(fetched) - len(records)
        if skipped:
            logger.debug(f"Dropped {skipped} record(s) outside the {record_filter.value} filter")

        self._publish(StoreState(records=tuple(records), is_loading=False, error_message=None))
        logger.info(f"Loaded {len(records)} records ({record_filter.value})")
        return records

    async def create_record(
        self,
        title: str,
        description: str,
        category: Category,
        device_info: str,
        contact_email: Optional[str] = None,
    ) -> int:
        """
        Submit a new record and prepend it to the cache.

        Returns:
            int: Number assigned by the tracker

        Raises:
            InvalidRequest: If the title is blank
            CreateError: If the tracker rejects the record
        """
        if not title or not title.strip():
            raise InvalidRequest("Title must not be empty")
        try:
            category = Category(category)
        except ValueError as e:
            raise InvalidRequest(f"Unknown category: {category!r}") from e

        body = compose_body(description, device_info, contact_email)
        labels = [category.value, USER_SUBMITTED_LABEL]
        record = await self.tracker.create_issue(title.strip(), body, labels)

        self._publish(replace(self._state, records=(record,) + self._state.records))
        logger.info(f"Created {category.value} record #{record.number}")
        return record.number

    async def upvote(self, record_number: int) -> int:
        """
        Increment the vote counter embedded in a record body.

        Fetches the current record, parses its count, rewrites the body with
        count + 1 and pushes the full body back. Not atomic across clients.

        Returns:
            int: The vote count that was written

        Raises:
            FetchError: If the record cannot be retrieved
            UpdateError: If the updated body cannot be written
        """
        snapshot = await self.tracker.get_issue(record_number)
        current = parse_vote_count(snapshot.body)
        new_count = current + 1
        updated_body = rewrite_vote_count(snapshot.body, new_count)

        if self.verify_before_write:
            latest = await self.tracker.get_issue(record_number)
            if latest.body != snapshot.body:
                raise UpdateConflict(f"Record #{record_number} changed while voting, try again")

        await self.tracker.update_issue_body(record_number, updated_body)
        logger.info(f"Record #{record_number} votes {current} -> {new_count}")
        return new_count

    async def get_record(self, record_number: int) -> Record:
        return await self.tracker.get_issue(record_number)

    async def list_comments(self, record_number: int) -> List[Comment]:
        return await self.tracker.list_comments(record_number)

    async def add_comment(self, record_number: int, body: str) -> Comment:
        return await self.tracker.add_comment(record_number, body)

    async def add_reaction(self, record_number: int, kind: ReactionKind = ReactionKind.PLUS_ONE) -> None:
        await self.tracker.add_reaction(record_number, kind)
