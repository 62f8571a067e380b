"""Shared fixtures for the feedback board test-suite."""

from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from feedback_board.exceptions import FetchError
from feedback_board.models.record import Comment, ReactionKind, Record


def make_record(
    number: int,
    body: Optional[str] = None,
    labels: Sequence[str] = ("bug",),
    created_at: str = "2024-01-01T00:00:00Z",
    title: Optional[str] = None,
    **extra: Any,
) -> Record:
    """Build a record the way the tracker would return it."""
    payload = {
        "id": 1000 + number,
        "number": number,
        "title": title or f"Record {number}",
        "body": body,
        "state": "open",
        "labels": [{"name": name, "color": "ededed"} for name in labels],
        "created_at": created_at,
        "updated_at": created_at,
        "user": {"login": "reporter", "id": 7},
    }
    payload.update(extra)
    return Record.model_validate(payload)


class FakeTracker:
    """In-memory IssueTracker that records every call it receives."""

    def __init__(self, records: Sequence[Record] = ()):
        self.records: Dict[int, Record] = {record.number: record for record in records}
        self.comments: Dict[int, List[Comment]] = {}
        self.reactions: List[tuple] = []
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.after_get: Optional[Callable[[int], None]] = None
        self.next_number = 100
        self.closed = False

    def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def list_issues(self, labels: Optional[Sequence[str]] = None) -> List[Record]:
        self._call("list_issues", labels)
        records = sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)
        if labels:
            records = [r for r in records if all(label in r.label_names for label in labels)]
        return records

    async def create_issue(self, title: str, body: str, labels: Sequence[str]) -> Record:
        self._call("create_issue", title, body, list(labels))
        number = self.next_number
        self.next_number += 1
        record = make_record(number, body=body, labels=labels, title=title, created_at="2024-06-01T00:00:00Z")
        self.records[number] = record
        return record

    async def get_issue(self, number: int) -> Record:
        self._call("get_issue", number)
        if number not in self.records:
            raise FetchError("HTTP 404: Not Found", 404)
        record = self.records[number]
        if self.after_get is not None:
            self.after_get(number)
        return record

    async def update_issue_body(self, number: int, body: str) -> None:
        self._call("update_issue_body", number, body)
        self.records[number] = self.records[number].model_copy(update={"body": body})

    async def list_comments(self, number: int) -> List[Comment]:
        self._call("list_comments", number)
        return list(self.comments.get(number, []))

    async def add_comment(self, number: int, body: str) -> Comment:
        self._call("add_comment", number, body)
        comment = Comment.model_validate({
            "id": len(self.calls),
            "body": body,
            "user": {"login": "reporter", "id": 7},
            "created_at": "2024-06-02T00:00:00Z",
            "updated_at": "2024-06-02T00:00:00Z",
        })
        self.comments.setdefault(number, []).append(comment)
        return comment

    async def add_reaction(self, number: int, kind: ReactionKind = ReactionKind.PLUS_ONE) -> None:
        self._call("add_reaction", number, kind)
        self.reactions.append((number, kind))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def tracker() -> FakeTracker:
    """Empty fake tracker."""
    return FakeTracker()


@pytest.fixture
def record_factory() -> Callable[..., Record]:
    """Factory for tracker-shaped records."""
    return make_record
