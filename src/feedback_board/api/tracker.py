"""Defines the IssueTracker protocol the record store talks to."""

from typing import List, Optional, Protocol, Sequence

from ..models.record import Comment, ReactionKind, Record


class IssueTracker(Protocol):
    """
    A protocol that defines the remote operations the board relies on.

    Implementations treat 2xx responses as success and raise the matching
    ``TrackerError`` subclass for everything else.
    """

    async def list_issues(self, labels: Optional[Sequence[str]] = None) -> List[Record]:
        """List open issues, newest first, optionally filtered by labels."""
        ...

    async def create_issue(self, title: str, body: str, labels: Sequence[str]) -> Record:
        """Create an issue and return it as stored by the tracker."""
        ...

    async def get_issue(self, number: int) -> Record:
        """Fetch a single issue by number."""
        ...

    async def update_issue_body(self, number: int, body: str) -> None:
        """Replace the body of an issue."""
        ...

    async def list_comments(self, number: int) -> List[Comment]:
        """List the comments on an issue."""
        ...

    async def add_comment(self, number: int, body: str) -> Comment:
        """Add a comment to an issue."""
        ...

    async def add_reaction(self, number: int, kind: ReactionKind) -> None:
        """Add a reaction to an issue."""
        ...
