"""
Exception hierarchy for the feedback board.

Remote failures derive from ``TrackerError`` and carry the HTTP status code
when one was received. ``AlreadyVoted`` is a client-side guard and is kept
outside that branch so callers can tell it apart from transport problems.
"""

from typing import Optional


class FeedbackError(Exception):
    """Base class for all feedback board errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidRequest(FeedbackError):
    """Raised when a request target is malformed and nothing was sent."""


class AlreadyVoted(FeedbackError):
    """Raised when this device has already voted for a record."""

    def __init__(self, record_number: int):
        self.record_number = record_number
        super().__init__(f"You've already voted for #{record_number}")


class TrackerError(FeedbackError):
    """Custom exception for issue tracker API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class FetchError(TrackerError):
    """Listing or fetching records failed."""


class CreateError(TrackerError):
    """Creating a record or comment failed."""


class UpdateError(TrackerError):
    """Updating a record body or adding a reaction failed."""


class UpdateConflict(UpdateError):
    """The record body changed between the snapshot and the write."""
