"""Data models for tracker records."""

from .record import (
    Category,
    Comment,
    Label,
    Reactions,
    ReactionKind,
    Record,
    RecordFilter,
    User,
)

__all__ = [
    "Category",
    "Comment",
    "Label",
    "Reactions",
    "ReactionKind",
    "Record",
    "RecordFilter",
    "User",
]
