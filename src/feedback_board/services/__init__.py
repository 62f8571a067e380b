"""
Services module for the feedback board.

This module provides the record store and the feedback orchestration built
on top of it.
"""

from .feedback_service import FeedbackService
from .record_store import RecordStore, StoreState

__all__ = ["FeedbackService", "RecordStore", "StoreState"]
