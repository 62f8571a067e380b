"""Issue tracker API integration."""

from .client import TrackerClient
from .tracker import IssueTracker

__all__ = ["IssueTracker", "TrackerClient"]
