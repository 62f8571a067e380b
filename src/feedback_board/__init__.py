"""
Feedback Board - anonymous bug and feature feedback on top of an issue tracker.

Each feedback item is stored as a tracker issue whose body carries the
description, device metadata, contact details and an embedded vote counter.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
