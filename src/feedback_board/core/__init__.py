"""Pure text transforms over record bodies."""

from .vote_codec import compose_body, parse_vote_count, rewrite_vote_count, strip_sections

__all__ = ["compose_body", "parse_vote_count", "rewrite_vote_count", "strip_sections"]
