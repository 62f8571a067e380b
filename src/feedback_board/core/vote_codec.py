"""
Vote counter encoding inside record bodies.

A record body is free text followed by optional sections delimited by fixed
markers::

    <description>

    ---
    **Device Information:**
    <device info>

    **Contact Email:**
    <email or N/A>

    *Submitted via mobile app*

    ---
    👍 Votes: <count>

Every function here is pure and total: malformed bodies degrade to default
values instead of raising, so a damaged record never blocks the read path.
"""

import re
from typing import Optional, Pattern

VOTE_EMOJI = "\U0001F44D"
VOTE_LABEL = f"{VOTE_EMOJI} Votes:"
SECTION_RULE = "\n\n---\n"
DEVICE_INFO_HEADER = "**Device Information:**"
CONTACT_HEADER = "**Contact Email:**"
SUBMITTED_FOOTER = "*Submitted via mobile app*"
CONTACT_FALLBACK = "N/A"

# Counts longer than 18 digits are treated as malformed
_VOTE_PATTERN = re.compile(re.escape(VOTE_LABEL) + r" ([0-9]{1,18})(?![0-9])")
_TRAILING_RULE = re.compile(r"(?:^|\n)-{3}\s*$")

# (separator in front of the marker, marker at the start of a line), in the
# order they are stripped
_STRIP_STEPS = tuple(
    (separator, re.compile(r"(?m)^\s*" + re.escape(marker)))
    for separator, marker in (
        (SECTION_RULE, VOTE_LABEL),
        (SECTION_RULE, DEVICE_INFO_HEADER),
        ("\n\n", CONTACT_HEADER),
        ("\n\n", SUBMITTED_FOOTER),
    )
)


def parse_vote_count(body: Optional[str]) -> int:
    """
    Return the vote count embedded in a record body.

    Args:
        body: Raw record body, possibly ``None``

    Returns:
        int: Value of the first ``👍 Votes: <n>`` line, or 0 when absent
    """
    if not body:
        return 0
    match = _VOTE_PATTERN.search(body)
    if match is None:
        return 0
    return int(match.group(1))


def _cut_at_marker(text: str, separator: str, marker: Pattern[str]) -> Optional[str]:
    match = marker.search(text)
    if match is None:
        return None
    index = match.start()
    # Take the separator along when it directly precedes the marker line
    if text[:index].endswith(separator):
        index -= len(separator)
    return text[:index]


def strip_sections(body: Optional[str]) -> str:
    """
    Remove the vote, device, contact and footer sections from a body.

    Each step cuts at the first line that starts with its marker (together
    with the separator in front of it) and works on the output of the
    previous step, so duplicated or reordered sections are still removed.
    Markers quoted inside a line of the description are left alone.

    Args:
        body: Raw record body, possibly ``None``

    Returns:
        str: The user-written description, trimmed
    """
    text = body or ""
    cut = False
    for separator, marker in _STRIP_STEPS:
        remainder = _cut_at_marker(text, separator, marker)
        if remainder is not None:
            text = remainder
            cut = True
    text = text.strip()
    if cut:
        text = _TRAILING_RULE.sub("", text).strip()
    return text


def rewrite_vote_count(body: Optional[str], new_count: int) -> str:
    """
    Set the vote count embedded in a body.

    Existing vote lines are rewritten in place; a body without one gets a
    fresh vote section appended.

    Args:
        body: Raw record body, possibly ``None``
        new_count: Non-negative vote count to store

    Returns:
        str: Updated body

    Raises:
        ValueError: If new_count is negative
    """
    if new_count < 0:
        raise ValueError(f"Vote count must be non-negative, got {new_count}")
    vote_line = f"{VOTE_LABEL} {new_count}"
    text = body or ""
    if _VOTE_PATTERN.search(text):
        return _VOTE_PATTERN.sub(vote_line, text)
    return text + SECTION_RULE + vote_line


def compose_body(
    description: str,
    device_info: str,
    contact_email: Optional[str] = None,
) -> str:
    """
    Build the body of a newly submitted record.

    Args:
        description: User-written description
        device_info: Pre-formatted device information block
        contact_email: Optional contact address, ``N/A`` when missing

    Returns:
        str: Body with device, contact, footer and a zeroed vote section
    """
    contact = (contact_email or "").strip() or CONTACT_FALLBACK
    return (
        f"{description}"
        f"{SECTION_RULE}{DEVICE_INFO_HEADER}\n{device_info}"
        f"\n\n{CONTACT_HEADER}\n{contact}"
        f"\n\n{SUBMITTED_FOOTER}"
        f"{SECTION_RULE}{VOTE_LABEL} 0"
    )
