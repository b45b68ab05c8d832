"""Extraction of @id mention tokens from note content."""

import re
from typing import List, Tuple

from ..constants import NOTE_ID_LENGTH

# "@" + exactly NOTE_ID_LENGTH alphanumerics, not glued to a longer alphanumeric run
MENTION_PATTERN = re.compile(
    rf"(?<![A-Za-z0-9])@([A-Za-z0-9]{{{NOTE_ID_LENGTH}}})(?![A-Za-z0-9])"
)


def get_mention_positions(content: str) -> List[Tuple[str, int]]:
    """All (note_id, position) pairs in encounter order.

    The position is the zero-based offset of the "@" character. Repeated
    mentions of the same id are all reported.
    """
    if not content or "@" not in content:
        return []
    return [(match.group(1), match.start()) for match in MENTION_PATTERN.finditer(content)]


def extract_mentions(content: str) -> List[str]:
    """Unique mentioned note ids, in order of first appearance."""
    return list(dict.fromkeys(note_id for note_id, _ in get_mention_positions(content)))
