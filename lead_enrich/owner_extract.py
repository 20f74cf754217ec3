"""
Owner name + title detection in rendered page text

Looks for "Jane Doe, Founder" / "John Michael Smith · Owner" shaped text:
a run of capitalized words right before a leadership title.
"""

import re
from dataclasses import dataclass
from typing import Tuple

from .logging_utils import setup_logger

logger = setup_logger(__name__)

# Vocabulary order only matters for the alternation; the first match in the text wins
TITLE_KEYWORDS = ["Owner", "Founder", "CEO", "President", "Principal", "Director", "Manager"]

_CANONICAL_TITLE = {t.lower(): t for t in TITLE_KEYWORDS}

# Name tokens are case-sensitive, the title is not
NAME_TITLE_RE = re.compile(
    r"([A-Z][a-z'-]+(?:\s+[A-Z][a-z'-]+)+)"
    r"[\s,·-]*"
    r"\b(?i:(" + "|".join(TITLE_KEYWORDS) + r"))\b"
)


@dataclass(frozen=True)
class OwnerIdentity:
    title: str = ""
    first_name: str = ""
    last_name: str = ""

    def found(self) -> bool:
        return bool(self.first_name)


def split_name(full_name: str) -> Tuple[str, str]:
    """
    Split a full name into (first, last).

    Everything after the first token is the last name:
        "John Michael Smith" -> ("John", "Michael Smith")
    """
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def extract_owner(body_text: str) -> OwnerIdentity:
    """
    Find the first "<Capitalized Name> <title>" occurrence in the text.

    Args:
        body_text: Rendered page text

    Returns:
        OwnerIdentity; all fields empty when nothing matched
    """
    if not body_text:
        return OwnerIdentity()

    m = NAME_TITLE_RE.search(body_text)
    if not m:
        return OwnerIdentity()

    first, last = split_name(m.group(1))
    title = _CANONICAL_TITLE[m.group(2).lower()]
    logger.debug(f"OWNER: matched name={m.group(1)!r} title={title}")
    return OwnerIdentity(title=title, first_name=first, last_name=last)
