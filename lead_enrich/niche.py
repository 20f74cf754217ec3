"""
Business niche from page title + body text
"""
import re
from typing import List, Pattern, Tuple

# Priority order, not alphabetical: the first keyword present wins
NICHE_KEYWORDS = [
    "Roofer",
    "Chiropractor",
    "Plumber",
    "Electrician",
    "Massage",
    "Therapist",
    "Contractor",
    "Landscaping",
    "Cleaning",
    "Consulting",
]

_NICHE_PATTERNS: List[Tuple[str, Pattern]] = [
    (kw, re.compile(rf"\b{re.escape(kw)}\b", re.IGNORECASE)) for kw in NICHE_KEYWORDS
]


def classify_niche(title: str, body_text: str) -> str:
    """Return the highest-priority niche keyword found in the title or body, or ""."""
    title = title or ""
    body_text = body_text or ""
    for keyword, pattern in _NICHE_PATTERNS:
        if pattern.search(title) or pattern.search(body_text):
            return keyword
    return ""
