# ============================================================
# EMAIL CANDIDATES: scan page source for addresses, pick one
# ============================================================
import re
from typing import Iterable, List

# RFC 5322 approximation (dot-atom or quoted local part, hostname or IP literal)
EMAIL_RE = re.compile(
    r"(?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"|\"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*\")"
    r"@"
    r"(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9]"
    r"|[a-z0-9-]*[a-z0-9]:(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])",
    re.IGNORECASE,
)

# Retina/asset filenames like "logo@2x.png" look like addresses
_ASSET_SUFFIX_RE = re.compile(r"\.(png|jpg|jpeg|gif|svg|webp)$", re.IGNORECASE)

# Role accounts are the most likely to be read by the owner of a small business
_ROLE_PREFIX_RE = re.compile(r"^(info|contact|hello|support|admin)", re.IGNORECASE)


def is_asset_filename(candidate: str) -> bool:
    return bool(_ASSET_SUFFIX_RE.search(candidate))


def extract_emails(text: str) -> List[str]:
    """
    Find every email address in `text`.

    Meant to run on raw page source so mailto: links are seen too.
    Duplicates are removed case-sensitively, keeping first-seen order.

    Args:
        text: Any text (HTML source, rendered text...)

    Returns:
        Unique addresses in order of first occurrence
    """
    if not text:
        return []
    found = (m.group(0) for m in EMAIL_RE.finditer(text))
    return list(dict.fromkeys(e for e in found if not is_asset_filename(e)))


def pick_best_email(candidates: Iterable[str]) -> str:
    """
    Prefer the first role account (info@, contact@, ...), then the
    first address seen. Empty string when there is nothing to pick.
    """
    candidates = list(candidates)
    for email in candidates:
        if _ROLE_PREFIX_RE.match(email):
            return email
    return candidates[0] if candidates else ""
