"""
Owner-contact enrichment for a single business row

enrich() is the only entry point the batch layer needs. Expected failures
(bad URL, site unreachable) come back as an EnrichmentResult with an
`uncertainty` reason instead of an exception. No state is kept between
calls, so it is safe to run from many threads at once.
"""
from typing import Any, Callable, Mapping, Optional, Union

from .email_extract import extract_emails, pick_best_email
from .fetch import fetch_page_content
from .logging_utils import setup_logger
from .models import BusinessRecord, EnrichmentResult, WEBSITE_FIELDS, is_blank
from .niche import classify_niche
from .owner_extract import extract_owner
from .page_text import normalize_page

logger = setup_logger(__name__)

INVALID_URL = "Invalid website URL"
FETCH_FAILED = "Failed to fetch website"

Fetcher = Callable[[str], Optional[str]]


def resolve_website(record: Union[BusinessRecord, Mapping[str, Any]]) -> Optional[str]:
    """
    Website column value if it is an absolute http(s) URL, else None.
    Accepts both "website" and "Website"; a blank or NaN cell falls
    through to the other spelling.
    """
    if isinstance(record, BusinessRecord):
        website = record.website
    else:
        website = next((record.get(k) for k in WEBSITE_FIELDS if not is_blank(record.get(k))), None)

    if not isinstance(website, str):
        return None
    if not (website.startswith("http://") or website.startswith("https://")):
        return None
    return website


def enrich(
    record: Union[BusinessRecord, Mapping[str, Any]],
    fetcher: Fetcher = fetch_page_content,
) -> EnrichmentResult:
    """
    Find owner name/title, a contact email and the niche for one business.

    Args:
        record: BusinessRecord or plain row mapping with a website column
        fetcher: url -> raw HTML or None

    Returns:
        EnrichmentResult (never None)
    """
    website = resolve_website(record)
    if website is None:
        logger.warning(f"Skipping row with missing or invalid website URL: {_describe(record)}")
        return EnrichmentResult.empty(INVALID_URL)

    try:
        html = fetcher(website)
    except Exception as e:
        # fetchers should return None instead of raising; treat it the same way
        logger.warning(f"Fetcher raised for {website}: {repr(e)}")
        html = None
    if not html:
        return EnrichmentResult.empty(FETCH_FAILED)

    page = normalize_page(html)

    # 1. Owner name + title
    owner = extract_owner(page.body_text)

    # 2. Best email, from the raw source so mailto: links count
    owner_email = pick_best_email(extract_emails(html))

    # 3. Niche
    niche = classify_niche(page.title, page.body_text)

    return EnrichmentResult(
        owner_title=owner.title,
        owner_first_name=owner.first_name,
        owner_last_name=owner.last_name,
        owner_email=owner_email,
        niche=niche,
        uncertainty="",
    )


def _describe(record: Union[BusinessRecord, Mapping[str, Any]]) -> str:
    if isinstance(record, BusinessRecord):
        return f"id={record.id} fields={record.fields}"
    return str(dict(record))
