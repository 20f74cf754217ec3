# ============================================================
# PAGE FETCH: one GET per website, None on any failure
# ============================================================
import os
from typing import Dict, Optional
from urllib.parse import quote

import requests

from .http_pool import get_session
from .logging_utils import setup_logger

logger = setup_logger(__name__)

FETCH_TIMEOUT = float(os.getenv("LEAD_FETCH_TIMEOUT", "12"))
# e.g. https://api.allorigins.win/raw?url= ; empty means fetch the site directly
FETCH_PROXY_URL = os.getenv("LEAD_FETCH_PROXY_URL", "").strip()
USER_AGENT = os.getenv("LEAD_USER_AGENT", "Mozilla/5.0")


def build_request_url(url: str, proxy_url: str = FETCH_PROXY_URL) -> str:
    if not proxy_url:
        return url
    return f"{proxy_url}{quote(url, safe='')}"


def _headers(proxied: bool) -> Dict[str, str]:
    headers = {"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml"}
    if proxied:
        headers["X-Requested-With"] = "XMLHttpRequest"
    return headers


def fetch_page_content(
    url: str,
    *,
    timeout: float = FETCH_TIMEOUT,
    proxy_url: str = FETCH_PROXY_URL,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """
    Fetch the raw HTML of `url`.

    Single attempt, no retries. Network errors, timeouts and non-2xx
    responses are logged and reported as None; this never raises for
    ordinary fetch failures.

    Args:
        url: Absolute http(s) URL
        timeout: Seconds before giving up
        proxy_url: Optional proxy prefix the percent-encoded URL is appended to
        session: requests session (defaults to the shared pool)

    Returns:
        Page body text, or None
    """
    s = session or get_session()
    target = build_request_url(url, proxy_url)
    try:
        r = s.get(target, headers=_headers(bool(proxy_url)), timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.warning(f"FETCH: error url={url} err={repr(e)}")
        return None

    if not r.ok:
        logger.warning(f"FETCH: status={r.status_code} reason={r.reason} url={url}")
        return None

    logger.debug(f"FETCH: status={r.status_code} bytes={len(r.content or b'')} url={url}")
    return r.text or None
