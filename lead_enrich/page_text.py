"""
Raw HTML -> visible body text + <title>
"""
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

# Elements whose text never shows up in the rendered page
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


@dataclass(frozen=True)
class PageText:
    body_text: str
    title: str


def _title_tag(soup: BeautifulSoup) -> Optional[Tag]:
    # <title> inside inline <svg> labels an icon, not the document
    if soup.head is not None:
        return soup.head.find("title")
    for tag in soup.find_all("title"):
        if tag.find_parent("svg") is None:
            return tag
    return None


def normalize_page(html: str) -> PageText:
    """
    Parse fetched HTML and render it as plain text.

    Nothing is executed or fetched; html.parser never raises on broken
    markup, so malformed pages still give best-effort text.

    Args:
        html: Raw page source

    Returns:
        PageText with the body text (one text node per line) and the page title
    """
    soup = BeautifulSoup(html or "", "html.parser")

    title_tag = _title_tag(soup)
    title = title_tag.get_text(" ", strip=True) if title_tag is not None else ""

    for tag in soup(_INVISIBLE_TAGS):
        # <style> inside <noscript> is already gone with its parent
        if not tag.decomposed:
            tag.decompose()

    # Fragments without a <body> still carry visible text
    root = soup.body if soup.body is not None else soup
    if root is soup and title_tag is not None:
        title_tag.decompose()

    body_text = root.get_text(separator="\n", strip=True)
    return PageText(body_text=body_text, title=title)
