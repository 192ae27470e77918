"""
HTML content extraction utilities.
"""

from __future__ import annotations

import re
from typing import List, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from boardscout.models import normalize_text

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
NON_CONTENT_TAGS = ["script", "style", "noscript", "iframe", "svg", "canvas"]


def make_soup(html: str) -> BeautifulSoup:
    """Parse an HTML document with lxml."""
    return BeautifulSoup(html or "", "lxml")


def strip_html(html: str, max_len: int = 8000) -> str:
    """
    Convert HTML to plain text, stripping tags.
    """
    if not html:
        return ""

    soup = make_soup(html)
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    return normalize_text(soup.get_text(" ", strip=True))[:max_len]


def inner_html(element: Tag) -> str:
    """Serialized children of an element, without the element itself."""
    return "".join(str(child) for child in element.contents).strip()


def extract_text_structured(
    source: Union[str, Tag],
    max_len: int = 20000,
    include_root: bool = False,
) -> str:
    """
    Extract text from HTML while preserving headings, list items and
    paragraph breaks.

    With include_root, a Tag source is rendered as an element itself
    (a lone <p> or <li>) rather than as a container of children.
    """
    if not source:
        return ""

    root = make_soup(source) if isinstance(source, str) else source
    lines: List[str] = []

    def process_element(element) -> None:
        if isinstance(element, NavigableString):
            text = normalize_text(str(element))
            if text:
                lines.append(text)
            return

        tag_name = getattr(element, "name", None)
        if tag_name is None or tag_name in NON_CONTENT_TAGS:
            return

        if tag_name in HEADING_TAGS:
            text = normalize_text(element.get_text(" "))
            if text:
                lines.append("")
                lines.append(text)
            return

        if tag_name == "li":
            text = normalize_text(element.get_text(" "))
            if text:
                lines.append(f"• {text}")
            return

        if tag_name == "br":
            lines.append("")
            return

        if tag_name == "p":
            text = normalize_text(element.get_text(" "))
            if text:
                lines.append(text)
                lines.append("")
            return

        if tag_name in ("html", "body", "div", "section", "article", "ul", "ol"):
            lines.append("")
            for child in element.children:
                process_element(child)
            lines.append("")
            return

        # Inline elements: keep their text on its own line
        text = normalize_text(element.get_text(" "))
        if text:
            lines.append(text)

    if include_root and isinstance(root, Tag) and not isinstance(root, BeautifulSoup):
        process_element(root)
    else:
        for child in root.children:
            process_element(child)

    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    return text.strip()[:max_len]
