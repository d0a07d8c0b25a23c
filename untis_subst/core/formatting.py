# untis_subst/core/formatting.py
import html
import logging
import re
from functools import lru_cache
from typing import List

from bs4 import NavigableString, Tag

from .constants import EMPTY_CELL_PLACEHOLDER, NBSP

log = logging.getLogger(__name__)

_RE_WHITESPACE = re.compile(r"\s+")
# Tags that separate words when the table markup is rendered
_BREAKING_TAGS = {"br", "p", "div", "li", "tr", "td", "th"}


@lru_cache(maxsize=1024)
def normalize_text(text: str) -> str:
    """
    Collapses whitespace (including non-breaking spaces) and strips the result.

    Args:
        text: Raw text taken from the HTML.

    Returns:
        The normalized text, "" for None or whitespace-only input.
    """
    if not text:
        return ""
    return _RE_WHITESPACE.sub(" ", text.replace(NBSP, " ")).strip()


def is_empty_cell(text: str) -> bool:
    """True for cells that are blank or contain only the "---" placeholder."""
    normalized = normalize_text(text)
    return normalized == "" or normalized == EMPTY_CELL_PLACEHOLDER


def _is_text_node(node) -> bool:
    # Comments, CDATA and doctypes are NavigableStrings as well
    return isinstance(node, NavigableString) and type(node) is NavigableString


def element_text(element: Tag) -> str:
    """
    Returns the visible text of an element as a single normalized line.

    Line breaks and block elements are rendered as a space so that
    "<td>5a<br>5b</td>" reads "5a 5b" rather than "5a5b".
    """
    parts: List[str] = []
    for node in element.descendants:
        if isinstance(node, Tag):
            if node.name in _BREAKING_TAGS:
                parts.append(" ")
        elif _is_text_node(node):
            parts.append(str(node))
    return normalize_text("".join(parts))


def own_text(element: Tag) -> str:
    """Returns only the element's direct text, ignoring text inside child elements."""
    parts: List[str] = []
    for node in element.children:
        if isinstance(node, Tag):
            if node.name == "br":
                parts.append(" ")
        elif _is_text_node(node):
            parts.append(str(node))
    return normalize_text("".join(parts))


def inner_html_text(element: Tag) -> str:
    """Returns the element's inner HTML with entities decoded, markup left as is."""
    return html.unescape(element.decode_contents())
