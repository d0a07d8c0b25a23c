# untis_subst/core/strikethrough.py
import logging
import re
from typing import Optional, Tuple

from bs4 import Tag

from .constants import MOVED_GLYPH
from .formatting import element_text, normalize_text, own_text

log = logging.getLogger(__name__)

# Untis marks the superseded value of a changed cell with <s>
STRUCK_TAG = "s"
_RE_LEADING_QUESTION_MARK = re.compile(r"^\?")


def split_strikethrough(cell: Tag) -> Tuple[Optional[str], Optional[str]]:
    """
    Splits a cell that encodes an old and a new value.

    "<td><s>M</s>→Ph</td>" yields ("M", "Ph"). Cells without struck-through
    markup yield (None, <cell text>).

    Args:
        cell: The table cell.

    Returns:
        A tuple (previous, current); either may be None.
    """
    struck = cell.find_all(STRUCK_TAG)
    if not struck:
        return None, element_text(cell) or None

    previous = normalize_text(" ".join(element_text(tag) for tag in struck)) or None
    current = None
    remaining = own_text(cell)
    if remaining:
        remaining = _RE_LEADING_QUESTION_MARK.sub("", remaining, count=1)
        current = normalize_text(remaining.replace(MOVED_GLYPH, "", 1)) or None
    return previous, current


def apply_strikethrough(cell: Tag, substitution, current_field: str, previous_field: str) -> None:
    """
    Writes the split values of ``cell`` onto a record.

    Used for the subject, room and teacher columns, which differ only in the
    pair of record fields they write.
    """
    previous, current = split_strikethrough(cell)
    if previous is not None:
        setattr(substitution, previous_field, previous)
        if current is not None:
            setattr(substitution, current_field, current)
    else:
        setattr(substitution, current_field, current)
