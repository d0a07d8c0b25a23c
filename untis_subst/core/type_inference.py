# untis_subst/core/type_inference.py
import logging
from typing import Optional

from bs4 import Tag

from .constants import (CANCELLATION_FLAG, CANCELLATION_KEYWORDS, FREE_KEYWORD,
                        MOVED_KEYWORD, ROOM_CHANGED_KEYWORD, TASKS_KEYWORD,
                        TYPE_CANCELLATION, TYPE_MOVED, TYPE_ROOM_CHANGE,
                        TYPE_SUBSTITUTION, TYPE_TASKS, VERBATIM_TYPES)

log = logging.getLogger(__name__)

# Rows struck through as a whole mark a lesson that no longer takes place
CANCELLATION_MARKUP_TAG = "strike"


def recognize_type(text: Optional[str]) -> Optional[str]:
    """
    Classifies a free-text description into a record type.

    Args:
        text: The description, e.g. "fällt aus" or "Raumänderung".

    Returns:
        The recognized type, or None if no keyword matches.
    """
    if not text:
        return None
    if any(keyword in text for keyword in CANCELLATION_KEYWORDS):
        return TYPE_CANCELLATION
    elif text in VERBATIM_TYPES:
        return text
    elif MOVED_KEYWORD in text:
        return TYPE_MOVED
    elif ROOM_CHANGED_KEYWORD in text:
        return TYPE_ROOM_CHANGE
    elif FREE_KEYWORD in text:
        return TYPE_CANCELLATION
    elif TASKS_KEYWORD in text:
        return TYPE_TASKS
    return None


def flag_type(text: str) -> str:
    """Type of a "type-entfall" cell: the flag character means cancellation."""
    return TYPE_CANCELLATION if text == CANCELLATION_FLAG else TYPE_SUBSTITUTION


def equals_or_null(a: Optional[str], b: Optional[str]) -> bool:
    return a is None or b is None or a == b


def infer_type(row: Tag, substitution) -> str:
    """
    Infers the type of a record whose table has no type column.

    A struck-through row whose subject and teacher did not change is a
    cancellation, as is a row that only names the previous subject. Anything
    else is a plain substitution.
    """
    struck_row = row.find(CANCELLATION_MARKUP_TAG) is not None
    if struck_row and equals_or_null(substitution.subject, substitution.previous_subject) \
            and equals_or_null(substitution.teacher, substitution.previous_teacher):
        return TYPE_CANCELLATION
    if substitution.subject is None and substitution.room is None and substitution.teacher is None \
            and substitution.previous_subject is not None:
        return TYPE_CANCELLATION
    return TYPE_SUBSTITUTION
