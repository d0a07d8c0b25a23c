# untis_subst/core/continuation.py
import logging
from typing import List, Optional, Tuple

from bs4 import Tag

from .formatting import element_text

log = logging.getLogger(__name__)


def row_cells(row: Tag) -> List[Tag]:
    """Returns the physical cells (direct <td>/<th> children) of a table row."""
    return row.find_all(["td", "th"], recursive=False)


def next_row(row: Tag) -> Optional[Tag]:
    """Returns the following <tr> sibling, or None at the end of the table section."""
    return row.find_next_sibling("tr")


def is_continuation(row: Tag, column_index: int, cell_count: int) -> bool:
    """
    Checks whether ``row`` only continues the text of one column of the row above.

    A row counts as a continuation when it has the same number of cells and
    the given column holds all of the row's visible text.
    """
    cells = row_cells(row)
    if len(cells) != cell_count or column_index >= len(cells):
        return False
    return element_text(cells[column_index]) == element_text(row)


def merge_continuation(row: Tag, column_index: int, text: str) -> Tuple[str, int]:
    """
    Extends a cell's text with the lines it wraps onto in the following rows.

    Args:
        row: The row the cell belongs to.
        column_index: Index of the cell within the row.
        text: The cell's own (normalized) text.

    Returns:
        A tuple (merged_text, lines_consumed). ``lines_consumed`` is the number of
        rows after ``row`` that only carried this column's continuation.
    """
    cell_count = len(row_cells(row))
    consumed = 0
    candidate = next_row(row)
    while candidate is not None and is_continuation(candidate, column_index, cell_count):
        continued = element_text(row_cells(candidate)[column_index])
        if continued:
            text = f"{text} {continued}"
        consumed += 1
        candidate = next_row(candidate)
    if consumed:
        log.debug(f"Column {column_index} continues over {consumed} line(s): '{text}'")
    return text, consumed
