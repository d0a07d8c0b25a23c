# untis_subst/core/row_builder.py
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from bs4 import Tag

from .classes import get_class_name
from .colors import ColorProvider
from .constants import TYPE_SUBSTITUTION, ColumnType
from .continuation import merge_continuation, row_cells
from .errors import ConfigurationError, SchemaMismatchError
from .formatting import element_text, is_empty_cell
from .strikethrough import apply_strikethrough
from .type_inference import flag_type, infer_type, recognize_type
from ..models.models import ParserConfig, Substitution

log = logging.getLogger(__name__)


@dataclass
class BuiltRow:
    """Outcome of decoding one logical table row."""
    substitution: Optional[Substitution] # None if the row carried no lesson
    class_text: Optional[str] = None # Rewritten content of the "class" column
    skip_lines: int = 0 # Following rows that only continued this row's cells


@dataclass
class _RowState:
    substitution: Substitution
    class_text: Optional[str] = None


class RowBuilder:
    """
    Maps table rows through a column schema into substitution records.

    Each cell is handed to the handler registered for its column type.
    Blank cells and "---" placeholders are skipped.
    """

    def __init__(self, config: ParserConfig, color_provider: Optional[ColorProvider] = None):
        self.config = config
        self.color_provider = color_provider or ColorProvider(config.colors)
        self._handlers: Dict[ColumnType, Callable[[_RowState, Tag, str], None]] = {
            ColumnType.LESSON: self._lesson,
            ColumnType.SUBJECT: self._subject,
            ColumnType.PREVIOUS_SUBJECT: self._previous_subject,
            ColumnType.TYPE: self._type,
            ColumnType.TYPE_ENTFALL: self._type_flag,
            ColumnType.ROOM: self._room,
            ColumnType.PREVIOUS_ROOM: self._previous_room,
            ColumnType.TEACHER: self._teacher,
            ColumnType.PREVIOUS_TEACHER: self._previous_teacher,
            ColumnType.DESC: self._desc,
            ColumnType.DESC_TYPE: self._desc_type,
            ColumnType.SUBSTITUTION_FROM: self._substitution_from,
            ColumnType.TEACHER_TO: self._teacher_to,
            ColumnType.CLASS: self._class,
            ColumnType.IGNORE: self._ignore,
        }

    # --- Column Handlers ---

    def _set_type(self, substitution: Substitution, type_: Optional[str]) -> None:
        substitution.type = type_
        substitution.color = self.color_provider.get_color(type_)

    def _lesson(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.lesson = text

    def _subject(self, state: _RowState, cell: Tag, text: str) -> None:
        apply_strikethrough(cell, state.substitution, "subject", "previous_subject")

    def _previous_subject(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.previous_subject = text

    def _type(self, state: _RowState, cell: Tag, text: str) -> None:
        self._set_type(state.substitution, text)

    def _type_flag(self, state: _RowState, cell: Tag, text: str) -> None:
        type_ = flag_type(text)
        # An explicit type column takes precedence over a plain substitution
        if type_ == TYPE_SUBSTITUTION and self.config.has_type_column:
            return
        self._set_type(state.substitution, type_)

    def _room(self, state: _RowState, cell: Tag, text: str) -> None:
        apply_strikethrough(cell, state.substitution, "room", "previous_room")

    def _previous_room(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.previous_room = text

    def _teacher(self, state: _RowState, cell: Tag, text: str) -> None:
        apply_strikethrough(cell, state.substitution, "teacher", "previous_teacher")

    def _previous_teacher(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.previous_teacher = text

    def _desc(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.desc = text

    def _desc_type(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.desc = text
        self._set_type(state.substitution, recognize_type(text))

    def _substitution_from(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.substitution_from = text

    def _teacher_to(self, state: _RowState, cell: Tag, text: str) -> None:
        state.substitution.teacher_to = text

    def _class(self, state: _RowState, cell: Tag, text: str) -> None:
        state.class_text = get_class_name(text, self.config.class_regex)

    def _ignore(self, state: _RowState, cell: Tag, text: str) -> None:
        pass

    # --- Row Decoding ---

    def build(self, row: Tag, infer: bool = True) -> BuiltRow:
        """
        Decodes one table row (plus its continuation lines) into a record.

        Args:
            row: The <tr> element.
            infer: Whether to infer the type of rows without an explicit type.
                   Without inference, untyped rows become plain substitutions.

        Returns:
            A BuiltRow. Its substitution is None if the row has no lesson.

        Raises:
            SchemaMismatchError: If the row has more cells than the column schema.
            ConfigurationError: If a column type has no registered handler.
        """
        columns = self.config.columns
        cells = row_cells(row)
        if len(cells) > len(columns):
            raise SchemaMismatchError(
                f"Row has {len(cells)} cells but the column schema declares {len(columns)}",
                html_content=str(row),
            )

        state = _RowState(substitution=Substitution())
        skip_lines = 0
        for index, cell in enumerate(cells):
            text = element_text(cell)
            if is_empty_cell(text):
                continue

            text, lines = merge_continuation(row, index, text)
            skip_lines = max(skip_lines, lines)

            column = columns[index]
            handler = self._handlers.get(column)
            if handler is None:
                raise ConfigurationError(f"Unknown column type: {column}")
            handler(state, cell, text)

        substitution = state.substitution
        if not substitution.lesson:
            log.debug("Dropping row without lesson.")
            return BuiltRow(substitution=None, class_text=state.class_text, skip_lines=skip_lines)

        if substitution.type is None:
            if infer and not self.config.has_type_column:
                self._set_type(substitution, infer_type(row, substitution))
            else:
                self._set_type(substitution, TYPE_SUBSTITUTION)

        return BuiltRow(substitution=substitution, class_text=state.class_text, skip_lines=skip_lines)
