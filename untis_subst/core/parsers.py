# untis_subst/core/parsers.py
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, Tag

from .classes import ClassResolver, ClassRoster, FuzzyStrategy, get_class_name, is_valid_class, match_concatenated
from .colors import ColorProvider
from .constants import (INLINE_HEADER_CLASS, LAST_CHANGE_PREFIX, MESSAGES_HEADER_TEXT,
                        SUBSTITUTIONS_NOT_RELEASED_TEXT)
from .continuation import next_row, row_cells
from .date_utils import parse_last_change, to_iso_date
from .errors import ConfigurationError, RowDecodeError, SchemaMismatchError, UntisParserError
from .formatting import element_text, inner_html_text
from .row_builder import BuiltRow, RowBuilder
from ..models.models import ParserConfig, SubstitutionScheduleDay

# Basic logging setup
logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(levelname)s - %(name)s - %(message)s')
log = logging.getLogger(__name__)

# Striped data rows of flat tables; class header rows are excluded
_STRIPED_ROW_SELECTOR = (
    f"tr.list.odd:not(:has(td.{INLINE_HEADER_CLASS})), "
    f"tr.list.even:not(:has(td.{INLINE_HEADER_CLASS}))"
)
_RE_PAGE_SUFFIX = re.compile(r" \(Seite \d+ / \d+\)")
_RE_MON_HEAD_TIMESTAMP = re.compile(r"\d\d\.\d\d\.\d\d\d\d \d\d:\d\d")


# --- Row Selection ---

def is_class_header_row(row: Tag) -> bool:
    """True for rows of grouped tables that introduce the next class."""
    return any(INLINE_HEADER_CLASS in cell.get("class", []) for cell in row_cells(row))


def _is_centered_data_row(row: Tag) -> bool:
    # Centered tables have no striping; their first row is the column header
    if row.find_previous_sibling() is None:
        return False
    return row.select_one("td[align=center]") is not None


def select_flat_rows(table: Tag) -> List[Tag]:
    """
    Returns the data rows of a flat table in document order.

    Rows are recognised by their shape: "list odd"/"list even" striping, or
    center-aligned cells in any row but the first.
    """
    striped = {id(row) for row in table.select(_STRIPED_ROW_SELECTOR)}
    return [row for row in table.find_all("tr") if id(row) in striped or _is_centered_data_row(row)]


# --- Table Parser ---

class TableParser:
    """
    Converts Untis substitution tables into substitution records.

    The parser keeps no state between tables; records and messages are
    appended to the day passed to each call.
    """

    def __init__(
        self,
        config: ParserConfig,
        roster: Optional[ClassRoster] = None,
        color_provider: Optional[ColorProvider] = None,
        roster_required: bool = False,
        fuzzy_strategy: Optional[FuzzyStrategy] = match_concatenated,
    ):
        """
        Args:
            config: The schedule's column schema and behaviour flags.
            roster: The school's class roster, needed to expand grades and
                    concatenated class names.
            color_provider: Assigns display colours; built from the config by default.
            roster_required: Raise RosterUnavailable instead of resolving no
                             classes when the roster cannot be loaded.
            fuzzy_strategy: Matcher for class names without separators, or None
                            to disable that mode.
        """
        self.config = config
        if roster is None and config.classes is not None:
            roster = ClassRoster.static(config.classes)
        self.row_builder = RowBuilder(config, color_provider)
        self.class_resolver = ClassResolver(
            roster=roster,
            excluded=config.excluded_classes,
            classes_separated=config.classes_separated,
            roster_required=roster_required,
            fuzzy_strategy=fuzzy_strategy,
        )

    def parse_table(self, table: Tag, day: SubstitutionScheduleDay, default_class: Optional[str] = None) -> None:
        """
        Parses a substitution table and adds its records to ``day``.

        Args:
            table: The <table> element.
            day: Receives the parsed records.
            default_class: Class of every record if the table has no class
                           column (per-class pages). Unused for grouped tables.

        Raises:
            ConfigurationError: If the column schema does not fit a flat table.
        """
        if self.config.class_in_extra_line:
            added = self._parse_grouped(table, day)
        else:
            added = self._parse_flat(table, day, default_class)
        log.info(f"Parsed {added} substitutions from table.")

    def _parse_flat(self, table: Tag, day: SubstitutionScheduleDay, default_class: Optional[str]) -> int:
        rows = select_flat_rows(table)
        log.debug(f"Found {len(rows)} data rows in flat table.")
        added = 0
        index = 0
        while index < len(rows):
            built = self.row_builder.build(rows[index], infer=True)
            # Rows that only continued this row's cells are not records of their own
            index += 1 + built.skip_lines
            if built.substitution is None:
                continue

            class_text = built.class_text if built.class_text is not None else (default_class or "")
            built.substitution.classes = self.class_resolver.resolve(class_text)
            day.add_substitution(built.substitution)
            added += 1
        return added

    def _decode_grouped_row(self, row: Tag) -> BuiltRow:
        try:
            return self.row_builder.build(row, infer=False)
        except SchemaMismatchError as e:
            raise RowDecodeError(str(e), html_content=str(row)) from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise RowDecodeError(f"Unexpected row structure: {e}", html_content=str(row)) from e

    def _parse_grouped(self, table: Tag, day: SubstitutionScheduleDay) -> int:
        added = 0
        for header in table.select(f"td.{INLINE_HEADER_CLASS}"):
            class_name = get_class_name(element_text(header), self.config.class_regex)
            if not is_valid_class(class_name, self.config.excluded_classes):
                log.debug(f"Skipping rows of excluded class header '{class_name}'.")
                continue

            row = next_row(header.parent) if header.parent is not None else None
            skip_lines = 0
            while row is not None and not is_class_header_row(row):
                if skip_lines > 0:
                    skip_lines -= 1
                    row = next_row(row)
                    continue

                try:
                    built = self._decode_grouped_row(row)
                except RowDecodeError as e:
                    log.error(f"Skipping malformed row of class '{class_name}': {e}", exc_info=True)
                    row = next_row(row)
                    continue

                skip_lines = built.skip_lines
                if built.substitution is not None:
                    built.substitution.classes = {class_name}
                    day.add_substitution(built.substitution)
                    added += 1
                row = next_row(row)
        return added


def parse_substitution_table(
    table: Tag,
    config: ParserConfig,
    day: SubstitutionScheduleDay,
    default_class: Optional[str] = None,
    roster: Optional[ClassRoster] = None,
    color_provider: Optional[ColorProvider] = None,
) -> None:
    """Parses one substitution table into ``day`` (see TableParser.parse_table)."""
    TableParser(config, roster=roster, color_provider=color_provider).parse_table(table, day, default_class)


# --- Daily Messages ---

def parse_messages(table: Tag, day: SubstitutionScheduleDay) -> None:
    """
    Parses a "Nachrichten zum Tag" (daily news) table.

    Every row except the heading becomes one message; the cells' inner HTML
    is joined with newlines.
    """
    for row in table.find_all("tr"):
        if MESSAGES_HEADER_TEXT.lower() in element_text(row).lower():
            continue
        cells = row.find_all("td")
        if not cells:
            continue
        day.add_message("\n".join(inner_html_text(cell) for cell in cells))


# --- Last Change ---

def _last_change_from_mon_head(mon_head: Tag) -> Optional[str]:
    right_cell = mon_head.select_one("td[align=right]")
    if right_cell is None:
        return None
    match = _RE_MON_HEAD_TIMESTAMP.search(element_text(right_cell))
    if match:
        return match.group(0)
    head_text = element_text(mon_head)
    if f"{LAST_CHANGE_PREFIX} " in head_text:
        return head_text[head_text.index(LAST_CHANGE_PREFIX) + len(LAST_CHANGE_PREFIX):].strip()
    return None


def find_last_change(doc: Tag, config: Optional[ParserConfig] = None) -> Optional[str]:
    """
    Finds the "last changed" text of an Untis monitor page.

    Looks at the ``table.mon_head`` header, the top-left corner of the body
    (``lastChangeLeft``), or a header table hidden in an HTML comment.

    Returns:
        The raw last-change text, or None if it cannot be found.
    """
    mon_head = doc.select_one("table.mon_head")
    if mon_head is not None:
        return _last_change_from_mon_head(mon_head)

    body = doc.body if isinstance(doc, BeautifulSoup) and doc.body is not None else doc
    if config is not None and config.last_change_left:
        body_html = body.decode_contents()
        paragraph_index = body_html.find("<p>")
        if paragraph_index < 1:
            log.warning("lastChangeLeft is set but the page has no <p> after the last change.")
            return None
        return body_html[:paragraph_index - 1]

    for node in body.children:
        if isinstance(node, Comment) and '<table class="mon_head">' in node:
            commented = BeautifulSoup(str(node), "lxml").select_one("table.mon_head")
            if commented is not None:
                return _last_change_from_mon_head(commented)
    return None


# --- Days ---

def parse_monitor_day(doc: Tag, config: ParserConfig, table_parser: Optional[TableParser] = None) -> SubstitutionScheduleDay:
    """
    Parses one day of an Untis monitor page.

    Args:
        doc: The parsed page.
        config: The schedule configuration.
        table_parser: Parser for the substitution table; built from ``config`` if omitted.

    Returns:
        The day with its date, last change, messages and substitutions.

    Raises:
        UntisParserError: If the page has no day title (``.mon_title``).
    """
    table_parser = table_parser or TableParser(config)

    title = doc.select_one(".mon_title")
    if title is None:
        raise UntisParserError("Could not find day title (.mon_title)", html_content=str(doc))
    date_string = _RE_PAGE_SUFFIX.sub("", element_text(title))
    day = SubstitutionScheduleDay(date=to_iso_date(date_string), date_string=date_string)

    if config.last_change_selector:
        element = doc.select_one(config.last_change_selector)
        last_change = element_text(element) if element is not None else None
    else:
        last_change = find_last_change(doc, config)
    if last_change is None:
        log.warning(f"No last change found for day '{date_string}'.")
    day.last_change_string = last_change
    day.last_change = parse_last_change(last_change)

    info_table = doc.select_one("table.info")
    if info_table is not None:
        parse_messages(info_table, day)

    substitution_table = doc.select_one("table:has(tr.list)")
    if substitution_table is not None:
        table_parser.parse_table(substitution_table, day)
    else:
        log.info(f"No substitution table on day '{date_string}'.")
    return day


def parse_class_day(
    element: Tag,
    day: SubstitutionScheduleDay,
    default_class: Optional[str],
    table_parser: TableParser,
) -> None:
    """
    Parses the tables of a per-class page into ``day``.

    ``element`` is either the substitution table itself (CSS class ``subst``)
    or a messages table followed, two elements later, by the substitution table.
    """
    if "subst" in element.get("class", []):
        if SUBSTITUTIONS_NOT_RELEASED_TEXT in element_text(element):
            log.info("Substitutions have not been released yet.")
            return
        table_parser.parse_table(element, day, default_class)
        return

    parse_messages(element, day)
    table = element.find_next_sibling()
    table = table.find_next_sibling() if table is not None else None
    if table is None:
        log.warning("Messages table is not followed by a substitution table.")
        return
    table_parser.parse_table(table, day, default_class)
