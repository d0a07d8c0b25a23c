# untis_subst/core/registry.py
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from .classes import ClassRoster, RosterAccessor
from .colors import ColorProvider
from .constants import ROSTER_CACHE_TTL
from .date_utils import to_iso_date
from .errors import RosterUnavailable, UnknownParserError, UntisParserError
from .formatting import element_text
from .parsers import TableParser, parse_class_day, parse_messages, parse_monitor_day
from ..models.models import ParserConfig, SubstitutionSchedule, SubstitutionScheduleDay

log = logging.getLogger(__name__)


class BaseParser(ABC):
    """
    Site adapter: locates the substitution tables of one kind of page and
    hands them to the table parser.
    """

    def __init__(
        self,
        config: ParserConfig,
        roster_accessor: Optional[RosterAccessor] = None,
        roster_ttl: int = ROSTER_CACHE_TTL,
    ):
        """
        Args:
            config: The schedule configuration.
            roster_accessor: Loads the class roster; defaults to the ``classes``
                             listed in the configuration.
            roster_ttl: Seconds a loaded roster is reused.
        """
        self.config = config
        self.roster = ClassRoster(roster_accessor or (lambda: config.classes), ttl=roster_ttl)
        self.color_provider = ColorProvider(config.colors)
        self.table_parser = TableParser(config, roster=self.roster, color_provider=self.color_provider)

    @abstractmethod
    def get_substitution_schedule(self, html: str, default_class: Optional[str] = None) -> SubstitutionSchedule:
        """Parses a fetched page into a schedule."""

    def get_all_classes(self) -> Optional[List[str]]:
        """All classes of the school, also those without substitutions."""
        return self.roster.get()

    def _new_schedule(self) -> SubstitutionSchedule:
        schedule = SubstitutionSchedule()
        try:
            schedule.classes = self.get_all_classes()
        except RosterUnavailable as e:
            log.warning(f"Schedule is returned without class list: {e}")
        return schedule

    @staticmethod
    def _soup(html: str) -> BeautifulSoup:
        if not html or not html.strip():
            raise UntisParserError("Input HTML content is empty or invalid", html_content=html)
        return BeautifulSoup(html, "lxml")


class UntisMonitorParser(BaseParser):
    """A complete Untis monitor page ("subst_001.htm") holding one day."""

    def get_substitution_schedule(self, html: str, default_class: Optional[str] = None) -> SubstitutionSchedule:
        doc = self._soup(html)
        schedule = self._new_schedule()
        schedule.add_day(parse_monitor_day(doc, self.config, self.table_parser))
        return schedule


class UntisSubstitutionParser(BaseParser):
    """
    A per-class Untis page. The substitution table is the ``table.subst``
    element, or the first table that has "list" rows.
    """

    def get_substitution_schedule(self, html: str, default_class: Optional[str] = None) -> SubstitutionSchedule:
        doc = self._soup(html)
        schedule = self._new_schedule()

        title = doc.select_one(".mon_title")
        date_string = element_text(title) if title is not None else None
        day = SubstitutionScheduleDay(
            date=to_iso_date(date_string) if date_string else None,
            date_string=date_string,
        )
        info_table = doc.select_one("table.info")
        subst_table = doc.select_one("table.subst")
        if subst_table is not None:
            if info_table is not None:
                parse_messages(info_table, day)
            parse_class_day(subst_table, day, default_class, self.table_parser)
        elif info_table is not None:
            # Messages come first; the substitution table follows two elements later
            parse_class_day(info_table, day, default_class, self.table_parser)
        else:
            table = doc.select_one("table:has(tr.list)") or doc.select_one("table")
            if table is None:
                raise UntisParserError("Could not find substitution table", html_content=html)
            self.table_parser.parse_table(table, day, default_class)
        schedule.add_day(day)
        return schedule


# Site adapters by configuration key
PARSERS: Dict[str, Callable[..., BaseParser]] = {
    "untis-monitor": UntisMonitorParser,
    "untis-subst": UntisSubstitutionParser,
}


def get_parser(api: str, config: ParserConfig, **kwargs) -> BaseParser:
    """
    Creates the site adapter registered under ``api``.

    Raises:
        UnknownParserError: If no adapter is registered under that key.
    """
    factory = PARSERS.get(api)
    if factory is None:
        raise UnknownParserError(f"Unknown parser: '{api}'. Known parsers: {sorted(PARSERS)}")
    log.debug(f"Creating '{api}' parser.")
    return factory(config, **kwargs)
