# untis_subst/core/classes.py
import logging
import re
from typing import Callable, Iterable, List, Optional, Set

from cachetools import TTLCache

from .constants import ROSTER_CACHE_TTL
from .errors import RosterUnavailable

log = logging.getLogger(__name__)

# Returns the list of all class names a school knows, or None if it has none
RosterAccessor = Callable[[], Optional[List[str]]]
# Expands concatenated class designators ("5abc") against the roster
FuzzyStrategy = Callable[[str, List[str]], List[str]]

_RE_GRADE_RANGE = re.compile(r"(\d+) ?- ?(\d+)") # "5-7", "5 - 7"
_RE_GRADE = re.compile(r"(\d+)") # "7"
_RE_GRADE_PREFIX = re.compile(r"(\d+).*") # "10b" -> 10
SEPARATOR = ", "


class ClassRoster:
    """
    Wraps a roster accessor and caches its result.

    The accessor may perform I/O; an ``OSError`` it raises is reported as
    ``RosterUnavailable``. Failed loads are not cached.
    """

    def __init__(self, accessor: RosterAccessor, ttl: int = ROSTER_CACHE_TTL):
        self._accessor = accessor
        self._cache: TTLCache = TTLCache(maxsize=1, ttl=ttl)

    @classmethod
    def static(cls, classes: Optional[Iterable[str]]) -> "ClassRoster":
        roster = list(classes) if classes is not None else None
        return cls(lambda: roster)

    def get(self) -> Optional[List[str]]:
        try:
            return self._cache["roster"]
        except KeyError:
            pass
        try:
            roster = self._accessor()
        except OSError as e:
            raise RosterUnavailable(f"Could not load class roster: {e}") from e
        if roster is None:
            return None
        roster = list(roster)
        self._cache["roster"] = roster
        log.debug(f"Loaded class roster with {len(roster)} classes.")
        return roster


def get_class_name(text: str, class_regex: Optional[str] = None) -> str:
    """
    Rewrites a class designator using the configured class regex.

    Parentheses are dropped first. With a regex, the first group (or the whole
    match if the regex has no group) is used; text the regex does not match
    becomes "".
    """
    text = text.replace("(", "").replace(")", "")
    if not class_regex:
        return text
    match = re.search(class_regex, text)
    if not match:
        log.warning(f"Class regex '{class_regex}' did not match '{text}'.")
        return ""
    return match.group(1) if match.re.groups > 0 else match.group(0)


def is_valid_class(name: Optional[str], excluded: Iterable[str]) -> bool:
    return bool(name) and name not in excluded


def _grade(name: str) -> Optional[int]:
    match = _RE_GRADE_PREFIX.fullmatch(name)
    return int(match.group(1)) if match else None


def expand_grade_range(low: int, high: int, roster: List[str]) -> List[str]:
    """All roster classes whose grade lies in [low, high]."""
    expanded = []
    for name in roster:
        grade = _grade(name)
        if grade is not None and low <= grade <= high:
            expanded.append(name)
    return expanded


def expand_grade(grade: int, roster: List[str]) -> List[str]:
    """All roster classes of one grade."""
    return [name for name in roster if _grade(name) == grade]


def split_separated(text: str) -> List[str]:
    return text.split(SEPARATOR)


def match_concatenated(text: str, roster: List[str]) -> List[str]:
    """
    Finds roster classes hidden in a designator without separators.

    Some schools write "5abcde" for the classes 5a to 5e. A roster class
    matches when its characters appear in the designator in order, starting
    with the first character.
    """
    matched = []
    for name in roster:
        pattern = "".join(re.escape(character) + ".*" for character in name)
        if re.fullmatch(pattern, text, re.DOTALL):
            matched.append(name)
    return matched


class ClassResolver:
    """
    Turns a free-text class designator into the set of affected classes.

    Modes, in order: grade range ("5-7"), single grade ("7"), comma-separated
    list, and matching concatenated names against the roster. Excluded classes
    are never returned.
    """

    def __init__(
        self,
        roster: Optional[ClassRoster] = None,
        excluded: Iterable[str] = (),
        classes_separated: bool = True,
        roster_required: bool = False,
        fuzzy_strategy: Optional[FuzzyStrategy] = match_concatenated,
    ):
        self.roster = roster
        self.excluded = set(excluded)
        self.classes_separated = classes_separated
        self.roster_required = roster_required
        self.fuzzy_strategy = fuzzy_strategy

    def _roster_classes(self) -> List[str]:
        if self.roster is None:
            return []
        try:
            return self.roster.get() or []
        except RosterUnavailable as e:
            if self.roster_required:
                raise
            log.warning(f"{e}. Class expansion yields no classes.")
            return []

    def expand(self, text: str) -> List[str]:
        """Expands a designator without applying the exclusion list."""
        range_match = _RE_GRADE_RANGE.fullmatch(text)
        if range_match:
            low, high = int(range_match.group(1)), int(range_match.group(2))
            return expand_grade_range(low, high, self._roster_classes())

        grade_match = _RE_GRADE.fullmatch(text)
        if grade_match:
            return expand_grade(int(grade_match.group(1)), self._roster_classes())

        if self.classes_separated:
            return split_separated(text)

        if self.fuzzy_strategy is None:
            log.debug(f"Concatenated class matching disabled, ignoring '{text}'.")
            return []
        return self.fuzzy_strategy(text, self._roster_classes())

    def resolve(self, text: Optional[str]) -> Set[str]:
        if not text:
            return set()
        classes = {name for name in self.expand(text) if is_valid_class(name, self.excluded)}
        log.debug(f"Resolved classes '{text}' -> {sorted(classes)}")
        return classes
