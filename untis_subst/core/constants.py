# untis_subst/core/constants.py
from enum import Enum


class ColumnType(str, Enum):
    """Meaning of one physical column in an Untis substitution table."""
    LESSON = "lesson"
    SUBJECT = "subject"
    PREVIOUS_SUBJECT = "previousSubject"
    TYPE = "type"
    TYPE_ENTFALL = "type-entfall" # "x" marks a cancellation
    ROOM = "room"
    PREVIOUS_ROOM = "previousRoom"
    TEACHER = "teacher"
    PREVIOUS_TEACHER = "previousTeacher"
    DESC = "desc"
    DESC_TYPE = "desc-type" # description that also carries the type
    SUBSTITUTION_FROM = "substitutionFrom"
    TEACHER_TO = "teacherTo"
    CLASS = "class" # only meaningful when classes are not grouped by header
    IGNORE = "ignore"


# --- Record Types ---
# Untis schools publish German labels; downstream consumers key colours on these.
TYPE_CANCELLATION = "Entfall"
TYPE_SUBSTITUTION = "Vertretung"
TYPE_ROOM_CHANGE = "Raumänderung"
TYPE_MOVED = "Verlegung"
TYPE_TASKS = "Aufgaben"

# Flag character used by "type-entfall" columns
CANCELLATION_FLAG = "x"

# --- Type Keyword Table ---
# Substrings that mark a description as a cancellation
CANCELLATION_KEYWORDS = ("f.a.", "fällt aus", "faellt aus", "entfällt")
# Descriptions that are used verbatim as the record type
VERBATIM_TYPES = (
    "Raumänderung",
    "Klasse frei",
    "Unterrichtstausch",
    "Freistunde",
    "Raumverlegung",
    "Selbstlernen",
    "Zusammenlegung",
    "HA",
)
MOVED_KEYWORD = "verschoben"
ROOM_CHANGED_KEYWORD = "geänderter Raum"
FREE_KEYWORD = "frei"
TASKS_KEYWORD = "Aufgaben"

# --- Cell Markers ---
NBSP = "\u00a0"
EMPTY_CELL_PLACEHOLDER = "---"
# Glyph Untis puts in front of the new value of a struck-through cell
MOVED_GLYPH = "→"

# --- Classes ---
DEFAULT_EXCLUDED_CLASSES = ("-----",)
INLINE_HEADER_CLASS = "inline_header"

# --- Day Metadata ---
MESSAGES_HEADER_TEXT = "Nachrichten zum Tag"
SUBSTITUTIONS_NOT_RELEASED_TEXT = "Vertretungen sind nicht freigegeben"
LAST_CHANGE_PREFIX = "Stand:"

# --- Caching ---
# Time-to-live (TTL) in seconds for cached class rosters
ROSTER_CACHE_TTL = 3600
