# untis_subst/core/colors.py
import logging
from typing import Dict, Optional

from .constants import (TYPE_CANCELLATION, TYPE_MOVED, TYPE_ROOM_CHANGE,
                        TYPE_SUBSTITUTION, TYPE_TASKS)

log = logging.getLogger(__name__)

DEFAULT_COLOR = "#FF9800"

# Material design colours used by the schedule apps
DEFAULT_COLORS = {
    TYPE_CANCELLATION: "#F44336",
    "Klasse frei": "#F44336",
    "Freistunde": "#F44336",
    TYPE_SUBSTITUTION: "#2196F3",
    "Unterrichtstausch": "#2196F3",
    "Zusammenlegung": "#2196F3",
    TYPE_ROOM_CHANGE: "#3F51B5",
    "Raumverlegung": "#3F51B5",
    TYPE_MOVED: "#9C27B0",
    TYPE_TASKS: "#795548",
    "Selbstlernen": "#795548",
    "HA": "#795548",
}


class ColorProvider:
    """Assigns display colours to record types."""

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        self.colors = dict(DEFAULT_COLORS)
        if overrides:
            self.colors.update(overrides)

    def get_color(self, type_: Optional[str]) -> str:
        if type_ is None:
            return DEFAULT_COLOR
        color = self.colors.get(type_)
        if color is None:
            log.debug(f"No colour configured for type '{type_}', using default.")
            return DEFAULT_COLOR
        return color
