# untis_subst/models/models.py
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..core.constants import DEFAULT_EXCLUDED_CLASSES, ColumnType
from ..core.errors import ConfigurationError


class Substitution(BaseModel):
    """One affected lesson change (substitution, cancellation, room swap, ...)."""
    classes: Set[str] = Field(default_factory=set)
    lesson: Optional[str] = None
    type: Optional[str] = None
    subject: Optional[str] = None
    previous_subject: Optional[str] = Field(None, alias="previousSubject")
    teacher: Optional[str] = None
    previous_teacher: Optional[str] = Field(None, alias="previousTeacher")
    room: Optional[str] = None
    previous_room: Optional[str] = Field(None, alias="previousRoom")
    desc: Optional[str] = None
    color: Optional[str] = None
    substitution_from: Optional[str] = Field(None, alias="substitutionFrom")
    teacher_to: Optional[str] = Field(None, alias="teacherTo")

    def equals_excluding_classes(self, other: Any) -> bool:
        """
        Compares two records on every field except the affected classes.

        Used to merge records that only differ in which classes they affect.
        """
        if self is other:
            return True
        if not isinstance(other, Substitution):
            return False
        return self.model_dump(exclude={"classes"}) == other.model_dump(exclude={"classes"})

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "classes": ["5a", "5b"],
                "lesson": "3",
                "type": "Vertretung",
                "subject": "Ph",
                "previousSubject": "M",
                "teacher": "MUE",
                "previousTeacher": "SCH",
                "room": "B12",
                "previousRoom": None,
                "desc": "Aufgaben im Klassenraum",
                "color": "#2196F3",
                "substitutionFrom": None,
                "teacherTo": None,
            }
        }


class SubstitutionScheduleDay(BaseModel):
    date: Optional[str] = None # ISO date (YYYY-MM-DD) if the title could be parsed
    date_string: Optional[str] = Field(None, alias="dateString")
    last_change: Optional[datetime] = Field(None, alias="lastChange")
    last_change_string: Optional[str] = Field(None, alias="lastChangeString")
    substitutions: List[Substitution] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, v):
        if v is None:
            return v
        try:
            datetime.strptime(v, "%Y-%m-%d")
            return v
        except ValueError:
            raise ValueError("Date must be in ISO format (YYYY-MM-DD)")

    def add_substitution(self, substitution: Substitution) -> None:
        """Appends a record, merging its classes into an existing record with the same content."""
        for existing in self.substitutions:
            if existing.equals_excluding_classes(substitution):
                existing.classes.update(substitution.classes)
                return
        self.substitutions.append(substitution)

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def merge(self, other: "SubstitutionScheduleDay") -> None:
        for substitution in other.substitutions:
            self.add_substitution(substitution)
        self.messages.extend(other.messages)
        if other.last_change and (not self.last_change or other.last_change > self.last_change):
            self.last_change = other.last_change
            self.last_change_string = other.last_change_string

    class Config:
        populate_by_name = True


class SubstitutionSchedule(BaseModel):
    days: List[SubstitutionScheduleDay] = Field(default_factory=list)
    classes: Optional[List[str]] = None

    def add_day(self, day: SubstitutionScheduleDay) -> None:
        """Adds a day, merging it into an already known day with the same date."""
        key = day.date or day.date_string
        if key:
            for existing in self.days:
                if (existing.date or existing.date_string) == key:
                    existing.merge(day)
                    return
        self.days.append(day)

    class Config:
        populate_by_name = True


class ParserConfig(BaseModel):
    """
    Declarative configuration of one school's Untis tables.

    Built from the schedule's JSON data with ``ParserConfig.from_data``; keys that
    are not listed here (URLs, encodings, credentials) are ignored.
    """
    columns: List[ColumnType]
    class_in_extra_line: bool = Field(False, alias="classInExtraLine")
    classes_separated: bool = Field(True, alias="classesSeparated")
    exclude_classes: List[str] = Field(default_factory=list, alias="excludeClasses")
    class_regex: Optional[str] = Field(None, alias="classRegex")
    last_change_left: bool = Field(False, alias="lastChangeLeft")
    last_change_selector: Optional[str] = Field(None, alias="lastChangeSelector")
    classes: Optional[List[str]] = None # Static class roster
    colors: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def apply_legacy_keys(cls, data: Any) -> Any:
        # Older configurations use snake_case keys
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "class_in_extra_line" in data:
            data["classInExtraLine"] = bool(data.get("classInExtraLine")) or bool(data.pop("class_in_extra_line"))
        if "classes_separated" in data:
            legacy_separated = data.pop("classes_separated")
            data["classesSeparated"] = bool(data.get("classesSeparated", True)) and bool(legacy_separated)
        if "exclude_classes" in data:
            data["excludeClasses"] = list(data.get("excludeClasses") or []) + list(data.pop("exclude_classes") or [])
        if "stand_links" in data:
            data["lastChangeLeft"] = data.pop("stand_links")
        return data

    @field_validator("class_regex")
    @classmethod
    def validate_class_regex(cls, v):
        if v is None:
            return v
        try:
            pattern = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid class regex '{v}': {e}")
        if pattern.groups > 1:
            raise ValueError(f"Class regex '{v}' must contain at most one group")
        return v

    @property
    def excluded_classes(self) -> Set[str]:
        return set(DEFAULT_EXCLUDED_CLASSES) | set(self.exclude_classes)

    @property
    def has_type_column(self) -> bool:
        return ColumnType.TYPE in self.columns

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ParserConfig":
        """
        Validates a schedule's configuration data.

        Raises:
            ConfigurationError: If the column schema is missing or contains an
                                unknown column type, or the class regex is invalid.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid schedule configuration: {e}") from e

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "columns": ["class", "lesson", "subject", "type", "room", "desc"],
                "classInExtraLine": False,
                "classesSeparated": True,
                "excludeClasses": ["-----"],
                "classes": ["5a", "5b", "6a"],
            }
        }
