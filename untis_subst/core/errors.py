"""Error hierarchy for the substitution table engine.

Configuration errors indicate a deployment bug and abort a whole table, while
row-level problems in real-world HTML degrade to a partial record list.
"""
from typing import Optional


class UntisParserError(Exception):
    """Base exception for parser-related errors."""
    def __init__(self, message: str, html_content: Optional[str] = None):
        super().__init__(message)
        # The problematic HTML fragment, kept for debugging
        self.html_content = html_content


class ConfigurationError(UntisParserError):
    """The schedule configuration cannot be used to parse a table.

    Examples: unknown column type, invalid class regex, missing column schema.
    """
    pass


class SchemaMismatchError(ConfigurationError):
    """A table row has more cells than the column schema declares."""
    pass


class UnknownParserError(ConfigurationError):
    """No site adapter is registered under the requested key."""
    pass


class RosterUnavailable(UntisParserError):
    """The class roster could not be loaded."""
    pass


class RowDecodeError(UntisParserError):
    """A single row in a grouped table had an unexpected structure."""
    pass
