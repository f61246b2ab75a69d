"""
Severity scale used by pino-style JSON loggers.
"""

from enum import IntEnum
from typing import Optional


class Severity(IntEnum):
    """Standard log levels, ordered by numeric code."""
    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60

    @classmethod
    def from_code(cls, code: int) -> Optional["Severity"]:
        """
        Look up a severity by its numeric code.

        Args:
            code: Raw level value from a log record

        Returns:
            The matching Severity, or None for an unrecognized code
        """
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.name
