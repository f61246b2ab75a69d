"""
Exception hierarchy for logsift.
"""

from typing import Optional


class LogsiftError(Exception):
    """
    Base exception for all logsift errors
    """
    pass


class IngestionError(LogsiftError):
    """
    Raised when a single input line cannot be turned into a record.

    Per-line and non-fatal: readers collect these instead of aborting.
    """

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}")


class StoreError(LogsiftError):
    """
    Raised when the store rejects a statement or transaction.
    """

    def __init__(self, message: str, statement: Optional[str] = None):
        self.message = message
        self.statement = statement
        if statement:
            super().__init__(f"{message} (SQL: {statement})")
        else:
            super().__init__(message)


class NotInitializedError(StoreError):
    """
    Raised when inserting or querying before the table has been created.
    """
    pass


class SchemaFrozenError(StoreError):
    """
    Raised when trying to create the table a second time.
    """
    pass


class UnknownPresetError(LogsiftError):
    """
    Raised when a filter preset name is not registered.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown filter preset: {name}")
