"""
Data models for logsift.
"""

from logsift.models.column_type import ColumnType
from logsift.models.field_names import normalize_field_name, resolve_field
from logsift.models.log_record import LogRecord
from logsift.models.severity import Severity

__all__ = [
    "ColumnType",
    "LogRecord",
    "Severity",
    "normalize_field_name",
    "resolve_field",
]
