"""
Conversion between log records and SQL rows.

Writing goes through a closed set of SQL value kinds so every JSON value
maps to exactly one parameter type. Reading goes the other way, driven
by what the store hands back for each cell rather than by the declared
column type.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from logsift.database.schema import IDENTITY_COLUMN, is_exact_integer
from logsift.models.field_names import resolve_field
from logsift.models.log_record import LogRecord


@dataclass(frozen=True)
class SqlNull:
    def to_param(self) -> None:
        return None


@dataclass(frozen=True)
class SqlBool:
    value: bool

    def to_param(self) -> bool:
        return self.value


@dataclass(frozen=True)
class SqlInt:
    value: int

    def to_param(self) -> int:
        return self.value


@dataclass(frozen=True)
class SqlFloat:
    value: float

    def to_param(self) -> float:
        return self.value


@dataclass(frozen=True)
class SqlText:
    value: str

    def to_param(self) -> str:
        return self.value


SqlValue = Union[SqlNull, SqlBool, SqlInt, SqlFloat, SqlText]

SQL_NULL = SqlNull()


def to_sql_value(value: Any) -> SqlValue:
    """
    Classify a JSON value as one SQL value kind.

    Integers outside the signed 64-bit range are stored as floats, the
    same way schema inference types them, or as their decimal text when
    even a float cannot hold them. Lists and dicts are stored as their
    JSON text.
    """
    if value is None:
        return SQL_NULL
    if isinstance(value, bool):
        return SqlBool(value)
    if isinstance(value, int):
        if is_exact_integer(value):
            return SqlInt(value)
        try:
            return SqlFloat(float(value))
        except OverflowError:
            return SqlText(str(value))
    if isinstance(value, float):
        return SqlFloat(value)
    if isinstance(value, str):
        return SqlText(value)
    if isinstance(value, (list, dict)):
        return SqlText(json.dumps(value, separators=(",", ":")))
    raise TypeError(f"Unsupported JSON value type: {type(value).__name__}")


def sql_values(record: LogRecord, column_order: Sequence[str]) -> Tuple[SqlValue, ...]:
    """
    Pick the value for each column, in column order.

    Columns the record has no field for become NULL. Fields that match no
    column are not looked at at all, so they are dropped.
    """
    values = []
    for column in column_order:
        found, value = resolve_field(record.fields, column)
        values.append(to_sql_value(value) if found else SQL_NULL)
    return tuple(values)


def to_params(record: LogRecord, column_order: Sequence[str]) -> Tuple[Any, ...]:
    """Native DB-API parameters for ``record`` in ``column_order``."""
    return tuple(v.to_param() for v in sql_values(record, column_order))


def from_cell(cell: Any) -> Optional[Union[str, int, float, bool]]:
    """
    Rebuild a JSON value from a single fetched cell.

    Probe order is text, integer, float, boolean, with bools tested
    before ints since bool is an int subclass. A float with an exact
    integral value comes back as an int.
    """
    if isinstance(cell, str):
        return cell
    if isinstance(cell, bool):
        return cell
    if isinstance(cell, int):
        return cell
    if isinstance(cell, float):
        return int(cell) if cell.is_integer() else cell
    return None


def from_row(column_names: Sequence[str], row: Sequence[Any]) -> LogRecord:
    """
    Rebuild a record from a result row.

    The identity column is skipped; NULL cells are kept as None so the
    record carries every column of the table.
    """
    fields: Dict[str, Any] = {}
    for name, cell in zip(column_names, row):
        if name == IDENTITY_COLUMN:
            continue
        fields[name] = from_cell(cell)
    return LogRecord(fields=fields)
