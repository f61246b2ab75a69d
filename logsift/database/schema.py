"""
Schema inference for heterogeneous JSON log records.

The schema is a fold over a sample of records: each record's fields are
canonicalized, classified, and merged into an immutable mapping of
column name to ColumnType. The result is frozen and drives both the
CREATE TABLE statement and the positional order of insert parameters.
"""

from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Tuple

from logsift.models.column_type import ColumnType
from logsift.models.field_names import normalize_field_name
from logsift.models.log_record import LogRecord


IDENTITY_COLUMN = "_id"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

EMPTY_SCHEMA: Mapping[str, ColumnType] = MappingProxyType({})


def is_exact_integer(value: Any) -> bool:
    """True for ints (not bools) that fit a signed 64-bit column."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and INT64_MIN <= value <= INT64_MAX
    )


def detect_column_type(value: Any) -> ColumnType:
    """
    Classify a single JSON value.

    None gives no positive evidence, so it maps to TEXT. Lists and dicts
    are stored as serialized JSON text.
    """
    if value is None:
        return ColumnType.TEXT
    if isinstance(value, bool):
        return ColumnType.BOOLEAN
    if isinstance(value, int):
        return ColumnType.INTEGER if is_exact_integer(value) else ColumnType.FLOAT
    if isinstance(value, float):
        return ColumnType.FLOAT
    if isinstance(value, (list, dict)):
        return ColumnType.JSON
    return ColumnType.TEXT


def quote_identifier(name: str) -> str:
    """Quote a column or table name for SQLite."""
    return '"' + name.replace('"', '""') + '"'


def merge_record_into_schema(
    types: Mapping[str, ColumnType],
    record: LogRecord,
) -> Mapping[str, ColumnType]:
    """
    Merge one record's field types into a schema mapping.

    Pure: ``types`` is left untouched and a new read-only mapping is
    returned.
    """
    merged = dict(types)
    for raw_name, value in record.items():
        name = normalize_field_name(raw_name)
        detected = detect_column_type(value)
        if name in merged:
            merged[name] = merged[name].merge(detected)
        else:
            merged[name] = detected
    return MappingProxyType(merged)


@dataclass(frozen=True)
class InferredSchema:
    """
    Frozen result of schema inference.

    ``column_names`` is sorted; that order is the DDL column order and the
    parameter order used when inserting rows.
    """
    column_types: Mapping[str, ColumnType]
    column_names: Tuple[str, ...]

    @classmethod
    def from_types(cls, types: Mapping[str, ColumnType]) -> "InferredSchema":
        return cls(
            column_types=MappingProxyType(dict(types)),
            column_names=tuple(sorted(types)),
        )

    def __len__(self) -> int:
        return len(self.column_names)

    def __contains__(self, name: object) -> bool:
        return name in self.column_types

    def type_of(self, name: str) -> ColumnType:
        return self.column_types[name]

    def columns(self) -> List[Tuple[str, ColumnType]]:
        """(name, type) pairs in column order."""
        return [(name, self.column_types[name]) for name in self.column_names]

    def create_table_sql(self, table_name: str) -> str:
        """
        Generate the CREATE TABLE statement for this schema.

        Output depends only on the schema and the table name, so it can be
        compared verbatim in tests.
        """
        column_defs = [f"    {IDENTITY_COLUMN} INTEGER PRIMARY KEY AUTOINCREMENT"]
        for name, column_type in self.columns():
            column_defs.append(f"    {quote_identifier(name)} {column_type.sql_type}")

        columns_sql = ",\n".join(column_defs)
        return f"CREATE TABLE {quote_identifier(table_name)} (\n{columns_sql}\n)"


def infer_schema(records: Iterable[LogRecord]) -> InferredSchema:
    """
    Infer a schema from records.

    Every record given is scanned; limiting inference to a sample prefix
    is up to the caller.
    """
    return InferredSchema.from_types(
        reduce(merge_record_into_schema, records, EMPTY_SCHEMA)
    )


class SchemaBuilder:
    """
    Incremental front-end over ``merge_record_into_schema``.

    Each call swaps in a new immutable accumulator; ``finalize`` freezes it.
    """

    def __init__(self):
        self._types: Mapping[str, ColumnType] = EMPTY_SCHEMA

    def analyze(self, record: LogRecord) -> None:
        """Fold one record into the running schema."""
        self._types = merge_record_into_schema(self._types, record)

    def analyze_batch(self, records: Iterable[LogRecord]) -> None:
        """Fold a sample of records into the running schema."""
        self._types = reduce(merge_record_into_schema, records, self._types)

    @property
    def field_types(self) -> Mapping[str, ColumnType]:
        return self._types

    def field_names(self) -> List[str]:
        return sorted(self._types)

    def finalize(self) -> InferredSchema:
        return InferredSchema.from_types(self._types)

    def generate_create_table(self, table_name: str) -> str:
        return self.finalize().create_table_sql(table_name)
