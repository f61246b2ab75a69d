"""
Column types inferred for log fields.
"""

from enum import Enum


class ColumnType(str, Enum):
    """Storage type of a single inferred column."""
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    JSON = "json"

    @property
    def sql_type(self) -> str:
        """Declared type used in CREATE TABLE."""
        return _SQL_TYPES[self]

    def merge(self, other: "ColumnType") -> "ColumnType":
        """
        Widen two observed types into one that can hold both.

        Identical types merge to themselves, INTEGER and FLOAT promote to
        FLOAT, and every other combination falls back to TEXT.
        """
        if self is other:
            return self
        if {self, other} == {ColumnType.INTEGER, ColumnType.FLOAT}:
            return ColumnType.FLOAT
        return ColumnType.TEXT

    @classmethod
    def from_sql_type(cls, declared: str) -> "ColumnType":
        """
        Map a declared column type back to a ColumnType.

        JSON columns are declared as TEXT, so they come back as TEXT.
        """
        return _FROM_SQL.get(declared.upper(), cls.TEXT)


_SQL_TYPES = {
    ColumnType.TEXT: "TEXT",
    ColumnType.INTEGER: "BIGINT",
    ColumnType.FLOAT: "DOUBLE",
    ColumnType.BOOLEAN: "BOOLEAN",
    ColumnType.JSON: "TEXT",
}

_FROM_SQL = {
    "TEXT": ColumnType.TEXT,
    "BIGINT": ColumnType.INTEGER,
    "DOUBLE": ColumnType.FLOAT,
    "BOOLEAN": ColumnType.BOOLEAN,
}
