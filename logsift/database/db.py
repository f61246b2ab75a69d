"""
SQLite-backed log store.

``LogDatabase`` owns a single connection for its whole lifetime. The
table is created once from a schema inferred over a sample of records;
after that the schema is frozen and there is no migration path.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from logsift.database.marshal import from_row, to_params
from logsift.database.schema import (
    IDENTITY_COLUMN,
    InferredSchema,
    infer_schema,
    quote_identifier,
)
from logsift.exceptions import NotInitializedError, SchemaFrozenError, StoreError
from logsift.models.column_type import ColumnType
from logsift.models.log_record import LogRecord


logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"
DEFAULT_TABLE_NAME = "logs"
DEFAULT_SAMPLE_SIZE = 100


def _convert_boolean(raw: bytes):
    """
    Read BOOLEAN columns back as bools; other values keep their kind.

    The converter is registered with the sqlite3 module, so it applies to
    every connection in the process opened with PARSE_DECLTYPES whose
    table declares a BOOLEAN column. BOOLEAN has NUMERIC affinity, so the
    text "0" or "1" stored in such a column is kept as an integer and
    comes back as False or True like any other 0/1.
    """
    if raw in (b"0", b"1"):
        return raw == b"1"
    text = raw.decode("utf-8", errors="replace")
    for parse in (int, float):
        try:
            return parse(text)
        except ValueError:
            continue
    return text


sqlite3.register_converter("BOOLEAN", _convert_boolean)


class LogDatabase:
    """
    Relational store for one log session.

    Use as a context manager, or call ``close()``, to release the
    connection.
    """

    def __init__(
        self,
        path: Union[str, Path] = IN_MEMORY,
        table_name: str = DEFAULT_TABLE_NAME,
    ):
        """
        Open the store.

        Args:
            path: Database file, or ":memory:" for an in-memory store
            table_name: Name of the table records are loaded into
        """
        self.path = str(path)
        self.table_name = table_name
        self._schema: Optional[InferredSchema] = None

        if self.path != IN_MEMORY:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Autocommit mode; transactions are opened explicitly
            self.conn = sqlite3.connect(
                self.path,
                detect_types=sqlite3.PARSE_DECLTYPES,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open database at {self.path}: {e}") from e

    @classmethod
    def in_memory(cls, table_name: str = DEFAULT_TABLE_NAME) -> "LogDatabase":
        return cls(IN_MEMORY, table_name)

    def __enter__(self) -> "LogDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    # Schema

    @property
    def schema(self) -> Optional[InferredSchema]:
        return self._schema

    @property
    def is_initialized(self) -> bool:
        return self._schema is not None

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._schema.column_names if self._schema else ()

    def create_table_from_records(
        self,
        records: Sequence[LogRecord],
        sample_size: int = DEFAULT_SAMPLE_SIZE,
    ) -> InferredSchema:
        """
        Infer the schema from the first ``sample_size`` records and create
        the table.

        Records after the sample are never looked at here; fields that
        only show up later are dropped when those records are inserted.

        Raises:
            SchemaFrozenError: If the table was already created
            StoreError: If the store rejects the DDL
        """
        if self._schema is not None:
            raise SchemaFrozenError(
                f"Table '{self.table_name}' already exists; the schema is frozen"
            )

        sample = records[:sample_size]
        logger.info("Analyzing %d sample logs to detect schema", len(sample))

        schema = infer_schema(sample)
        create_sql = schema.create_table_sql(self.table_name)
        logger.debug("Creating table with SQL: %s", create_sql)

        self._execute(create_sql, message="Failed to create table")
        self._schema = schema

        logger.info(
            "Created table '%s' with %d fields: %s",
            self.table_name, len(schema), list(schema.column_names),
        )
        return schema

    def describe(self) -> List[Tuple[str, ColumnType]]:
        """
        Column names and types as reported by the store, in table order.

        The identity column is left out. JSON columns are declared as
        TEXT and are reported as TEXT.
        """
        self._require_table("describe table")
        sql = f"PRAGMA table_info({quote_identifier(self.table_name)})"
        rows = self._execute(sql, message="Failed to query table schema").fetchall()

        # table_info rows: (cid, name, type, notnull, dflt_value, pk)
        return [
            (name, ColumnType.from_sql_type(declared))
            for _, name, declared, *_ in rows
            if name != IDENTITY_COLUMN
        ]

    # Writes

    def _insert_sql(self) -> str:
        columns = ", ".join(quote_identifier(name) for name in self.field_names)
        placeholders = ", ".join("?" for _ in self.field_names)
        return (
            f"INSERT INTO {quote_identifier(self.table_name)} "
            f"({columns}) VALUES ({placeholders})"
        )

    def insert_one(self, record: LogRecord) -> None:
        """Insert a single record outside of any batch."""
        self._require_table("insert log")
        self._execute(
            self._insert_sql(),
            to_params(record, self.field_names),
            message="Failed to insert log",
        )

    def insert_batch(self, records: Iterable[LogRecord]) -> int:
        """
        Insert records in one transaction.

        Either every record is stored or, on the first failure, none are.

        Returns:
            Number of rows inserted

        Raises:
            NotInitializedError: If the table does not exist yet
            StoreError: If any insert fails (after rolling back)
        """
        self._require_table("insert logs")

        all_params = [to_params(record, self.field_names) for record in records]
        insert_sql = self._insert_sql()
        logger.info("Inserting %d logs into database", len(all_params))
        logger.debug("Insert SQL: %s", insert_sql)

        try:
            self.conn.execute("BEGIN")
            for params in all_params:
                self.conn.execute(insert_sql, params)
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
            raise StoreError(
                f"Failed to insert log in batch: {e}",
                statement=insert_sql,
            ) from e

        logger.info("Successfully inserted %d logs", len(all_params))
        return len(all_params)

    # Reads

    def count(self) -> int:
        self._require_table("count logs")
        sql = f"SELECT COUNT(*) FROM {quote_identifier(self.table_name)}"
        return self._execute(sql, message="Failed to count logs").fetchone()[0]

    def query(self, where: Optional[str] = None) -> List[LogRecord]:
        """
        Fetch records, optionally filtered.

        Args:
            where: Boolean SQL expression placed verbatim after WHERE. It is
                neither validated nor escaped.

        Returns:
            Matching records in table scan order (insertion order unless the
            filter adds its own ORDER BY), identity column removed
        """
        self._require_table("query logs")

        sql = f"SELECT * FROM {quote_identifier(self.table_name)}"
        if where:
            sql += f" WHERE {where}"
        logger.debug("Executing query: %s", sql)

        cursor = self._execute(sql, message="Failed to query logs")
        column_names = [col[0] for col in cursor.description]
        try:
            logs = [from_row(column_names, row) for row in cursor]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to collect query results: {e}", statement=sql) from e

        logger.info("Query returned %d log entries", len(logs))
        return logs

    # Helpers

    def _require_table(self, action: str) -> None:
        if self._schema is None:
            raise NotInitializedError(
                f"Cannot {action}: table not created yet. "
                "Call create_table_from_records first"
            )

    def _execute(self, sql: str, params: Sequence = (), message: str = "Statement failed"):
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StoreError(f"{message}: {e}", statement=sql) from e
