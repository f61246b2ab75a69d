"""
Tests for the SQLite log store and value marshalling.
"""

import sqlite3

import pytest

from logsift.database.db import LogDatabase
from logsift.database.marshal import (
    SQL_NULL,
    SqlBool,
    SqlFloat,
    SqlInt,
    SqlText,
    from_cell,
    sql_values,
    to_params,
    to_sql_value,
)
from logsift.exceptions import NotInitializedError, SchemaFrozenError, StoreError
from logsift.models.column_type import ColumnType
from logsift.models.log_record import LogRecord


def make_record(**fields) -> LogRecord:
    """Helper to build a record from keyword arguments."""
    return LogRecord(fields=fields)


class TestMarshalling:
    """Tests for record to parameter conversion."""

    def test_to_sql_value(self):
        assert to_sql_value(None) == SQL_NULL
        assert to_sql_value(True) == SqlBool(True)
        assert to_sql_value(7) == SqlInt(7)
        assert to_sql_value(2.5) == SqlFloat(2.5)
        assert to_sql_value("x") == SqlText("x")
        assert to_sql_value({"foo": "bar"}) == SqlText('{"foo":"bar"}')
        assert to_sql_value([1, 2]) == SqlText("[1,2]")

    def test_huge_integer_becomes_float(self):
        assert to_sql_value(2 ** 64) == SqlFloat(float(2 ** 64))

    def test_integer_beyond_float_range_becomes_text(self):
        value = 10 ** 400
        assert to_sql_value(value) == SqlText(str(value))

    def test_params_follow_column_order(self):
        record = make_record(b="x", a=1)
        assert to_params(record, ["a", "b", "c"]) == (1, "x", None)

    def test_params_use_aliases(self):
        record = make_record(msg="hi", lvl=30)
        assert to_params(record, ["level", "message"]) == (30, "hi")

    def test_canonical_name_wins_over_alias(self):
        first = LogRecord(fields={"msg": "alias", "message": "canonical"})
        second = LogRecord(fields={"message": "canonical", "msg": "alias"})

        assert sql_values(first, ["message"]) == (SqlText("canonical"),)
        assert sql_values(second, ["message"]) == (SqlText("canonical"),)

    def test_unknown_fields_dropped(self):
        record = make_record(a=1, extra="ignored")
        assert to_params(record, ["a"]) == (1,)

    def test_from_cell(self):
        assert from_cell("x") == "x"
        assert from_cell(5) == 5
        assert from_cell(2.5) == 2.5
        assert from_cell(True) is True
        assert from_cell(None) is None

    def test_integral_float_collapses_to_int(self):
        value = from_cell(3.0)
        assert value == 3
        assert isinstance(value, int)


class TestLogDatabase:
    """Tests for LogDatabase table creation, loading and queries."""

    def test_create_table_and_insert(self, db):
        record = make_record(msg="test message", level=30, time=1234567890)

        db.create_table_from_records([record])
        db.insert_one(record)

        assert db.count() == 1
        assert db.field_names == ("level", "message", "time")

    def test_batch_insert(self, db):
        records = [
            make_record(msg=f"message {i}", level=30, time=1234567890 + i)
            for i in range(10)
        ]

        db.create_table_from_records(records)

        assert db.insert_batch(records) == 10
        assert db.count() == 10

    def test_field_normalization(self, db):
        records = [
            make_record(msg="message 1", lvl=30),
            make_record(message="message 2", level=40),
        ]

        db.create_table_from_records(records)
        db.insert_batch(records)

        rows = db.query()
        assert [r.fields for r in rows] == [
            {"level": 30, "message": "message 1"},
            {"level": 40, "message": "message 2"},
        ]

    def test_scalar_round_trip(self, db):
        record = make_record(a=1, b=2.5, c=True, d="x")

        db.create_table_from_records([record])
        db.insert_batch([record])

        [restored] = db.query()
        assert restored.fields == {"a": 1, "b": 2.5, "c": True, "d": "x"}
        assert restored.get("c") is True

    def test_float_column_returns_int_for_integral_values(self, db):
        records = [make_record(v=1), make_record(v=2.5)]

        db.create_table_from_records(records)
        db.insert_batch(records)

        first, second = db.query()
        assert first.get("v") == 1
        assert isinstance(first.get("v"), int)
        assert second.get("v") == 2.5

    def test_json_column_returns_text(self, db):
        record = make_record(meta={"foo": "bar"}, tags=["a"])

        db.create_table_from_records([record])
        db.insert_batch([record])

        [restored] = db.query()
        assert restored.get("meta") == '{"foo":"bar"}'
        assert restored.get("tags") == '["a"]'

    def test_missing_fields_are_null(self, db):
        records = [make_record(a=1, b="x"), make_record(a=2)]

        db.create_table_from_records(records)
        db.insert_batch(records)

        assert db.query()[1].fields == {"a": 2, "b": None}

    def test_field_outside_sample_is_dropped(self, db):
        records = [make_record(a=1), make_record(a=2, late="dropped")]

        db.create_table_from_records(records, sample_size=1)
        db.insert_batch(records)

        assert db.field_names == ("a",)
        assert db.query()[1].fields == {"a": 2}

    def test_identity_column_not_returned(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        for restored in db.query():
            assert "_id" not in restored.fields

    def test_batch_is_atomic(self, db):
        records = [make_record(n=i, msg=f"row {i}") for i in range(10)]
        # 7th record repeats a value under a unique index
        records[6] = make_record(n=0, msg="duplicate")

        db.create_table_from_records(records)
        db.conn.execute('CREATE UNIQUE INDEX idx_logs_n ON logs ("n")')

        with pytest.raises(StoreError) as exc_info:
            db.insert_batch(records)

        assert exc_info.value.statement.startswith('INSERT INTO "logs"')
        assert db.count() == 0

    def test_insert_before_create(self, db):
        record = make_record(a=1)

        with pytest.raises(NotInitializedError):
            db.insert_one(record)
        with pytest.raises(NotInitializedError):
            db.insert_batch([record])
        with pytest.raises(NotInitializedError):
            db.query()

    def test_schema_is_frozen(self, db):
        db.create_table_from_records([make_record(a=1)])

        with pytest.raises(SchemaFrozenError):
            db.create_table_from_records([make_record(b=1)])

    def test_query_with_filter(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        [match] = db.query("severity >= 40")
        assert match.message() == "boom"
        assert db.query("severity >= 999") == []

    def test_filter_with_trailing_semicolon(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        [match] = db.query("severity >= 40;")
        assert match.message() == "boom"

    def test_filter_with_order_and_limit(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        newest_first = db.query("severity >= 0 ORDER BY time DESC")
        assert [r.message() for r in newest_first] == ["boom", "hello world"]
        [first] = db.query("severity >= 0 LIMIT 1")
        assert first.message() == "hello world"

    def test_filter_with_trailing_comment(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        assert len(db.query("severity >= 0 -- everything")) == 2

    def test_invalid_filter_reports_statement(self, db, severity_records):
        db.create_table_from_records(severity_records)
        db.insert_batch(severity_records)

        with pytest.raises(StoreError) as exc_info:
            db.query("severity >>> 40")

        assert "severity >>> 40" in exc_info.value.statement

    def test_describe(self, db, severity_records):
        db.create_table_from_records(severity_records)

        assert db.describe() == [
            ("message", ColumnType.TEXT),
            ("severity", ColumnType.INTEGER),
            ("time", ColumnType.INTEGER),
        ]

    def test_file_backed(self, tmp_path):
        path = tmp_path / "data" / "logs.db"
        records = [make_record(a=1), make_record(a=2)]

        with LogDatabase(path) as database:
            database.create_table_from_records(records)
            database.insert_batch(records)

        conn = sqlite3.connect(path)
        try:
            assert conn.execute("SELECT COUNT(*) FROM logs").fetchone()[0] == 2
        finally:
            conn.close()
