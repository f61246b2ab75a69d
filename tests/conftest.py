"""
Shared fixtures.
"""

import pytest

from logsift.database.db import LogDatabase
from logsift.models.log_record import LogRecord


@pytest.fixture
def db():
    """Fresh in-memory store, closed after the test."""
    database = LogDatabase.in_memory()
    yield database
    database.close()


@pytest.fixture
def severity_records():
    """Two pino-style records at INFO and ERROR."""
    return [
        LogRecord(fields={"severity": 30, "time": 1531171074631, "msg": "hello world"}),
        LogRecord(fields={"severity": 50, "time": 1531171082399, "msg": "boom"}),
    ]
