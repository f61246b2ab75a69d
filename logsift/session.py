"""
Log session - wires parsing, schema inference, loading and filtering.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from logsift.config import Settings, get_settings
from logsift.database.db import LogDatabase
from logsift.exceptions import IngestionError
from logsift.filtering.orchestrator import FilterOrchestrator
from logsift.parsers.base import ParseResult
from logsift.parsers.json_parser import JSONLogParser
from logsift.parsers.reader import LogFileReader


logger = logging.getLogger(__name__)


class LogSession:
    """
    One loaded log source and the store holding it.

    The session owns its ``LogDatabase``; closing the session closes the
    connection.
    """

    def __init__(self, db: LogDatabase, parse_result: ParseResult):
        self.db = db
        self.parse_result = parse_result
        self.filters = FilterOrchestrator(db)

    @classmethod
    def load(cls, parse_result: ParseResult, settings: Optional[Settings] = None) -> "LogSession":
        """
        Create the table from parsed records and load all of them.

        The schema is inferred from the first ``settings.sample_size``
        records only.

        Raises:
            IngestionError: If no line could be parsed
            StoreError: If creating the table or loading the batch fails
        """
        settings = settings or get_settings()
        if not parse_result.records:
            raise IngestionError(0, "No log entries could be parsed")

        db = LogDatabase(settings.database_path, settings.table_name)
        try:
            db.create_table_from_records(parse_result.records, settings.sample_size)
            db.insert_batch(parse_result.records)
            session = cls(db, parse_result)
        except Exception:
            db.close()
            raise

        if parse_result.errors:
            logger.warning("%d lines could not be parsed", len(parse_result.errors))
        return session

    @classmethod
    def from_lines(cls, lines: Iterable[str], settings: Optional[Settings] = None) -> "LogSession":
        return cls.load(JSONLogParser().parse_lines(lines), settings)

    @classmethod
    def from_file(cls, path: Union[str, Path], settings: Optional[Settings] = None) -> "LogSession":
        return cls.load(LogFileReader(path).read_logs(), settings)

    @property
    def parse_errors(self) -> List[IngestionError]:
        return self.parse_result.errors

    def __enter__(self) -> "LogSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.db.close()
