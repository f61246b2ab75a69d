"""
Line-by-line reader for log files on disk.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from logsift.exceptions import IngestionError
from logsift.parsers.base import BaseParser, ParseResult
from logsift.parsers.json_parser import JSONLogParser


logger = logging.getLogger(__name__)


class LogFileReader:
    """
    Reads a log file and parses it one line at a time.

    Lines are numbered from 1. Undecodable bytes and malformed lines are
    reported per line; only failing to open the file is fatal.
    """

    def __init__(
        self,
        path: Union[str, Path],
        parser: Optional[BaseParser] = None,
        encoding: str = "utf-8",
    ):
        self.path = Path(path)
        self.parser = parser or JSONLogParser()
        self.encoding = encoding
        self.line_number = 0

    def read_logs(self) -> ParseResult:
        """
        Parse every line of the file.

        Returns:
            ParseResult with parsed records and per-line errors

        Raises:
            IngestionError: If the file cannot be opened (line 0)
        """
        try:
            handle = self.path.open("rb")
        except OSError as e:
            raise IngestionError(0, f"Failed to read log file {self.path}: {e}") from e

        result = ParseResult()
        with handle:
            for raw in handle:
                self.line_number += 1
                try:
                    line = raw.decode(self.encoding)
                except UnicodeDecodeError as e:
                    result.errors.append(
                        IngestionError(self.line_number, f"Invalid {self.encoding}: {e}")
                    )
                    continue

                try:
                    result.records.append(self.parser.parse_line(line, self.line_number))
                except IngestionError as e:
                    result.errors.append(e)

        logger.info(
            "Read %d lines from %s (%d parsed, %d failed)",
            self.line_number, self.path, len(result.records), len(result.errors),
        )
        return result
