"""
Abstract base class for log parsers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List

from logsift.exceptions import IngestionError
from logsift.models.log_record import LogRecord


@dataclass
class ParseResult:
    """
    Outcome of parsing a stream of lines.

    Failures are kept next to the successes; a bad line never stops the
    rest of the stream from being parsed.
    """
    records: List[LogRecord] = field(default_factory=list)
    errors: List[IngestionError] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        return len(self.records) + len(self.errors)

    def summary(self) -> dict:
        return {
            "parsed": len(self.records),
            "failed": len(self.errors),
            "total_lines": self.total_lines,
        }


class BaseParser(ABC):
    """
    Abstract base class for all log parsers.
    
    Each parser must implement:
    - can_parse(): Check if a line matches this parser's format
    - parse_line(): Parse a single log line into a LogRecord
    """
    
    @abstractmethod
    def can_parse(self, line: str) -> bool:
        """
        Check if this parser can handle the given log line.
        
        Args:
            line: A single log line
            
        Returns:
            True if this parser can parse the line
        """
        pass
    
    @abstractmethod
    def parse_line(self, line: str, line_number: int = 0) -> LogRecord:
        """
        Parse a single log line into a LogRecord.
        
        Args:
            line: A single log line
            line_number: 1-based position of the line, used in errors
            
        Returns:
            The parsed LogRecord

        Raises:
            IngestionError: If the line is empty or malformed
        """
        pass
    
    def parse_lines(self, lines: Iterable[str], start: int = 1) -> ParseResult:
        """
        Parse an iterable of lines, collecting failures per line.
        
        Args:
            lines: Raw lines, with or without trailing newlines
            start: Number given to the first line
            
        Returns:
            ParseResult with every record and every per-line error
        """
        result = ParseResult()
        for line_number, line in enumerate(lines, start):
            try:
                result.records.append(self.parse_line(line, line_number))
            except IngestionError as e:
                result.errors.append(e)
        
        return result

    def parse_content(self, content: str) -> ParseResult:
        """
        Parse multiple log lines from a content string.
        
        Args:
            content: Multi-line string of log entries
            
        Returns:
            ParseResult for every line in the content
        """
        return self.parse_lines(content.splitlines())
