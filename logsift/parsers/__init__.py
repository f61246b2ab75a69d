"""
Log parsers and readers.
"""

from logsift.parsers.base import BaseParser, ParseResult
from logsift.parsers.json_parser import JSONLogParser
from logsift.parsers.reader import LogFileReader

__all__ = [
    "BaseParser",
    "ParseResult",
    "JSONLogParser",
    "LogFileReader",
]
