"""
Parser for JSON-formatted logs (one object per line).
"""

import json
import logging
import math
from typing import NoReturn

from logsift.database.schema import INT64_MAX, INT64_MIN
from logsift.exceptions import IngestionError
from logsift.models.log_record import LogRecord
from logsift.parsers.base import BaseParser


logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def _parse_bounded_int(text: str) -> int:
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        try:
            float(value)
        except OverflowError:
            raise ValueError(f"Number out of range: {text[:32]}") from None
    return value


def _loads(line: str):
    return json.loads(
        line,
        parse_constant=_reject_constant,
        parse_float=_parse_finite_float,
        parse_int=_parse_bounded_int,
    )


class JSONLogParser(BaseParser):
    """
    Parser for newline-delimited JSON application logs.
    
    Every line must hold a single non-empty JSON object. Field names and
    values are kept as-is; normalization happens later, at the store.
    """
    
    def can_parse(self, line: str) -> bool:
        """Check if line is a JSON object."""
        line = line.strip()
        if not line:
            return False
        
        # Quick check for JSON structure
        if not (line.startswith("{") and line.endswith("}")):
            return False
        
        try:
            _loads(line)
            return True
        except ValueError:
            return False
    
    def parse_line(self, line: str, line_number: int = 0) -> LogRecord:
        """Parse a single JSON log line."""
        line = line.strip()
        if not line:
            raise IngestionError(line_number, "Empty line")
        
        try:
            data = _loads(line)
        except ValueError as e:
            # JSONDecodeError is a ValueError subclass
            logger.warning("Line %d: failed to parse JSON: %s", line_number, e)
            raise IngestionError(line_number, f"Failed to parse JSON: {e}") from e
        
        if not isinstance(data, dict):
            raise IngestionError(
                line_number,
                f"Expected a JSON object, got {type(data).__name__}",
            )
        
        if not data:
            raise IngestionError(line_number, "Empty JSON object")
        
        return LogRecord(fields=data)
