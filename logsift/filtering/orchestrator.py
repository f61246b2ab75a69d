"""
Filter orchestration - tracks the active filter and its result set.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from logsift.database.db import LogDatabase
from logsift.exceptions import StoreError, UnknownPresetError
from logsift.filtering.presets import get_preset
from logsift.filtering.state import FilterApplied, FilterPending, FilterState, NoFilter
from logsift.models.column_type import ColumnType
from logsift.models.log_record import LogRecord


logger = logging.getLogger(__name__)


class FilterOrchestrator:
    """
    Applies operator-written filters against the store.

    The orchestrator:
    1. Sends filter text to the store as a WHERE expression
    2. Swaps in the result set only when the store accepts the filter
    3. Keeps the last good result set when a filter is rejected
    4. Records the store's error message for display
    """

    def __init__(self, db: LogDatabase, all_records: Optional[Sequence[LogRecord]] = None):
        """
        Initialize the orchestrator.

        Args:
            db: Store holding the loaded table
            all_records: Unfiltered record set. If None, it is read from the store.
        """
        self.db = db
        self.all_records: List[LogRecord] = (
            list(all_records) if all_records is not None else db.query()
        )
        self.field_schema: List[Tuple[str, ColumnType]] = db.describe()

        self.records: List[LogRecord] = self.all_records
        self.state: FilterState = NoFilter()
        self.active_filter: Optional[str] = None
        self.last_error: Optional[str] = None

    def apply(self, text: str) -> FilterState:
        """
        Apply a filter expression.

        Empty text clears the filter. On failure the state stays
        FilterPending, ``last_error`` is set, and the active filter and
        result set are left as they were.

        Returns:
            The resulting filter state
        """
        text = text.strip()
        if not text:
            return self.clear()

        self.state = FilterPending(text)
        try:
            records = self.db.query(text)
        except StoreError as e:
            self.last_error = f"SQL Error: {e.message}"
            logger.warning("Filter rejected: %s (%s)", text, e.message)
            return self.state

        self.records = records
        self.active_filter = text
        self.last_error = None
        self.state = FilterApplied(text)
        logger.info("Filter '%s' matched %d logs", text, len(records))
        return self.state

    def clear(self) -> FilterState:
        """Drop the active filter and show every record again."""
        self.records = self.all_records
        self.active_filter = None
        self.last_error = None
        self.state = NoFilter()
        return self.state

    def preset(self, name: str, now: Optional[datetime] = None) -> FilterState:
        """
        Apply a named preset filter.

        Raises:
            UnknownPresetError: If no preset has that name
        """
        preset = get_preset(name)
        if preset is None:
            raise UnknownPresetError(name)
        return self.apply(preset.expression(now))
