"""
Filter states.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NoFilter:
    """Showing the full, unfiltered record set."""
    name = "none"


@dataclass(frozen=True)
class FilterPending:
    """A filter was submitted but the store has not accepted it."""
    text: str
    name = "pending"


@dataclass(frozen=True)
class FilterApplied:
    """The store accepted the filter and its result set is active."""
    text: str
    name = "applied"


FilterState = Union[NoFilter, FilterPending, FilterApplied]
