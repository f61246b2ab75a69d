"""
Filter orchestration and preset filters.
"""

from logsift.filtering.orchestrator import FilterOrchestrator
from logsift.filtering.presets import PRESETS, FilterPreset, get_preset
from logsift.filtering.state import FilterApplied, FilterPending, FilterState, NoFilter

__all__ = [
    "FilterOrchestrator",
    "FilterPreset",
    "PRESETS",
    "get_preset",
    "FilterState",
    "NoFilter",
    "FilterPending",
    "FilterApplied",
]
