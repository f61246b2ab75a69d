"""
Canned filter expressions.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from logsift.models.severity import Severity


@dataclass(frozen=True)
class FilterPreset:
    """A named filter whose expression is built when it is applied."""
    name: str
    description: str
    build: Callable[[datetime], str]

    def expression(self, now: Optional[datetime] = None) -> str:
        return self.build(now or datetime.now(timezone.utc))


def severity_at_least(severity: Severity) -> Callable[[datetime], str]:
    return lambda _now: f"level >= {severity.value}"


def within_last(window: timedelta) -> Callable[[datetime], str]:
    def build(now: datetime) -> str:
        cutoff_ms = int((now - window).timestamp() * 1000)
        return f"time >= {cutoff_ms}"
    return build


PRESETS: Dict[str, FilterPreset] = {
    preset.name: preset
    for preset in (
        FilterPreset("errors", "Errors only", severity_at_least(Severity.ERROR)),
        FilterPreset("warnings", "Warnings and above", severity_at_least(Severity.WARN)),
        FilterPreset("last_hour", "Last hour", within_last(timedelta(hours=1))),
    )
}


def get_preset(name: str) -> Optional[FilterPreset]:
    return PRESETS.get(name)
