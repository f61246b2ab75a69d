"""
Log record model.

A record is the parsed form of one JSON log line: a mapping of field
names to JSON values. Well-known fields (time, level, message) are
exposed through typed projections that return None when the field is
missing or has the wrong shape.
"""

from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, ItemsView, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from logsift.models.field_names import get_canonical
from logsift.models.severity import Severity


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class LogRecord(BaseModel):
    """
    One ingested log line.

    Field names are kept exactly as they appeared in the source; canonical
    names are only applied when a projection or the store looks them up.
    The fields are held in a read-only mapping.
    """

    fields: Mapping[str, Any] = Field(
        description="Raw field name to JSON value"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "fields": {
                    "level": 30,
                    "time": 1531171074631,
                    "msg": "hello world",
                    "pid": 657,
                    "hostname": "Davids-MBP-3.fritz.box",
                }
            }
        },
    )

    @field_validator("fields")
    @classmethod
    def freeze_fields(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        if not value:
            raise ValueError("Empty JSON object")
        return MappingProxyType(dict(value))

    @field_serializer("fields")
    def dump_fields(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def items(self) -> ItemsView[str, Any]:
        return self.fields.items()

    # Typed projections

    def timestamp_ms(self) -> Optional[int]:
        """Epoch milliseconds from the ``time`` field, if it is an integer."""
        value = get_canonical(self.fields, "time")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def timestamp(self) -> Optional[datetime]:
        """UTC datetime for ``timestamp_ms``, None if missing or out of range."""
        millis = self.timestamp_ms()
        if millis is None:
            return None
        try:
            return EPOCH + timedelta(milliseconds=millis)
        except OverflowError:
            return None

    def level_code(self) -> Optional[int]:
        """Raw numeric level, if present and non-negative."""
        value = get_canonical(self.fields, "level")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return None

    def severity(self) -> Optional[Severity]:
        code = self.level_code()
        if code is None:
            return None
        return Severity.from_code(code)

    def message(self) -> Optional[str]:
        value = get_canonical(self.fields, "message")
        return value if isinstance(value, str) else None
