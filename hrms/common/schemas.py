"""Shared pydantic base for camelCase wire payloads."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire.

    Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AuditedResponse(CamelModel):
    """Response projection carrying the audit fields.

    ``created_time`` / ``last_modified_time`` are the stored epoch
    milliseconds; ``created_at`` / ``updated_at`` render them as UTC
    timestamps.
    """

    created_by: str
    last_modified_by: Optional[str] = None
    created_time: int
    last_modified_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _render_timestamps(self) -> "AuditedResponse":
        self.created_at = _from_millis(self.created_time)
        if self.last_modified_time is not None:
            self.updated_at = _from_millis(self.last_modified_time)
        return self


def _from_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
