"""
Pydantic schemas for request history records.

Defines schemas for returning attempt records.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


class AttemptResponse(BaseModel):
    """Schema for an attempt record with all fields."""
    id: int
    method: str
    url: str
    month: str
    day: str
    year: str
    time: str
    created_at: datetime
    is_favorite: bool

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def created_at_in_utc(cls, value: datetime) -> datetime:
        # SQLite returns stored UTC times without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class AttemptListResponse(BaseModel):
    """Schema for paginated history list response."""
    items: list[AttemptResponse]
    count: int


class ClearResult(BaseModel):
    removed_count: int


class DeleteResult(BaseModel):
    id: int
