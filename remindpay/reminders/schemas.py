"""
Request/response schemas for reminders
"""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .recurrence import DEFAULT_OCCURRENCE, DEFAULT_REMINDER_TYPE, OccurrenceType, ReminderType


class ReminderBase(BaseModel):
    """Body shared by create and full update.

    ``type`` and ``occurrence`` accept a symbolic name ("monthly") or a legacy
    ordinal (4) and are normalized to the enum on the way in.
    """
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ReminderType = DEFAULT_REMINDER_TYPE
    occurrence: OccurrenceType = DEFAULT_OCCURRENCE
    remind_at: datetime

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required.")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> ReminderType:
        if v is None:
            return DEFAULT_REMINDER_TYPE
        try:
            return ReminderType.parse(v)
        except ValueError:
            raise ValueError("Type is not supported.") from None

    @field_validator("occurrence", mode="before")
    @classmethod
    def normalize_occurrence(cls, v: Any) -> OccurrenceType:
        if v is None:
            return DEFAULT_OCCURRENCE
        try:
            return OccurrenceType.parse(v)
        except ValueError:
            raise ValueError("Occurrence is not supported.") from None


class ReminderCreate(ReminderBase):
    pass


class ReminderUpdate(ReminderBase):
    pass


class ReminderRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    type: ReminderType
    occurrence: OccurrenceType
    remind_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReminderDeleted(BaseModel):
    id: int


class RemindersDeleted(BaseModel):
    success: bool = True
    deleted: int
