"""
Reminder model - one row per reminder, remind_at is the next due instant
"""
from sqlalchemy import Column, Enum as SAEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from remindpay.db.base import Base
from remindpay.db.types import UTCDateTime
from remindpay.utils.timezone import utc_now
from remindpay.reminders.recurrence import DEFAULT_OCCURRENCE, DEFAULT_REMINDER_TYPE, OccurrenceType, ReminderType


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(
        SAEnum(ReminderType, native_enum=False, length=32, values_callable=_enum_values, name="reminder_type"),
        nullable=False,
        default=DEFAULT_REMINDER_TYPE,
    )
    occurrence = Column(
        SAEnum(OccurrenceType, native_enum=False, length=32, values_callable=_enum_values, name="occurrence_type"),
        nullable=False,
        default=DEFAULT_OCCURRENCE,
    )
    remind_at = Column(UTCDateTime, nullable=False, index=True)

    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="reminders")

    __table_args__ = (
        Index("ix_reminders_user_remind_at", "user_id", "remind_at"),
    )

    def __repr__(self) -> str:
        return f"<Reminder id={self.id} user_id={self.user_id} occurrence={self.occurrence} remind_at={self.remind_at}>"
