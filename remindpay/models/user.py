from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from remindpay.db.base import Base
from remindpay.db.types import UTCDateTime
from remindpay.utils.timezone import utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)

    reminders = relationship("Reminder", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
