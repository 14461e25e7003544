from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import delete, select, update

from remindpay.models.reminder import Reminder
from remindpay.utils.timezone import to_utc_aware, utc_now
from .schemas import ReminderCreate, ReminderUpdate


class AdvanceResult(str, Enum):
    ADVANCED = "advanced"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


def create_reminder(db: Session, *, user_id: int, data: ReminderCreate) -> Reminder:
    now = utc_now()
    reminder = Reminder(
        user_id=user_id,
        title=data.title,
        description=data.description,
        type=data.type,
        occurrence=data.occurrence,
        remind_at=to_utc_aware(data.remind_at),
        created_at=now,
        updated_at=now,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


def get_reminder(db: Session, reminder_id: int) -> Optional[Reminder]:
    return db.get(Reminder, reminder_id, populate_existing=True)


def list_reminders(db: Session, user_id: int) -> List[Reminder]:
    stmt = (
        select(Reminder)
        .where(Reminder.user_id == user_id)
        .order_by(Reminder.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(db.execute(stmt).scalars())


def replace_reminder(db: Session, reminder: Reminder, data: ReminderUpdate) -> Reminder:
    """Full overwrite of the caller-owned fields."""
    reminder.title = data.title
    reminder.description = data.description
    reminder.type = data.type
    reminder.occurrence = data.occurrence
    reminder.remind_at = to_utc_aware(data.remind_at)
    reminder.updated_at = utc_now()
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


def delete_reminder(db: Session, reminder: Reminder) -> None:
    db.delete(reminder)
    db.commit()


def delete_all_reminders(db: Session, user_id: int) -> int:
    result = db.execute(
        delete(Reminder)
        .where(Reminder.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount or 0


def find_overdue(db: Session, as_of: datetime) -> List[Reminder]:
    """All reminders, of any owner, with remind_at <= as_of."""
    stmt = (
        select(Reminder)
        .where(Reminder.remind_at <= to_utc_aware(as_of))
        .order_by(Reminder.remind_at.asc(), Reminder.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(db.execute(stmt).scalars())


def find_due_within(
    db: Session,
    user_id: int,
    start: datetime,
    end: datetime,
    include_start: bool = True,
) -> List[Reminder]:
    """Reminders of one owner due between start and end, in creation order.

    Both bounds are inclusive unless include_start is False.
    """
    start = to_utc_aware(start)
    lower = Reminder.remind_at >= start if include_start else Reminder.remind_at > start
    stmt = (
        select(Reminder)
        .where(Reminder.user_id == user_id)
        .where(lower)
        .where(Reminder.remind_at <= to_utc_aware(end))
        .order_by(Reminder.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(db.execute(stmt).scalars())


def advance_reminder(
    db: Session,
    reminder_id: int,
    new_remind_at: datetime,
    expected_remind_at: Optional[datetime] = None,
) -> AdvanceResult:
    """Move one reminder's remind_at without touching the rest of the row.

    With expected_remind_at the write only lands if the stored value still
    equals it (compare-and-swap). Writing a value the row already holds is a
    successful no-op, so repeating a call is safe.
    """
    new_remind_at = to_utc_aware(new_remind_at)
    stmt = update(Reminder).where(Reminder.id == reminder_id)
    if expected_remind_at is not None:
        stmt = stmt.where(Reminder.remind_at == to_utc_aware(expected_remind_at))
    stmt = (
        stmt.values(remind_at=new_remind_at, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        if result.rowcount:
            db.commit()
            return AdvanceResult.ADVANCED

        current = db.execute(
            select(Reminder.remind_at).where(Reminder.id == reminder_id)
        ).scalar_one_or_none()
        db.commit()
    except Exception:
        db.rollback()
        raise

    if current is None:
        return AdvanceResult.NOT_FOUND
    if to_utc_aware(current) == new_remind_at:
        return AdvanceResult.ADVANCED
    return AdvanceResult.CONFLICT
