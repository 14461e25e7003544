"""
Owner-scoped reminder operations, including the upcoming window
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from remindpay.models.reminder import Reminder
from . import repository
from .advancer import ReminderAdvancer
from .clock import Clock, system_clock
from .config import settings
from .exceptions import ReminderAccessError, ReminderNotFoundError
from .metrics import reminders_created_total
from .schemas import ReminderCreate, ReminderUpdate

logger = logging.getLogger(__name__)


class ReminderService:
    """Reminder CRUD for one authenticated owner plus the upcoming query."""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        window: Optional[timedelta] = None,
        advance_policy: Optional[str] = None,
    ):
        self.db = db
        self.clock = clock
        self.window = window or timedelta(minutes=settings.UPCOMING_WINDOW_MINUTES)
        self.advance_policy = advance_policy or settings.UPCOMING_ADVANCE_POLICY

    def create_reminder(self, user_id: int, data: ReminderCreate) -> Reminder:
        reminder = repository.create_reminder(self.db, user_id=user_id, data=data)
        reminders_created_total.inc()
        logger.info(f"[Reminders] Reminder {reminder.id} created for user {user_id}")
        return reminder

    def list_reminders(self, user_id: int) -> List[Reminder]:
        reminders = repository.list_reminders(self.db, user_id)
        logger.info(f"[Reminders] Got {len(reminders)} reminder(s) for user {user_id}")
        return reminders

    def get_reminder(self, user_id: int, reminder_id: int) -> Reminder:
        reminder = repository.get_reminder(self.db, reminder_id)
        if reminder is None:
            logger.info(f"[Reminders] Couldn't get reminder {reminder_id} for user {user_id}: not found")
            raise ReminderNotFoundError(reminder_id)
        if reminder.user_id != user_id:
            logger.warning(
                f"[Reminders] User {user_id} asked for reminder {reminder_id} owned by {reminder.user_id}"
            )
            raise ReminderAccessError(reminder_id)
        return reminder

    def update_reminder(self, user_id: int, reminder_id: int, data: ReminderUpdate) -> Reminder:
        reminder = self.get_reminder(user_id, reminder_id)
        reminder = repository.replace_reminder(self.db, reminder, data)
        logger.info(f"[Reminders] Updated reminder {reminder_id} for user {user_id}")
        return reminder

    def delete_reminder(self, user_id: int, reminder_id: int) -> None:
        reminder = self.get_reminder(user_id, reminder_id)
        repository.delete_reminder(self.db, reminder)
        logger.info(f"[Reminders] Deleted reminder {reminder_id} for user {user_id}")

    def delete_all_reminders(self, user_id: int) -> int:
        deleted = repository.delete_all_reminders(self.db, user_id)
        logger.info(f"[Reminders] Deleted {deleted} reminder(s) for user {user_id}")
        return deleted

    def upcoming(self, user_id: int, now: Optional[datetime] = None) -> List[Reminder]:
        """Reminders due in (now, now + window], advanced on view.

        The returned objects are detached snapshots taken before advancing, so
        callers see the remind_at that put each reminder in the window while
        the stored row already points at its next occurrence. Which reminders
        get advanced is controlled by ``advance_policy``: "all" consumes every
        reminder in the window, "overdue" only those already due at ``now``.
        """
        now = now or self.clock.now()
        end = now + self.window
        reminders = repository.find_due_within(self.db, user_id, now, end, include_start=False)
        for reminder in reminders:
            self.db.expunge(reminder)

        if not reminders:
            logger.info(f"[Reminders] No upcoming reminders for user {user_id}")
            return reminders

        advancer = ReminderAdvancer(self.db, source="upcoming")
        for reminder in reminders:
            if self.advance_policy == "overdue" and reminder.remind_at > now:
                continue
            advancer.advance_if_due(reminder)

        logger.info(f"[Reminders] Got {len(reminders)} upcoming reminder(s) for user {user_id}")
        return reminders
