"""
Moves reminders that crossed their due time to their next occurrence
"""
import logging
from enum import Enum

from sqlalchemy.orm import Session

from remindpay.models.reminder import Reminder
from .metrics import reminders_advanced_total, reminders_advance_skipped_total
from .recurrence import is_repeating, next_due_time
from .repository import AdvanceResult, advance_reminder

logger = logging.getLogger(__name__)


class AdvanceOutcome(str, Enum):
    ADVANCED = "advanced"
    SKIPPED = "skipped"


class ReminderAdvancer:
    """Advances reminder snapshots by exactly one occurrence step.

    The next due time is computed from the snapshot's remind_at, and the write
    is conditioned on the stored value still being that remind_at. Two callers
    racing on the same snapshot therefore compute the same destination and the
    reminder moves one step, not two. Store errors propagate to the caller.
    """

    def __init__(self, db: Session, source: str = "sweep"):
        self.db = db
        self.source = source

    def advance_if_due(self, reminder: Reminder) -> AdvanceOutcome:
        if not is_repeating(reminder.occurrence):
            logger.debug(f"[Advancer] Reminder {reminder.id} does not repeat, leaving remind_at as is")
            reminders_advance_skipped_total.labels(source=self.source, reason="non_repeating").inc()
            return AdvanceOutcome.SKIPPED

        previous = reminder.remind_at
        next_at = next_due_time(previous, reminder.occurrence)
        result = advance_reminder(self.db, reminder.id, next_at, expected_remind_at=previous)

        if result is AdvanceResult.ADVANCED:
            reminders_advanced_total.labels(source=self.source).inc()
            logger.info(f"[Advancer] Updated {reminder.id}. Next occurrence: {next_at.isoformat()}")
            return AdvanceOutcome.ADVANCED

        if result is AdvanceResult.NOT_FOUND:
            logger.info(f"[Advancer] Reminder {reminder.id} was deleted before it could be advanced")
        else:
            logger.info(
                f"[Advancer] Reminder {reminder.id} moved away from {previous.isoformat()} concurrently, skipping"
            )
        reminders_advance_skipped_total.labels(source=self.source, reason=result.value).inc()
        return AdvanceOutcome.SKIPPED
