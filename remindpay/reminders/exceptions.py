class ReminderError(Exception):
    """Base error for reminder operations."""


class ReminderNotFoundError(ReminderError):
    def __init__(self, reminder_id) -> None:
        super().__init__(f"Reminder {reminder_id} not found")
        self.reminder_id = reminder_id


class ReminderAccessError(ReminderError):
    """Reminder exists but belongs to another owner."""

    def __init__(self, reminder_id) -> None:
        super().__init__(f"Reminder {reminder_id} is not owned by the caller")
        self.reminder_id = reminder_id
