"""
Reminder enumerations and the occurrence calculator
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Union

from dateutil.relativedelta import relativedelta


class _SymbolicEnum(str, Enum):
    """Closed enumeration stored by symbol, also addressable by legacy ordinal."""

    @classmethod
    def _ordinal_members(cls) -> list:
        return list(cls)

    @classmethod
    def parse(cls, value: Any) -> "_SymbolicEnum":
        """Normalize a symbolic name or a legacy integer ordinal into a member.

        Booleans, numeric strings and out-of-range ordinals are rejected with
        ValueError.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unsupported {cls.__name__}: {value!r}")
        if isinstance(value, int):
            members = cls._ordinal_members()
            if 0 <= value < len(members):
                return members[value]
            raise ValueError(f"Unsupported {cls.__name__}: {value!r}")
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                raise ValueError(f"Unsupported {cls.__name__}: {value!r}") from None
        raise ValueError(f"Unsupported {cls.__name__}: {value!r}")

    @property
    def ordinal(self) -> int | None:
        members = self._ordinal_members()
        return members.index(self) if self in members else None


class ReminderType(_SymbolicEnum):
    """Kinds of reminders"""
    PAYMENT = "payment"
    BIRTHDAY = "birthday"
    EVENT = "event"


class OccurrenceType(_SymbolicEnum):
    """Repeat rules. NONE marks a reminder that never repeats."""
    DAILY = "daily"
    EVERY_OTHER_DAY = "every_other_day"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"
    NONE = "none"

    @classmethod
    def _ordinal_members(cls) -> list:
        # NONE was introduced after the ordinal encoding and has no ordinal
        return [m for m in cls if m is not cls.NONE]


DEFAULT_REMINDER_TYPE = ReminderType.EVENT
DEFAULT_OCCURRENCE = OccurrenceType.YEARLY

_DAY_STEPS = {
    OccurrenceType.DAILY: timedelta(days=1),
    OccurrenceType.EVERY_OTHER_DAY: timedelta(days=2),
    OccurrenceType.WEEKLY: timedelta(days=7),
    OccurrenceType.BI_WEEKLY: timedelta(days=14),
}

_MONTH_STEPS = {
    OccurrenceType.MONTHLY: 1,
    OccurrenceType.QUARTERLY: 3,
    OccurrenceType.HALF_YEARLY: 6,
    OccurrenceType.YEARLY: 12,
}


def is_repeating(occurrence: Union[OccurrenceType, str, int, None]) -> bool:
    try:
        return OccurrenceType.parse(occurrence) is not OccurrenceType.NONE
    except ValueError:
        # Unknown rules are treated as yearly by the calculator
        return True


def occurrence_step(occurrence: Union[OccurrenceType, str, int, None]) -> Union[timedelta, relativedelta]:
    try:
        rule = OccurrenceType.parse(occurrence)
    except ValueError:
        rule = DEFAULT_OCCURRENCE
    if rule in _DAY_STEPS:
        return _DAY_STEPS[rule]
    return relativedelta(months=_MONTH_STEPS.get(rule, 12))


def next_due_time(current: datetime, occurrence: Union[OccurrenceType, str, int, None]) -> datetime:
    """Calculate the next due time for a repeat rule.

    Day based rules add an exact duration. Month based rules add calendar
    months, clamping to the last day of the target month (Jan 31 + 1 month
    is Feb 28 or Feb 29). Anything that is not one of the eight repeat
    rules, NONE included, falls back to yearly.
    """
    return current + occurrence_step(occurrence)
