from datetime import datetime, timedelta, timezone

import pytest

from remindpay.reminders.recurrence import (
    DEFAULT_OCCURRENCE,
    DEFAULT_REMINDER_TYPE,
    OccurrenceType,
    ReminderType,
    is_repeating,
    next_due_time,
    occurrence_step,
)

UTC = timezone.utc


@pytest.mark.parametrize(
    "occurrence, expected",
    [
        (OccurrenceType.DAILY, datetime(2021, 1, 1, 9, 30, tzinfo=UTC)),
        (OccurrenceType.EVERY_OTHER_DAY, datetime(2021, 1, 2, 9, 30, tzinfo=UTC)),
        (OccurrenceType.WEEKLY, datetime(2021, 1, 7, 9, 30, tzinfo=UTC)),
        (OccurrenceType.BI_WEEKLY, datetime(2021, 1, 14, 9, 30, tzinfo=UTC)),
    ],
)
def test_day_steps_cross_month_and_year(occurrence, expected):
    start = datetime(2020, 12, 31, 9, 30, tzinfo=UTC)
    assert next_due_time(start, occurrence) == expected


@pytest.mark.parametrize(
    "start, expected",
    [
        (datetime(2020, 1, 31, 10, 0, tzinfo=UTC), datetime(2020, 2, 29, 10, 0, tzinfo=UTC)),
        (datetime(2021, 1, 31, 10, 0, tzinfo=UTC), datetime(2021, 2, 28, 10, 0, tzinfo=UTC)),
        (datetime(2020, 3, 31, 8, 0, tzinfo=UTC), datetime(2020, 4, 30, 8, 0, tzinfo=UTC)),
        (datetime(2020, 12, 15, 8, 0, tzinfo=UTC), datetime(2021, 1, 15, 8, 0, tzinfo=UTC)),
    ],
)
def test_monthly_clamps_to_end_of_month(start, expected):
    assert next_due_time(start, OccurrenceType.MONTHLY) == expected


def test_longer_month_based_steps():
    start = datetime(2020, 8, 31, 6, 0, tzinfo=UTC)
    assert next_due_time(start, OccurrenceType.QUARTERLY) == datetime(2020, 11, 30, 6, 0, tzinfo=UTC)
    assert next_due_time(start, OccurrenceType.HALF_YEARLY) == datetime(2021, 2, 28, 6, 0, tzinfo=UTC)
    leap = datetime(2020, 2, 29, 6, 0, tzinfo=UTC)
    assert next_due_time(leap, OccurrenceType.YEARLY) == datetime(2021, 2, 28, 6, 0, tzinfo=UTC)


def test_time_of_day_is_kept():
    start = datetime(2020, 5, 17, 23, 59, 58, 123000, tzinfo=UTC)
    for occurrence in OccurrenceType:
        result = next_due_time(start, occurrence)
        assert result > start
        assert (result.hour, result.minute, result.second, result.microsecond) == (23, 59, 58, 123000)


@pytest.mark.parametrize("occurrence", [OccurrenceType.NONE, "fortnightly", 42, None])
def test_unknown_or_non_repeating_rules_fall_back_to_yearly(occurrence):
    start = datetime(2020, 6, 1, 12, 0, tzinfo=UTC)
    assert next_due_time(start, occurrence) == datetime(2021, 6, 1, 12, 0, tzinfo=UTC)


def test_calculator_accepts_names_and_ordinals():
    start = datetime(2020, 6, 1, 12, 0, tzinfo=UTC)
    assert next_due_time(start, "weekly") == start + timedelta(days=7)
    assert next_due_time(start, 0) == start + timedelta(days=1)
    assert occurrence_step("bi_weekly") == timedelta(days=14)


def test_day_steps_cross_leap_day():
    assert next_due_time(datetime(2020, 2, 28, 10, 0, tzinfo=UTC), OccurrenceType.DAILY) == datetime(
        2020, 2, 29, 10, 0, tzinfo=UTC
    )
    assert next_due_time(datetime(2020, 2, 29, 10, 0, tzinfo=UTC), OccurrenceType.EVERY_OTHER_DAY) == datetime(
        2020, 3, 2, 10, 0, tzinfo=UTC
    )
    assert next_due_time(datetime(2020, 2, 25, 10, 0, tzinfo=UTC), OccurrenceType.WEEKLY) == datetime(
        2020, 3, 3, 10, 0, tzinfo=UTC
    )
    assert next_due_time(datetime(2020, 2, 20, 10, 0, tzinfo=UTC), OccurrenceType.BI_WEEKLY) == datetime(
        2020, 3, 5, 10, 0, tzinfo=UTC
    )


def test_ordinals_follow_declaration_order():
    assert [m.ordinal for m in ReminderType] == [0, 1, 2]
    assert OccurrenceType.DAILY.ordinal == 0
    assert OccurrenceType.MONTHLY.ordinal == 4
    assert OccurrenceType.YEARLY.ordinal == 7
    assert OccurrenceType.NONE.ordinal is None


def test_parse_accepts_names_and_ordinals():
    assert ReminderType.parse("payment") is ReminderType.PAYMENT
    assert ReminderType.parse(" Birthday ") is ReminderType.BIRTHDAY
    assert ReminderType.parse(2) is ReminderType.EVENT
    assert OccurrenceType.parse(4) is OccurrenceType.MONTHLY
    assert OccurrenceType.parse("none") is OccurrenceType.NONE
    assert OccurrenceType.parse(OccurrenceType.WEEKLY) is OccurrenceType.WEEKLY


@pytest.mark.parametrize("value", [-1, 3, "1", "", True, 1.0, None])
def test_parse_rejects_unknown_reminder_types(value):
    with pytest.raises(ValueError):
        ReminderType.parse(value)


@pytest.mark.parametrize("value", [-1, 8, "fortnightly", "4"])
def test_parse_rejects_unknown_occurrences(value):
    with pytest.raises(ValueError):
        OccurrenceType.parse(value)


def test_defaults_and_repeating():
    assert DEFAULT_REMINDER_TYPE is ReminderType.EVENT
    assert DEFAULT_OCCURRENCE is OccurrenceType.YEARLY
    assert not is_repeating(OccurrenceType.NONE)
    assert not is_repeating("none")
    assert is_repeating(OccurrenceType.DAILY)
    assert is_repeating("something-else")
