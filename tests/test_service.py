from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from remindpay.reminders import advancer as advancer_module
from remindpay.reminders import repository
from remindpay.reminders.exceptions import ReminderAccessError, ReminderNotFoundError
from remindpay.reminders.recurrence import OccurrenceType
from remindpay.reminders.service import ReminderService

UTC = timezone.utc
N = datetime(2020, 6, 1, 12, 0, tzinfo=UTC)


def test_upcoming_window_excludes_now(db, user, make_reminder, clock):
    at_now = make_reminder(user, N, occurrence=OccurrenceType.DAILY)
    at_end = make_reminder(user, N + timedelta(hours=1), occurrence=OccurrenceType.DAILY)
    clock.set(N)

    upcoming = ReminderService(db, clock=clock).upcoming(user.id)

    assert [r.id for r in upcoming] == [at_end.id]
    assert repository.get_reminder(db, at_now.id).remind_at == N


def test_custom_window(db, user, make_reminder):
    reminder = make_reminder(user, N + timedelta(minutes=90))
    service = ReminderService(db, window=timedelta(hours=2))

    assert [r.id for r in service.upcoming(user.id, now=N)] == [reminder.id]


def test_overdue_policy_only_advances_due_reminders(db, user, make_reminder):
    later = N + timedelta(minutes=30)
    reminder = make_reminder(user, later, occurrence=OccurrenceType.WEEKLY)
    service = ReminderService(db, advance_policy="overdue")

    upcoming = service.upcoming(user.id, now=N)

    assert [r.remind_at for r in upcoming] == [later]
    assert repository.get_reminder(db, reminder.id).remind_at == later


def test_all_policy_returns_pre_advance_snapshots(db, user, make_reminder):
    due = N + timedelta(minutes=30)
    reminder = make_reminder(user, due, occurrence=OccurrenceType.WEEKLY)

    upcoming = ReminderService(db, advance_policy="all").upcoming(user.id, now=N)

    assert [r.remind_at for r in upcoming] == [due]
    assert repository.get_reminder(db, reminder.id).remind_at == due + timedelta(days=7)


def test_get_enforces_ownership(db, user, other_user, make_reminder):
    reminder = make_reminder(user, N)
    service = ReminderService(db)

    assert service.get_reminder(user.id, reminder.id).id == reminder.id
    with pytest.raises(ReminderAccessError):
        service.get_reminder(other_user.id, reminder.id)
    with pytest.raises(ReminderNotFoundError):
        service.get_reminder(user.id, reminder.id + 100)


def test_store_failure_fails_upcoming(db, user, make_reminder, monkeypatch):
    due = N + timedelta(minutes=20)
    reminder = make_reminder(user, due, occurrence=OccurrenceType.DAILY)

    def broken(*args, **kwargs):
        raise OperationalError("UPDATE reminders", {}, Exception("connection refused"))

    monkeypatch.setattr(advancer_module, "advance_reminder", broken)

    with pytest.raises(OperationalError):
        ReminderService(db, advance_policy="all").upcoming(user.id, now=N)
    assert repository.get_reminder(db, reminder.id).remind_at == due
