"""
Periodic sweep of overdue reminders.

The driver fires once a day at a fixed wall-clock time, collects every
overdue reminder across all owners and advances each one a single occurrence
step. A reminder overdue by ten days on a daily rule therefore moves one day
per sweep; the sweep does not catch up to the present.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone as dt_timezone
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from sqlalchemy.orm import Session

from remindpay.db.session import SessionLocal
from remindpay.utils.timezone import get_zoneinfo
from .advancer import AdvanceOutcome, ReminderAdvancer
from .clock import Clock, system_clock
from .config import settings
from .metrics import sweep_cycles_total, sweep_failures_total, sweep_overlaps_total
from .repository import find_overdue

logger = logging.getLogger(__name__)


class SweepState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class SweepReport:
    started_at: datetime
    found: int = 0
    advanced: int = 0
    skipped: int = 0
    failed_ids: List[int] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_ids)


class SweepDriver:
    """Owns the daily sweep: one cycle at a time, explicit start/stop."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Clock = system_clock,
        hour: int = settings.SWEEP_HOUR,
        minute: int = settings.SWEEP_MINUTE,
        tz_name: str = settings.SWEEP_TIMEZONE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.hour = hour
        self.minute = minute
        self.tz = get_zoneinfo(tz_name)
        self._sleep = sleep
        self._latch = threading.Lock()
        self._state = SweepState.IDLE
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SweepState:
        return self._state

    @property
    def is_started(self) -> bool:
        return self._task is not None and not self._task.done()

    def next_fire_after(self, now: datetime) -> datetime:
        """First configured wall-clock fire time strictly after ``now`` (UTC)."""
        local = now.astimezone(self.tz)
        fire_time = time(self.hour, self.minute)
        candidate = datetime.combine(local.date(), fire_time, tzinfo=self.tz)
        if candidate <= local:
            candidate = datetime.combine(local.date() + timedelta(days=1), fire_time, tzinfo=self.tz)
        return candidate.astimezone(dt_timezone.utc)

    def run_once(self, now: Optional[datetime] = None) -> Optional[SweepReport]:
        """Run a single sweep cycle.

        Returns None without doing anything when a previous cycle is still
        running.
        """
        if not self._latch.acquire(blocking=False):
            sweep_overlaps_total.inc()
            logger.warning("⚠️ [Sweep] Previous cycle still running - skipping this fire")
            return None
        self._state = SweepState.RUNNING
        try:
            return self._sweep(now or self.clock.now())
        finally:
            self._state = SweepState.IDLE
            self._latch.release()

    def _sweep(self, now: datetime) -> SweepReport:
        report = SweepReport(started_at=now)
        db = self.session_factory()
        try:
            overdue = find_overdue(db, now)
            sweep_cycles_total.inc()
            report.found = len(overdue)
            if not overdue:
                logger.info("[Sweep] No overdue reminders.")
                return report

            logger.info(f"🕒 [Sweep] {len(overdue)} overdue reminder(s) as of {now.isoformat()}")
            # Detached snapshots: a rollback must not expire them and force a reload
            db.expunge_all()
            advancer = ReminderAdvancer(db, source="sweep")
            for reminder in overdue:
                reminder_id = reminder.id
                try:
                    outcome = advancer.advance_if_due(reminder)
                except Exception as e:
                    db.rollback()
                    report.failed_ids.append(reminder_id)
                    sweep_failures_total.inc()
                    logger.error(f"❌ [Sweep] Failed to advance reminder {reminder_id}: {e}")
                    continue
                if outcome is AdvanceOutcome.ADVANCED:
                    report.advanced += 1
                else:
                    report.skipped += 1

            logger.info(
                f"✅ [Sweep] Done: advanced={report.advanced} skipped={report.skipped} failed={report.failed}"
            )
            return report
        finally:
            db.close()

    def start(self) -> asyncio.Task:
        """Start the background loop on the running event loop."""
        if self.is_started:
            return self._task
        self._task = asyncio.create_task(self._run_forever(), name="reminder-sweep")
        logger.info(
            f"🚀 [Sweep] Driver started, first run at {self.next_fire_after(self.clock.now()).isoformat()}"
        )
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("[Sweep] Driver stopped")

    async def _run_forever(self) -> None:
        while True:
            now = self.clock.now()
            fire_at = self.next_fire_after(now)
            await self._sleep(max((fire_at - now).total_seconds(), 0.0))
            try:
                await asyncio.to_thread(self.run_once)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Keep the loop alive; the next fire retries from scratch
                logger.exception(f"❌ [Sweep] Cycle failed: {e}")
