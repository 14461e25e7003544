import logging
from celery import shared_task

from .scheduler import SweepDriver

logger = logging.getLogger(__name__)

# One driver per worker process so overlapping beat fires share the latch
_driver = SweepDriver()


@shared_task(name="reminders.sweep_overdue")
def sweep_overdue_task() -> dict:
    """Advance every overdue reminder by one occurrence. Returns the sweep report."""
    report = _driver.run_once()
    if report is None:
        return {"skipped": True}
    return {
        "skipped": False,
        "started_at": report.started_at.isoformat(),
        "found": report.found,
        "advanced": report.advanced,
        "skipped_reminders": report.skipped,
        "failed_ids": report.failed_ids,
    }
