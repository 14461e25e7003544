from prometheus_client import Counter


reminders_created_total = Counter(
    "reminders_created_total",
    "Total reminders created via API",
)

reminders_advanced_total = Counter(
    "reminders_advanced_total",
    "Total reminders moved to their next occurrence",
    ["source"],
)

reminders_advance_skipped_total = Counter(
    "reminders_advance_skipped_total",
    "Total advance attempts skipped (deleted, moved concurrently or non-repeating)",
    ["source", "reason"],
)

sweep_cycles_total = Counter(
    "reminder_sweep_cycles_total",
    "Total sweep cycles run",
)

sweep_overlaps_total = Counter(
    "reminder_sweep_overlaps_total",
    "Total sweep fires skipped because a previous cycle was still running",
)

sweep_failures_total = Counter(
    "reminder_sweep_item_failures_total",
    "Total reminders that failed to advance during a sweep",
)
