"""Short human-readable strings for blocks and summaries."""

from __future__ import annotations

from .models import ActivityBlock


def format_duration(minutes: int) -> str:
    """45 -> "45m", 120 -> "2h", 135 -> "2h 15m"."""
    minutes = max(int(minutes), 0)
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_time_range(block: ActivityBlock) -> str:
    """"06:00 - 08:00", or "06:00 - now" while the block is ongoing."""
    start = block.start_time.strftime("%H:%M")
    if block.is_ongoing:
        return f"{start} - now"
    if not block.has_duration:
        return start
    return f"{start} - {block.end_time.strftime('%H:%M')}"
