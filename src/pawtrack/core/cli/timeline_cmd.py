"""pawtrack timeline: one day's blocks and totals."""

from __future__ import annotations

from datetime import datetime

import click

from pawtrack.timeline.blocks import awake_gaps, build_blocks, timeline_bounds
from pawtrack.timeline.formatting import format_duration, format_time_range
from pawtrack.timeline.models import ActivityBlock, BlockType, TimeRange
from pawtrack.timeline.summary import summarize

from .common import prepare


def _describe(block: ActivityBlock) -> str:
    if block.type is BlockType.POTTY:
        return "potty (outdoor)" if block.outdoor else "potty (indoor)"
    if block.type is BlockType.MEAL:
        return "meal"
    return f"{block.type.value} ({format_duration(block.duration_minutes)})"


@click.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Day to show.")
@click.option("--now", "now_text", default=None, help="Current time as ISO 8601 (defaults to the clock).")
@click.pass_context
def timeline(ctx: click.Context, events_file: str, day: datetime | None, now_text: str | None) -> None:
    """Show the activity timeline for one day."""
    cmd = prepare(ctx, events_file, now_text)
    local_now = cmd.now.astimezone(cmd.tz) if cmd.tz and cmd.now.tzinfo else cmd.now
    target = day.date() if day else local_now.date()

    window = TimeRange.for_day(target, cmd.tz)
    blocks = build_blocks(cmd.events, window, cmd.now, default_walk_minutes=cmd.settings.default_walk_minutes)
    bounds = timeline_bounds(
        blocks,
        target,
        cmd.now,
        day_start_hour=cmd.settings.day_start_hour,
        day_end_hour=cmd.settings.day_end_hour,
    )

    click.echo(f"Timeline for {target.isoformat()} ({bounds.start:%H:%M} - {bounds.end:%H:%M})")
    if not blocks:
        click.echo("  No activity logged.")
    for block in blocks:
        click.echo(f"  {format_time_range(block):<15} {_describe(block)}")

    awake_minutes = sum(int(g.duration.total_seconds() // 60) for g in awake_gaps(blocks, bounds))
    summary = summarize(blocks)
    click.echo("")
    click.echo(
        f"Sleep {format_duration(summary.total_sleep_minutes)} | "
        f"Awake {format_duration(awake_minutes)} | "
        f"Walks {summary.walk_count} ({format_duration(summary.total_walk_minutes)}) | "
        f"Potty {summary.outdoor_potty_count} outdoor / {summary.indoor_potty_count} indoor | "
        f"Meals {summary.meal_count}"
    )
