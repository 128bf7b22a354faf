"""pawtrack streak / pawtrack patterns: behavioural statistics."""

from __future__ import annotations

from datetime import datetime

import click

from pawtrack.timeline.patterns import analyze_patterns
from pawtrack.timeline.streaks import compute_streak, streak_emoji, streak_message

from .common import prepare


def _when(moment: datetime | None) -> str:
    return moment.strftime("%Y-%m-%d %H:%M") if moment else "never"


@click.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Day to count back from.")
@click.option("--now", "now_text", default=None, help="Current time as ISO 8601 (defaults to the clock).")
@click.pass_context
def streak(ctx: click.Context, events_file: str, today: datetime | None, now_text: str | None) -> None:
    """Show the clean-day outdoor potty streak."""
    cmd = prepare(ctx, events_file, now_text)
    local_now = cmd.now.astimezone(cmd.tz) if cmd.tz and cmd.now.tzinfo else cmd.now
    info = compute_streak(cmd.events, today.date() if today else local_now.date(), tz=cmd.tz)

    current = info.current_streak
    click.echo(f"Current streak: {current} day(s) {streak_emoji(current)} - {streak_message(current)}")
    click.echo(f"Best streak:    {info.best_streak} day(s)")
    click.echo(f"Last outdoor:   {_when(info.last_outdoor_time)}")
    click.echo(f"Last indoor:    {_when(info.last_indoor_time)}")


@click.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--days", type=int, default=None, help="Lookback in days (default from config).")
@click.option("--proximity", type=int, default=None, help="Trigger window in minutes (default from config).")
@click.option("--now", "now_text", default=None, help="End of the lookback as ISO 8601 (defaults to the clock).")
@click.pass_context
def patterns(
    ctx: click.Context,
    events_file: str,
    days: int | None,
    proximity: int | None,
    now_text: str | None,
) -> None:
    """Show outdoor success rates per trigger (sleep, meals, walks, water)."""
    cmd = prepare(ctx, events_file, now_text)
    analysis = analyze_patterns(
        cmd.events,
        days if days is not None else cmd.settings.period_days,
        proximity if proximity is not None else cmd.settings.proximity_minutes,
        now=cmd.now,
        default_walk_minutes=cmd.settings.default_walk_minutes,
    )

    click.echo(f"Patterns over the last {analysis.period_days} day(s)")
    if not analysis.has_triggers:
        click.echo("  Not enough data yet.")
        return
    for trigger in analysis.ranked():
        click.echo(
            f"  {trigger.name:<16} {trigger.success_percent:>3}% outdoor "
            f"({trigger.outdoor_count} outdoor, {trigger.indoor_count} indoor)"
        )
    best = analysis.strongest
    if best is not None:
        click.echo(f"Best results come {best.name.lower()}.")
