"""Shared setup logic for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo

import click
from pydantic import ValidationError

from pawtrack.core.config import Config
from pawtrack.core.config_schema import PawtrackConfig
from pawtrack.core.exceptions import ConfigurationError, EventLogError
from pawtrack.core.utils.logging import setup_logging_from_config
from pawtrack.timeline.eventlog import load_events
from pawtrack.timeline.models import CareEvent
from pawtrack.timeline.pipeline import EngineSettings


@dataclass(frozen=True)
class CommandContext:
    config: PawtrackConfig
    settings: EngineSettings
    events: list[CareEvent]
    now: datetime

    @property
    def tz(self) -> tzinfo | None:
        return self.settings.tz


def load_config(config_file: str | None) -> PawtrackConfig:
    """Load and validate configuration, turning failures into CLI errors."""
    try:
        return Config(config_file=config_file).validated()
    except (ConfigurationError, ValidationError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def parse_now(text: str | None, tz: tzinfo | None) -> datetime:
    """Parse ``--now``; defaults to the current time in ``tz``."""
    if not text:
        return datetime.now(tz)
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as e:
        raise click.BadParameter(f"not an ISO 8601 timestamp: {text!r}", param_hint="--now") from e
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    return moment


def prepare(ctx: click.Context, events_file: str, now_text: str | None = None) -> CommandContext:
    """Config, logging, events and the reference instant for a command."""
    obj = ctx.obj or {}
    config = load_config(obj.get("config_file"))
    setup_logging_from_config(config.logging, verbose=obj.get("verbose", False))

    settings = EngineSettings.from_config(config)
    try:
        events = load_events(events_file, tz=settings.tz)
    except EventLogError as e:
        raise click.ClickException(str(e)) from e

    return CommandContext(config=config, settings=settings, events=events, now=parse_now(now_text, settings.tz))
