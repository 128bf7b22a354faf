"""Tests for the CLI entry point."""

import os

import pytest
import yaml
from click.testing import CliRunner

from pawtrack.core.cli import main

NOW = "2025-06-15T21:00:00+00:00"


@pytest.fixture
def events_file(tmp_dir, busy_day):
    records = []
    for e in busy_day:
        record = {"id": e.id, "timestamp": e.timestamp.isoformat(), "kind": e.kind}
        if e.duration_minutes is not None:
            record["duration_minutes"] = e.duration_minutes
        if e.is_outdoor is not None:
            record["is_outdoor"] = e.is_outdoor
        records.append(record)
    path = os.path.join(tmp_dir, "events.yaml")
    with open(path, "w") as f:
        yaml.dump({"events": records}, f)
    return path


@pytest.fixture
def empty_events_file(tmp_dir):
    path = os.path.join(tmp_dir, "empty.yaml")
    with open(path, "w") as f:
        f.write("[]\n")
    return path


class TestCliGroup:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Pawtrack" in result.output
        assert "timeline" in result.output
        assert "streak" in result.output
        assert "patterns" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestTimelineCommand:
    def test_busy_day(self, events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["timeline", events_file, "--date", "2025-06-15", "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Timeline for 2025-06-15" in result.output
        assert "20:00 - now" in result.output
        assert "potty (indoor)" in result.output
        assert "walk (40m)" in result.output
        assert "Sleep 8h 40m" in result.output
        assert "Walks 2 (1h 10m)" in result.output
        assert "Potty 3 outdoor / 1 indoor" in result.output
        assert "Meals 3" in result.output

    def test_day_without_events(self, events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["timeline", events_file, "--date", "2025-06-10", "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "No activity logged." in result.output

    def test_bad_now(self, events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["timeline", events_file, "--now", "teatime"])
        assert result.exit_code == 2
        assert "ISO 8601" in result.output

    def test_missing_events_file(self, tmp_dir):
        runner = CliRunner()
        result = runner.invoke(main, ["timeline", os.path.join(tmp_dir, "nope.yaml")])
        assert result.exit_code == 2

    def test_malformed_events_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "events.yaml")
        with open(path, "w") as f:
            f.write("events: 3\n")
        runner = CliRunner()
        result = runner.invoke(main, ["timeline", path, "--now", NOW])
        assert result.exit_code == 1
        assert "must contain a list" in result.output


class TestStreakCommand:
    def test_busy_day(self, events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["streak", events_file, "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Current streak: 0 day(s)" in result.output
        assert "Best streak:    0 day(s)" in result.output
        assert "Last outdoor:   2025-06-15 17:20" in result.output
        assert "Last indoor:    2025-06-15 10:50" in result.output

    def test_no_events(self, empty_events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["streak", empty_events_file, "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Last outdoor:   never" in result.output
        assert "\N{BROKEN HEART} - Start again!" in result.output


class TestPatternsCommand:
    def test_busy_day(self, events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["patterns", events_file, "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Patterns over the last 7 day(s)" in result.output
        assert "After eating     100% outdoor (1 outdoor, 0 indoor)" in result.output
        assert "After drinking     0% outdoor (0 outdoor, 1 indoor)" in result.output
        assert "Best results come after eating." in result.output

    def test_days_from_config(self, events_file, tmp_config_file):
        runner = CliRunner()
        result = runner.invoke(main, ["--config", tmp_config_file, "patterns", events_file, "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Patterns over the last 14 day(s)" in result.output

    def test_not_enough_data(self, empty_events_file):
        runner = CliRunner()
        result = runner.invoke(main, ["patterns", empty_events_file, "--days", "3", "--now", NOW])
        assert result.exit_code == 0, result.output
        assert "Patterns over the last 3 day(s)" in result.output
        assert "Not enough data yet." in result.output


def test_invalid_config_is_reported(tmp_dir, events_file):
    config_path = os.path.join(tmp_dir, "bad.yaml")
    with open(config_path, "w") as f:
        yaml.dump({"timeline": {"day_start_hour": 23, "day_end_hour": 5}}, f)

    runner = CliRunner()
    result = runner.invoke(main, ["--config", config_path, "streak", events_file, "--now", NOW])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
