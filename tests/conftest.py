"""Shared test fixtures for pawtrack."""

import os
import tempfile

import pytest

from pawtrack.timeline.models import CareEvent
from tests.factories import at, event


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "timeline": {"timezone": "UTC", "day_start_hour": 7},
        "patterns": {"period_days": 14, "proximity_minutes": 45},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def busy_day() -> list[CareEvent]:
    """A realistic 15 June: overnight sleep, walks, meals, naps, potty."""
    return [
        event("s0", at(14, "21:30"), "sleep_start"),
        event("w0", at(15, "06:10"), "wake"),
        event("p1", at(15, "06:20"), "elimination", is_outdoor=True),
        event("m1", at(15, "07:00"), "meal"),
        event("wk1", at(15, "07:15"), "walk_start"),
        event("p2", at(15, "07:25"), "elimination", is_outdoor=True),
        event("wk1e", at(15, "07:45"), "walk_end"),
        event("s1", at(15, "09:00"), "sleep_start"),
        event("w1", at(15, "10:30"), "wake"),
        event("d1", at(15, "10:35"), "drink"),
        event("p3", at(15, "10:50"), "elimination", is_outdoor=False),
        event("x1", at(15, "11:00"), "vet_visit"),
        event("wk2", at(15, "12:00"), "walk", duration_minutes=40),
        event("m2", at(15, "17:00"), "meal"),
        event("p4", at(15, "17:20"), "elimination", is_outdoor=True),
        event("s2", at(15, "20:00"), "sleep_start"),
    ]
