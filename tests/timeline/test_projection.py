"""Tests for pawtrack.timeline.projection."""

import pytest

from pawtrack.timeline.blocks import build_blocks
from pawtrack.timeline.models import TimeRange
from pawtrack.timeline.projection import (
    place_blocks,
    width_fraction,
    window_contains_now,
    x_fraction,
    x_position,
)
from tests.factories import at, event

WINDOW = TimeRange(at(15, "06:00"), at(15, "22:00"))


class TestXFraction:
    def test_clamps_outside_window(self):
        assert x_fraction(at(15, "05:00"), WINDOW) == 0
        assert x_fraction(at(14, "23:00"), WINDOW) == 0
        assert x_fraction(at(15, "23:00"), WINDOW) == 1
        assert x_fraction(at(16, "08:00"), WINDOW) == 1

    def test_edges_and_middle(self):
        assert x_fraction(WINDOW.start, WINDOW) == 0.0
        assert x_fraction(WINDOW.end, WINDOW) == 1.0
        assert x_fraction(at(15, "14:00"), WINDOW) == pytest.approx(0.5)

    def test_empty_window(self):
        empty = TimeRange(at(15, "06:00"), at(15, "06:00"))
        assert x_fraction(at(15, "06:00"), empty) == 0.0

    def test_pixels(self):
        assert x_position(at(15, "10:00"), WINDOW, 320) == pytest.approx(80.0)


class TestWidthFraction:
    def test_proportional(self):
        assert width_fraction(at(15, "06:00"), at(15, "10:00"), WINDOW) == pytest.approx(0.25)

    def test_floor_for_short_spans(self):
        assert width_fraction(at(15, "12:00"), at(15, "12:00"), WINDOW) == pytest.approx(0.005)
        assert width_fraction(at(15, "12:00"), at(15, "12:01"), WINDOW, min_fraction=0.02) == pytest.approx(0.02)

    def test_clamped_to_window(self):
        assert width_fraction(at(15, "04:00"), at(15, "08:00"), WINDOW) == pytest.approx(0.125)
        assert width_fraction(at(14, "00:00"), at(16, "00:00"), WINDOW) == 1.0

    def test_empty_window(self):
        empty = TimeRange(at(15, "06:00"), at(15, "05:00"))
        assert width_fraction(at(15, "06:00"), at(15, "07:00"), empty) == 0.0


class TestNowMarker:
    def test_contains_now(self):
        assert window_contains_now(WINDOW, at(15, "12:00"))
        assert not window_contains_now(WINDOW, at(15, "23:00"))
        assert not window_contains_now(TimeRange(at(15, "06:00"), at(15, "06:00")), at(15, "06:00"))


class TestPlaceBlocks:
    def test_layout(self):
        events = [
            event("s", at(15, "06:00"), "sleep_start"),
            event("w", at(15, "10:00"), "wake"),
            event("p", at(15, "14:00"), "elimination", is_outdoor=True),
        ]
        blocks = build_blocks(events, WINDOW, now=at(15, "18:00"))
        layout = place_blocks(blocks, WINDOW, now=at(15, "18:00"))

        sleep, potty = layout.placements
        assert sleep.x == 0.0
        assert sleep.width == pytest.approx(0.25)
        assert not sleep.is_point
        assert potty.x == pytest.approx(0.5)
        assert potty.width == 0.0
        assert potty.is_point
        assert layout.now_x == pytest.approx(0.75)

    def test_no_now_marker_outside_window(self):
        layout = place_blocks([], WINDOW, now=at(16, "09:00"))
        assert layout.placements == ()
        assert layout.now_x is None

    def test_short_bar_at_right_edge_stays_on_axis(self):
        events = [
            event("s", at(15, "21:59"), "sleep_start"),
            event("w", at(15, "22:00"), "wake"),
        ]
        blocks = build_blocks(events, WINDOW, now=at(15, "23:00"))
        (bar,) = place_blocks(blocks, WINDOW, now=at(15, "23:00")).placements

        assert bar.width == pytest.approx(0.005)
        assert bar.x + bar.width <= 1.0 + 1e-9
        assert bar.x == pytest.approx(0.995)

    def test_point_at_right_edge_is_not_shifted(self):
        events = [event("p", at(15, "22:00"), "elimination", is_outdoor=True)]
        blocks = build_blocks(events, WINDOW, now=at(15, "23:00"))
        (tick,) = place_blocks(blocks, WINDOW, now=at(15, "23:00")).placements
        assert tick.x == 1.0
        assert tick.width == 0.0
