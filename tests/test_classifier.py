"""Tests for the heuristic pattern classifier."""

import pytest

from sound_alert_engine.classifier import RULES, classify, count_peaks, window_stats
from sound_alert_engine.models import ALARM, DOORBELL, IMPACT, KNOCKING, UNKNOWN

THRESHOLD = 30


@pytest.mark.parametrize("current", range(0, THRESHOLD))
def test_quiet_samples_are_never_classified(current):
    loud_history = [90, 10] * 10
    assert classify(current, loud_history, THRESHOLD) is None
    assert classify(current, [], THRESHOLD) is None


def test_count_peaks_interior_only():
    # Edges never count, even when they are the maximum
    assert count_peaks([90, 10, 90], THRESHOLD) == 0
    assert count_peaks([10, 90, 10], THRESHOLD) == 1


def test_count_peaks_requires_strict_maximum_above_threshold():
    assert count_peaks([10, 50, 50, 10], THRESHOLD) == 0  # plateau
    assert count_peaks([10, 30, 10], THRESHOLD) == 0  # at threshold
    assert count_peaks([10, 31, 10], THRESHOLD) == 1


def test_window_stats_empty():
    stats = window_stats([], THRESHOLD)
    assert stats.size == 0
    assert stats.peak_count == 0
    assert not stats.is_sustained


def test_doorbell():
    window = [40, 40, 80, 40, 40, 40, 40, 40, 40, 40]
    result = classify(40, window, THRESHOLD)
    assert result.type == DOORBELL
    assert result.confidence == 0.8
    assert result.description == "Doorbell or chime pattern"


def test_doorbell_takes_precedence_over_alarm():
    # 18 samples at 50 and 2 at 10: sustained with one peak, but the
    # doorbell rule is checked first and its average condition also holds
    window = [50] * 9 + [10, 50, 10] + [50] * 8
    stats = window_stats(window, THRESHOLD)
    assert stats.is_sustained
    assert stats.peak_count == 1

    assert classify(50, window, THRESHOLD).type == DOORBELL


def test_alarm():
    window = [31, 40] * 10
    result = classify(40, window, THRESHOLD)
    assert result.type == ALARM
    assert result.confidence == 0.6


def test_repeating_loud_peaks_are_sustained_alarm():
    window = [35, 36, 70] * 6 + [35, 36]
    stats = window_stats(window, THRESHOLD)
    assert stats.peak_count == 6
    assert stats.avg_volume == pytest.approx(45.85)
    assert stats.is_sustained

    # Alarm is checked before knocking
    assert classify(36, window, THRESHOLD).type == ALARM


def test_knocking():
    window = [10, 40] * 4 + [10] * 12
    assert window_stats(window, THRESHOLD).peak_count == 4

    result = classify(40, window, THRESHOLD)
    assert result.type == KNOCKING
    assert result.confidence == 0.7


def test_impact():
    result = classify(50, [50] * 20, THRESHOLD)
    assert result.type == IMPACT
    assert result.confidence == 0.6


def test_unknown():
    result = classify(30, [30] * 20, THRESHOLD)
    assert result.type == UNKNOWN
    assert result.confidence == 0.3


def test_short_window_cannot_have_peaks():
    # Two samples: no interior index, so only alarm/impact/unknown reachable
    assert classify(50, [50, 50], THRESHOLD).type == IMPACT
    assert classify(31, [31, 31], THRESHOLD).type == UNKNOWN


def test_empty_history_is_unknown():
    assert classify(80, [], THRESHOLD).type == UNKNOWN


def test_only_recent_window_is_used():
    history = [90, 10] * 15 + [30] * 20
    assert classify(30, history, THRESHOLD).type == UNKNOWN


def test_custom_window():
    history = [40, 40, 80, 40, 40] + [30] * 5
    assert classify(40, history, THRESHOLD, window=5).type == UNKNOWN
    assert classify(40, history, THRESHOLD, window=10).type == DOORBELL


def test_pure_and_deterministic():
    window = [10, 40] * 4 + [10] * 12
    original = list(window)
    first = classify(40, window, THRESHOLD)
    second = classify(40, window, THRESHOLD)

    assert first == second
    assert window == original


def test_rule_order():
    assert [r.result.type for r in RULES] == [DOORBELL, ALARM, KNOCKING, IMPACT]
