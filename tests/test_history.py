"""Tests for the rolling volume history."""

import pytest

from sound_alert_engine.history import HistoryBuffer


def test_empty_snapshot():
    assert HistoryBuffer().snapshot() == []


def test_short_history_returns_what_is_available():
    history = HistoryBuffer()
    for v in (1, 2, 3):
        history.append(v)
    assert history.snapshot(20) == [1, 2, 3]


def test_snapshot_defaults_to_last_twenty():
    history = HistoryBuffer()
    for v in range(30):
        history.append(v)
    assert history.snapshot() == list(range(10, 30))


def test_oldest_sample_is_evicted():
    history = HistoryBuffer(capacity=3)
    for v in (1, 2, 3, 4):
        history.append(v)
    assert len(history) == 3
    assert history.snapshot(10) == [2, 3, 4]


def test_bounded_after_any_number_of_appends():
    history = HistoryBuffer()
    for count in range(1, 121):
        history.append(count % 101)
        assert len(history) <= 50
        assert len(history.snapshot(20)) == min(20, count)


def test_clear():
    history = HistoryBuffer()
    history.append(5)
    history.clear()
    assert len(history) == 0


def test_non_positive_window():
    history = HistoryBuffer()
    history.append(5)
    assert history.snapshot(0) == []


def test_snapshot_is_a_copy():
    history = HistoryBuffer()
    history.append(5)
    history.snapshot().append(99)
    assert history.snapshot() == [5]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)
