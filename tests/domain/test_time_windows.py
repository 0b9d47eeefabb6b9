from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from relsync.domain.time_windows import Clock, TimeWindow


def _make_clock(reference: datetime) -> Clock:
    def _clock() -> datetime:
        return reference

    return _clock


def test_default_window_is_six_hours_back() -> None:
    now = datetime(2025, 1, 1, 12, tzinfo=UTC)

    window = TimeWindow().resolve(clock=_make_clock(now))

    assert window.start == datetime(2025, 1, 1, 6, tzinfo=UTC)
    assert window.end == now


def test_trailing_window_uses_given_hours() -> None:
    now = datetime(2025, 1, 1, 12, tzinfo=UTC)

    window = TimeWindow.trailing(1.5).resolve(clock=_make_clock(now))

    assert window.start == datetime(2025, 1, 1, 10, 30, tzinfo=UTC)


def test_window_combines_start_and_lookback() -> None:
    now = datetime(2025, 1, 10, tzinfo=UTC)
    start = datetime(2025, 1, 8, tzinfo=UTC)

    window = TimeWindow(start=start, lookback=timedelta(days=5)).resolve(clock=_make_clock(now))

    assert window.start == start
    assert window.end == now


def test_window_with_end_anchors_lookback_to_end() -> None:
    end = datetime(2025, 2, 1, tzinfo=UTC)

    window = TimeWindow(end=end, lookback=timedelta(days=2)).resolve()

    assert window.start == datetime(2025, 1, 30, tzinfo=UTC)
    assert window.end == end


def test_window_exposes_epoch_milliseconds() -> None:
    window = TimeWindow(
        start=datetime(2025, 1, 1, tzinfo=UTC),
        end=datetime(2025, 1, 1, 0, 0, 1, tzinfo=UTC),
        lookback=None,
    ).resolve()

    assert window.end_ms - window.start_ms == 1000
    assert window.start_ms == 1735689600000


def test_window_rejects_naive_datetimes() -> None:
    window = TimeWindow(start=datetime(2025, 1, 1, 12), lookback=None)  # noqa: DTZ001

    with pytest.raises(ValueError, match="timezone information"):
        window.resolve()


def test_window_rejects_inverted_bounds() -> None:
    window = TimeWindow(
        start=datetime(2025, 1, 2, tzinfo=UTC),
        end=datetime(2025, 1, 1, tzinfo=UTC),
        lookback=None,
    )

    with pytest.raises(ValueError, match="before end"):
        window.resolve()


def test_window_requires_start_or_lookback() -> None:
    with pytest.raises(ValueError, match="start or a lookback"):
        TimeWindow(lookback=None).resolve()
