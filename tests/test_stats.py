import datetime as dt
import itertools

import pytest

from focusflow.core.stats import (
    compute_stats,
    current_streak,
    longest_streak,
    monthly_series,
    start_of_week,
    weekly_series,
)
from focusflow.domain.models import SessionKind, SessionRecord

NOW = dt.datetime(2024, 1, 3, 18, 0)  # Wednesday
_ids = itertools.count(1)


def session(when, minutes=25, kind=SessionKind.POMODORO, completed=True):
    return SessionRecord(
        id=f"s{next(_ids)}",
        timestamp=when,
        kind=kind,
        duration_minutes=minutes,
        completed=completed,
    )


def on(day, hour=9):
    return dt.datetime(2024, 1, day, hour, 0)


class TestStreaks:
    def test_three_consecutive_days(self):
        sessions = [session(on(1)), session(on(2)), session(on(3))]
        stats = compute_stats(sessions, 10, NOW)
        assert stats.current_streak == 3
        assert stats.longest_streak == 3

    def test_gap_breaks_the_streak(self):
        sessions = [session(on(1)), session(on(3))]
        stats = compute_stats(sessions, 10, NOW)
        assert stats.current_streak == 1
        assert stats.longest_streak == 1

    def test_no_session_today_means_no_current_streak(self):
        sessions = [session(on(1)), session(on(2))]
        stats = compute_stats(sessions, 10, NOW)
        assert stats.current_streak == 0
        assert stats.longest_streak == 2

    def test_incomplete_sessions_do_not_count(self):
        sessions = [session(on(2)), session(on(3), completed=False)]
        stats = compute_stats(sessions, 10, NOW)
        assert stats.current_streak == 0

    def test_walk_is_capped(self):
        today = dt.date(2024, 1, 3)
        dates = {today - dt.timedelta(days=i) for i in range(50)}
        assert current_streak(dates, today) == 50
        assert current_streak(dates, today, max_lookback_days=7) == 7

    def test_longest_streak_over_history(self):
        base = dt.date(2023, 6, 1)
        dates = {base + dt.timedelta(days=i) for i in (0, 1, 2, 3, 10, 11, 20)}
        assert longest_streak(dates) == 4
        assert longest_streak(set()) == 0


class TestTotals:
    def test_empty_log(self):
        stats = compute_stats([], 10, NOW)
        assert stats.total_sessions == 0
        assert stats.avg_session_length == 0
        assert stats.weekly_progress == 0.0
        assert stats.weekly_goal == 10

    def test_focus_and_meditation_are_split(self):
        sessions = [
            session(on(1), 25),
            session(on(2), 50),
            session(on(3), 10, kind=SessionKind.MEDITATION),
            session(on(3), 25, completed=False),
        ]
        stats = compute_stats(sessions, 10, NOW)
        assert stats.total_sessions == 3
        assert stats.total_focus_time == 75
        assert stats.total_meditation_time == 10
        assert stats.sessions_today == 1

    def test_average_rounds_half_up(self):
        sessions = [session(on(1), 2), session(on(2), 3)]
        assert compute_stats(sessions, 10, NOW).avg_session_length == 3

    def test_today_window_is_calendar_day(self):
        sessions = [
            session(dt.datetime(2024, 1, 3, 0, 0)),
            session(dt.datetime(2024, 1, 2, 23, 59)),
            session(dt.datetime(2024, 1, 4, 0, 0)),
        ]
        assert compute_stats(sessions, 10, NOW).sessions_today == 1

    def test_rejects_non_positive_goal(self):
        with pytest.raises(ValueError):
            compute_stats([], 0, NOW)


class TestWeeklyProgress:
    def test_six_of_ten(self):
        sessions = [session(on(d)) for d in (1, 1, 2, 2, 3, 3)]
        assert compute_stats(sessions, 10, NOW).weekly_progress == 60.0

    def test_clamped_to_hundred(self):
        sessions = [session(on(d)) for d in (1, 2, 3) for _ in range(4)]
        assert compute_stats(sessions, 10, NOW).weekly_progress == 100.0

    def test_last_week_does_not_count(self):
        sessions = [session(dt.datetime(2023, 12, 31, 20, 0))]
        assert compute_stats(sessions, 10, NOW).weekly_progress == 0.0

    def test_week_starts_on_monday(self):
        assert start_of_week(dt.datetime(2024, 1, 7, 23, 0)) == dt.datetime(2024, 1, 1)
        assert start_of_week(dt.datetime(2024, 1, 8, 1, 0)) == dt.datetime(2024, 1, 8)


class TestSeries:
    def test_weekly_series_buckets_by_day(self):
        sessions = [
            session(on(1), 25),
            session(on(1), 25),
            session(on(3), 15, kind=SessionKind.MEDITATION),
        ]
        buckets = weekly_series(sessions, NOW)
        assert [b.label for b in buckets] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert (buckets[0].sessions, buckets[0].focus_time) == (2, 50)
        assert (buckets[2].sessions, buckets[2].meditation_time) == (1, 15)
        assert buckets[1].sessions == 0

    def test_monthly_series_covers_six_months_in_hours(self):
        sessions = [
            session(dt.datetime(2023, 8, 15, 9, 0), 90),
            session(dt.datetime(2023, 12, 31, 9, 0), 60),
            session(on(2), 30),
            session(on(2), 60, kind=SessionKind.MEDITATION),
            # outside the window
            session(dt.datetime(2023, 7, 31, 9, 0), 60),
        ]
        buckets = monthly_series(sessions, NOW)
        assert [b.label for b in buckets] == ["Aug", "Sep", "Oct", "Nov", "Dec", "Jan"]
        assert (buckets[0].sessions, buckets[0].focus_time) == (1, 2)
        assert buckets[4].focus_time == 1
        assert (buckets[5].sessions, buckets[5].focus_time, buckets[5].meditation_time) == (2, 1, 1)
        assert sum(b.sessions for b in buckets) == 4


class TestTimezones:
    def test_naive_sessions_with_aware_now(self):
        now = NOW.replace(tzinfo=dt.timezone.utc)
        sessions = [
            session(on(1)),
            session(on(2)),
            session(on(3)),
            session(dt.datetime(2024, 1, 3, 11, 0, tzinfo=dt.timezone.utc)),
        ]
        stats = compute_stats(sessions, 10, now)
        assert stats.sessions_today == 2
        assert stats.current_streak == 3
        assert stats.weekly_progress == 40.0
        assert weekly_series(sessions, now)[2].sessions == 2
