# -*- coding: utf-8 -*-
"""
Aggregations over the session log.

Everything here is a pure function of (sessions, now[, weekly_goal]) and is
recomputed from scratch on each call. Day boundaries are calendar-local: aware
timestamps are converted into the zone of ``now`` before their date is taken,
naive timestamps are assumed to be local already and take the zone of ``now``.
"""

import calendar
import datetime as dt
from typing import Dict, Iterable, List, Sequence, Set

from focusflow.domain.models import ChartBucket, SessionKind, SessionRecord, UserStats
from focusflow.utils.formatting import round_half_up

DEFAULT_STREAK_LOOKBACK_DAYS = 3650


def _local(ts: dt.datetime, now: dt.datetime) -> dt.datetime:
    if ts.tzinfo is None:
        return ts if now.tzinfo is None else ts.replace(tzinfo=now.tzinfo)
    if now.tzinfo is None:
        return ts.astimezone().replace(tzinfo=None)
    return ts.astimezone(now.tzinfo)


def start_of_day(moment: dt.datetime) -> dt.datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: dt.datetime) -> dt.datetime:
    # ISO week, Monday first
    return start_of_day(moment) - dt.timedelta(days=moment.weekday())


def _completed(sessions: Iterable[SessionRecord]) -> List[SessionRecord]:
    return [s for s in sessions if s.completed]


def _in_window(
    sessions: Iterable[SessionRecord], start: dt.datetime, end: dt.datetime, now: dt.datetime
) -> List[SessionRecord]:
    return [s for s in sessions if start <= _local(s.timestamp, now) < end]


def _minutes_by_kind(sessions: Iterable[SessionRecord]) -> Dict[SessionKind, int]:
    totals = {SessionKind.POMODORO: 0, SessionKind.MEDITATION: 0}
    for s in sessions:
        totals[s.kind] += s.duration_minutes
    return totals


def _active_dates(sessions: Iterable[SessionRecord], now: dt.datetime) -> Set[dt.date]:
    return {_local(s.timestamp, now).date() for s in sessions}


def current_streak(
    dates: Set[dt.date], today: dt.date, max_lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS
) -> int:
    streak = 0
    day = today
    while day in dates and streak < max_lookback_days:
        streak += 1
        day -= dt.timedelta(days=1)
    return streak


def longest_streak(dates: Set[dt.date]) -> int:
    longest = 0
    run = 0
    prev = None
    for day in sorted(dates):
        if prev is not None and (day - prev).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        prev = day
    return longest


def compute_stats(
    sessions: Sequence[SessionRecord],
    weekly_goal: int,
    now: dt.datetime,
    max_lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> UserStats:
    if weekly_goal <= 0:
        raise ValueError(f"weekly_goal must be positive, got {weekly_goal}")

    completed = _completed(sessions)
    today = start_of_day(now)
    week_start = start_of_week(now)

    todays = _in_window(completed, today, today + dt.timedelta(days=1), now)
    this_week = _in_window(completed, week_start, week_start + dt.timedelta(days=7), now)

    dates = _active_dates(completed, now)
    totals = _minutes_by_kind(completed)

    avg = 0
    if completed:
        avg = round_half_up(sum(s.duration_minutes for s in completed) / len(completed))

    return UserStats(
        total_sessions=len(completed),
        total_focus_time=totals[SessionKind.POMODORO],
        total_meditation_time=totals[SessionKind.MEDITATION],
        current_streak=current_streak(dates, today.date(), max_lookback_days),
        longest_streak=longest_streak(dates),
        sessions_today=len(todays),
        avg_session_length=avg,
        weekly_goal=weekly_goal,
        weekly_progress=min(100.0, 100.0 * len(this_week) / weekly_goal),
    )


def weekly_series(sessions: Sequence[SessionRecord], now: dt.datetime) -> List[ChartBucket]:
    """Seven buckets, Monday to Sunday of the current week. Durations in minutes."""
    completed = _completed(sessions)
    week_start = start_of_week(now)

    buckets = []
    for i in range(7):
        day = week_start + dt.timedelta(days=i)
        day_sessions = _in_window(completed, day, day + dt.timedelta(days=1), now)
        totals = _minutes_by_kind(day_sessions)
        buckets.append(
            ChartBucket(
                label=calendar.day_abbr[day.weekday()],
                sessions=len(day_sessions),
                focus_time=totals[SessionKind.POMODORO],
                meditation_time=totals[SessionKind.MEDITATION],
            )
        )
    return buckets


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_series(sessions: Sequence[SessionRecord], now: dt.datetime) -> List[ChartBucket]:
    """Six buckets, the five previous months then the current one. Durations in hours."""
    completed = _completed(sessions)
    first_of_month = start_of_day(now).replace(day=1)

    buckets = []
    for delta in range(-5, 1):
        year, month = _shift_month(first_of_month.year, first_of_month.month, delta)
        start = first_of_month.replace(year=year, month=month)
        end_year, end_month = _shift_month(year, month, 1)
        end = first_of_month.replace(year=end_year, month=end_month)

        month_sessions = _in_window(completed, start, end, now)
        totals = _minutes_by_kind(month_sessions)
        buckets.append(
            ChartBucket(
                label=calendar.month_abbr[month],
                sessions=len(month_sessions),
                focus_time=round_half_up(totals[SessionKind.POMODORO] / 60),
                meditation_time=round_half_up(totals[SessionKind.MEDITATION] / 60),
            )
        )
    return buckets
