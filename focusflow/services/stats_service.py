# -*- coding: utf-8 -*-

import datetime as dt
from typing import Callable, List, Optional

from focusflow.core.stats import (
    DEFAULT_STREAK_LOOKBACK_DAYS,
    compute_stats,
    monthly_series,
    weekly_series,
)
from focusflow.domain.models import ChartBucket, UserStats
from focusflow.services.session_store import SessionStore


class StatsService:
    def __init__(
        self,
        sessions: SessionStore,
        weekly_goal: Callable[[], int],
        clock: Callable[[], dt.datetime] = dt.datetime.now,
        streak_lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
    ):
        self.sessions = sessions
        self._weekly_goal = weekly_goal
        self._clock = clock
        self.streak_lookback_days = streak_lookback_days

    def _now(self, now: Optional[dt.datetime]) -> dt.datetime:
        return now if now is not None else self._clock()

    def stats(self, now: Optional[dt.datetime] = None) -> UserStats:
        return compute_stats(
            self.sessions.all(),
            self._weekly_goal(),
            self._now(now),
            max_lookback_days=self.streak_lookback_days,
        )

    def weekly_data(self, now: Optional[dt.datetime] = None) -> List[ChartBucket]:
        return weekly_series(self.sessions.all(), self._now(now))

    def monthly_data(self, now: Optional[dt.datetime] = None) -> List[ChartBucket]:
        return monthly_series(self.sessions.all(), self._now(now))
