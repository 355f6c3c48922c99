# -*- coding: utf-8 -*-

import datetime as dt
import math
from typing import List

from focusflow.domain.models import Insight, InsightCategory, UserStats

STREAK_ACHIEVEMENT_DAYS = 7
WEEKLY_GOAL_CLOSE_PCT = 75
LOW_MEDITATION_RATIO = 0.2
MIN_SESSIONS_FOR_WELLNESS = 10


def generate_insights(stats: UserStats, now: dt.datetime) -> List[Insight]:
    """All rules are checked in order; every one that applies yields an insight."""
    out: List[Insight] = []

    if stats.current_streak >= STREAK_ACHIEVEMENT_DAYS:
        out.append(
            Insight(
                id="streak_achievement",
                category=InsightCategory.ACHIEVEMENT,
                title="🔥 Amazing streak!",
                description=f"You have kept going for {stats.current_streak} days in a row!",
                generated_at=now,
            )
        )

    if stats.weekly_progress >= 100:
        out.append(
            Insight(
                id="weekly_goal_achieved",
                category=InsightCategory.ACHIEVEMENT,
                title="🎯 Weekly goal reached!",
                description="Congratulations! You completed your weekly session goal.",
                generated_at=now,
            )
        )
    elif stats.weekly_progress >= WEEKLY_GOAL_CLOSE_PCT:
        # float progress can land just above a whole session count
        remaining = math.ceil(
            round(stats.weekly_goal - stats.weekly_progress / 100 * stats.weekly_goal, 6)
        )
        out.append(
            Insight(
                id="weekly_goal_close",
                category=InsightCategory.PRODUCTIVITY,
                title="📈 Almost there!",
                description=f"You are {remaining} sessions away from your weekly goal.",
                generated_at=now,
            )
        )

    total_minutes = stats.total_focus_time + stats.total_meditation_time
    if total_minutes > 0 and stats.total_sessions > MIN_SESSIONS_FOR_WELLNESS:
        if stats.total_meditation_time / total_minutes < LOW_MEDITATION_RATIO:
            out.append(
                Insight(
                    id="meditation_suggestion",
                    category=InsightCategory.WELLNESS,
                    title="🧘 How about meditating?",
                    description="Adding more meditation sessions can improve your focus and well-being.",
                    generated_at=now,
                )
            )

    if stats.sessions_today == 0 and stats.current_streak > 0:
        out.append(
            Insight(
                id="daily_reminder",
                category=InsightCategory.PRODUCTIVITY,
                title="⏰ Time to focus!",
                description="You haven't done a session today yet. Why not start now?",
                generated_at=now,
            )
        )

    return out
