import datetime as dt

from focusflow.core.insights import generate_insights
from focusflow.core.stats import compute_stats
from focusflow.domain.models import InsightCategory, SessionKind, SessionRecord, UserStats

NOW = dt.datetime(2024, 1, 3, 12, 0)


def ids(stats):
    return [i.id for i in generate_insights(stats, NOW)]


class TestInsightRules:
    def test_long_streak_with_no_meditation_and_nothing_today(self):
        # streak >= 7 fires, progress 50 < 75 suppresses both goal insights,
        # 0 / 600 < 0.2 with more than 10 sessions fires, and nothing logged today
        # while a streak is alive fires the reminder
        stats = UserStats(
            current_streak=8,
            weekly_progress=50,
            total_meditation_time=0,
            total_focus_time=600,
            total_sessions=15,
            sessions_today=0,
        )
        insights = generate_insights(stats, NOW)
        assert [i.id for i in insights] == [
            "streak_achievement",
            "meditation_suggestion",
            "daily_reminder",
        ]
        assert "8 days" in insights[0].description
        assert insights[0].category == InsightCategory.ACHIEVEMENT
        assert insights[1].category == InsightCategory.WELLNESS
        assert all(i.generated_at == NOW for i in insights)

    def test_goal_reached_excludes_goal_close(self):
        assert ids(UserStats(weekly_progress=100, sessions_today=1)) == ["weekly_goal_achieved"]

    def test_goal_close_cites_remaining_sessions(self):
        insights = generate_insights(UserStats(weekly_goal=10, weekly_progress=80, sessions_today=1), NOW)
        assert [i.id for i in insights] == ["weekly_goal_close"]
        assert "2 sessions" in insights[0].description

    def test_remaining_sessions_round_up(self):
        insights = generate_insights(UserStats(weekly_goal=3, weekly_progress=75.5, sessions_today=1), NOW)
        assert "1 sessions" in insights[0].description

    def test_no_activity_yields_nothing(self):
        assert ids(UserStats()) == []

    def test_meditation_rule_needs_more_than_ten_sessions(self):
        stats = UserStats(total_focus_time=250, total_sessions=10, sessions_today=1)
        assert ids(stats) == []

    def test_balanced_meditation_is_not_flagged(self):
        stats = UserStats(
            total_focus_time=300, total_meditation_time=100, total_sessions=20, sessions_today=1
        )
        assert ids(stats) == []

    def test_reminder_needs_a_live_streak(self):
        assert ids(UserStats(current_streak=0, sessions_today=0)) == []
        assert ids(UserStats(current_streak=2, sessions_today=0)) == ["daily_reminder"]

    def test_remaining_sessions_from_computed_progress(self):
        # 7 of 9 leaves a float just above 2
        sessions = [
            SessionRecord(
                id=f"s{i}",
                timestamp=dt.datetime(2024, 1, 1 + i % 3, 9, i),
                kind=SessionKind.POMODORO,
                duration_minutes=25,
                completed=True,
            )
            for i in range(7)
        ]
        stats = compute_stats(sessions, 9, NOW)
        insights = generate_insights(stats, NOW)
        assert "weekly_goal_close" in [i.id for i in insights]
        close = next(i for i in insights if i.id == "weekly_goal_close")
        assert "2 sessions" in close.description
