import datetime as dt

from focusflow.domain.models import (
    ChartBucket,
    Insight,
    InsightCategory,
    SessionKind,
    SessionRecord,
    UserStats,
)
from focusflow.ui.markdown_renderer import RECENT_SESSIONS, MarkdownRenderer

NOW = dt.datetime(2024, 1, 3, 12, 0)


def report(sessions=(), insights=()):
    renderer = MarkdownRenderer()
    stats = UserStats(total_sessions=3, total_focus_time=95, current_streak=2, weekly_progress=30)
    weekly = [ChartBucket("Mon", 2, 50, 0)]
    monthly = [ChartBucket("Jan", 3, 2, 0)]
    return renderer.stats_report(stats, list(insights), weekly, monthly, list(sessions))


class TestStatsReport:
    def test_overview_table(self):
        md = report()
        assert "## Overview" in md
        assert "| Focus time | 1h 35min |" in md
        assert "| Current streak | 2 days |" in md
        assert "| Weekly goal | 30% of 10 |" in md
        assert "| Mon | 2 | 50min | 0min |" in md
        assert "| Jan | 3 | 2 | 0 |" in md

    def test_insights_become_admonitions(self):
        insight = Insight("daily_reminder", InsightCategory.PRODUCTIVITY, "Time to focus!", "Go", NOW)
        md = report(insights=[insight])
        assert '!!! productivity "Time to focus!"' in md
        assert "    Go" in md

    def test_no_insight_section_without_insights(self):
        assert "## Insights" not in report()

    def test_recent_sessions_newest_first_and_limited(self):
        sessions = [
            SessionRecord(f"s{i}", dt.datetime(2024, 1, 3, 8) + dt.timedelta(hours=i), SessionKind.POMODORO, 25)
            for i in range(RECENT_SESSIONS + 3)
        ]
        md = report(sessions=sessions)
        lines = [l for l in md.splitlines() if l.startswith("- 🍅")]
        assert len(lines) == RECENT_SESSIONS
        assert "20:00" in lines[0]

    def test_notes_and_interrupted_sessions(self):
        rec = SessionRecord(
            "m", NOW, SessionKind.MEDITATION, 10, completed=False, notes="- [x] breathe"
        )
        md = report(sessions=[rec])
        assert "🧘" in md
        assert "(interrupted)" in md
        assert "    > - ☑ breathe" in md


class TestRendering:
    def test_html_contains_tables_and_css(self):
        renderer = MarkdownRenderer()
        html = renderer.to_html(report())
        assert "<table>" in html
        assert "<h2>Overview</h2>" in html
        assert "<style>" in html

    def test_admonition_markup(self):
        insight = Insight("x", InsightCategory.WELLNESS, "Breathe", "Slowly", NOW)
        html = MarkdownRenderer().to_html(report(insights=[insight]))
        assert 'class="admonition wellness"' in html

    def test_preprocess_task_items(self):
        out = MarkdownRenderer().preprocess("- [ ] a\n* [X] b\nplain")
        assert out.splitlines() == ["- ☐ a", "* ☑ b", "plain"]
