# focusflow/ui/markdown_renderer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from markdown import markdown

from focusflow.domain.models import ChartBucket, Insight, SessionKind, SessionRecord, UserStats
from focusflow.utils.formatting import format_duration

RECENT_SESSIONS = 10


@dataclass(frozen=True)
class MarkdownTheme:
    text: str = "#111827"
    muted: str = "#6B7280"
    border: str = "#E5E7EB"
    panel: str = "#FFFFFF"
    soft: str = "#F9FAFB"
    accent: str = "#667EEA"
    quote: str = "#4FACFE"


DARK_MARKDOWN_THEME = MarkdownTheme(
    text="#E5E7EB",
    muted="#9CA3AF",
    border="#374151",
    panel="#1F2937",
    soft="#111827",
    accent="#818CF8",
    quote="#38BDF8",
)


class MarkdownRenderer:
    """
    Single responsibility:
    - Build the statistics report as markdown
    - Convert MD -> HTML with embedded CSS

    tkinterweb (tkhtml) only understands a limited HTML subset, so session
    notes are preprocessed: "- [ ]" / "- [x]" task items become unicode boxes
    instead of <input> checkboxes.
    """

    def __init__(self, theme: Optional[MarkdownTheme] = None):
        self.theme = theme or MarkdownTheme()

    # ---------- preprocessing ----------
    def preprocess(self, md_text: str) -> str:
        if not md_text:
            return ""
        task_unchecked = re.compile(r"^(\s*[-*+]\s+)\[ \]\s+")
        task_checked = re.compile(r"^(\s*[-*+]\s+)\[(x|X)\]\s+")

        out: List[str] = []
        for line in md_text.splitlines():
            line = task_checked.sub(r"\1☑ ", line)
            line = task_unchecked.sub(r"\1☐ ", line)
            out.append(line)
        return "\n".join(out)

    def extensions(self) -> Tuple[List[str], Dict]:
        return ["extra", "sane_lists", "tables", "nl2br", "admonition"], {}

    # ---------- report ----------
    def stats_report(
        self,
        stats: UserStats,
        insights: Sequence[Insight],
        weekly: Sequence[ChartBucket],
        monthly: Sequence[ChartBucket],
        sessions: Sequence[SessionRecord],
    ) -> str:
        lines: List[str] = ["## Overview", ""]
        lines += [
            "| | |",
            "|---|---|",
            f"| Sessions completed | {stats.total_sessions} |",
            f"| Focus time | {format_duration(stats.total_focus_time)} |",
            f"| Meditation time | {format_duration(stats.total_meditation_time)} |",
            f"| Current streak | {stats.current_streak} days |",
            f"| Longest streak | {stats.longest_streak} days |",
            f"| Today | {stats.sessions_today} sessions |",
            f"| Average session | {format_duration(stats.avg_session_length)} |",
            f"| Weekly goal | {stats.weekly_progress:.0f}% of {stats.weekly_goal} |",
            "",
        ]

        if insights:
            lines += ["## Insights", ""]
            for insight in insights:
                lines += [f'!!! {insight.category.value} "{insight.title}"', f"    {insight.description}", ""]

        lines += ["## This week", "", "| Day | Sessions | Focus | Meditation |", "|---|---|---|---|"]
        for b in weekly:
            lines.append(
                f"| {b.label} | {b.sessions} | {format_duration(b.focus_time)} | {format_duration(b.meditation_time)} |"
            )
        lines.append("")

        lines += ["## Last 6 months", "", "| Month | Sessions | Focus (h) | Meditation (h) |", "|---|---|---|---|"]
        for b in monthly:
            lines.append(f"| {b.label} | {b.sessions} | {b.focus_time} | {b.meditation_time} |")
        lines.append("")

        recent = list(sessions)[-RECENT_SESSIONS:]
        if recent:
            lines += ["## Recent sessions", ""]
            for s in reversed(recent):
                icon = "🍅" if s.kind == SessionKind.POMODORO else "🧘"
                status = "" if s.completed else " (interrupted)"
                lines.append(
                    f"- {icon} **{s.timestamp:%a %d %b, %H:%M}** · "
                    f"{format_duration(s.duration_minutes)}{status}"
                )
                if s.notes:
                    lines += [""] + [f"    > {n}" for n in self.preprocess(s.notes).splitlines()] + [""]
        return "\n".join(lines)

    # ---------- CSS ----------
    def css(self) -> str:
        t = self.theme
        return f"""
        body {{
          font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
          margin: 14px;
          color: {t.text};
          background: {t.panel};
          font-size: 14px;
          line-height: 1.55;
        }}
        h2 {{ font-size: 1.15em; margin: 1.0em 0 0.5em; }}
        table {{ border-collapse: collapse; width: 100%; margin: 0.6em 0; }}
        th, td {{ border: 1px solid {t.border}; padding: 6px 10px; }}
        th {{ background: {t.soft}; font-weight: 700; }}
        blockquote {{
          margin: 0.4em 0;
          padding: 0.2em 0 0.2em 0.9em;
          border-left: 4px solid {t.quote};
          color: {t.muted};
        }}
        .admonition {{
          border: 1px solid {t.border};
          border-left: 4px solid {t.accent};
          background: {t.soft};
          padding: 8px 12px;
          margin: 0.6em 0;
        }}
        .admonition-title {{ font-weight: 800; margin: 0 0 4px; }}
        .admonition.wellness {{ border-left-color: #43E97B; }}
        .admonition.achievement {{ border-left-color: #F093FB; }}
        """

    # ---------- render ----------
    def to_html(self, md_text: str) -> str:
        exts, cfg = self.extensions()
        body = markdown(
            md_text or "",
            extensions=exts,
            extension_configs=cfg,
            output_format="html5",
        )
        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <style>{self.css()}</style>
          </head>
          <body>{body}</body>
        </html>
        """
