# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

THEMES = ("light", "dark", "auto")


class TimerMode(str, Enum):
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class SessionKind(str, Enum):
    POMODORO = "pomodoro"
    MEDITATION = "meditation"


class View(str, Enum):
    TIMER = "timer"
    MEDITATION = "meditation"
    STATS = "stats"
    SOUNDS = "sounds"
    SETTINGS = "settings"


class InsightCategory(str, Enum):
    ACHIEVEMENT = "achievement"
    PRODUCTIVITY = "productivity"
    WELLNESS = "wellness"


class InvalidSettingsError(ValueError):
    """Raised when a settings update carries a value outside its allowed range."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


@dataclass(frozen=True)
class TimerState:
    remaining_seconds: int
    is_active: bool = False
    is_paused: bool = False
    mode: TimerMode = TimerMode.WORK
    cycles_completed: int = 0

    @property
    def is_running(self) -> bool:
        return self.is_active and not self.is_paused

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remainingSeconds": self.remaining_seconds,
            "isActive": self.is_active,
            "isPaused": self.is_paused,
            "mode": self.mode.value,
            "cycles": self.cycles_completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimerState":
        remaining = int(data["remainingSeconds"])
        cycles = int(data.get("cycles", 0))
        if remaining < 0 or cycles < 0:
            raise ValueError("timer counters cannot be negative")
        return cls(
            remaining_seconds=remaining,
            is_active=bool(data.get("isActive", False)),
            is_paused=bool(data.get("isPaused", False)),
            mode=TimerMode(data.get("mode", TimerMode.WORK.value)),
            cycles_completed=cycles,
        )


@dataclass(frozen=True)
class SessionRecord:
    id: str
    timestamp: dt.datetime
    kind: SessionKind
    duration_minutes: int
    completed: bool = True
    mood: Optional[int] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "date": self.timestamp.isoformat(),
            "type": self.kind.value,
            "duration": self.duration_minutes,
            "completed": self.completed,
        }
        # optional fields are omitted rather than stored as null
        if self.mood is not None:
            data["mood"] = self.mood
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionRecord":
        duration = int(data["duration"])
        if duration <= 0:
            raise ValueError(f"session duration must be positive, got {duration}")
        mood = data.get("mood")
        return cls(
            id=str(data["id"]),
            timestamp=dt.datetime.fromisoformat(data["date"]),
            kind=SessionKind(data["type"]),
            duration_minutes=duration,
            completed=bool(data.get("completed", False)),
            mood=int(mood) if mood is not None else None,
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class UserStats:
    total_sessions: int = 0
    total_focus_time: int = 0
    total_meditation_time: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    sessions_today: int = 0
    avg_session_length: int = 0
    weekly_goal: int = 10
    weekly_progress: float = 0.0


@dataclass(frozen=True)
class Insight:
    id: str
    category: InsightCategory
    title: str
    description: str
    generated_at: dt.datetime


@dataclass(frozen=True)
class ChartBucket:
    label: str
    sessions: int = 0
    focus_time: int = 0
    meditation_time: int = 0


# stored layout uses camelCase keys
_SETTINGS_KEYS = {
    "pomodoro_length": "pomodoroLength",
    "short_break_length": "shortBreakLength",
    "long_break_length": "longBreakLength",
    "cycles_before_long_break": "cyclesBeforeLongBreak",
    "notifications": "notifications",
    "sound_enabled": "soundEnabled",
    "background_sound": "backgroundSound",
    "theme": "theme",
    "weekly_goal": "weeklyGoal",
}


@dataclass(frozen=True)
class AppSettings:
    pomodoro_length: int = 25
    short_break_length: int = 5
    long_break_length: int = 15
    cycles_before_long_break: int = 4
    notifications: bool = True
    sound_enabled: bool = True
    background_sound: Optional[str] = None
    theme: str = "auto"
    weekly_goal: int = 10

    def duration_for(self, mode: TimerMode) -> int:
        if mode == TimerMode.SHORT_BREAK:
            return self.short_break_length
        if mode == TimerMode.LONG_BREAK:
            return self.long_break_length
        return self.pomodoro_length

    def to_dict(self) -> Dict[str, Any]:
        return {stored: getattr(self, attr) for attr, stored in _SETTINGS_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["AppSettings"] = None) -> "AppSettings":
        """Build settings from a stored blob, filling missing keys from ``base``."""
        base = base or cls()
        values = {
            attr: data[stored] if stored in data else getattr(base, attr)
            for attr, stored in _SETTINGS_KEYS.items()
        }
        return cls(**values)


@dataclass(frozen=True)
class SoundOption:
    id: str
    name: str
    icon: str
    filename: str
    category: str  # nature | ambient | rain | instrumental


@dataclass(frozen=True)
class MeditationType:
    id: str
    name: str
    icon: str
    description: str


@dataclass(frozen=True)
class NotificationMessage:
    title: str
    body: str
    icon: str = "focusflow"
