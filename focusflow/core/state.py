# -*- coding: utf-8 -*-
"""
Application state and the commands that change it.

reduce() is pure: it returns a new AppState in which only the slice named by
the command is a new object, so observers can compare slices by identity.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple, Union

from focusflow.domain.models import (
    AppSettings,
    SessionRecord,
    TimerMode,
    TimerState,
    UserStats,
    View,
)


@dataclass(frozen=True)
class AppState:
    timer: TimerState
    sessions: Tuple[SessionRecord, ...] = ()
    stats: UserStats = field(default_factory=UserStats)
    settings: AppSettings = field(default_factory=AppSettings)
    selected_sound: Optional[str] = None
    is_playing: bool = False
    current_view: View = View.TIMER

    @classmethod
    def initial(cls, settings: Optional[AppSettings] = None) -> "AppState":
        settings = settings or AppSettings()
        return cls(
            timer=TimerState(remaining_seconds=settings.pomodoro_length * 60),
            stats=UserStats(weekly_goal=settings.weekly_goal),
            settings=settings,
        )


@dataclass(frozen=True)
class SetTimerState:
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class AddSession:
    record: SessionRecord


@dataclass(frozen=True)
class UpdateStats:
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateSettings:
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class SetSelectedSound:
    sound_id: Optional[str]


@dataclass(frozen=True)
class SetPlaying:
    playing: bool


@dataclass(frozen=True)
class SetView:
    view: View


@dataclass(frozen=True)
class ResetTimer:
    pass


@dataclass(frozen=True)
class LoadPersistedState:
    """Replace whole slices, e.g. {"settings": ..., "sessions": ...}."""

    changes: Mapping[str, Any]


Command = Union[
    SetTimerState,
    AddSession,
    UpdateStats,
    UpdateSettings,
    SetSelectedSound,
    SetPlaying,
    SetView,
    ResetTimer,
    LoadPersistedState,
]

_LOADABLE_SLICES = ("timer", "sessions", "settings", "selected_sound", "is_playing", "current_view")


def reduce(state: AppState, command: Command) -> AppState:
    if isinstance(command, SetTimerState):
        return replace(state, timer=replace(state.timer, **command.changes))

    if isinstance(command, AddSession):
        return replace(state, sessions=state.sessions + (command.record,))

    if isinstance(command, UpdateStats):
        return replace(state, stats=replace(state.stats, **command.changes))

    if isinstance(command, UpdateSettings):
        return replace(state, settings=replace(state.settings, **command.changes))

    if isinstance(command, SetSelectedSound):
        return replace(state, selected_sound=command.sound_id)

    if isinstance(command, SetPlaying):
        return replace(state, is_playing=bool(command.playing))

    if isinstance(command, SetView):
        return replace(state, current_view=View(command.view))

    if isinstance(command, ResetTimer):
        timer = TimerState(
            remaining_seconds=state.settings.pomodoro_length * 60,
            is_active=False,
            is_paused=False,
            mode=TimerMode.WORK,
            cycles_completed=0,
        )
        return replace(state, timer=timer)

    if isinstance(command, LoadPersistedState):
        unknown = set(command.changes) - set(_LOADABLE_SLICES)
        if unknown:
            raise ValueError(f"Cannot load unknown state slices: {sorted(unknown)}")
        changes = dict(command.changes)
        if "sessions" in changes:
            changes["sessions"] = tuple(changes["sessions"])
        return replace(state, **changes)

    raise TypeError(f"Unknown command: {command!r}")
