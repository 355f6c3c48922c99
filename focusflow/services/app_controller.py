# -*- coding: utf-8 -*-

import datetime as dt
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, List, Optional

from focusflow.constants import CHIME_FILE, NOTIFICATION_CONFIG, TIMER_KEY
from focusflow.core.insights import generate_insights
from focusflow.core.state import (
    AddSession,
    AppState,
    Command,
    LoadPersistedState,
    ResetTimer,
    SetPlaying,
    SetSelectedSound,
    SetTimerState,
    SetView,
    UpdateSettings,
    UpdateStats,
    reduce,
)
from focusflow.core.stats import DEFAULT_STREAK_LOOKBACK_DAYS
from focusflow.core.timer_engine import TimerEngine
from focusflow.domain.models import (
    AppSettings,
    ChartBucket,
    Insight,
    SessionKind,
    SessionRecord,
    TimerMode,
    TimerState,
    UserStats,
    View,
)
from focusflow.services.audio_service import AmbientPlayer
from focusflow.services.meditation_service import MeditationService
from focusflow.services.notification_service import DesktopNotifier
from focusflow.services.session_store import SessionStore
from focusflow.services.settings_service import SettingsService
from focusflow.services.stats_service import StatsService
from focusflow.services.timer_service import TimerService
from focusflow.storage.kv import KeyValueStore, PersistentValue

logger = logging.getLogger(__name__)

StateListener = Callable[[AppState, Command], None]

_TIMER_FIELDS = (
    "pomodoro_length",
    "short_break_length",
    "long_break_length",
    "cycles_before_long_break",
)


class AppController:
    """
    Owns the AppState and is the only place that changes it.

    Built once by app.main() and handed to the UI. Every change goes through
    dispatch(), which runs the pure reducer and then notifies subscribers.
    """

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: Any,
        notifier: DesktopNotifier,
        player: AmbientPlayer,
        sounds_dir: Path,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
        streak_lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
    ):
        self.store = store
        self.notifier = notifier
        self.player = player
        self.chime_path = Path(sounds_dir) / CHIME_FILE
        self._clock = clock
        self._listeners: List[StateListener] = []

        self.settings_service = SettingsService(store)
        self.session_store = SessionStore(store, clock=clock)
        settings = self.settings_service.settings

        self._state = AppState.initial(settings)
        self.insights: List[Insight] = []

        self._timer_value: PersistentValue[TimerState] = PersistentValue(
            store,
            TIMER_KEY,
            default=TimerState(remaining_seconds=settings.pomodoro_length * 60),
            decode=TimerState.from_dict,
            encode=lambda s: s.to_dict(),
        )
        engine = TimerEngine(
            settings.pomodoro_length,
            settings.short_break_length,
            settings.long_break_length,
            settings.cycles_before_long_break,
            state=self._timer_value.value,
        )
        self.timer = TimerService(engine, scheduler, self._timer_value)
        self.meditation = MeditationService(scheduler)
        self.stats_service = StatsService(
            self.session_store,
            weekly_goal=lambda: self._state.settings.weekly_goal,
            clock=clock,
            streak_lookback_days=streak_lookback_days,
        )

        self.timer.set_on_state_change(self._timer_changed)
        self.timer.set_on_tick(self._timer_changed)
        self.timer.set_on_complete(self._interval_finished)
        self.meditation.set_on_complete(self._meditation_finished)
        self.session_store.set_on_change(self._sessions_changed_elsewhere)
        self.settings_service.set_on_change(self._settings_changed_elsewhere)

        self.load_persisted_state()
        if settings.notifications:
            self.notifier.request_permission()

    # ----- state -----
    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, command: Command) -> AppState:
        self._state = reduce(self._state, command)
        for listener in list(self._listeners):
            listener(self._state, command)
        return self._state

    def load_persisted_state(self) -> None:
        settings = self.settings_service.settings
        self.dispatch(
            LoadPersistedState(
                {
                    "settings": settings,
                    "sessions": self.session_store.all(),
                    "timer": self.timer.get_snapshot(),
                    "selected_sound": settings.background_sound,
                }
            )
        )
        self.recompute()

    # ----- stats -----
    def recompute(self) -> UserStats:
        now = self._clock()
        stats = self.stats_service.stats(now)
        self.insights = generate_insights(stats, now)
        self.dispatch(UpdateStats(asdict(stats)))
        return stats

    def weekly_data(self) -> List[ChartBucket]:
        return self.stats_service.weekly_data()

    def monthly_data(self) -> List[ChartBucket]:
        return self.stats_service.monthly_data()

    # ----- sessions -----
    def log_session(
        self,
        kind: SessionKind,
        duration_minutes: int,
        completed: bool = True,
        mood: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> SessionRecord:
        record = self.session_store.append(
            kind, duration_minutes, completed=completed, mood=mood, notes=notes
        )
        self.dispatch(AddSession(record))
        self.recompute()
        return record

    # ----- settings -----
    def update_settings(self, **changes: Any) -> AppSettings:
        """Raises InvalidSettingsError (previous settings kept) on a bad value."""
        old = self._state.settings
        new = self.settings_service.update(**changes)
        self._apply_settings(old, new)
        return new

    def _apply_settings(self, old: AppSettings, new: AppSettings) -> None:
        diff = self.settings_service.changed_fields(old, new)
        if not diff:
            return
        self.dispatch(UpdateSettings(diff))

        if any(name in diff for name in _TIMER_FIELDS):
            self.timer.configure(
                new.pomodoro_length,
                new.short_break_length,
                new.long_break_length,
                new.cycles_before_long_break,
            )
        if "weekly_goal" in diff:
            self.recompute()
        if "background_sound" in diff and not self._state.is_playing:
            self.dispatch(SetSelectedSound(new.background_sound))
        if diff.get("notifications"):
            self.notifier.request_permission()

    # ----- timer -----
    def start_timer(self) -> None:
        self.timer.start()

    def pause_timer(self) -> None:
        self.timer.pause()

    def resume_timer(self) -> None:
        self.timer.resume()

    def toggle_timer(self) -> None:
        self.timer.toggle()

    def stop_timer(self) -> None:
        self.timer.stop()

    def reset_timer(self) -> None:
        self.dispatch(ResetTimer())
        self.timer.reset()

    def switch_mode(self, mode: TimerMode) -> None:
        self.timer.switch_mode(mode)

    def _timer_changed(self, snapshot: TimerState) -> None:
        if snapshot != self._state.timer:
            self.dispatch(SetTimerState(asdict(snapshot)))

    def _interval_finished(self, mode: TimerMode) -> None:
        settings = self._state.settings
        if mode == TimerMode.WORK:
            self.log_session(SessionKind.POMODORO, settings.pomodoro_length)

        if settings.sound_enabled:
            self.player.play_chime(self.chime_path)
        if settings.notifications:
            msg = self.notifier.completion_message(mode, self.timer.get_snapshot().mode)
            self.notifier.show(msg.title, msg.body, msg.icon)

    def _meditation_finished(self, minutes: int) -> None:
        self.log_session(SessionKind.MEDITATION, minutes)
        settings = self._state.settings
        if settings.sound_enabled:
            self.player.play_chime(self.chime_path)
        if settings.notifications:
            msg = NOTIFICATION_CONFIG["MEDITATION_COMPLETE"]
            self.notifier.show(msg.title, msg.body, msg.icon)

    # ----- ambient sound -----
    def select_sound(self, sound_id: str) -> bool:
        playing = self.player.play(sound_id)
        self.dispatch(SetSelectedSound(sound_id))
        self.dispatch(SetPlaying(playing))
        return playing

    def toggle_sound(self) -> bool:
        if self.player.current_sound is None:
            if self._state.selected_sound is None:
                return False
            return self.select_sound(self._state.selected_sound)
        playing = self.player.toggle()
        self.dispatch(SetPlaying(playing))
        return playing

    def stop_sound(self) -> None:
        self.player.stop()
        self.dispatch(SetPlaying(False))

    def set_volume(self, volume: float) -> float:
        return self.player.set_volume(volume)

    # ----- view -----
    def set_view(self, view: View) -> None:
        if View(view) != self._state.current_view:
            self.dispatch(SetView(View(view)))

    # ----- external changes -----
    def poll_external_changes(self) -> List[str]:
        return self.store.poll()

    def _sessions_changed_elsewhere(self, sessions: List[SessionRecord]) -> None:
        self.dispatch(LoadPersistedState({"sessions": sessions}))
        self.recompute()

    def _settings_changed_elsewhere(self, settings: AppSettings) -> None:
        self._apply_settings(self._state.settings, settings)

    def shutdown(self) -> None:
        self.timer.shutdown()
        self.meditation.shutdown()
        self.player.release()
        self._timer_value.close()
        self.session_store.close()
        self.settings_service.close()
        self.store.close()
        logger.info("Controller shut down")
