# -*- coding: utf-8 -*-

import logging
from typing import Any, Callable, Optional

from focusflow.core.timer_engine import TimerEngine
from focusflow.domain.models import TimerMode, TimerState
from focusflow.storage.kv import PersistentValue

logger = logging.getLogger(__name__)

TICK_MS = 1000


class TimerService:
    """
    Orchestrates:
    - TimerEngine state
    - the one-second tick task (at most one pending at a time)
    - persistence of the timer snapshot after every change
    - callbacks for the coordinator / UI

    ``scheduler`` must provide call_later(delay_ms, fn) -> handle and
    cancel(handle); the UI passes a wrapper around Tk's after().
    """

    def __init__(
        self,
        engine: TimerEngine,
        scheduler: Any,
        persisted: Optional[PersistentValue] = None,
    ):
        self.engine = engine
        self.scheduler = scheduler
        self.persisted = persisted

        self._tick_job = None

        self._on_tick: Optional[Callable[[TimerState], None]] = None
        self._on_complete: Optional[Callable[[TimerMode], None]] = None
        self._on_state_change: Optional[Callable[[TimerState], None]] = None

        if self.persisted is not None:
            self.persisted.set_on_change(self._external_change)

        # a restored snapshot that was counting down keeps counting
        self._sync_tick_loop()

    # ----- Callbacks -----
    def set_on_tick(self, fn: Optional[Callable[[TimerState], None]]) -> None:
        self._on_tick = fn

    def set_on_complete(self, fn: Optional[Callable[[TimerMode], None]]) -> None:
        self._on_complete = fn

    def set_on_state_change(self, fn: Optional[Callable[[TimerState], None]]) -> None:
        self._on_state_change = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.engine.snapshot())

    def _emit_complete(self, mode: TimerMode) -> None:
        if self._on_complete:
            self._on_complete(mode)

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.engine.snapshot())

    # ----- Public API -----
    def get_snapshot(self) -> TimerState:
        return self.engine.snapshot()

    def progress(self) -> float:
        return self.engine.progress()

    @property
    def has_pending_tick(self) -> bool:
        return self._tick_job is not None

    def start(self) -> None:
        self.engine.start()
        self._after_change()

    def pause(self) -> None:
        self.engine.pause()
        self._after_change()

    def resume(self) -> None:
        self.engine.resume()
        self._after_change()

    def toggle(self) -> None:
        if self.engine.is_running:
            self.pause()
        else:
            self.start()

    def stop(self) -> None:
        self.engine.stop()
        self._after_change()

    def reset(self) -> None:
        self.engine.reset()
        self._after_change()

    def switch_mode(self, mode: TimerMode) -> None:
        self.engine.switch_mode(mode)
        self._after_change()

    def configure(
        self,
        work_minutes: int,
        short_break_minutes: int,
        long_break_minutes: int,
        cycles_before_long_break: int,
    ) -> None:
        self.engine.configure(
            work_minutes, short_break_minutes, long_break_minutes, cycles_before_long_break
        )
        self._after_change()

    def shutdown(self) -> None:
        self._stop_tick_loop()
        self._persist()

    def tick(self) -> None:
        """
        Advance one second. Normally driven by the scheduled task.
        Handles interval completion and stops the tick task when the engine stops.
        """
        if not self.engine.is_running:
            self._stop_tick_loop()
            return

        finished = self.engine.tick()
        self._persist()

        if finished is not None:
            logger.info(
                "%s interval finished, next: %s (cycles=%d)",
                finished.value,
                self.engine.mode.value,
                self.engine.cycles_completed,
            )
            self._stop_tick_loop()
            self._emit_complete(finished)
            self._emit_state_change()

        self._emit_tick()

    # ----- Tick loop -----
    def _after_change(self) -> None:
        self._persist()
        self._sync_tick_loop()
        self._emit_state_change()
        self._emit_tick()

    def _sync_tick_loop(self) -> None:
        if self.engine.is_running:
            self._ensure_tick_loop()
        else:
            self._stop_tick_loop()

    def _ensure_tick_loop(self) -> None:
        if self._tick_job is None:
            self._tick_job = self.scheduler.call_later(TICK_MS, self._tick_once)

    def _stop_tick_loop(self) -> None:
        if self._tick_job is not None:
            self.scheduler.cancel(self._tick_job)
            self._tick_job = None

    def _tick_once(self) -> None:
        self._tick_job = None
        self.tick()
        # re-read the engine; a callback may have stopped or restarted it
        if self.engine.is_running:
            self._ensure_tick_loop()

    def _external_change(self, state: TimerState) -> None:
        # another window drove the same timer; last write wins
        self.engine.restore(state)
        self._sync_tick_loop()
        self._emit_state_change()
        self._emit_tick()

    def _persist(self) -> None:
        if self.persisted is not None:
            self.persisted.set(self.engine.snapshot())
