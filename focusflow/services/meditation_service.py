# -*- coding: utf-8 -*-

import logging
from typing import Any, Callable, Optional, Tuple

from focusflow.constants import (
    BREATHING_PHASE_SECONDS,
    BREATHING_PHASES,
    DEFAULT_MEDITATION_MINUTES,
    MEDITATION_DURATIONS,
    MEDITATION_TYPES,
)
from focusflow.core.timer_engine import TimerEngine
from focusflow.domain.models import MeditationType, TimerMode
from focusflow.services.timer_service import TimerService

logger = logging.getLogger(__name__)

_ALLOWED_MINUTES = tuple(m for m, _ in MEDITATION_DURATIONS)
_TYPES_BY_ID = {t.id: t for t in MEDITATION_TYPES}


def breathing_phase(elapsed_seconds: int) -> Tuple[str, str]:
    """(phase, instruction) for a breathing exercise ``elapsed_seconds`` in."""
    index = (max(0, elapsed_seconds) // BREATHING_PHASE_SECONDS) % len(BREATHING_PHASES)
    return BREATHING_PHASES[index]


class MeditationService:
    """
    A single-interval countdown for meditation. It reuses the pomodoro engine
    in work mode only and is not persisted: closing the app abandons it.
    """

    def __init__(self, scheduler: Any, minutes: int = DEFAULT_MEDITATION_MINUTES):
        self._check_minutes(minutes)
        self.minutes = minutes
        self.meditation_type: MeditationType = MEDITATION_TYPES[0]

        self.engine = TimerEngine(minutes, minutes, minutes, 1)
        self.timer = TimerService(self.engine, scheduler)
        self.timer.set_on_complete(self._finished)

        self._on_complete: Optional[Callable[[int], None]] = None

    def set_on_complete(self, fn: Optional[Callable[[int], None]]) -> None:
        """``fn`` receives the length in minutes of the meditation that finished."""
        self._on_complete = fn

    @staticmethod
    def _check_minutes(minutes: int) -> None:
        if minutes not in _ALLOWED_MINUTES:
            raise ValueError(
                f"Meditation length must be one of {', '.join(map(str, _ALLOWED_MINUTES))} minutes."
            )

    def select_duration(self, minutes: int) -> None:
        self._check_minutes(minutes)
        if self.engine.is_active:
            raise ValueError("Stop the current meditation before changing its length.")
        self.minutes = minutes
        self.timer.configure(minutes, minutes, minutes, 1)

    def select_type(self, type_id: str) -> MeditationType:
        try:
            self.meditation_type = _TYPES_BY_ID[type_id]
        except KeyError:
            raise ValueError(f"Unknown meditation type: {type_id}")
        return self.meditation_type

    def start(self) -> None:
        self.timer.start()

    def pause(self) -> None:
        self.timer.pause()

    def stop(self) -> None:
        self.timer.stop()

    def reset(self) -> None:
        self.timer.reset()

    def elapsed_seconds(self) -> int:
        return self.engine.duration_sec(TimerMode.WORK) - self.engine.remaining_sec

    def current_breathing_phase(self) -> Optional[Tuple[str, str]]:
        if self.meditation_type.id != "breathing" or not self.engine.is_active:
            return None
        return breathing_phase(self.elapsed_seconds())

    def shutdown(self) -> None:
        self.timer.shutdown()

    def _finished(self, mode: TimerMode) -> None:
        # back to a fresh countdown instead of the pomodoro break that follows work
        self.engine.reset()
        logger.info("Meditation finished (%d min, %s)", self.minutes, self.meditation_type.id)
        if self._on_complete:
            self._on_complete(self.minutes)
