# -*- coding: utf-8 -*-

from typing import Optional

from focusflow.domain.models import TimerMode, TimerState


class TimerEngine:
    """
    Pure countdown engine (no Tkinter, no clock).
    The owning service calls tick() once per elapsed second while running.

    After an interval finishes the engine moves to the next mode and stops;
    the next interval only begins on an explicit start().
    """

    def __init__(
        self,
        work_minutes: int = 25,
        short_break_minutes: int = 5,
        long_break_minutes: int = 15,
        cycles_before_long_break: int = 4,
        state: Optional[TimerState] = None,
    ):
        self.durations = {}
        self.cycles_before_long_break = 1
        self._set_durations(
            work_minutes, short_break_minutes, long_break_minutes, cycles_before_long_break
        )

        if state is None:
            state = TimerState(remaining_seconds=self.duration_sec(TimerMode.WORK))
        self.restore(state)

    def _set_durations(self, work: int, short: int, long: int, cycles: int) -> None:
        if min(work, short, long) <= 0:
            raise ValueError("Durations must be positive.")
        if cycles <= 0:
            raise ValueError("cycles_before_long_break must be positive.")
        self.durations = {
            TimerMode.WORK: int(work) * 60,
            TimerMode.SHORT_BREAK: int(short) * 60,
            TimerMode.LONG_BREAK: int(long) * 60,
        }
        self.cycles_before_long_break = int(cycles)

    def duration_sec(self, mode: TimerMode) -> int:
        return self.durations[mode]

    def restore(self, state: TimerState) -> None:
        self.mode = TimerMode(state.mode)
        self.remaining_sec = max(0, int(state.remaining_seconds))
        self.is_active = state.is_active
        self.is_paused = state.is_paused
        self.cycles_completed = max(0, int(state.cycles_completed))

    def snapshot(self) -> TimerState:
        return TimerState(
            remaining_seconds=self.remaining_sec,
            is_active=self.is_active,
            is_paused=self.is_paused,
            mode=self.mode,
            cycles_completed=self.cycles_completed,
        )

    @property
    def is_running(self) -> bool:
        return self.is_active and not self.is_paused

    def configure(
        self,
        work_minutes: int,
        short_break_minutes: int,
        long_break_minutes: int,
        cycles_before_long_break: int,
    ) -> None:
        self._set_durations(
            work_minutes, short_break_minutes, long_break_minutes, cycles_before_long_break
        )
        # a running interval keeps its countdown
        if not self.is_active:
            self.remaining_sec = self.duration_sec(self.mode)

    def start(self) -> None:
        if self.is_paused:
            self.is_paused = False
            return
        self.is_active = True
        self.is_paused = False

    def pause(self) -> None:
        if not self.is_active:
            return
        self.is_paused = True

    def resume(self) -> None:
        if not self.is_active:
            return
        self.is_paused = False

    def stop(self) -> None:
        self.is_active = False
        self.is_paused = False
        self.remaining_sec = self.duration_sec(self.mode)

    def reset(self) -> None:
        self.mode = TimerMode.WORK
        self.cycles_completed = 0
        self.remaining_sec = self.duration_sec(TimerMode.WORK)
        self.is_active = False
        self.is_paused = False

    def switch_mode(self, mode: TimerMode) -> None:
        self.mode = TimerMode(mode)
        self.remaining_sec = self.duration_sec(self.mode)
        self.is_active = False
        self.is_paused = False

    def next_mode(self, finished: TimerMode) -> TimerMode:
        if finished != TimerMode.WORK:
            return TimerMode.WORK
        if self.cycles_completed % self.cycles_before_long_break == 0:
            return TimerMode.LONG_BREAK
        return TimerMode.SHORT_BREAK

    def progress(self) -> float:
        total = self.duration_sec(self.mode)
        pct = 100.0 * (total - self.remaining_sec) / total
        return max(0.0, min(100.0, pct))

    def tick(self) -> Optional[TimerMode]:
        """
        Returns the mode that just finished if this tick completed the interval.
        """
        if not self.is_running:
            return None

        if self.remaining_sec > 0:
            self.remaining_sec -= 1

        if self.remaining_sec > 0:
            return None

        return self._complete_interval()

    def _complete_interval(self) -> TimerMode:
        finished = self.mode
        if finished == TimerMode.WORK:
            self.cycles_completed += 1

        self.mode = self.next_mode(finished)
        self.remaining_sec = self.duration_sec(self.mode)
        self.is_active = False
        self.is_paused = False
        return finished
