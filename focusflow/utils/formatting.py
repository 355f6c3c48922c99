# -*- coding: utf-8 -*-

import math

from focusflow.domain.models import TimerState


def format_time(seconds: int) -> str:
    m = max(0, seconds) // 60
    s = max(0, seconds) % 60
    return f"{m:02d}:{s:02d}"


def format_duration(minutes: int) -> str:
    hours, mins = divmod(max(0, int(minutes)), 60)
    if hours == 0:
        return f"{mins}min"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}min"


def round_half_up(value: float) -> int:
    # round() is banker's rounding; stats want 2.5 -> 3
    return int(math.floor(value + 0.5))


def timer_title(timer: TimerState, suffix: str, prefix: str = "") -> str:
    """Window title for a timer; empty when it is idle."""
    if not timer.is_active:
        return ""
    text = f"{prefix}{format_time(timer.remaining_seconds)}"
    if timer.is_paused:
        text += " (paused)"
    return f"{text} - {suffix}"
