# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import messagebox, ttk
from typing import Callable

from focusflow.constants import MEDITATION_DURATIONS, MEDITATION_TYPES
from focusflow.domain.models import TimerState
from focusflow.services.meditation_service import MeditationService
from focusflow.utils.formatting import format_time, timer_title


class MeditationWidget(ttk.Frame):
    def __init__(self, master, meditation: MeditationService, on_title: Callable[[str], None]):
        super().__init__(master, padding=16)
        self.meditation = meditation
        self.on_title = on_title

        self._build_ui()

        timer = meditation.timer
        timer.set_on_tick(self._render)
        timer.set_on_state_change(self._render)
        self._render(timer.get_snapshot())

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        row = ttk.Frame(self)
        row.grid(row=0, column=0, pady=(0, 8))
        ttk.Label(row, text="Length:").pack(side="left", padx=(0, 6))
        self.duration_var = tk.IntVar(value=self.meditation.minutes)
        for minutes, label in MEDITATION_DURATIONS:
            ttk.Radiobutton(
                row,
                text=label,
                value=minutes,
                variable=self.duration_var,
                command=self._pick_duration,
            ).pack(side="left", padx=3)

        types = ttk.Frame(self)
        types.grid(row=1, column=0, pady=(0, 8))
        self.type_var = tk.StringVar(value=self.meditation.meditation_type.id)
        for t in MEDITATION_TYPES:
            ttk.Radiobutton(
                types,
                text=f"{t.icon} {t.name}",
                value=t.id,
                variable=self.type_var,
                command=lambda: self.meditation.select_type(self.type_var.get()),
            ).pack(side="left", padx=3)

        self.time_var = tk.StringVar(value="")
        self.hint_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self.time_var, font=("Sans", 44, "bold")).grid(
            row=2, column=0, pady=(8, 4)
        )
        ttk.Label(self, textvariable=self.hint_var, font=("Sans", 12)).grid(row=3, column=0)

        buttons = ttk.Frame(self)
        buttons.grid(row=4, column=0, pady=(10, 0))
        self.start_btn = ttk.Button(buttons, text="Begin", command=self._start_pause)
        self.start_btn.pack(side="left", padx=5)
        ttk.Button(buttons, text="Stop", command=self._stop).pack(side="left", padx=5)

    def _pick_duration(self):
        try:
            self.meditation.select_duration(self.duration_var.get())
        except ValueError as e:
            self.duration_var.set(self.meditation.minutes)
            messagebox.showinfo("Meditation", str(e))

    def _start_pause(self):
        if self.meditation.engine.is_running:
            self.meditation.pause()
        else:
            self.meditation.start()

    def _stop(self):
        self.meditation.stop()

    def _render(self, timer: TimerState):
        self.time_var.set(format_time(timer.remaining_seconds))
        phase = self.meditation.current_breathing_phase()
        if phase is not None:
            self.hint_var.set(phase[1])
        elif timer.is_active:
            self.hint_var.set(self.meditation.meditation_type.description)
        else:
            self.hint_var.set("Find a comfortable position")

        if timer.is_running:
            self.start_btn.config(text="Pause")
        elif timer.is_paused:
            self.start_btn.config(text="Resume")
        else:
            self.start_btn.config(text="Begin")
        self.on_title(timer_title(timer, "Meditation", prefix="🧘 "))
