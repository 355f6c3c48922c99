# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk
from typing import Callable

from focusflow.constants import APP_NAME, MODE_LABELS
from focusflow.core.state import AppState, Command
from focusflow.domain.models import TimerMode, TimerState
from focusflow.services.app_controller import AppController
from focusflow.utils.formatting import format_time, timer_title


class PomodoroWidget(ttk.Frame):
    def __init__(
        self,
        master,
        controller: AppController,
        on_title: Callable[[str], None],
    ):
        super().__init__(master, padding=16)

        self.controller = controller
        self.on_title = on_title
        self._last_timer = None

        self._build_ui()
        self._unsubscribe = controller.subscribe(self._on_state)

        # initial render
        self._render(controller.state.timer)

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        modes = ttk.Frame(self)
        modes.grid(row=0, column=0, pady=(0, 10))
        for i, mode in enumerate(TimerMode):
            ttk.Button(
                modes,
                text=MODE_LABELS[mode],
                command=lambda m=mode: self.controller.switch_mode(m),
            ).grid(row=0, column=i, padx=4)

        self.phase_var = tk.StringVar(value=MODE_LABELS[TimerMode.WORK])
        self.time_var = tk.StringVar(value="25:00")
        self.info_var = tk.StringVar(value="")
        self.cycles_var = tk.StringVar(value="")

        ttk.Label(self, textvariable=self.phase_var, font=("Sans", 12, "bold")).grid(
            row=1, column=0
        )
        ttk.Label(self, textvariable=self.time_var, font=("Sans", 48, "bold")).grid(
            row=2, column=0, pady=(8, 4)
        )

        self.progress = ttk.Progressbar(self, maximum=100, length=320)
        self.progress.grid(row=3, column=0, pady=(0, 8))

        ttk.Label(self, textvariable=self.info_var).grid(row=4, column=0)
        ttk.Label(self, textvariable=self.cycles_var).grid(row=5, column=0, pady=(0, 10))

        buttons = ttk.Frame(self)
        buttons.grid(row=6, column=0)

        self.start_btn = ttk.Button(buttons, text="Start", command=self._start_pause)
        self.start_btn.pack(side="left", padx=5)
        ttk.Button(buttons, text="Stop", command=self._stop).pack(side="left", padx=5)
        ttk.Button(buttons, text="Reset", command=self._reset).pack(side="left", padx=5)

    # ---- actions ----
    def _start_pause(self):
        timer = self.controller.state.timer
        if timer.is_running:
            self.controller.pause_timer()
        elif timer.is_paused:
            self.controller.resume_timer()
        else:
            self.controller.start_timer()

    def _stop(self):
        self.controller.stop_timer()

    def _reset(self):
        self.controller.reset_timer()

    # ---- state callbacks ----
    def _on_state(self, state: AppState, command: Command):
        if state.timer is self._last_timer:
            return
        self._render(state.timer)

    def _render(self, timer: TimerState):
        self._last_timer = timer
        self.time_var.set(format_time(timer.remaining_seconds))
        self.phase_var.set(MODE_LABELS[timer.mode])
        self.progress["value"] = self.controller.timer.progress()
        self.cycles_var.set(f"Cycles completed: {timer.cycles_completed}")

        if timer.is_running:
            self.info_var.set("Running...")
            self.start_btn.config(text="Pause")
        elif timer.is_paused:
            self.info_var.set("Paused")
            self.start_btn.config(text="Resume")
        else:
            self.info_var.set("Ready")
            self.start_btn.config(text="Start")
        self.on_title(timer_title(timer, APP_NAME))

    def destroy(self):
        self._unsubscribe()
        super().destroy()
