# -*- coding: utf-8 -*-

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict

from focusflow.config import AppConfig
from focusflow.constants import AMBIENT_SOUNDS, APP_NAME
from focusflow.core.state import AppState, Command, SetPlaying, SetSelectedSound, SetView, UpdateSettings
from focusflow.domain.models import THEMES, InvalidSettingsError, View
from focusflow.services.app_controller import AppController
from focusflow.ui.markdown_renderer import DARK_MARKDOWN_THEME, MarkdownRenderer, MarkdownTheme
from focusflow.ui.meditation_widget import MeditationWidget
from focusflow.ui.pomodoro_widget import PomodoroWidget
from focusflow.ui.stats_panel import StatsPanel

logger = logging.getLogger(__name__)

PALETTES: Dict[str, Dict[str, str]] = {
    "light": {"bg": "#F9FAFB", "fg": "#111827"},
    "dark": {"bg": "#111827", "fg": "#E5E7EB"},
}

_VIEW_ORDER = [View.TIMER, View.MEDITATION, View.STATS, View.SOUNDS, View.SETTINGS]
_VIEW_TITLES = {
    View.TIMER: "Focus",
    View.MEDITATION: "Meditate",
    View.STATS: "Stats",
    View.SOUNDS: "Sounds",
    View.SETTINGS: "Settings",
}

# (field, label) pairs edited as integers
_NUMBER_FIELDS = [
    ("pomodoro_length", "Focus (min)"),
    ("short_break_length", "Short break (min)"),
    ("long_break_length", "Long break (min)"),
    ("cycles_before_long_break", "Cycles before long break"),
    ("weekly_goal", "Weekly goal (sessions)"),
]


class TkScheduler:
    """Runs callbacks on the Tk event loop."""

    def __init__(self, root: tk.Misc):
        self.root = root

    def call_later(self, ms: int, fn: Callable[[], None]) -> str:
        return self.root.after(ms, fn)

    def cancel(self, handle: str) -> None:
        self.root.after_cancel(handle)


def palette_for(theme: str) -> Dict[str, str]:
    # "auto" has no system hook under Tk, it follows the light palette
    return PALETTES["dark"] if theme == "dark" else PALETTES["light"]


class MainWindow:
    def __init__(self, root: tk.Tk, controller: AppController, config: AppConfig):
        self.root = root
        self.controller = controller
        self.config = config
        self._poll_job = None

        self.root.title(APP_NAME)
        self.root.geometry("720x560")
        self.root.protocol("WM_DELETE_WINDOW", self.close)

        self.style = ttk.Style(self.root)
        self._build_ui()
        self._apply_theme(controller.state.settings.theme)
        self._unsubscribe = controller.subscribe(self._on_state)

        self._schedule_poll()

    def _build_ui(self):
        self.notebook = ttk.Notebook(self.root)
        self.notebook.pack(fill="both", expand=True)

        renderer = MarkdownRenderer(self._markdown_theme(self.controller.state.settings.theme))
        self.tabs: Dict[View, ttk.Frame] = {
            View.TIMER: PomodoroWidget(self.notebook, self.controller, on_title=self.set_title),
            View.MEDITATION: MeditationWidget(
                self.notebook, self.controller.meditation, on_title=self.set_title
            ),
            View.STATS: StatsPanel(self.notebook, self.controller, renderer),
            View.SOUNDS: self._build_sounds_tab(),
            View.SETTINGS: self._build_settings_tab(),
        }
        self.stats_panel = self.tabs[View.STATS]
        for view in _VIEW_ORDER:
            self.notebook.add(self.tabs[view], text=_VIEW_TITLES[view])

        self.notebook.select(_VIEW_ORDER.index(self.controller.state.current_view))
        self.notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)

    # ----- sounds -----
    def _build_sounds_tab(self) -> ttk.Frame:
        frame = ttk.Frame(self.notebook, padding=16)
        frame.columnconfigure(0, weight=1)

        self.sound_var = tk.StringVar(value=self.controller.state.selected_sound or "")
        for i, sound in enumerate(AMBIENT_SOUNDS):
            ttk.Radiobutton(
                frame,
                text=f"{sound.icon}  {sound.name}",
                value=sound.id,
                variable=self.sound_var,
                command=lambda s=sound.id: self.controller.select_sound(s),
            ).grid(row=i, column=0, sticky="w", pady=2)

        controls = ttk.Frame(frame)
        controls.grid(row=len(AMBIENT_SOUNDS), column=0, sticky="w", pady=(12, 0))
        self.play_btn = ttk.Button(controls, text="Play", command=self.controller.toggle_sound)
        self.play_btn.pack(side="left", padx=(0, 6))
        ttk.Button(controls, text="Stop", command=self.controller.stop_sound).pack(side="left")

        ttk.Label(controls, text="Volume").pack(side="left", padx=(16, 6))
        self.volume_var = tk.DoubleVar(value=self.controller.player.volume * 100)
        ttk.Scale(
            controls,
            from_=0,
            to=100,
            variable=self.volume_var,
            command=lambda v: self.controller.set_volume(float(v) / 100),
        ).pack(side="left")
        return frame

    # ----- settings -----
    def _build_settings_tab(self) -> ttk.Frame:
        frame = ttk.Frame(self.notebook, padding=16)
        settings = self.controller.state.settings

        self.setting_vars: Dict[str, tk.Variable] = {}
        row = 0
        for field, label in _NUMBER_FIELDS:
            ttk.Label(frame, text=label).grid(row=row, column=0, sticky="w", pady=3)
            var = tk.StringVar(value=str(getattr(settings, field)))
            ttk.Entry(frame, textvariable=var, width=8).grid(row=row, column=1, sticky="w")
            self.setting_vars[field] = var
            row += 1

        for field, label in (("notifications", "Desktop notifications"), ("sound_enabled", "Completion chime")):
            var = tk.BooleanVar(value=getattr(settings, field))
            ttk.Checkbutton(frame, text=label, variable=var).grid(
                row=row, column=0, columnspan=2, sticky="w", pady=3
            )
            self.setting_vars[field] = var
            row += 1

        ttk.Label(frame, text="Theme").grid(row=row, column=0, sticky="w", pady=3)
        theme_var = tk.StringVar(value=settings.theme)
        ttk.Combobox(frame, textvariable=theme_var, values=THEMES, state="readonly", width=8).grid(
            row=row, column=1, sticky="w"
        )
        self.setting_vars["theme"] = theme_var
        row += 1

        ttk.Button(frame, text="Save", command=self._save_settings).grid(
            row=row, column=0, sticky="w", pady=(12, 0)
        )
        self.settings_err_var = tk.StringVar(value="")
        ttk.Label(frame, textvariable=self.settings_err_var, foreground="red").grid(
            row=row + 1, column=0, columnspan=2, sticky="w", pady=(6, 0)
        )
        return frame

    def _save_settings(self):
        changes = {}
        for field, var in self.setting_vars.items():
            value = var.get()
            if field in dict(_NUMBER_FIELDS):
                try:
                    value = int(str(value).strip())
                except ValueError:
                    self.settings_err_var.set(f"{field.replace('_', ' ')} must be a whole number")
                    return
            changes[field] = value
        try:
            self.controller.update_settings(**changes)
        except InvalidSettingsError as e:
            self.settings_err_var.set(str(e))
            return
        self.settings_err_var.set("")

    def _sync_settings_form(self):
        settings = self.controller.state.settings
        for field, var in self.setting_vars.items():
            value = getattr(settings, field)
            var.set(str(value) if field in dict(_NUMBER_FIELDS) else value)

    # ----- theme -----
    def _markdown_theme(self, theme: str) -> MarkdownTheme:
        return DARK_MARKDOWN_THEME if theme == "dark" else MarkdownTheme()

    def _apply_theme(self, theme: str):
        colors = palette_for(theme)
        self.root.configure(background=colors["bg"])
        self.style.configure(".", background=colors["bg"], foreground=colors["fg"])
        self.stats_panel.renderer.theme = self._markdown_theme(theme)

    # ----- state -----
    def _on_state(self, state: AppState, command: Command):
        if isinstance(command, UpdateSettings):
            self._sync_settings_form()
            if "theme" in command.changes:
                self._apply_theme(state.settings.theme)
                self.stats_panel.refresh()
        elif isinstance(command, SetPlaying):
            self.play_btn.config(text="Pause" if state.is_playing else "Play")
        elif isinstance(command, SetSelectedSound):
            self.sound_var.set(state.selected_sound or "")
        elif isinstance(command, SetView):
            index = _VIEW_ORDER.index(state.current_view)
            if self.notebook.index("current") != index:
                self.notebook.select(index)

    def _on_tab_changed(self, event=None):
        view = _VIEW_ORDER[self.notebook.index("current")]
        self.controller.set_view(view)

    def set_title(self, text: str):
        self.root.title(text or APP_NAME)

    # ----- external changes -----
    def _schedule_poll(self):
        self._poll_job = self.root.after(self.config.external_poll_ms, self._poll)

    def _poll(self):
        self._poll_job = None
        changed = self.controller.poll_external_changes()
        if changed:
            logger.info("Picked up external changes: %s", ", ".join(changed))
        self._schedule_poll()

    # ----- lifecycle -----
    def run(self):
        self.root.mainloop()

    def close(self):
        if self._poll_job is not None:
            self.root.after_cancel(self._poll_job)
            self._poll_job = None
        self._unsubscribe()
        self.controller.shutdown()
        self.root.destroy()
