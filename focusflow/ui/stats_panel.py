# -*- coding: utf-8 -*-

import logging
from tkinter import ttk

from tkinterweb import HtmlFrame

from focusflow.core.state import AddSession, AppState, Command, LoadPersistedState, UpdateStats
from focusflow.services.app_controller import AppController
from focusflow.ui.markdown_renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


class StatsPanel(ttk.Frame):
    def __init__(self, master, controller: AppController, renderer: MarkdownRenderer):
        super().__init__(master, padding=8)
        self.controller = controller
        self.renderer = renderer

        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)
        self.view = HtmlFrame(self, horizontal_scrollbar="auto")
        self.view.grid(row=0, column=0, sticky="nsew")

        self._unsubscribe = controller.subscribe(self._on_state)
        self.refresh()

    def _on_state(self, state: AppState, command: Command):
        if isinstance(command, (AddSession, UpdateStats, LoadPersistedState)):
            self.refresh()

    def refresh(self):
        state = self.controller.state
        md = self.renderer.stats_report(
            state.stats,
            self.controller.insights,
            self.controller.weekly_data(),
            self.controller.monthly_data(),
            state.sessions,
        )
        logger.debug("Rendering stats report (%d sessions)", len(state.sessions))
        self.view.load_html(self.renderer.to_html(md))

    def destroy(self):
        self._unsubscribe()
        super().destroy()
