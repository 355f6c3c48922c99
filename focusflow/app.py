#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
import tkinter as tk

from focusflow.config import AppConfig
from focusflow.services.app_controller import AppController
from focusflow.services.audio_service import AmbientPlayer, PygameAudioSink
from focusflow.services.notification_service import DesktopNotifier
from focusflow.storage.db import Database
from focusflow.storage.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from focusflow.storage.repos import AppStateRepo
from focusflow.ui.main_window import MainWindow, TkScheduler
from focusflow.utils.logger import setup_logger

logger = logging.getLogger("focusflow")


def open_store(config: AppConfig) -> KeyValueStore:
    try:
        db = Database(db_path=str(config.db_path))
        db.init_schema()
        return SqliteKeyValueStore(AppStateRepo(db))
    except sqlite3.Error:
        logger.error("Could not open %s, data will not be saved", config.db_path, exc_info=True)
        return MemoryKeyValueStore()


def main():
    config = AppConfig.from_env()
    config.ensure_directories()
    setup_logger(config.log_file if config.log_to_file else None, level=config.logging_level)
    logger.info("Starting FocusFlow (data dir: %s)", config.data_dir)

    store = open_store(config)

    root = tk.Tk()
    controller = AppController(
        store,
        TkScheduler(root),
        DesktopNotifier(),
        AmbientPlayer(PygameAudioSink(), config.sounds_dir),
        config.sounds_dir,
        streak_lookback_days=config.streak_lookback_days,
    )

    app = MainWindow(root, controller, config)
    app.run()


if __name__ == "__main__":
    main()
