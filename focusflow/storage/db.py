#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: Union[str, Path] = "focusflow.db"):
        self.db_path = str(db_path)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def init_schema(self) -> None:
        cur = self.conn.cursor()

        # every persisted value lives here as JSON text
        cur.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)

        self.conn.commit()

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error:
            logger.warning("Failed to close database %s", self.db_path, exc_info=True)
