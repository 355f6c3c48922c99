# focusflow/storage/repos.py
# -*- coding: utf-8 -*-

from typing import Dict, Optional

from focusflow.storage.db import Database


class AppStateRepo:
    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, value),
        )
        self.db.conn.commit()

    def all(self) -> Dict[str, Optional[str]]:
        rows = self.db.conn.execute("SELECT key, value FROM app_state").fetchall()
        return {r["key"]: r["value"] for r in rows}

    def close(self) -> None:
        self.db.close()
