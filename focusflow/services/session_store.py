# -*- coding: utf-8 -*-

import datetime as dt
import logging
import uuid
from typing import Any, Callable, List, Optional

from focusflow.constants import SESSIONS_KEY
from focusflow.domain.models import SessionKind, SessionRecord
from focusflow.storage.kv import KeyValueStore, PersistentValue

logger = logging.getLogger(__name__)


def _decode_sessions(raw: Any) -> List[SessionRecord]:
    if not isinstance(raw, list):
        raise ValueError("session log must be a list")
    return [SessionRecord.from_dict(item) for item in raw]


def _encode_sessions(sessions: List[SessionRecord]) -> List[dict]:
    return [s.to_dict() for s in sessions]


class SessionStore:
    """
    Append-only log of sessions, oldest first.
    Every append is written through immediately; storage failures are logged
    and never reach the caller.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], dt.datetime] = dt.datetime.now):
        self._clock = clock
        self._value: PersistentValue[List[SessionRecord]] = PersistentValue(
            store,
            SESSIONS_KEY,
            default=[],
            decode=_decode_sessions,
            encode=_encode_sessions,
        )
        self._on_change: Optional[Callable[[List[SessionRecord]], None]] = None
        self._value.set_on_change(self._external_change)

    def set_on_change(self, fn: Optional[Callable[[List[SessionRecord]], None]]) -> None:
        self._on_change = fn

    def all(self) -> List[SessionRecord]:
        return list(self._value.value)

    def append(
        self,
        kind: SessionKind,
        duration_minutes: int,
        completed: bool = True,
        mood: Optional[int] = None,
        notes: Optional[str] = None,
        timestamp: Optional[dt.datetime] = None,
        session_id: Optional[str] = None,
    ) -> SessionRecord:
        if duration_minutes <= 0:
            raise ValueError("Session duration must be positive.")
        record = SessionRecord(
            id=session_id or str(uuid.uuid4()),
            timestamp=timestamp or self._clock(),
            kind=SessionKind(kind),
            duration_minutes=int(duration_minutes),
            completed=completed,
            mood=mood,
            notes=notes,
        )
        return self.append_record(record)

    def append_record(self, record: SessionRecord) -> SessionRecord:
        self._value.set(self._value.value + [record])
        logger.info(
            "Logged %s session (%d min, completed=%s)",
            record.kind.value,
            record.duration_minutes,
            record.completed,
        )
        return record

    def close(self) -> None:
        self._value.close()

    def _external_change(self, sessions: List[SessionRecord]) -> None:
        logger.info("Session log changed elsewhere (%d sessions)", len(sessions))
        if self._on_change:
            self._on_change(list(sessions))
