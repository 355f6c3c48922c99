import datetime as dt
import itertools
from pathlib import Path

import pytest

from focusflow.services.audio_service import AudioError
from focusflow.storage.kv import MemoryKeyValueStore


class FakeScheduler:
    """Collects call_later() requests; tests fire them by hand."""

    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._ids = itertools.count(1)

    def call_later(self, ms, fn):
        handle = next(self._ids)
        self.pending[handle] = (ms, fn)
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)
        self.pending.pop(handle, None)

    def run_pending(self):
        """Fire everything currently queued once. Returns how many callbacks ran."""
        due = list(self.pending.items())
        self.pending.clear()
        for _, (_, fn) in due:
            fn()
        return len(due)

    def advance(self, seconds):
        for _ in range(seconds):
            if not self.run_pending():
                break


class FakeSink:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = set(fail_on or ())

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise AudioError(f"{name} rejected")

    def load(self, path):
        self._record("load", Path(path).name)

    def play(self, loop=True):
        self._record("play", loop)

    def pause(self):
        self._record("pause")

    def unpause(self):
        self._record("unpause")

    def stop(self):
        self._record("stop")

    def set_volume(self, volume):
        self._record("set_volume", volume)

    def play_chime(self, path, volume=0.7):
        self._record("play_chime", Path(path).name)

    def close(self):
        self._record("close")


class FakeNotifier:
    def __init__(self, granted=True):
        self.granted = granted
        self.permission_requests = 0
        self.shown = []

    def request_permission(self):
        self.permission_requests += 1
        return self.granted

    def show(self, title, body, icon="focusflow"):
        if not self.granted:
            return False
        self.shown.append((title, body, icon))
        return True

    def completion_message(self, finished, upcoming):
        from focusflow.domain.models import NotificationMessage

        return NotificationMessage(f"{finished.value} done", f"next: {upcoming.value}")


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += dt.timedelta(**kwargs)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def clock():
    # a Wednesday
    return FakeClock(dt.datetime(2024, 1, 3, 10, 0, 0))
