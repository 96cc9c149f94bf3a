"""
Pytest fixtures for Voicery tests: a manual scheduler, a settable clock and
an in-memory SQLite key-value store.
"""

from datetime import datetime, timedelta, timezone

import pytest

from voicery.kv_store import KeyValueStore
from voicery.note_store import NoteStore
from voicery.snapshot_store import SnapshotStore


class FakeHandle:

    def __init__(self, scheduler, entry):
        self._scheduler = scheduler
        self._entry = entry

    def cancel(self):
        self._scheduler.cancel(self._entry)


class FakeScheduler:
    """Runs nothing until the test asks it to."""

    def __init__(self):
        self.idle = []
        self.repeating = []

    def call_soon(self, callback):
        entry = [callback]
        self.idle.append(entry)
        return FakeHandle(self, entry)

    def schedule_every(self, interval_seconds, callback):
        entry = [interval_seconds, callback]
        self.repeating.append(entry)
        return FakeHandle(self, entry)

    def cancel(self, entry):
        if entry in self.idle:
            self.idle.remove(entry)
        if entry in self.repeating:
            self.repeating.remove(entry)

    def run_idle(self):
        while self.idle:
            callback = self.idle.pop(0)[0]
            callback()

    def tick(self):
        for _, callback in list(self.repeating):
            callback()


class FakeClock:

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def kv():
    store = KeyValueStore(':memory:')
    yield store
    store.close()


@pytest.fixture
def snapshots(kv):
    return SnapshotStore(kv)


@pytest.fixture
def make_store(snapshots, scheduler, clock):
    def _make(load=True):
        store = NoteStore(snapshots, scheduler=scheduler, clock=clock)
        if load:
            store.load()
            scheduler.run_idle()
        return store
    return _make


@pytest.fixture
def store(make_store):
    return make_store()
