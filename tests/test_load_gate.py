"""Tests for startup hydration and the persistence gate."""

from datetime import timedelta

from voicery.constants import NOTES_KEY, TRASH_KEY
from voicery.load_gate import LoadGate
from voicery.note import Note


class TestLoadGate:

    def test_runs_once(self):
        calls = []
        gate = LoadGate()
        assert gate.run(lambda: calls.append('hydrate'))
        assert not gate.run(lambda: calls.append('hydrate'))
        assert calls == ['hydrate']
        assert gate.loaded

    def test_replays_deferred_after_hydration(self):
        calls = []
        gate = LoadGate()
        assert gate.defer(lambda: calls.append('first'))
        assert gate.defer(lambda: calls.append('second'))
        assert gate.pending_count == 2
        gate.run(lambda: calls.append('hydrate'))
        assert calls == ['hydrate', 'first', 'second']
        assert gate.pending_count == 0

    def test_defer_after_load_is_refused(self):
        gate = LoadGate()
        gate.run(lambda: None)
        assert not gate.defer(lambda: None)


def _seed(snapshots, clock, *texts):
    notes = [
        Note(id=f'saved-{i}', text=text, created_at=clock.now - timedelta(minutes=i + 1))
        for i, text in enumerate(texts)
    ]
    snapshots.save(NOTES_KEY, notes)
    return notes


class TestHydration:

    def test_nothing_written_before_load(self, make_store, snapshots, scheduler, clock):
        saved = _seed(snapshots, clock, 'kept')
        store = make_store(load=False)
        store.add('early')
        store.clear_all()
        scheduler.run_idle()
        assert snapshots.load(NOTES_KEY) == saved
        assert snapshots.load(TRASH_KEY) == []

    def test_early_add_is_kept_after_load(self, make_store, snapshots, scheduler, clock):
        saved = _seed(snapshots, clock, 'one', 'two')
        store = make_store(load=False)
        early = store.add('early')
        assert store.notes == [early]

        store.load()
        scheduler.run_idle()

        assert store.notes == [early] + saved
        assert snapshots.load(NOTES_KEY) == [early] + saved

    def test_early_delete_applies_to_hydrated_note(self, make_store, snapshots, scheduler, clock):
        saved = _seed(snapshots, clock, 'one', 'two')
        store = make_store(load=False)
        assert store.delete(saved[0].id) is None

        store.load()
        scheduler.run_idle()

        assert store.notes == [saved[1]]
        assert [n.id for n in store.trash] == [saved[0].id]
        assert [n.id for n in snapshots.load(TRASH_KEY)] == [saved[0].id]

        restored = store.restore_from_trash(saved[0].id)
        assert restored.created_at == saved[0].created_at
        assert store.notes == saved

    def test_early_restore_of_hydrated_id_is_rejected(self, make_store, snapshots, scheduler, clock):
        saved = _seed(snapshots, clock, 'one')
        store = make_store(load=False)
        assert store.restore_note(saved[0])

        store.load()
        assert store.notes == saved

    def test_load_twice(self, make_store):
        store = make_store()
        assert store.loaded
        assert not store.load()

    def test_loaded_signal(self, make_store):
        store = make_store(load=False)
        seen = []
        store.connect('loaded', lambda s: seen.append(s.notes))
        store.load()
        assert seen == [[]]

    def test_expired_entries_dropped_on_load(self, make_store, snapshots, scheduler, clock):
        snapshots.save(NOTES_KEY, [
            Note(id='fresh', text='x', created_at=clock.now - timedelta(minutes=59)),
            Note(id='stale', text='x', created_at=clock.now - timedelta(minutes=61)),
        ])
        snapshots.save(TRASH_KEY, [
            Note(id='binned', text='x', created_at=clock.now - timedelta(hours=3),
                 deleted_at=clock.now - timedelta(minutes=10)),
            Note(id='gone', text='x', created_at=clock.now - timedelta(hours=3),
                 deleted_at=clock.now - timedelta(hours=2)),
        ])
        store = make_store()
        assert [n.id for n in store.notes] == ['fresh']
        assert [n.id for n in store.trash] == ['binned']
        assert [n.id for n in snapshots.load(NOTES_KEY)] == ['fresh']
        assert [n.id for n in snapshots.load(TRASH_KEY)] == ['binned']

    def test_load_restores_invariants(self, make_store, snapshots, clock):
        older = Note(id='a', text='a', created_at=clock.now - timedelta(minutes=5))
        newer = Note(id='b', text='b', created_at=clock.now - timedelta(minutes=1))
        snapshots.save(NOTES_KEY, [older, newer, older])
        snapshots.save(TRASH_KEY, [
            older.trashed(clock.now),
            Note(id='c', text='c', created_at=clock.now),
        ])
        store = make_store()
        assert [n.id for n in store.notes] == ['b', 'a']
        assert store.trash == []

    def test_corrupt_storage_loads_empty(self, make_store, kv):
        kv.set(NOTES_KEY, '\x00garbage')
        kv.set(TRASH_KEY, '[{"id": 1}]')
        store = make_store()
        assert store.notes == []
        assert store.trash == []
