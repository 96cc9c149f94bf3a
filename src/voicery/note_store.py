# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import uuid
from dataclasses import replace

from gi.repository import GObject

from voicery.auto_save import AutoSave
from voicery.constants import NOTES_KEY, SWEEP_INTERVAL_SECONDS, TRASH_KEY
from voicery.expiry import filter_live, utcnow
from voicery.load_gate import LoadGate
from voicery.note import Note, Reversal
from voicery.scheduler import GLibScheduler
from voicery.tags import is_valid_tag

logger = logging.getLogger(__name__)


def _sort_by_created(notes):
    notes.sort(key=lambda n: n.created_at, reverse=True)


def _sort_by_deleted(notes):
    notes.sort(key=lambda n: n.deleted_at, reverse=True)


def _find(notes, note_id):
    for note in notes:
        if note.id == note_id:
            return note
    return None


def _pop(notes, note_id):
    for i, note in enumerate(notes):
        if note.id == note_id:
            return notes.pop(i)
    return None


class NoteStore(GObject.Object):
    """Active notes plus a time-limited trash, persisted as two snapshots.

    Active notes are kept newest-created first, trashed notes newest-deleted
    first, and an id lives in at most one of the two. Every mutation updates
    memory synchronously, emits ``notes-changed`` and/or ``trash-changed``
    and, once loaded, queues an idle write of the affected snapshot.

    All calls are expected on the main loop thread. Operations on unknown
    ids are no-ops.
    """

    __gsignals__ = {
        'notes-changed': (GObject.SignalFlags.RUN_LAST, None, ()),
        'trash-changed': (GObject.SignalFlags.RUN_LAST, None, ()),
        'loaded': (GObject.SignalFlags.RUN_LAST, None, ()),
    }

    def __init__(self, snapshots, scheduler=None, clock=None):
        super().__init__()
        self._snapshots = snapshots
        self._scheduler = scheduler if scheduler is not None else GLibScheduler()
        self._clock = clock if clock is not None else utcnow
        self._notes = []
        self._trash = []
        self._dirty = set()
        self._gate = LoadGate()
        self._notes_save = AutoSave(self._save_notes, self._scheduler)
        self._trash_save = AutoSave(self._save_trash, self._scheduler)
        self._sweep_handle = None

    # --- Snapshots ---

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    @property
    def trash(self) -> list[Note]:
        return list(self._trash)

    @property
    def loaded(self) -> bool:
        return self._gate.loaded

    def now(self):
        return self._clock()

    def get_note(self, note_id) -> Note | None:
        return _find(self._notes, note_id)

    def get_trashed_note(self, note_id) -> Note | None:
        return _find(self._trash, note_id)

    # --- Lifecycle ---

    def load(self) -> bool:
        """Hydrate from storage once and open persistence.

        Changes made before this call are replayed on top of the loaded
        snapshot. Returns False if the store was already loaded.
        """
        if not self._gate.run(self._hydrate):
            return False
        # Write back the hydrated state so expired entries leave storage too.
        self._dirty.update((NOTES_KEY, TRASH_KEY))
        self._flush_changes()
        self.emit('loaded')
        return True

    def start(self):
        """Begin the periodic expiry sweep."""
        if self._sweep_handle is None:
            self._sweep_handle = self._scheduler.schedule_every(
                SWEEP_INTERVAL_SECONDS, self.sweep,
            )

    def close(self):
        if self._sweep_handle is not None:
            self._sweep_handle.cancel()
            self._sweep_handle = None
        for saver in (self._notes_save, self._trash_save):
            if saver.pending:
                saver.save_now()

    def sweep(self, now=None):
        """Drop expired notes from both collections. Expiry never goes through the trash."""
        if now is None:
            now = self._clock()

        live_notes = filter_live(self._notes, now)
        if len(live_notes) != len(self._notes):
            logger.info('Expired %d note(s)', len(self._notes) - len(live_notes))
            self._notes = live_notes
            self._dirty.add(NOTES_KEY)

        live_trash = filter_live(self._trash, now)
        if len(live_trash) != len(self._trash):
            logger.info('Purged %d trashed note(s)', len(self._trash) - len(live_trash))
            self._trash = live_trash
            self._dirty.add(TRASH_KEY)

        self._flush_changes()

    # --- Notes ---

    def add(self, text, audio_data=None) -> Note | None:
        text = (text or '').strip()
        if not text:
            logger.debug('Ignoring empty capture')
            return None

        note = Note(
            id=str(uuid.uuid4()), text=text, created_at=self._clock(),
            audio_data=audio_data,
        )

        def op():
            if _find(self._notes, note.id) is None and _find(self._trash, note.id) is None:
                self._notes.insert(0, note)
                self._dirty.add(NOTES_KEY)

        self._mutate(op)
        return note

    def update(self, note_id, text):
        text = (text or '').strip()
        if not text:
            return

        def op():
            for i, note in enumerate(self._notes):
                if note.id == note_id:
                    if note.text != text:
                        self._notes[i] = replace(note, text=text)
                        self._dirty.add(NOTES_KEY)
                    return

        self._mutate(op)

    def set_tag(self, note_id, tag):
        if tag is not None and not is_valid_tag(tag):
            logger.warning('Ignoring unknown tag %r for note %s', tag, note_id)
            return

        def op():
            for i, note in enumerate(self._notes):
                if note.id == note_id:
                    if note.tag != tag:
                        self._notes[i] = replace(note, tag=tag)
                        self._dirty.add(NOTES_KEY)
                    return

        self._mutate(op)

    def delete(self, note_id) -> Reversal | None:
        """Move a note to the trash. Returns the reversal to undo it.

        Before ``load()`` only notes already in memory can produce a reversal.
        A delete aimed at a note that hydration has yet to bring in returns
        None, though the queued delete still moves that note to the trash
        once loaded; it can be brought back with ``restore_from_trash``.
        """
        now = self._clock()

        def op():
            note = _pop(self._notes, note_id)
            if note is None:
                return None
            self._trash.insert(0, note.trashed(now))
            self._dirty.update((NOTES_KEY, TRASH_KEY))
            return Reversal(Reversal.RESTORE, (note,))

        return self._mutate(op)

    def restore_note(self, note) -> bool:
        """Put a previously removed note back into the active collection.

        Rejected if its id is already active. A copy of the note still sitting
        in the trash is taken out so the id lives in one place only.
        """
        note = note.restored()

        def op():
            if _find(self._notes, note.id) is not None:
                logger.debug('Note %s is already active, not restoring', note.id)
                return False
            if _pop(self._trash, note.id) is not None:
                self._dirty.add(TRASH_KEY)
            self._insert_active(note)
            return True

        return self._mutate(op)

    def clear_all(self) -> Reversal | None:
        """Trash every active note with one shared deletion time."""
        now = self._clock()

        def op():
            if not self._notes:
                return None
            removed = tuple(self._notes)
            self._trash = [note.trashed(now) for note in removed] + self._trash
            self._notes = []
            self._dirty.update((NOTES_KEY, TRASH_KEY))
            return Reversal(Reversal.REPLACE, removed)

        return self._mutate(op)

    def replace_notes(self, notes):
        """Overwrite the active collection, e.g. to undo ``clear_all``."""
        incoming = [note.restored() for note in notes]

        def op():
            seen = set()
            fresh = []
            for note in incoming:
                if note.id not in seen:
                    seen.add(note.id)
                    fresh.append(note)
            self._notes = fresh
            self._dirty.add(NOTES_KEY)

            kept = [note for note in self._trash if note.id not in seen]
            if len(kept) != len(self._trash):
                self._trash = kept
                self._dirty.add(TRASH_KEY)

        self._mutate(op)

    # --- Trash ---

    def restore_from_trash(self, note_id) -> Note | None:
        def op():
            trashed = _pop(self._trash, note_id)
            if trashed is None:
                return None
            self._dirty.add(TRASH_KEY)
            note = trashed.restored()
            if _find(self._notes, note_id) is None:
                self._insert_active(note)
            return note

        return self._mutate(op)

    def permanent_delete(self, note_id):
        def op():
            if _pop(self._trash, note_id) is not None:
                self._dirty.add(TRASH_KEY)

        self._mutate(op)

    def clear_trash(self):
        def op():
            if self._trash:
                self._trash = []
                self._dirty.add(TRASH_KEY)

        self._mutate(op)

    # --- Helpers ---

    def _insert_active(self, note):
        # Prepend and resort: a restored note may be older than notes
        # captured since, so the front of the list is not its place.
        self._notes.insert(0, note)
        _sort_by_created(self._notes)
        self._dirty.add(NOTES_KEY)

    def _mutate(self, op):
        if not self._gate.loaded:
            self._gate.defer(op)
        result = op()
        self._flush_changes()
        return result

    def _flush_changes(self):
        dirty, self._dirty = self._dirty, set()
        if NOTES_KEY in dirty:
            if self._gate.loaded:
                self._notes_save.trigger()
            self.emit('notes-changed')
        if TRASH_KEY in dirty:
            if self._gate.loaded:
                self._trash_save.trigger()
            self.emit('trash-changed')

    def _hydrate(self):
        now = self._clock()

        notes = []
        seen = set()
        for note in self._snapshots.load(NOTES_KEY):
            if note.id in seen:
                continue
            seen.add(note.id)
            notes.append(note.restored())

        trash = []
        for note in self._snapshots.load(TRASH_KEY):
            if note.id in seen:
                continue
            if note.deleted_at is None:
                logger.warning('Dropping trashed note %s without a deletion time', note.id)
                continue
            seen.add(note.id)
            trash.append(note)

        _sort_by_created(notes)
        _sort_by_deleted(trash)
        self._notes = filter_live(notes, now)
        self._trash = filter_live(trash, now)
        logger.info(
            'Loaded %d note(s) and %d trashed note(s)',
            len(self._notes), len(self._trash),
        )

    def _save_notes(self):
        self._snapshots.save(NOTES_KEY, self._notes)

    def _save_trash(self):
        self._snapshots.save(TRASH_KEY, self._trash)
