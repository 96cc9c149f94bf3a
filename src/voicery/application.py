# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import sys

from gi.repository import Gio, GLib

from voicery.constants import APP_ID
from voicery.expiry import time_remaining
from voicery.export import format_stack, refine_prompt
from voicery.kv_store import KeyValueStore
from voicery.note_store import NoteStore
from voicery.onboarding import WELCOME_TEXT, Onboarding
from voicery.settings import get_settings, resolve_db_path
from voicery.snapshot_store import SnapshotStore
from voicery.tags import tag_label

logger = logging.getLogger(__name__)


def format_note_line(note, now) -> str:
    minutes = int(time_remaining(note, now).total_seconds() // 60)
    label = tag_label(note.tag)
    tag = f'[{label}] ' if label else ''
    return f'{note.id}  {minutes:>2}m  {tag}{note.preview_text}'


class VoiceryApp(Gio.Application):
    """Headless front end: capture, list and manage notes from the command line."""

    def __init__(self, db_path=None, scheduler=None, clock=None, **kwargs):
        super().__init__(
            application_id=APP_ID,
            flags=Gio.ApplicationFlags.HANDLES_COMMAND_LINE
            | Gio.ApplicationFlags.NON_UNIQUE,
            **kwargs,
        )
        self.kv = None
        self.store = None
        self._db_path = db_path
        self._scheduler = scheduler
        self._clock = clock
        self._setup_options()

    def _setup_options(self):
        options = [
            ('add', ord('a'), GLib.OptionArg.STRING, 'Capture a note', 'TEXT'),
            ('list', ord('l'), GLib.OptionArg.NONE, 'List active notes', None),
            ('trash', ord('t'), GLib.OptionArg.NONE, 'List recently deleted notes', None),
            ('delete', ord('d'), GLib.OptionArg.STRING, 'Move a note to the trash', 'ID'),
            ('restore', ord('r'), GLib.OptionArg.STRING, 'Restore a note from the trash', 'ID'),
            ('empty-trash', 0, GLib.OptionArg.NONE, 'Permanently delete trashed notes', None),
            ('copy-all', 0, GLib.OptionArg.NONE, 'Print every note as one block', None),
            ('refine', 0, GLib.OptionArg.STRING, 'Print a prompt for tidying up a note', 'ID'),
            ('db', 0, GLib.OptionArg.STRING, 'Use this database file', 'PATH'),
        ]
        for long_name, short_name, arg, description, arg_description in options:
            self.add_main_option(
                long_name, short_name, GLib.OptionFlags.NONE, arg,
                description, arg_description,
            )

    def open_store(self, db_path=None):
        if self.store is not None:
            return self.store
        path = resolve_db_path(get_settings(), db_path or self._db_path)
        logger.debug('Using database %s', path)
        self.kv = KeyValueStore(path)
        self.store = NoteStore(
            SnapshotStore(self.kv), scheduler=self._scheduler, clock=self._clock,
        )
        self.store.load()
        self.store.start()
        return self.store

    def do_command_line(self, command_line):
        options = command_line.get_options_dict().end().unpack()
        store = self.open_store(options.get('db'))

        onboarding = Onboarding(self.kv)
        if onboarding.should_show():
            print(WELCOME_TEXT)
            print()
            onboarding.dismiss()

        if 'add' in options:
            note = store.add(options['add'])
            if note is None:
                print('Nothing to capture', file=sys.stderr)
                return 1
            print(f'Captured {note.id}')
        if 'delete' in options:
            if store.delete(options['delete']) is None:
                print(f'No note {options["delete"]}', file=sys.stderr)
                return 1
            print('Moved to trash')
        if 'restore' in options:
            if store.restore_from_trash(options['restore']) is None:
                print(f'No trashed note {options["restore"]}', file=sys.stderr)
                return 1
            print('Restored')
        if 'empty-trash' in options:
            store.clear_trash()
            print('Trash emptied')

        now = store.now()
        if 'list' in options:
            for note in store.notes:
                print(format_note_line(note, now))
        if 'trash' in options:
            for note in store.trash:
                print(format_note_line(note, now))
        if 'copy-all' in options:
            print(format_stack(store.notes))
        if 'refine' in options:
            note = store.get_note(options['refine'])
            if note is None:
                print(f'No note {options["refine"]}', file=sys.stderr)
                return 1
            print(refine_prompt(note))
        return 0

    def do_shutdown(self):
        if self.store is not None:
            self.store.close()
            self.store = None
        if self.kv is not None:
            self.kv.close()
            self.kv = None
        Gio.Application.do_shutdown(self)


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = VoiceryApp()
    return app.run(sys.argv)


if __name__ == '__main__':
    sys.exit(main())
