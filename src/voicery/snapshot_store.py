# SPDX-License-Identifier: GPL-3.0-or-later
"""
Whole-collection snapshots of notes in the key-value store.

Each key holds a JSON array of flat note records:

[
  {"id": "...", "text": "...", "created_at": "2026-01-01T12:00:00+00:00",
   "tag": "idea", "audio_data": "data:audio/webm;base64,...",
   "deleted_at": "2026-01-01T12:30:00+00:00"}
]

Reads never raise. Missing keys, undecodable payloads and storage errors all
come back as an empty collection so a bad snapshot cannot block startup.
"""

import json
import logging
import sqlite3

from voicery.note import Note

logger = logging.getLogger(__name__)


class SnapshotStore:

    def __init__(self, kv):
        self._kv = kv

    def load(self, key) -> list[Note]:
        try:
            payload = self._kv.get(key)
        except sqlite3.Error as e:
            logger.warning('Could not read %s, starting empty: %s', key, e)
            return []

        if payload is None:
            return []

        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, TypeError, RecursionError):
            logger.info('Discarding unreadable snapshot for %s', key)
            return []

        if not isinstance(data, list):
            logger.info('Discarding snapshot for %s: expected a list', key)
            return []

        notes = []
        for record in data:
            try:
                notes.append(Note.from_record(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning('Skipping malformed record in %s: %s', key, e)
        return notes

    def save(self, key, notes):
        payload = json.dumps([note.to_record() for note in notes])
        try:
            self._kv.set(key, payload)
        except sqlite3.Error as e:
            # The in-memory collections stay authoritative; the next write
            # for this key will try again.
            logger.warning('Could not write %s: %s', key, e)
