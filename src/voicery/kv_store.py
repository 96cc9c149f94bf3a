# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import os
import sqlite3

from gi.repository import GLib

logger = logging.getLogger(__name__)


def default_db_path():
    data_dir = os.path.join(GLib.get_user_data_dir(), 'voicery')
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, 'voicery.db')


class KeyValueStore:
    """Synchronous string-keyed storage on top of a single SQLite table."""

    def __init__(self, db_path=None):
        if db_path is None:
            db_path = default_db_path()

        self._db = sqlite3.connect(db_path)
        self._db.execute('PRAGMA journal_mode=WAL')
        self._create_tables()
        logger.debug('Opened key-value store at %s', db_path)

    def _create_tables(self):
        self._db.executescript('''
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        ''')

    def get(self, key) -> str | None:
        row = self._db.execute(
            'SELECT value FROM kv WHERE key = ?', (key,)
        ).fetchone()
        if row is None:
            return None
        return row[0]

    def set(self, key, value):
        self._db.execute(
            'INSERT INTO kv (key, value) VALUES (?, ?) '
            'ON CONFLICT(key) DO UPDATE SET value = excluded.value',
            (key, value),
        )
        self._db.commit()

    def close(self):
        self._db.close()
