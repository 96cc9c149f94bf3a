# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from voicery.constants import PREVIEW_LENGTH
from voicery.tags import is_valid_tag


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        # Older snapshots may carry naive stamps; they were written in UTC.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Note:
    id: str
    text: str
    created_at: datetime
    tag: Optional[str] = None
    audio_data: Optional[str] = None  # base64 data URI from the recorder
    deleted_at: Optional[datetime] = None

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    @property
    def preview_text(self) -> str:
        return self.text[:PREVIEW_LENGTH]

    def to_record(self) -> dict:
        """Flatten into a JSON-friendly dict. Unset optional fields are omitted."""
        record = {
            'id': self.id,
            'text': self.text,
            'created_at': format_timestamp(self.created_at),
        }
        if self.tag is not None:
            record['tag'] = self.tag
        if self.audio_data is not None:
            record['audio_data'] = self.audio_data
        if self.deleted_at is not None:
            record['deleted_at'] = format_timestamp(self.deleted_at)
        return record

    @classmethod
    def from_record(cls, record) -> 'Note':
        """Build a Note from a stored record.

        Raises KeyError, TypeError or ValueError when the record is missing
        required fields or carries an unparseable timestamp.
        """
        if not isinstance(record, dict):
            raise TypeError(f'note record must be an object, got {type(record).__name__}')
        note_id = record['id']
        text = record['text']
        if not isinstance(note_id, str) or not isinstance(text, str):
            raise TypeError('note id and text must be strings')

        tag = record.get('tag')
        if not is_valid_tag(tag):
            tag = None
        audio_data = record.get('audio_data')
        if not isinstance(audio_data, str):
            audio_data = None
        deleted_at = record.get('deleted_at')

        return cls(
            id=note_id,
            text=text,
            created_at=parse_timestamp(record['created_at']),
            tag=tag,
            audio_data=audio_data,
            deleted_at=parse_timestamp(deleted_at) if deleted_at else None,
        )

    def trashed(self, now: datetime) -> 'Note':
        return replace(self, deleted_at=now)

    def restored(self) -> 'Note':
        return replace(self, deleted_at=None)


@dataclass(frozen=True)
class Reversal:
    """What a destructive store operation removed, held by the caller for undo.

    ``restore`` reversals put single notes back with ``restore_note``;
    ``replace`` reversals swap the whole active collection back with
    ``replace_notes``.
    """

    RESTORE = 'restore'
    REPLACE = 'replace'

    kind: str
    notes: tuple

    def apply(self, store):
        if self.kind == Reversal.REPLACE:
            store.replace_notes(self.notes)
            return
        for note in self.notes:
            store.restore_note(note)
