# SPDX-License-Identifier: GPL-3.0-or-later
"""
Retention policy shared by the active and trashed collections.

A record is expired once ``now - timestamp >= ttl``. Active notes age from
``created_at``; trashed notes age from ``deleted_at``, so a note sent to the
trash gets a fresh window there.
"""

from datetime import datetime, timedelta, timezone

from voicery.constants import NOTE_TTL


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_expired(timestamp: datetime, now: datetime, ttl: timedelta = NOTE_TTL) -> bool:
    return now - timestamp >= ttl


def expiry_timestamp(note) -> datetime:
    """The timestamp the retention window is measured from."""
    if note.deleted_at is not None:
        return note.deleted_at
    return note.created_at


def filter_live(records, now: datetime, ttl: timedelta = NOTE_TTL,
                key=expiry_timestamp) -> list:
    """Drop expired records, keeping survivors in their original order."""
    return [record for record in records if not is_expired(key(record), now, ttl)]


def expires_at(note, ttl: timedelta = NOTE_TTL) -> datetime:
    return expiry_timestamp(note) + ttl


def time_remaining(note, now: datetime, ttl: timedelta = NOTE_TTL) -> timedelta:
    remaining = expires_at(note, ttl) - now
    if remaining < timedelta(0):
        return timedelta(0)
    return remaining
