# SPDX-License-Identifier: GPL-3.0-or-later

from gi.repository import GLib


class ScheduledSource:
    """Cancellation handle for a GLib main loop source."""

    def __init__(self, source_id=None):
        self.source_id = source_id

    @property
    def active(self) -> bool:
        return self.source_id is not None

    def cancel(self):
        if self.source_id is not None:
            GLib.source_remove(self.source_id)
            self.source_id = None


class GLibScheduler:
    """Runs callbacks on the default GLib main context.

    Callbacks run on the main loop, one at a time, so they never interleave
    with each other or with handlers driven by the same loop.
    """

    def schedule_every(self, interval_seconds, callback) -> ScheduledSource:
        def _tick():
            callback()
            return GLib.SOURCE_CONTINUE

        return ScheduledSource(GLib.timeout_add_seconds(interval_seconds, _tick))

    def call_soon(self, callback) -> ScheduledSource:
        handle = ScheduledSource()

        def _idle():
            handle.source_id = None
            callback()
            return GLib.SOURCE_REMOVE

        handle.source_id = GLib.idle_add(_idle)
        return handle
