# SPDX-License-Identifier: GPL-3.0-or-later


class AutoSave:
    """Coalesced write-through: many triggers before the next idle run share one save."""

    def __init__(self, save_callback, scheduler):
        self._save_callback = save_callback
        self._scheduler = scheduler
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self):
        """Schedule a save on the next idle slot unless one is already queued."""
        if self._handle is not None:
            return
        self._handle = self._scheduler.call_soon(self._do_save)

    def cancel(self):
        """Cancel any pending save."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def save_now(self):
        """Save immediately, canceling any pending one."""
        self.cancel()
        self._save_callback()

    def _do_save(self):
        self._handle = None
        self._save_callback()
