# SPDX-License-Identifier: GPL-3.0-or-later
"""
One-shot startup gate between hydration and persistence.

Until the gate opens nothing is written to storage, so the empty collections
a store starts with can never overwrite a saved snapshot. Mutations made while
the gate is closed are applied to memory right away and also queued; when the
gate runs, hydration replaces memory with the persisted snapshot and the queue
is replayed on top of it, in order. Persisted data wins and early mutations
are kept.
"""

import logging

logger = logging.getLogger(__name__)


class LoadGate:

    def __init__(self):
        self._loaded = False
        self._pending = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def defer(self, op) -> bool:
        """Queue ``op`` for replay after hydration. Returns False once loaded."""
        if self._loaded:
            return False
        self._pending.append(op)
        return True

    def run(self, hydrate) -> bool:
        if self._loaded:
            logger.debug('Load gate already open, ignoring repeated run')
            return False

        hydrate()
        pending, self._pending = self._pending, []
        if pending:
            logger.info('Replaying %d change(s) made before load', len(pending))
        for op in pending:
            op()
        self._loaded = True
        return True
