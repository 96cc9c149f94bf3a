# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import sqlite3

from voicery.constants import ONBOARDED_KEY

logger = logging.getLogger(__name__)

WELCOME_TEXT = '''Welcome to Voicery
Capture fleeting thoughts with your voice.

  * Record a thought and it lands at the top of your stack
  * Notes auto-delete after 1 hour
  * Deleted notes stay in the trash for 1 hour'''


class Onboarding:
    """Remembers whether the welcome screen was dismissed."""

    def __init__(self, kv):
        self._kv = kv

    def should_show(self) -> bool:
        try:
            return self._kv.get(ONBOARDED_KEY) is None
        except sqlite3.Error as e:
            logger.warning('Could not read onboarding state: %s', e)
            return False

    def dismiss(self):
        try:
            self._kv.set(ONBOARDED_KEY, 'true')
        except sqlite3.Error as e:
            logger.warning('Could not save onboarding state: %s', e)
