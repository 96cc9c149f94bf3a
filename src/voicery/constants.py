# SPDX-License-Identifier: GPL-3.0-or-later

from datetime import timedelta

APP_ID = 'com.github.voicery.Voicery'

NOTES_KEY = 'voicery-notes'
TRASH_KEY = 'voicery-trash'
ONBOARDED_KEY = 'voicery-onboarded'

# Both collections share one retention window, measured from created_at for
# active notes and from deleted_at for trashed ones.
NOTE_TTL = timedelta(seconds=3600)
SWEEP_INTERVAL_SECONDS = 60

PREVIEW_LENGTH = 200
