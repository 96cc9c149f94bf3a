# SPDX-License-Identifier: GPL-3.0-or-later

from gi.repository import Gio

from voicery.constants import APP_ID
from voicery.kv_store import default_db_path


def get_settings():
    """The app's GSettings, or None when the schema is not installed (dev mode)."""
    schema_source = Gio.SettingsSchemaSource.get_default()
    if schema_source and schema_source.lookup(APP_ID, True):
        return Gio.Settings.new(APP_ID)
    return None


def resolve_db_path(settings=None, override=None):
    if override:
        return override
    if settings is not None:
        path = settings.get_string('database-path')
        if path:
            return path
    return default_db_path()
