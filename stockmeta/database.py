"""
StockMeta - SQLite Settings Store
Persists provider, model, platform choice and the saved API key between runs.

The metadata pipeline never reads these itself: callers load them here and
pass them in explicitly.
"""

import os
import sqlite3

from stockmeta.ai_providers import DEFAULT_MODEL, DEFAULT_PROVIDER
from stockmeta.prompt_builder import PLATFORM_ADOBE

# Use AppData folder for persistent storage, overridable with STOCKMETA_DB_PATH
_APP_DIR = os.path.join(os.environ.get("APPDATA", os.path.expanduser("~")), "StockMeta")

SETTING_API_KEY = "api_key"
SETTING_PROVIDER = "provider"
SETTING_MODEL = "model"
SETTING_PLATFORM = "platform"


def get_db_path():
    """Resolve the database file, creating its folder if needed."""
    path = os.environ.get("STOCKMETA_DB_PATH") or os.path.join(_APP_DIR, "stockmeta.db")
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    return path


def get_connection():
    """Get a database connection with row factory."""
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Initialize the database schema."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT DEFAULT ''
        )
    """)
    conn.commit()
    conn.close()


def save_setting(key, value):
    """Save a setting to the database."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO settings (key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value
    """, (key, str(value)))
    conn.commit()
    conn.close()


def get_setting(key, default=""):
    """Get a setting from the database."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
    row = cursor.fetchone()
    conn.close()
    return row["value"] if row else default


def delete_setting(key):
    """Remove a setting (e.g. forget the saved API key)."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
    conn.commit()
    conn.close()


def load_generation_settings():
    """Return the saved provider/model/platform, with defaults filled in."""
    return {
        "provider": get_setting(SETTING_PROVIDER, DEFAULT_PROVIDER) or DEFAULT_PROVIDER,
        "model": get_setting(SETTING_MODEL, DEFAULT_MODEL) or DEFAULT_MODEL,
        "platform": get_setting(SETTING_PLATFORM, PLATFORM_ADOBE) or PLATFORM_ADOBE,
    }
