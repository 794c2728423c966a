"""Settings file I/O for binview.

Manages a JSON settings file at XDG_CONFIG_HOME/binview/settings.json.
Only viewer defaults live here (row budget, display format); nothing about
the buffer being viewed is ever persisted.

Import as: import binview.settings
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from binview.core.layout import DEFAULT_MAX_ROWS, DisplayFormat

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / binview / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "binview" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    # Atomic: write temp → rename
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def load_max_rows() -> int:
    """Row budget for the hex view; falls back to 1000 on bad values."""
    raw = load_setting("max_rows", DEFAULT_MAX_ROWS)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        logger.warning("ignoring invalid max_rows setting %r", raw)
        return DEFAULT_MAX_ROWS
    return raw


def load_default_format() -> DisplayFormat:
    """Display format to open with. Hex unless the settings say otherwise."""
    raw = load_setting("format", DisplayFormat.HEX.value)
    try:
        return DisplayFormat(raw)
    except ValueError:
        logger.warning("ignoring invalid format setting %r", raw)
        return DisplayFormat.HEX


def save_default_format(fmt: DisplayFormat) -> None:
    """Persist the last used display format."""
    save_setting("format", fmt.value)
