"""Persistent JSON config helpers.

Stores hidden-file preference, listing concurrency, and mime overrides.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .loader import DEFAULT_MAX_CONCURRENCY
from .mime import normalize_extension

logger = logging.getLogger(__name__)

APP_NAME = "projecttree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored so a read-only config
    directory never breaks tree loading.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("cannot write config %s: %s", CONFIG_PATH, exc)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_listing_concurrency() -> int:
    """Return how many directory listings may be in flight at once."""
    value = load_config().get("listing_concurrency")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_MAX_CONCURRENCY
    return value


def save_listing_concurrency(value: int) -> None:
    if value <= 0:
        return
    config = load_config()
    config["listing_concurrency"] = int(value)
    save_config(config)


def load_mime_overrides() -> dict[str, str]:
    """Load extension -> mime overrides, dropping malformed entries.

    Keys are normalized to ``".ext"`` form.
    """
    value = load_config().get("mime_overrides")
    if not isinstance(value, dict):
        return {}

    overrides: dict[str, str] = {}
    for raw_extension, raw_mime in value.items():
        if not isinstance(raw_extension, str) or not isinstance(raw_mime, str):
            continue
        extension = normalize_extension(raw_extension)
        mime_type = raw_mime.strip()
        if not extension or not mime_type:
            continue
        overrides[extension] = mime_type
    return overrides


def save_mime_overrides(overrides: dict[str, str]) -> None:
    serialized = {
        normalize_extension(extension): mime_type.strip()
        for extension, mime_type in overrides.items()
        if normalize_extension(extension) and mime_type.strip()
    }
    config = load_config()
    config["mime_overrides"] = serialized
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_show_hidden",
    "save_show_hidden",
    "load_listing_concurrency",
    "save_listing_concurrency",
    "load_mime_overrides",
    "save_mime_overrides",
]
