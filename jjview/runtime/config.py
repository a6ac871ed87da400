"""Persistent JSON config helpers.

Stores the UI theme, compact/full preference, zoom level, revset and the
``jj`` command to run. All access is defensive: malformed or missing config
falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..view_model.build import DEFAULT_DESCRIPTION_WIDTH
from .commands import DEFAULT_REVSET

logger = logging.getLogger(__name__)

APP_NAME = "jjview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class Preferences:
    """Validated view of the config file."""

    theme: str | None = None
    full_mode: bool = False
    revset: str = DEFAULT_REVSET
    jj_command: str = "jj"
    collapse_depth: int = 0
    description_width: int = DEFAULT_DESCRIPTION_WIDTH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception:
        logger.warning("ignoring unreadable config at %s", CONFIG_PATH, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and otherwise ignored so that
    runtime behavior stays non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except Exception:
        logger.warning("could not write config to %s", CONFIG_PATH, exc_info=True)


def _string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _nonnegative_int(value: object, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(0, value)


def load_preferences() -> Preferences:
    data = load_config()
    full_mode = data.get("full_mode")
    width = _nonnegative_int(data.get("description_width"), DEFAULT_DESCRIPTION_WIDTH)
    return Preferences(
        theme=_string(data.get("theme")),
        full_mode=full_mode if isinstance(full_mode, bool) else False,
        revset=_string(data.get("revset")) or DEFAULT_REVSET,
        jj_command=_string(data.get("jj_command")) or "jj",
        collapse_depth=_nonnegative_int(data.get("collapse_depth"), 0),
        description_width=width if width > 0 else DEFAULT_DESCRIPTION_WIDTH,
    )


def save_preference(key: str, value: object) -> None:
    """Update one key in the config file, keeping everything else."""
    config = load_config()
    config[key] = value
    save_config(config)
