"""
On-disk settings file for udfsig (~/.udfsig/config.json).

Only size limits are stored.  Unknown keys are carried through saves so
that a newer udfsig can share the file with an older one.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "ConfigDict",
    "load_config",
    "load_raw_config",
    "save_config",
]

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypedDict, cast

from ..constants import MAX_SIZE_LIMIT, MIN_SIZE_LIMIT

_logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".udfsig"
CONFIG_FILE = CONFIG_DIR / "config.json"

_SIZE_KEYS = ("max_entry_size", "max_signature_size")


class ConfigDict(TypedDict, total=False):
    """Validated settings; absent keys fall back to defaults."""

    max_entry_size: int
    max_signature_size: int


def load_raw_config() -> dict[str, object]:
    """Read the settings file as-is.  Missing or unreadable files give ``{}``."""
    try:
        text = CONFIG_FILE.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        _logger.warning("Cannot read %s: %s", CONFIG_FILE, e)
        return {}

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        _logger.warning("Config file corrupted, ignoring: %s", e)
        return {}
    if not isinstance(data, dict):
        _logger.warning("Config file is not a JSON object, ignoring")
        return {}
    return cast("dict[str, object]", data)


def _size_setting(key: str, value: object) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        _logger.warning("Config %s=%r is not an integer, ignoring", key, value)
        return None
    if not MIN_SIZE_LIMIT <= value <= MAX_SIZE_LIMIT:
        _logger.warning(
            "Config %s=%d outside [%d, %d] bytes, ignoring",
            key,
            value,
            MIN_SIZE_LIMIT,
            MAX_SIZE_LIMIT,
        )
        return None
    return value


def load_config() -> ConfigDict:
    """Read the settings file, keeping only well-typed, in-range size limits."""
    raw = load_raw_config()
    result: ConfigDict = {}
    for key in _SIZE_KEYS:
        if raw.get(key) is None:
            continue
        value = _size_setting(key, raw[key])
        if value is not None:
            result[key] = value  # type: ignore[literal-required]  # key from _SIZE_KEYS
    return result


def save_config(config: dict[str, object]) -> None:
    """Write the settings file via a temp file in the same directory and a rename."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(config, indent=2, ensure_ascii=False) + "\n"
    fd, tmp_name = tempfile.mkstemp(dir=CONFIG_DIR, prefix="config.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        fh = os.fdopen(fd, "w", encoding="utf-8")
        fd = -1  # closed with fh from here on
        with fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        tmp.replace(CONFIG_FILE)
    except BaseException:
        if fd >= 0:
            os.close(fd)
        tmp.unlink(missing_ok=True)
        raise
