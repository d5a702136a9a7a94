"""
Verification limits for udfsig.

Limits bound the work done on untrusted containers: the size of any
extracted entry and the size of the decoded signature blob.  They are
resolved from, in priority order, environment variables, the config file
(~/.udfsig/config.json), and built-in defaults.

``verify`` itself never reads configuration; callers resolve limits with
:func:`get_limits` and pass them in.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_LIMITS",
    "VerificationLimits",
    "get_limits",
    "reset_limits",
    "save_limits",
    "validate_size_limit",
]

import logging
import os
from dataclasses import dataclass

from ..constants import (
    DEFAULT_MAX_ENTRY_SIZE,
    DEFAULT_MAX_SIGNATURE_SIZE,
    ENV_MAX_ENTRY_SIZE,
    ENV_MAX_SIGNATURE_SIZE,
    MAX_SIZE_LIMIT,
    MIN_SIZE_LIMIT,
)
from ..errors import ConfigError
from ._storage import load_config, load_raw_config, save_config

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationLimits:
    """Upper bounds applied while reading and verifying one container."""

    max_entry_size: int = DEFAULT_MAX_ENTRY_SIZE
    max_signature_size: int = DEFAULT_MAX_SIGNATURE_SIZE


DEFAULT_LIMITS = VerificationLimits()


def validate_size_limit(value: int, name: str) -> int:
    """
    Check a size limit against the accepted range.

    Raises:
        ConfigError: If the value is outside [MIN_SIZE_LIMIT, MAX_SIZE_LIMIT].
    """
    if not MIN_SIZE_LIMIT <= value <= MAX_SIZE_LIMIT:
        raise ConfigError(
            f"{name} must be between {MIN_SIZE_LIMIT} and {MAX_SIZE_LIMIT} bytes, got {value}"
        )
    return value


def _env_size(var: str) -> int | None:
    raw = os.environ.get(var, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("Invalid %s value %r, ignoring", var, raw)
        return None
    if value < MIN_SIZE_LIMIT or value > MAX_SIZE_LIMIT:
        _logger.warning(
            "%s=%d out of range [%d, %d], ignoring",
            var,
            value,
            MIN_SIZE_LIMIT,
            MAX_SIZE_LIMIT,
        )
        return None
    return value


def get_limits() -> VerificationLimits:
    """
    Resolve the active verification limits.

    Priority: env vars > config file > defaults.
    """
    config = load_config()

    max_entry_size = _env_size(ENV_MAX_ENTRY_SIZE)
    if max_entry_size is None:
        max_entry_size = config.get("max_entry_size", DEFAULT_MAX_ENTRY_SIZE)

    max_signature_size = _env_size(ENV_MAX_SIGNATURE_SIZE)
    if max_signature_size is None:
        max_signature_size = config.get("max_signature_size", DEFAULT_MAX_SIGNATURE_SIZE)

    return VerificationLimits(
        max_entry_size=max_entry_size,
        max_signature_size=max_signature_size,
    )


def save_limits(
    *,
    max_entry_size: int | None = None,
    max_signature_size: int | None = None,
) -> None:
    """
    Persist size limits to the config file, preserving other keys.

    Raises:
        ConfigError: If a value is out of range.
    """
    config = load_raw_config()
    if max_entry_size is not None:
        config["max_entry_size"] = validate_size_limit(max_entry_size, "max_entry_size")
    if max_signature_size is not None:
        config["max_signature_size"] = validate_size_limit(
            max_signature_size, "max_signature_size"
        )
    save_config(config)


def reset_limits() -> None:
    """Remove saved size limits so defaults apply again."""
    config = load_raw_config()
    for key in ("max_entry_size", "max_signature_size"):
        config.pop(key, None)
    save_config(config)
