"""
Configuration management.

Import from this package rather than from the individual submodules.
"""

from __future__ import annotations

from ._storage import CONFIG_FILE
from .config import (
    DEFAULT_LIMITS,
    VerificationLimits,
    get_limits,
    reset_limits,
    save_limits,
    validate_size_limit,
)

__all__ = [
    "CONFIG_FILE",
    "DEFAULT_LIMITS",
    "VerificationLimits",
    "get_limits",
    "reset_limits",
    "save_limits",
    "validate_size_limit",
]
