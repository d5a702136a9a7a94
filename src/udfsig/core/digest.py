"""Digest computation and hex rendering for payload integrity checks."""

from __future__ import annotations

__all__ = [
    "PAYLOAD_DIGEST_LADDER",
    "digest",
    "display_name",
    "from_base64",
    "from_hex",
    "resolve_algorithm",
    "to_hex",
]

import base64
import binascii
import hashlib
import re

from ..errors import DecodeError, FormatError

# Preference order when the signer's algorithm is not declared (strongest first)
PAYLOAD_DIGEST_LADDER: tuple[str, ...] = ("sha256", "sha1", "md5")

_SUPPORTED = frozenset(PAYLOAD_DIGEST_LADDER)

_DISPLAY_NAMES = {"sha256": "SHA-256", "sha1": "SHA-1", "md5": "MD5"}

_WHITESPACE = re.compile(r"\s+")


def resolve_algorithm(name: str) -> str:
    """Normalize ``"SHA-256"``, ``"sha256"``, ``"Sha-1"``, ``"MD5"`` etc. to a hashlib name.

    Raises:
        FormatError: If the algorithm is not one of MD5, SHA-1, SHA-256.
    """
    normalized = name.strip().lower().replace("-", "").replace("_", "")
    if normalized not in _SUPPORTED:
        raise FormatError(f"Unsupported digest algorithm: {name!r}")
    return normalized


def display_name(algorithm: str) -> str:
    """Human-readable name, e.g. ``sha256`` -> ``SHA-256``."""
    return _DISPLAY_NAMES[resolve_algorithm(algorithm)]


def digest(data: bytes, algorithm: str) -> bytes:
    """Compute the digest of ``data`` with MD5, SHA-1 or SHA-256."""
    # Integrity indicator only; MD5/SHA-1 stay available on FIPS builds.
    return hashlib.new(resolve_algorithm(algorithm), data, usedforsecurity=False).digest()


def to_hex(data: bytes) -> str:
    """Render bytes as lowercase hex."""
    return data.hex()


def from_hex(text: str) -> bytes:
    """Parse hex text (either case) into bytes.

    Raises:
        DecodeError: On odd length or non-hex characters.
    """
    if len(text) % 2:
        raise DecodeError(f"Hex string has odd length ({len(text)})")
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid hex string: {e}") from e


def from_base64(text: str) -> bytes:
    """Decode Base64 text, ignoring whitespace and tolerating stripped ``=`` padding.

    Raises:
        DecodeError: On characters outside the Base64 alphabet or an
            impossible length.
    """
    body = _WHITESPACE.sub("", text)
    body += "=" * (-len(body) % 4)
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"not valid Base64: {e}") from e
