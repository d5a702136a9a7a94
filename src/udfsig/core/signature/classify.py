"""Signature artifact format detection.

``sign.sgn`` carries no header declaring its encoding, so the format is
sniffed from the trimmed text.  Rules are tried in order and the first
match wins; the order matters because inputs can satisfy several rules
(PEM text that is also hex-looking is still CMS).
"""

from __future__ import annotations

__all__ = ["CLASSIFICATION_RULES", "SignatureFormat", "classify_signature"]

import enum
import re
from collections.abc import Callable

# 32+ hex characters and nothing else
_HEX_DIGEST_PATTERN = re.compile(r"[0-9a-fA-F]{32,}")


class SignatureFormat(enum.Enum):
    """Verification strategy selected for a signature artifact."""

    CMS = "cms"
    XML_DSIG = "xml_dsig"
    HASH_ONLY = "hash_only"
    UNKNOWN = "unknown"


def _is_cms(text: str) -> bool:
    # "MII" is the Base64 form of a DER SEQUENCE with a two-byte length
    return text.startswith(("MII", "-----BEGIN"))


def _is_xml_dsig(text: str) -> bool:
    return text.startswith("<?xml") or "<Signature" in text


def _is_hash(text: str) -> bool:
    return _HEX_DIGEST_PATTERN.fullmatch(text) is not None


CLASSIFICATION_RULES: tuple[tuple[SignatureFormat, Callable[[str], bool]], ...] = (
    (SignatureFormat.CMS, _is_cms),
    (SignatureFormat.XML_DSIG, _is_xml_dsig),
    (SignatureFormat.HASH_ONLY, _is_hash),
)


def classify_signature(text: str) -> SignatureFormat:
    """Pick the verification strategy for a signature artifact's text.

    The text is trimmed before matching.  Total: anything no rule claims
    is ``UNKNOWN``.
    """
    trimmed = text.strip()
    for fmt, predicate in CLASSIFICATION_RULES:
        if predicate(trimmed):
            return fmt
    return SignatureFormat.UNKNOWN
