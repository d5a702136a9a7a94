"""Verification of a bare hex digest against the payload."""

from __future__ import annotations

__all__ = ["HASH_KIND", "verify_hash_only"]

import logging

from ...constants import HASH_PREVIEW_LENGTH
from ..digest import PAYLOAD_DIGEST_LADDER, digest, display_name, to_hex
from ..result import SignatureKind, SignatureStatus, VerificationResult, error_result

_logger = logging.getLogger(__name__)

HASH_KIND: SignatureKind = "Hash"


def verify_hash_only(hash_hex: str, payload: bytes | None) -> VerificationResult:
    """
    Compare a claimed hex digest with SHA-256, SHA-1 and MD5 of the payload.

    The comparison is case-insensitive and the first matching algorithm
    wins.  There is no signer identity; ``certificate_info`` holds a short
    preview of the claimed hash.  Never raises.
    """
    claimed = hash_hex.strip().lower()
    preview = f"Hash: {claimed[:HASH_PREVIEW_LENGTH]}..."
    try:
        matched: str | None = None
        details: list[str] = [f"Claimed digest: {len(claimed) * 4} bits"]
        if payload is None:
            details.append("content.xml missing -- payload digest cannot be checked")
        else:
            for algorithm in PAYLOAD_DIGEST_LADDER:
                if to_hex(digest(payload, algorithm)) == claimed:
                    matched = algorithm
                    break
            if matched:
                details.append(f"Digest OK -- matches {display_name(matched)} of content.xml")
            else:
                details.append("Digest MISMATCH -- matches none of SHA-256, SHA-1, MD5")
    except Exception as e:
        _logger.exception("Unexpected error while verifying hash signature")
        return error_result(f"Hash verification error: {e}", HASH_KIND)

    return VerificationResult(
        status=SignatureStatus.VALID if matched else SignatureStatus.INVALID,
        certificate_info=preview,
        signature_kind=HASH_KIND,
        details=tuple(details),
    )
