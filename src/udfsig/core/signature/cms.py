# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
CMS/PKCS#7 signature verification by digest containment.

The SignerInfo is not parsed.  Instead the payload's SHA-256 and SHA-1 are
rendered as hex and searched for in the hex rendering of the whole CMS
blob: if either appears, the signed digest is taken to match the payload.
This is an integrity indicator, not cryptographic signature verification;
the signature value, signed attributes and certificate chain are never
checked.
"""

from __future__ import annotations

__all__ = [
    "CMS_KIND",
    "decode_cms_text",
    "find_payload_digest",
    "verify_cms",
]

import datetime
import logging

from ...constants import DEFAULT_MAX_SIGNATURE_SIZE
from ...errors import CertificateError, DecodeError, FormatError, UdfSigError
from ..cert_info import CertificateSummary, render_certificate_info, summarize_certificate
from ..digest import digest, display_name, from_base64, to_hex
from ..result import SignatureKind, SignatureStatus, VerificationResult, error_result
from .asn1 import ASN1_SEQUENCE_TAG, find_certificate

_logger = logging.getLogger(__name__)

CMS_KIND: SignatureKind = "CMS/PKCS#7"

_PEM_DELIMITERS = (
    "-----BEGIN PKCS7-----",
    "-----END PKCS7-----",
    "-----BEGIN SIGNED DATA-----",
    "-----END SIGNED DATA-----",
    "-----BEGIN CMS-----",
    "-----END CMS-----",
)

# Algorithms searched for in the CMS blob, strongest first
_CONTAINMENT_ALGORITHMS = ("sha256", "sha1")


def decode_cms_text(text: str) -> bytes:
    """
    Strip PEM framing and whitespace from a CMS block and Base64-decode it.
    Missing ``=`` padding is restored.

    Raises:
        DecodeError: If the remaining text is not valid Base64.
    """
    body = text
    for delimiter in _PEM_DELIMITERS:
        body = body.replace(delimiter, "")
    try:
        return from_base64(body)
    except DecodeError as e:
        raise DecodeError(f"CMS block is {e}") from e


def find_payload_digest(cms_der: bytes, payload: bytes) -> str | None:
    """Return the first algorithm whose payload digest occurs in the CMS hex, or None."""
    cms_hex = to_hex(cms_der)
    for algorithm in _CONTAINMENT_ALGORITHMS:
        payload_hex = to_hex(digest(payload, algorithm))
        if payload_hex in cms_hex:
            return algorithm
        _logger.debug("%s of payload not found in CMS blob", display_name(algorithm))
    return None


def _format_timestamp(value: datetime.datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _verify_cms(text: str, payload: bytes | None, max_size: int) -> VerificationResult:
    details: list[str] = []

    cms_der = decode_cms_text(text)
    if len(cms_der) > max_size:
        raise FormatError(f"CMS blob is {len(cms_der)} bytes, exceeds the {max_size}-byte limit")
    details.append(f"CMS blob: {len(cms_der)} bytes")
    if not cms_der or cms_der[0] != ASN1_SEQUENCE_TAG:
        details.append("CMS does not start with ASN.1 SEQUENCE tag (0x30)")

    # ── Certificate (heuristic scan) ─────────────────────────────
    summary: CertificateSummary | None = None
    cert = find_certificate(cms_der)
    if cert is None:
        details.append("No embedded certificate found")
    else:
        try:
            summary = summarize_certificate(cert)
            details.append(f"Certificate: {summary.subject}")
        except CertificateError as e:
            details.append(f"Certificate unreadable: {e}")

    # ── Digest containment ───────────────────────────────────────
    matched: str | None = None
    if payload is None:
        details.append("content.xml missing -- payload digest cannot be checked")
    else:
        matched = find_payload_digest(cms_der, payload)
        if matched:
            details.append(f"Digest OK -- {display_name(matched)} of content.xml found in CMS")
        else:
            details.append("Digest MISMATCH -- neither SHA-256 nor SHA-1 of content.xml found in CMS")

    return VerificationResult(
        status=SignatureStatus.VALID if matched else SignatureStatus.INVALID,
        signer_name=summary.common_name if summary else None,
        signer_title=summary.organizational_unit if summary else None,
        signed_at=_format_timestamp(summary.not_before) if summary else None,
        certificate_info=render_certificate_info(summary) if summary else None,
        signature_kind=CMS_KIND,
        details=tuple(details),
    )


def verify_cms(
    text: str,
    payload: bytes | None,
    *,
    max_size: int = DEFAULT_MAX_SIGNATURE_SIZE,
) -> VerificationResult:
    """
    Verify a Base64/PEM CMS signature against the payload bytes.

    ``signed_at`` is the certificate's notBefore; the CMS signing-time
    attribute is not read.

    Args:
        text: Trimmed signature text (PEM or bare Base64).
        payload: ``content.xml`` bytes, or None if the container has none
            (the result is then INVALID).
        max_size: Maximum decoded CMS size in bytes.

    Returns:
        VALID or INVALID by digest containment; ERROR if decoding fails.
        Never raises.
    """
    try:
        return _verify_cms(text, payload, max_size)
    except UdfSigError as e:
        return error_result(f"CMS parse error: {e}", CMS_KIND)
    except Exception as e:
        _logger.exception("Unexpected error while verifying CMS signature")
        return error_result(f"CMS parse error: {e}", CMS_KIND)
