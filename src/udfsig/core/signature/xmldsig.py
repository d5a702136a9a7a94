"""
XML-DSig signature verification by tolerant tag scraping.

No XML tree is built and no canonicalization is performed.  Element
contents are located by their start and end markers, which suits the flat
shape of the signatures this tool meets but is lossy for nested or
repeated elements: the first occurrence wins.  The DigestMethod is not
consulted; the DigestValue is compared against SHA-256 and then SHA-1 of
the payload.
"""

from __future__ import annotations

__all__ = ["XML_DSIG_KIND", "extract_tag", "verify_xmldsig"]

import logging

from ...constants import DEFAULT_MAX_SIGNATURE_SIZE
from ...errors import CertificateError, DecodeError, FormatError, UdfSigError
from ..cert_info import (
    CertificateSummary,
    dn_component,
    load_certificate,
    render_certificate_info,
    summarize_certificate,
)
from ..digest import digest, display_name, from_base64
from ..result import SignatureKind, SignatureStatus, VerificationResult, error_result

_logger = logging.getLogger(__name__)

XML_DSIG_KIND: SignatureKind = "XML-DSig"

# Digest algorithms tried against DigestValue, in order
_DIGEST_FALLBACKS = ("sha256", "sha1")


def extract_tag(xml: str, tag: str) -> str | None:
    """
    Return the trimmed text between the first ``<tag>``/``<tag ...>`` and the next ``</tag>``.

    Returns None if either marker is missing.
    """
    candidates = [pos for pos in (xml.find(f"<{tag}>"), xml.find(f"<{tag} ")) if pos != -1]
    if not candidates:
        return None
    start = xml.find(">", min(candidates)) + 1
    end = xml.find(f"</{tag}>", start)
    if end == -1:
        return None
    return xml[start:end].strip()


def _first_tag(xml: str, *tags: str) -> str | None:
    for tag in tags:
        value = extract_tag(xml, tag)
        if value is not None:
            return value
    return None


def _verify_xmldsig(xml: str, payload: bytes | None, max_size: int) -> VerificationResult:
    if len(xml) > max_size:
        raise FormatError(f"XML-DSig text is {len(xml)} characters, exceeds the {max_size} limit")

    details: list[str] = []
    error_message: str | None = None

    # ── Embedded certificate ─────────────────────────────────────
    summary: CertificateSummary | None = None
    certificate_info = _first_tag(xml, "X509Certificate", "ds:X509Certificate")
    if certificate_info is not None:
        try:
            summary = summarize_certificate(load_certificate(from_base64(certificate_info)))
        except (DecodeError, CertificateError) as e:
            details.append(f"X509Certificate could not be parsed: {e}")
        else:
            certificate_info = render_certificate_info(summary)
            details.append(f"Certificate: {summary.subject}")

    # ── Signer identity ──────────────────────────────────────────
    subject_name = _first_tag(xml, "X509SubjectName", "ds:X509SubjectName")
    signer_name = (
        dn_component(subject_name, "CN")
        or extract_tag(xml, "SignedBy")
        or (summary.common_name if summary else None)
    )
    signer_title = dn_component(subject_name, "OU") or (
        summary.organizational_unit if summary else None
    )
    signed_at = _first_tag(xml, "SigningTime", "xades:SigningTime")

    # ── Digest check ─────────────────────────────────────────────
    digest_value = _first_tag(xml, "DigestValue", "ds:DigestValue")
    matched: str | None = None
    if digest_value is None:
        error_message = "No DigestValue element found"
        details.append(error_message)
    elif payload is None:
        details.append("content.xml missing -- payload digest cannot be checked")
    else:
        try:
            expected = from_base64(digest_value)
        except DecodeError:
            error_message = "DigestValue is not valid Base64"
            details.append(error_message)
        else:
            for algorithm in _DIGEST_FALLBACKS:
                if digest(payload, algorithm) == expected:
                    matched = algorithm
                    break
            if matched:
                details.append(f"Digest OK -- DigestValue matches {display_name(matched)} of content.xml")
            else:
                details.append("Digest MISMATCH -- DigestValue matches neither SHA-256 nor SHA-1")

    if digest_value is None:
        status = SignatureStatus.UNKNOWN_FORMAT
    else:
        status = SignatureStatus.VALID if matched else SignatureStatus.INVALID

    return VerificationResult(
        status=status,
        signer_name=signer_name or None,
        signer_title=signer_title or None,
        signed_at=signed_at or None,
        certificate_info=certificate_info or None,
        error_message=error_message,
        signature_kind=XML_DSIG_KIND,
        details=tuple(details),
    )


def verify_xmldsig(
    xml: str,
    payload: bytes | None,
    *,
    max_size: int = DEFAULT_MAX_SIGNATURE_SIZE,
) -> VerificationResult:
    """
    Verify an XML-DSig signature's DigestValue against the payload bytes.

    Returns:
        UNKNOWN_FORMAT when there is no DigestValue, otherwise VALID or
        INVALID (a DigestValue that is not Base64 counts as a mismatch).
        ERROR on unexpected failures.  Never raises.
    """
    try:
        return _verify_xmldsig(xml, payload, max_size)
    except UdfSigError as e:
        return error_result(f"XML-DSig error: {e}", XML_DSIG_KIND)
    except Exception as e:
        _logger.exception("Unexpected error while verifying XML-DSig signature")
        return error_result(f"XML-DSig error: {e}", XML_DSIG_KIND)
