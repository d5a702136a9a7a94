# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Certificate information extraction from DER-encoded X.509 certificates.

Subject fields are read from an RFC 4514 style rendering of the subject
(``CN=..., OU=..., O=...``) by splitting on commas, the same way signer
names are read from XML-DSig ``X509SubjectName`` text.  Values that
themselves contain commas are truncated at the first comma.
"""

from __future__ import annotations

__all__ = [
    "CertificateSummary",
    "dn_component",
    "format_distinguished_name",
    "load_certificate",
    "render_certificate_info",
    "summarize_certificate",
]

import datetime
import logging
from dataclasses import dataclass

from asn1crypto import x509 as asn1_x509

from ..errors import CertificateError

_logger = logging.getLogger(__name__)

# asn1crypto raises these for malformed or mistyped DER
PARSE_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError, OverflowError)

# Short names for common subject attribute OIDs
_OID_SHORT_NAMES = {
    "2.5.4.3": "CN",
    "2.5.4.4": "SURNAME",
    "2.5.4.5": "SERIALNUMBER",
    "2.5.4.6": "C",
    "2.5.4.7": "L",
    "2.5.4.8": "ST",
    "2.5.4.9": "STREET",
    "2.5.4.10": "O",
    "2.5.4.11": "OU",
    "2.5.4.12": "T",
    "2.5.4.42": "GIVENNAME",
    "1.2.840.113549.1.9.1": "EMAILADDRESS",
    "0.9.2342.19200300.100.1.1": "UID",
    "0.9.2342.19200300.100.1.25": "DC",
}


@dataclass(frozen=True, slots=True)
class CertificateSummary:
    """Display-oriented facts about a certificate."""

    common_name: str | None
    organizational_unit: str | None
    subject: str
    serial_hex: str
    not_before: datetime.datetime | None
    not_after: datetime.datetime | None


def load_certificate(cert_der: bytes) -> asn1_x509.Certificate:
    """
    Parse a DER-encoded X.509 certificate.

    The subject is decoded eagerly so that lazily-parsed garbage is
    rejected here rather than when fields are read later.

    Raises:
        CertificateError: If parsing fails or the subject is empty.
    """
    try:
        cert = asn1_x509.Certificate.load(cert_der, strict=True)
        rdns = cert.subject.chosen
        subject = format_distinguished_name(cert.subject)
    except PARSE_ERRORS as e:
        raise CertificateError(f"Failed to parse X.509 certificate: {e}") from e

    if not len(rdns) or not subject:
        raise CertificateError("Certificate has an empty subject")
    return cert


def format_distinguished_name(name: asn1_x509.Name) -> str:
    """Render a Name as ``CN=..., OU=..., O=..., C=...`` (most specific first)."""
    parts: list[str] = []
    for rdn in name.chosen:
        for attr in rdn:
            oid = attr["type"].dotted
            key = _OID_SHORT_NAMES.get(oid, oid)
            value = attr["value"].native
            parts.append(f"{key}={value}")
    return ", ".join(reversed(parts))


def dn_component(dn: str | None, key: str) -> str | None:
    """
    Return the value of the first ``KEY=value`` component of a DN string.

    Components are split on commas; the key match is case-insensitive.
    """
    if not dn:
        return None
    prefix = f"{key.upper()}="
    for part in dn.split(","):
        part = part.strip()
        if part.upper().startswith(prefix):
            return part[len(prefix) :].strip()
    return None


def summarize_certificate(cert: asn1_x509.Certificate) -> CertificateSummary:
    """
    Extract CN, OU, serial and validity window from a parsed certificate.

    Also logs warnings for expired or not-yet-valid certificates.

    Raises:
        CertificateError: If a required field cannot be decoded.
    """
    try:
        subject = format_distinguished_name(cert.subject)
        serial_hex = format(cert.serial_number, "X")
    except PARSE_ERRORS as e:
        raise CertificateError(f"Cannot read certificate fields: {e}") from e

    not_before: datetime.datetime | None = None
    not_after: datetime.datetime | None = None
    try:
        not_before = cert.not_valid_before
        not_after = cert.not_valid_after
        now = datetime.datetime.now(datetime.timezone.utc)
        if not_before and now < not_before:
            _logger.warning("Certificate is not yet valid (notBefore: %s)", not_before)
        elif not_after and now > not_after:
            _logger.warning("Certificate has expired (notAfter: %s)", not_after)
    except PARSE_ERRORS as e:
        _logger.debug("Cannot read certificate validity dates: %s", e)

    return CertificateSummary(
        common_name=dn_component(subject, "CN"),
        organizational_unit=dn_component(subject, "OU"),
        subject=subject,
        serial_hex=serial_hex,
        not_before=not_before,
        not_after=not_after,
    )


def render_certificate_info(summary: CertificateSummary) -> str:
    """Two-line serial and validity text, e.g. ``Serial: 1A2B\\nValid: 2024-01-01 - 2026-01-01``."""

    def _day(value: datetime.datetime | None) -> str:
        return value.strftime("%Y-%m-%d") if value else "?"

    return (
        f"Serial: {summary.serial_hex}\n"
        f"Valid: {_day(summary.not_before)} - {_day(summary.not_after)}"
    )
