"""
Presentation helpers shared by CLI output.

All display text for verification results lives here: status labels,
the three-way tone used to colour results, and the placeholder shown for
an unknown signer.  The core only returns structured data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from ..core.result import SignatureStatus

if TYPE_CHECKING:
    from ..core.result import VerificationResult

__all__ = [
    "UNKNOWN_SIGNER_LABEL",
    "Tone",
    "format_result_lines",
    "format_size_kb",
    "signer_display_name",
    "status_label",
    "status_tone",
]

_BYTES_PER_KB = 1024

UNKNOWN_SIGNER_LABEL = "Unknown"

Tone = Literal["valid", "invalid", "indeterminate", "unsigned"]

_STATUS_LABELS: dict[SignatureStatus, str] = {
    SignatureStatus.VALID: "Signature VALID",
    SignatureStatus.INVALID: "Signature INVALID",
    SignatureStatus.UNKNOWN_FORMAT: "Signature format not recognized",
    SignatureStatus.NO_SIGNATURE: "No signature",
    SignatureStatus.ERROR: "Verification error",
}


def format_size_kb(size_bytes: int) -> str:
    """Format a byte count as a human-readable KB string (e.g. '123.4 KB')."""
    return f"{size_bytes / _BYTES_PER_KB:.1f} KB"


def status_label(status: SignatureStatus) -> str:
    """Short human-readable label for a status."""
    return _STATUS_LABELS[status]


def status_tone(status: SignatureStatus) -> Tone:
    """
    Classify a status for display.

    ERROR and UNKNOWN_FORMAT are "indeterminate": they say nothing about
    trust and must never be shown like INVALID, which is a positive finding
    of tampering or mismatch.
    """
    if status is SignatureStatus.VALID:
        return "valid"
    if status is SignatureStatus.INVALID:
        return "invalid"
    if status is SignatureStatus.NO_SIGNATURE:
        return "unsigned"
    return "indeterminate"


def signer_display_name(result: VerificationResult) -> str:
    """Signer name, or the unknown-signer placeholder."""
    return result.signer_name or UNKNOWN_SIGNER_LABEL


def format_result_lines(result: VerificationResult) -> list[str]:
    """Render a result as labelled lines, skipping absent fields."""
    lines = [f"Status:    {status_label(result.status)}"]
    if result.status is SignatureStatus.NO_SIGNATURE:
        return lines

    if result.signature_kind:
        lines.append(f"Type:      {result.signature_kind}")
    if result.status.is_determination or result.signer_known:
        lines.append(f"Signer:    {signer_display_name(result)}")
    if result.signer_title:
        lines.append(f"Title:     {result.signer_title}")
    if result.signed_at:
        lines.append(f"Date:      {result.signed_at}")
    if result.certificate_info:
        cert_lines = result.certificate_info.splitlines()
        lines.append(f"Cert:      {cert_lines[0]}")
        lines.extend(f"           {line}" for line in cert_lines[1:])
    if result.error_message:
        lines.append(f"Error:     {result.error_message}")
    for detail in result.details:
        lines.append(f"  - {detail}")
    return lines
