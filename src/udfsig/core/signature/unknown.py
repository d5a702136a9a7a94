"""Best-effort field extraction from signature artifacts of unknown format."""

from __future__ import annotations

__all__ = ["DATE_LABELS", "NAME_LABELS", "TITLE_LABELS", "UNKNOWN_KIND", "parse_unknown_format"]

from ...constants import RAW_PREVIEW_LENGTH
from ..result import SignatureKind, SignatureStatus, VerificationResult

UNKNOWN_KIND: SignatureKind = "Unknown"

# English and Turkish labels written by legacy signers
NAME_LABELS = ("Name:", "Ad:", "Signer:", "İmzalayan:")
DATE_LABELS = ("Date:", "Tarih:", "Time:", "Zaman:")
TITLE_LABELS = ("Title:", "Unvan:")


def _line_value(lines: list[str], labels: tuple[str, ...]) -> str | None:
    for line in lines:
        for label in labels:
            if line.startswith(label):
                return line[len(label) :].strip() or None
    return None


def parse_unknown_format(text: str) -> VerificationResult:
    """Scan labelled lines (``Name: ...``, ``Tarih: ...``) of an unrecognized signature.

    Always UNKNOWN_FORMAT; never raises.
    """
    lines = [line.strip() for line in text.splitlines()]
    return VerificationResult(
        status=SignatureStatus.UNKNOWN_FORMAT,
        signer_name=_line_value(lines, NAME_LABELS),
        signer_title=_line_value(lines, TITLE_LABELS),
        signed_at=_line_value(lines, DATE_LABELS),
        certificate_info=f"Raw data: {text[:RAW_PREVIEW_LENGTH]}",
        error_message="Signature format not recognized",
        signature_kind=UNKNOWN_KIND,
    )
