"""Verification outcome model shared by all verifiers."""

from __future__ import annotations

__all__ = [
    "SignatureKind",
    "SignatureStatus",
    "VerificationResult",
    "error_result",
    "no_signature_result",
]

import enum
from dataclasses import dataclass, field
from typing import Any, Literal

from ..constants import NO_SIGNATURE_MESSAGE

SignatureKind = Literal["CMS/PKCS#7", "XML-DSig", "Hash", "Unknown"]


class SignatureStatus(enum.Enum):
    """Terminal outcome of one verification attempt."""

    VALID = "valid"
    INVALID = "invalid"
    UNKNOWN_FORMAT = "unknown_format"
    NO_SIGNATURE = "no_signature"
    ERROR = "error"

    @property
    def is_determination(self) -> bool:
        """True when the status is a finding about the signature itself.

        ERROR and UNKNOWN_FORMAT say nothing about trust and must not be
        presented like INVALID.
        """
        return self in (SignatureStatus.VALID, SignatureStatus.INVALID)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Immutable result of a single ``verify`` call.

    Signer fields are ``None`` when unknown; presentation code decides how
    to label that.  ``details`` carries human-readable diagnostics in the
    order they were produced.
    """

    status: SignatureStatus
    signer_name: str | None = None
    signer_title: str | None = None
    signed_at: str | None = None
    certificate_info: str | None = None
    error_message: str | None = None
    signature_kind: SignatureKind | None = None
    details: tuple[str, ...] = field(default=())

    @property
    def signer_known(self) -> bool:
        return bool(self.signer_name)

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-serializable dict."""
        return {
            "status": self.status.name,
            "signer_name": self.signer_name,
            "signer_title": self.signer_title,
            "signed_at": self.signed_at,
            "certificate_info": self.certificate_info,
            "error_message": self.error_message,
            "signature_kind": self.signature_kind,
            "details": list(self.details),
        }


def no_signature_result() -> VerificationResult:
    """Result for a container without ``sign.sgn``."""
    return VerificationResult(
        status=SignatureStatus.NO_SIGNATURE,
        error_message=NO_SIGNATURE_MESSAGE,
    )


def error_result(
    message: str,
    kind: SignatureKind | None = None,
    details: tuple[str, ...] = (),
) -> VerificationResult:
    """Result for a verification attempt that could not reach a verdict."""
    return VerificationResult(
        status=SignatureStatus.ERROR,
        error_message=message,
        signature_kind=kind,
        details=details,
    )
