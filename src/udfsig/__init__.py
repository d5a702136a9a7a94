"""
udfsig -- signature indicator for UDF document containers.

Reads ``content.xml`` and ``sign.sgn`` from a UDF container (ZIP), works
out whether the signature is CMS/PKCS#7, XML-DSig, a bare hex digest, or
something unrecognized, and checks whether the signed digest matches the
payload.

This is an integrity indicator, not a legal-grade validator: signature
values, certificate chains, revocation and timestamps are not checked.
"""

from __future__ import annotations

from .api import inspect_container, verify, verify_contents, verify_file
from .config import DEFAULT_LIMITS, VerificationLimits, get_limits
from .constants import __version__
from .core.result import SignatureStatus, VerificationResult
from .core.signature import SignatureFormat, classify_signature
from .errors import (
    CertificateError,
    ConfigError,
    ContainerError,
    DecodeError,
    FormatError,
    UdfSigError,
)

__all__ = [
    "DEFAULT_LIMITS",
    "CertificateError",
    "ConfigError",
    "ContainerError",
    "DecodeError",
    "FormatError",
    "SignatureFormat",
    "SignatureStatus",
    "UdfSigError",
    "VerificationLimits",
    "VerificationResult",
    "__version__",
    "classify_signature",
    "get_limits",
    "inspect_container",
    "verify",
    "verify_contents",
    "verify_file",
]
