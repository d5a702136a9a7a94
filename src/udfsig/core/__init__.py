"""Container extraction, digests, and signature verification."""

from __future__ import annotations

from .container import ContainerContents, ExtractedEntry, iter_entries, read_container
from .result import SignatureKind, SignatureStatus, VerificationResult

__all__ = [
    "ContainerContents",
    "ExtractedEntry",
    "SignatureKind",
    "SignatureStatus",
    "VerificationResult",
    "iter_entries",
    "read_container",
]
