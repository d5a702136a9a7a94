"""
Application-wide constants for udfsig.

Container entry names, size limits, and environment variable names are
centralized here.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("udfsig")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "BYTES_PER_MB",
    "CONTENT_ENTRY",
    "DEFAULT_MAX_ENTRY_SIZE",
    "DEFAULT_MAX_SIGNATURE_SIZE",
    "ENV_MAX_ENTRY_SIZE",
    "ENV_MAX_SIGNATURE_SIZE",
    "HASH_PREVIEW_LENGTH",
    "MAX_SIZE_LIMIT",
    "MIN_SIZE_LIMIT",
    "NO_SIGNATURE_MESSAGE",
    "RAW_PREVIEW_LENGTH",
    "READ_CHUNK_SIZE",
    "SIGNATURE_ENTRY",
    "__version__",
]

# ── Container layout ──────────────────────────────────────────────────

# Structured-text payload of a UDF document
CONTENT_ENTRY = "content.xml"

# Optional signature artifact
SIGNATURE_ENTRY = "sign.sgn"


# ── Size units ────────────────────────────────────────────────────────

BYTES_PER_MB = 1024 * 1024


# ── Size limits (bytes) ───────────────────────────────────────────────

# Cap on any single extracted entry (uncompressed).
# Bounds memory on zip bombs; UDF payloads are typically well under 1 MB.
DEFAULT_MAX_ENTRY_SIZE = 64 * BYTES_PER_MB

# Cap on decoded CMS bytes / XML-DSig text.
# The certificate scan and hash-containment search are linear in this size.
DEFAULT_MAX_SIGNATURE_SIZE = 16 * BYTES_PER_MB

# Accepted range for configured limits
MIN_SIZE_LIMIT = 1024
MAX_SIZE_LIMIT = 1024 * BYTES_PER_MB

# Stream read granularity for skipping and inflating entries
READ_CHUNK_SIZE = 64 * 1024


# ── Display ───────────────────────────────────────────────────────────

# Number of hex characters of a claimed hash kept in certificate_info
HASH_PREVIEW_LENGTH = 16

# Number of characters of an unrecognized signature kept for display
RAW_PREVIEW_LENGTH = 80

NO_SIGNATURE_MESSAGE = "No digital signature found in the container"


# ── Environment variable names ──────────────────────────────────────

ENV_MAX_ENTRY_SIZE = "UDFSIG_MAX_ENTRY_SIZE"
ENV_MAX_SIGNATURE_SIZE = "UDFSIG_MAX_SIGNATURE_SIZE"
