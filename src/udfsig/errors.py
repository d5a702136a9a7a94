"""udfsig error types."""

from __future__ import annotations

__all__ = [
    "CertificateError",
    "ConfigError",
    "ContainerError",
    "DecodeError",
    "FormatError",
    "UdfSigError",
]


class UdfSigError(Exception):
    """Base error for udfsig operations."""


class ContainerError(UdfSigError):
    """The UDF container (ZIP stream) could not be read."""


class FormatError(UdfSigError):
    """Content does not have the shape its detected format requires."""


class DecodeError(FormatError):
    """Base64 or hexadecimal text is malformed."""


class CertificateError(UdfSigError):
    """No parseable X.509 certificate could be extracted.

    Verifiers treat this as non-fatal: signer fields are left empty
    and verification continues.
    """


class ConfigError(UdfSigError):
    """Configuration validation error."""
