"""High-level verification API.

:func:`verify` is the single entry point: it extracts ``content.xml`` and
``sign.sgn`` from a UDF container, classifies the signature artifact, and
dispatches to the matching verifier.  It is a pure function of the
container bytes and the given limits: no configuration is read, nothing is
cached, and concurrent calls share no state.
"""

from __future__ import annotations

__all__ = [
    "ContainerInspection",
    "decode_signature_text",
    "inspect_container",
    "verify",
    "verify_contents",
    "verify_file",
]

import io
import logging
from collections.abc import Callable
from contextlib import nullcontext
from pathlib import Path
from typing import BinaryIO, Optional, TypedDict, Union

from .config.config import DEFAULT_LIMITS, VerificationLimits
from .core.container import ContainerContents, read_container
from .core.result import VerificationResult, error_result, no_signature_result
from .core.signature import (
    SignatureFormat,
    classify_signature,
    parse_unknown_format,
    verify_cms,
    verify_hash_only,
    verify_xmldsig,
)
from .errors import UdfSigError

_logger = logging.getLogger(__name__)

ContainerSource = Union[bytes, bytearray, memoryview, BinaryIO]

_Verifier = Callable[[str, Optional[bytes], VerificationLimits], VerificationResult]


def _dispatch_cms(text: str, payload: bytes | None, limits: VerificationLimits) -> VerificationResult:
    return verify_cms(text, payload, max_size=limits.max_signature_size)


def _dispatch_xmldsig(
    text: str, payload: bytes | None, limits: VerificationLimits
) -> VerificationResult:
    return verify_xmldsig(text, payload, max_size=limits.max_signature_size)


def _dispatch_hash(text: str, payload: bytes | None, limits: VerificationLimits) -> VerificationResult:
    return verify_hash_only(text, payload)


def _dispatch_unknown(
    text: str, payload: bytes | None, limits: VerificationLimits
) -> VerificationResult:
    return parse_unknown_format(text)


_VERIFIERS: dict[SignatureFormat, _Verifier] = {
    SignatureFormat.CMS: _dispatch_cms,
    SignatureFormat.XML_DSIG: _dispatch_xmldsig,
    SignatureFormat.HASH_ONLY: _dispatch_hash,
    SignatureFormat.UNKNOWN: _dispatch_unknown,
}


def decode_signature_text(signature: bytes) -> str:
    """Decode ``sign.sgn`` as UTF-8 (BOM dropped, bad bytes replaced) and trim it."""
    return signature.decode("utf-8-sig", errors="replace").strip()


def _open_source(container: ContainerSource) -> io.BytesIO | nullcontext[BinaryIO]:
    if isinstance(container, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(container))
    # Caller-owned stream: read it, leave closing to the caller
    return nullcontext(container)


def verify_contents(
    contents: ContainerContents,
    *,
    limits: VerificationLimits = DEFAULT_LIMITS,
) -> VerificationResult:
    """Verify already-extracted container entries.

    Returns NO_SIGNATURE when ``sign.sgn`` is absent, whatever
    ``content.xml`` holds.
    """
    if contents.signature is None:
        return no_signature_result()

    text = decode_signature_text(contents.signature)
    fmt = classify_signature(text)
    _logger.debug("Signature artifact classified as %s", fmt.name)
    return _VERIFIERS[fmt](text, contents.content, limits)


def verify(
    container: ContainerSource,
    *,
    limits: VerificationLimits = DEFAULT_LIMITS,
) -> VerificationResult:
    """
    Verify the signature of a UDF container.

    Args:
        container: Container bytes, or a readable binary stream positioned
            at the start of the ZIP data.  Streams are read once, forward
            only, and are not closed.
        limits: Size bounds for extracted entries and decoded signatures.

    Returns:
        VerificationResult.  Never raises: unreadable containers and
        verifier failures are reported with status ERROR.
    """
    try:
        with _open_source(container) as stream:
            contents = read_container(stream, max_entry_size=limits.max_entry_size)
    except (UdfSigError, OSError) as e:
        _logger.debug("Container extraction failed: %s", e)
        return error_result(f"Cannot read container: {e}")
    except Exception as e:
        _logger.exception("Unexpected error while reading container")
        return error_result(f"Cannot read container: {e}")

    return verify_contents(contents, limits=limits)


def verify_file(
    path: str | Path,
    *,
    limits: VerificationLimits = DEFAULT_LIMITS,
) -> VerificationResult:
    """Open a container file, verify it, and close it on every exit path."""
    try:
        with Path(path).open("rb") as fh:
            return verify(fh, limits=limits)
    except OSError as e:
        return error_result(f"Cannot open {path}: {e}")


class ContainerInspection(TypedDict):
    """Entry presence and detected signature format, without verification."""

    content_size: int | None
    signature_size: int | None
    signature_format: SignatureFormat | None


def inspect_container(
    container: ContainerSource,
    *,
    limits: VerificationLimits = DEFAULT_LIMITS,
) -> ContainerInspection:
    """
    Report which entries a container holds and how ``sign.sgn`` classifies.

    Raises:
        ContainerError: If the container cannot be read.
        FormatError: If an entry exceeds ``limits.max_entry_size``.
    """
    with _open_source(container) as stream:
        contents = read_container(stream, max_entry_size=limits.max_entry_size)

    signature_format = None
    if contents.signature is not None:
        signature_format = classify_signature(decode_signature_text(contents.signature))

    return {
        "content_size": len(contents.content) if contents.content is not None else None,
        "signature_size": len(contents.signature) if contents.signature is not None else None,
        "signature_format": signature_format,
    }
