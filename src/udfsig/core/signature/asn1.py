"""DER scanning utilities for locating certificates inside CMS blobs.

This is a deliberate heuristic, not an ASN.1 walker: the blob is searched
for ``30 82 LL LL`` (a SEQUENCE with a two-byte length, the usual outer
shape of an X.509 certificate).  A candidate is only offered to the
certificate parser when its first child is itself a ``30 82`` SEQUENCE
(the tbsCertificate) that ends inside the candidate and is followed by
another SEQUENCE (the signatureAlgorithm).  The first candidate that
parses with a non-empty subject wins.  When a blob embeds several
certificates this finds the first parseable one, which is not necessarily
the signer's.

Candidates are zero-copy views, and at most ``MAX_PARSE_ATTEMPTS`` of them
(each at most 64 KiB) reach the parser, so the worst case is one pass over
the blob plus a bounded amount of parsing.
"""

from __future__ import annotations

__all__ = [
    "ASN1_SEQUENCE_TAG",
    "CERTIFICATE_MARKER",
    "MAX_PARSE_ATTEMPTS",
    "CertificateSearch",
    "find_certificate",
    "iter_der_candidates",
]

import enum
import logging
from collections.abc import Iterator

from asn1crypto import x509 as asn1_x509

from ...errors import CertificateError
from ..cert_info import load_certificate

_logger = logging.getLogger(__name__)

# ASN.1 SEQUENCE tag -- first byte of any certificate or CMS blob
ASN1_SEQUENCE_TAG = 0x30

# Long-form length with two length bytes
_LENGTH_TWO_BYTES = 0x82

CERTIFICATE_MARKER = bytes((ASN1_SEQUENCE_TAG, _LENGTH_TWO_BYTES))

# Tag + length-of-length + two length bytes
_HEADER_LEN = 4

MAX_PARSE_ATTEMPTS = 32


class CertificateSearch(enum.Enum):
    """How a certificate was located in a signature blob."""

    HEURISTIC_SCAN = "heuristic_scan"


def iter_der_candidates(der: bytes) -> Iterator[tuple[int, memoryview]]:
    """Yield ``(offset, view)`` for every ``30 82`` TLV that fits in ``der``."""
    view = memoryview(der)
    pos = der.find(CERTIFICATE_MARKER)
    while pos != -1 and pos + _HEADER_LEN <= len(der):
        length = int.from_bytes(der[pos + 2 : pos + _HEADER_LEN], "big")
        end = pos + _HEADER_LEN + length
        if end <= len(der):
            yield pos, view[pos:end]
        pos = der.find(CERTIFICATE_MARKER, pos + 1)


def _has_certificate_shape(candidate: memoryview) -> bool:
    """Check the tbsCertificate and signatureAlgorithm headers without parsing."""
    if candidate[_HEADER_LEN : _HEADER_LEN + 2] != CERTIFICATE_MARKER:
        return False
    tbs_length = int.from_bytes(candidate[_HEADER_LEN + 2 : 2 * _HEADER_LEN], "big")
    tbs_end = 2 * _HEADER_LEN + tbs_length
    return tbs_end < len(candidate) and candidate[tbs_end] == ASN1_SEQUENCE_TAG


def find_certificate(der: bytes) -> asn1_x509.Certificate | None:
    """
    Locate the first parseable certificate in a DER blob.

    Returns:
        The parsed certificate, or None if no candidate parses within
        ``MAX_PARSE_ATTEMPTS`` attempts.  Never raises on malformed input.
    """
    attempts = 0
    for offset, candidate in iter_der_candidates(der):
        if not _has_certificate_shape(candidate):
            continue
        if attempts == MAX_PARSE_ATTEMPTS:
            _logger.debug("Giving up after %d certificate candidates", attempts)
            return None
        attempts += 1
        try:
            cert = load_certificate(bytes(candidate))
        except CertificateError as e:
            _logger.debug("Candidate at offset %d rejected: %s", offset, e)
            continue
        _logger.debug(
            "Certificate found at offset %d (%d bytes, %s)",
            offset,
            len(candidate),
            CertificateSearch.HEURISTIC_SCAN.value,
        )
        return cert
    return None
