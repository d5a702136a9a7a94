"""Signature artifact classification and the per-format verifiers."""

from .asn1 import CertificateSearch, find_certificate, iter_der_candidates
from .classify import CLASSIFICATION_RULES, SignatureFormat, classify_signature
from .cms import CMS_KIND, decode_cms_text, find_payload_digest, verify_cms
from .hash_only import HASH_KIND, verify_hash_only
from .unknown import UNKNOWN_KIND, parse_unknown_format
from .xmldsig import XML_DSIG_KIND, extract_tag, verify_xmldsig

__all__ = [
    "CLASSIFICATION_RULES",
    "CMS_KIND",
    "HASH_KIND",
    "UNKNOWN_KIND",
    "XML_DSIG_KIND",
    "CertificateSearch",
    "SignatureFormat",
    "classify_signature",
    "decode_cms_text",
    "extract_tag",
    "find_certificate",
    "find_payload_digest",
    "iter_der_candidates",
    "parse_unknown_format",
    "verify_cms",
    "verify_hash_only",
    "verify_xmldsig",
]
