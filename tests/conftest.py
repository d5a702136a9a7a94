"""Shared test fixtures for the udfsig test suite."""

from __future__ import annotations

import base64
import datetime
import hashlib
import io
import zipfile
from unittest.mock import patch

import pytest
from asn1crypto import keys, x509

PAYLOAD = b"<?xml version='1.0' encoding='UTF-8'?><template><content>hello</content></template>"

SIGNER_CN = "Ayşe Yılmaz"
SIGNER_OU = "Hukuk Müşavirliği"
CERT_SERIAL = 0x1A2B3C
CERT_NOT_BEFORE = datetime.datetime(2024, 1, 15, 9, 30, tzinfo=datetime.timezone.utc)
CERT_NOT_AFTER = datetime.datetime(2034, 1, 15, 9, 30, tzinfo=datetime.timezone.utc)

# 1.2.840.113549.1.7.2 (signedData)
_SIGNED_DATA_OID = bytes.fromhex("06092a864886f70d010702")


# ── DER helpers ───────────────────────────────────────────────────


def _der_len(length: int) -> bytes:
    """Encode a DER length field."""
    if length < 0x80:
        return bytes([length])
    elif length < 0x100:
        return bytes([0x81, length])
    else:
        return bytes([0x82, (length >> 8) & 0xFF, length & 0xFF])


def _der_tlv(tag: int, contents: bytes) -> bytes:
    return bytes([tag]) + _der_len(len(contents)) + contents


def _build_certificate(cn: str, ou: str | None) -> bytes:
    """Self-issued RSA certificate with a dummy signature value."""
    name = {"country_name": "TR", "organization_name": "Example Kurum", "common_name": cn}
    if ou is not None:
        name["organizational_unit_name"] = ou
    subject = x509.Name.build(name)
    # 2048-bit modulus, top bit set
    modulus = int.from_bytes(b"\xc5" + bytes(range(255)), "big")
    public_key = keys.PublicKeyInfo.wrap(
        keys.RSAPublicKey({"modulus": modulus, "public_exponent": 65537}), "rsa"
    )
    tbs = x509.TbsCertificate(
        {
            "version": "v3",
            "serial_number": CERT_SERIAL,
            "signature": {"algorithm": "sha256_rsa"},
            "issuer": subject,
            "validity": {
                "not_before": x509.Time(name="utc_time", value=CERT_NOT_BEFORE),
                "not_after": x509.Time(name="utc_time", value=CERT_NOT_AFTER),
            },
            "subject": subject,
            "subject_public_key_info": public_key,
        }
    )
    cert = x509.Certificate(
        {
            "tbs_certificate": tbs,
            "signature_algorithm": {"algorithm": "sha256_rsa"},
            "signature_value": b"\x5a" * 256,
        }
    )
    return cert.dump()


# ── ZIP helpers ───────────────────────────────────────────────────


class _UnseekableWriter:
    """Write-only sink; makes zipfile emit data descriptors."""

    def __init__(self) -> None:
        self._buf = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self._buf.write(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        return self._buf.getvalue()


def _build_udf(
    entries: list[tuple[str, bytes]] | dict[str, bytes],
    compression: int = zipfile.ZIP_DEFLATED,
    streaming: bool = False,
) -> bytes:
    items = list(entries.items()) if isinstance(entries, dict) else list(entries)
    sink: io.BytesIO | _UnseekableWriter = _UnseekableWriter() if streaming else io.BytesIO()
    with zipfile.ZipFile(sink, "w", compression=compression) as zf:  # type: ignore[arg-type]
        for name, data in items:
            zf.writestr(name, data)
    return sink.getvalue()


# ── Fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def payload():
    return PAYLOAD


@pytest.fixture
def make_udf():
    """Build an in-memory UDF container from ``{name: bytes}`` or ``[(name, bytes)]``."""
    return _build_udf


@pytest.fixture(scope="session")
def cert_der():
    """DER certificate with CN, OU, serial 1A2B3C, valid 2024-01-15 to 2034-01-15."""
    return _build_certificate(SIGNER_CN, SIGNER_OU)


@pytest.fixture(scope="session")
def cert_der_no_ou():
    return _build_certificate("Mehmet Demir", None)


@pytest.fixture
def make_cms(cert_der):
    """Build a CMS-shaped DER blob: signedData OID, certificate, optional digest."""

    def _make(digest_of: bytes | None = None, algorithm: str = "sha256", cert: bool = True):
        body = _SIGNED_DATA_OID
        if cert:
            body += cert_der
        if digest_of is not None:
            body += _der_tlv(0x04, hashlib.new(algorithm, digest_of).digest())
        return _der_tlv(0x30, body)

    return _make


@pytest.fixture
def to_pem():
    def _pem(der: bytes, label: str = "PKCS7") -> str:
        b64 = base64.b64encode(der).decode("ascii")
        lines = [b64[i : i + 64] for i in range(0, len(b64), 64)]
        return f"-----BEGIN {label}-----\n" + "\n".join(lines) + f"\n-----END {label}-----\n"

    return _pem


@pytest.fixture
def config_dir(tmp_path):
    """Redirect the config file to a temp directory and clear limit env vars."""
    config_file = tmp_path / "config.json"
    with (
        patch("udfsig.config._storage.CONFIG_DIR", tmp_path),
        patch("udfsig.config._storage.CONFIG_FILE", config_file),
        patch.dict("os.environ", {"UDFSIG_MAX_ENTRY_SIZE": "", "UDFSIG_MAX_SIGNATURE_SIZE": ""}),
    ):
        yield tmp_path, config_file
