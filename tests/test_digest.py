"""Tests for udfsig.core.digest -- algorithm names, digests, hex codec."""

from __future__ import annotations

import hashlib

import pytest

from udfsig.core.digest import (
    PAYLOAD_DIGEST_LADDER,
    digest,
    display_name,
    from_base64,
    from_hex,
    resolve_algorithm,
    to_hex,
)
from udfsig.errors import DecodeError, FormatError

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("SHA-256", "sha256"),
        ("sha256", "sha256"),
        ("Sha-1", "sha1"),
        ("SHA_1", "sha1"),
        ("MD5", "md5"),
        ("  md5 ", "md5"),
    ],
)
def test_resolve_algorithm(name, expected):
    assert resolve_algorithm(name) == expected


def test_resolve_algorithm_rejects_unknown():
    with pytest.raises(FormatError, match="Unsupported digest algorithm"):
        resolve_algorithm("SHA-512")


def test_display_name():
    assert display_name("sha256") == "SHA-256"
    assert display_name("SHA1") == "SHA-1"
    assert display_name("md5") == "MD5"


def test_ladder_is_strongest_first():
    assert PAYLOAD_DIGEST_LADDER == ("sha256", "sha1", "md5")


def test_digest_hello_sha256():
    assert to_hex(digest(b"hello", "SHA-256")) == HELLO_SHA256


@pytest.mark.parametrize("algorithm", ["sha256", "sha1", "md5"])
def test_digest_matches_hashlib(algorithm):
    data = b"\x00\x01 payload \xff"
    assert digest(data, algorithm) == hashlib.new(algorithm, data).digest()


def test_digest_empty_input():
    assert to_hex(digest(b"", "md5")) == "d41d8cd98f00b204e9800998ecf8427e"


def test_to_hex_is_lowercase():
    assert to_hex(b"\xab\xcd\xef") == "abcdef"


def test_from_hex_accepts_either_case():
    assert from_hex("ABcd") == b"\xab\xcd"


def test_from_hex_inverts_to_hex():
    data = bytes(range(256))
    assert from_hex(to_hex(data)) == data


def test_from_hex_empty():
    assert from_hex("") == b""


def test_from_hex_odd_length():
    with pytest.raises(DecodeError, match="odd length"):
        from_hex("abc")


def test_from_hex_non_hex_characters():
    with pytest.raises(DecodeError, match="Invalid hex"):
        from_hex("zz")


def test_from_hex_error_is_format_error():
    with pytest.raises(FormatError):
        from_hex("0g")


# ── from_base64 ───────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("aGVsbG8=", b"hello"),
        ("aGVsbG8", b"hello"),
        ("aGVs\n bG8", b"hello"),
        ("aGk", b"hi"),
        ("aA", b"h"),
        ("", b""),
    ],
)
def test_from_base64(text, expected):
    assert from_base64(text) == expected


@pytest.mark.parametrize("text", ["aGVsbG8*", "aGVsb", "not-base64"])
def test_from_base64_rejects(text):
    with pytest.raises(DecodeError, match="not valid Base64"):
        from_base64(text)
