"""Tests for udfsig.core.signature.unknown -- labelled-line scan of unrecognized text."""

from __future__ import annotations

from udfsig.core.result import SignatureStatus
from udfsig.core.signature.unknown import parse_unknown_format


def test_english_labels():
    text = "Name: Ali Veli\nTitle: Müdür\nDate: 01.02.2020 10:00\nsome other line"
    result = parse_unknown_format(text)
    assert result.status is SignatureStatus.UNKNOWN_FORMAT
    assert result.signature_kind == "Unknown"
    assert result.signer_name == "Ali Veli"
    assert result.signer_title == "Müdür"
    assert result.signed_at == "01.02.2020 10:00"
    assert result.error_message == "Signature format not recognized"


def test_turkish_labels():
    text = "  İmzalayan: Ayşe Yılmaz\r\n  Unvan: Avukat\r\n  Tarih: 03.03.2021"
    result = parse_unknown_format(text)
    assert result.signer_name == "Ayşe Yılmaz"
    assert result.signer_title == "Avukat"
    assert result.signed_at == "03.03.2021"


def test_first_label_wins():
    result = parse_unknown_format("Signer: First\nName: Second")
    assert result.signer_name == "First"


def test_without_labels():
    result = parse_unknown_format("just some bytes")
    assert result.signer_name is None
    assert result.signer_title is None
    assert result.signed_at is None
    assert result.certificate_info == "Raw data: just some bytes"


def test_empty_label_value_is_absent():
    assert parse_unknown_format("Name:   \nDate: x").signer_name is None


def test_raw_preview_truncated():
    result = parse_unknown_format("x" * 500)
    assert result.certificate_info == "Raw data: " + "x" * 80
