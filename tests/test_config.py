"""Tests for udfsig.config -- config file storage and verification limits."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from udfsig.config import (
    DEFAULT_LIMITS,
    VerificationLimits,
    get_limits,
    reset_limits,
    save_limits,
    validate_size_limit,
)
from udfsig.config._storage import load_config, load_raw_config, save_config
from udfsig.constants import DEFAULT_MAX_ENTRY_SIZE, DEFAULT_MAX_SIGNATURE_SIZE
from udfsig.errors import ConfigError

# ── load_config / save_config ─────────────────────────────────────


def test_load_empty(config_dir):
    """Loading when no config file exists should return empty dict."""
    assert load_config() == {}


def test_save_and_load(config_dir):
    save_config({"max_entry_size": 2048, "max_signature_size": 4096})
    assert load_config() == {"max_entry_size": 2048, "max_signature_size": 4096}


def test_save_is_pretty_json(config_dir):
    _, config_file = config_dir
    save_config({"max_entry_size": 2048})
    text = config_file.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert json.loads(text) == {"max_entry_size": 2048}


def test_save_leaves_no_temp_files(config_dir):
    tmp_path, _ = config_dir
    save_config({"max_entry_size": 2048})
    assert [p.name for p in tmp_path.iterdir()] == ["config.json"]


def test_save_cleans_up_on_failure(config_dir):
    tmp_path, _ = config_dir
    with (
        patch("udfsig.config._storage.os.fsync", side_effect=OSError("disk full")),
        pytest.raises(OSError, match="disk full"),
    ):
        save_config({"max_entry_size": 2048})
    assert list(tmp_path.iterdir()) == []


def test_load_corrupted(config_dir, caplog):
    _, config_file = config_dir
    config_file.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert load_config() == {}
    assert "corrupted" in caplog.text


def test_load_non_object(config_dir, caplog):
    _, config_file = config_dir
    config_file.write_text("[1, 2, 3]", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert load_raw_config() == {}
    assert "not a JSON object" in caplog.text


def test_load_preserves_unknown_keys_in_raw(config_dir):
    _, config_file = config_dir
    config_file.write_text(json.dumps({"future_key": 1, "max_entry_size": 2048}), encoding="utf-8")
    assert load_raw_config() == {"future_key": 1, "max_entry_size": 2048}
    assert load_config() == {"max_entry_size": 2048}


@pytest.mark.parametrize("bad", ["2048", 20.5, True, None, [2048]])
def test_load_rejects_wrong_types(config_dir, bad):
    _, config_file = config_dir
    config_file.write_text(json.dumps({"max_entry_size": bad}), encoding="utf-8")
    assert load_config() == {}


@pytest.mark.parametrize("value", [0, 1023, 2 * 1024 * 1024 * 1024])
def test_load_rejects_out_of_range(config_dir, value):
    _, config_file = config_dir
    config_file.write_text(json.dumps({"max_signature_size": value}), encoding="utf-8")
    assert load_config() == {}


# ── validate_size_limit ───────────────────────────────────────────


def test_validate_size_limit_accepts_bounds():
    assert validate_size_limit(1024, "x") == 1024
    assert validate_size_limit(1024 * 1024 * 1024, "x") == 1024 * 1024 * 1024


@pytest.mark.parametrize("value", [-1, 0, 1023, 1024 * 1024 * 1024 + 1])
def test_validate_size_limit_rejects(value):
    with pytest.raises(ConfigError, match="max_entry_size must be between"):
        validate_size_limit(value, "max_entry_size")


# ── get_limits ────────────────────────────────────────────────────


def test_defaults(config_dir):
    limits = get_limits()
    assert limits == DEFAULT_LIMITS
    assert limits.max_entry_size == DEFAULT_MAX_ENTRY_SIZE
    assert limits.max_signature_size == DEFAULT_MAX_SIGNATURE_SIZE


def test_config_file_overrides_defaults(config_dir):
    save_config({"max_entry_size": 4096})
    limits = get_limits()
    assert limits.max_entry_size == 4096
    assert limits.max_signature_size == DEFAULT_MAX_SIGNATURE_SIZE


def test_env_overrides_config_file(config_dir):
    save_config({"max_entry_size": 4096, "max_signature_size": 4096})
    with patch.dict("os.environ", {"UDFSIG_MAX_ENTRY_SIZE": "8192"}):
        limits = get_limits()
    assert limits.max_entry_size == 8192
    assert limits.max_signature_size == 4096


def test_invalid_env_falls_back(config_dir, caplog):
    save_config({"max_signature_size": 4096})
    with (
        patch.dict("os.environ", {"UDFSIG_MAX_SIGNATURE_SIZE": "lots"}),
        caplog.at_level(logging.WARNING),
    ):
        limits = get_limits()
    assert limits.max_signature_size == 4096
    assert "Invalid UDFSIG_MAX_SIGNATURE_SIZE" in caplog.text


def test_out_of_range_env_falls_back(config_dir):
    with patch.dict("os.environ", {"UDFSIG_MAX_ENTRY_SIZE": "10"}):
        assert get_limits().max_entry_size == DEFAULT_MAX_ENTRY_SIZE


def test_limits_are_frozen():
    limits = VerificationLimits()
    with pytest.raises(AttributeError):
        limits.max_entry_size = 1  # type: ignore[misc]


# ── save_limits / reset_limits ────────────────────────────────────


def test_save_limits(config_dir):
    save_limits(max_entry_size=2048)
    assert get_limits().max_entry_size == 2048
    save_limits(max_signature_size=3072)
    limits = get_limits()
    assert limits.max_entry_size == 2048
    assert limits.max_signature_size == 3072


def test_save_limits_preserves_other_keys(config_dir):
    save_config({"future_key": "keep"})
    save_limits(max_entry_size=2048)
    assert load_raw_config() == {"future_key": "keep", "max_entry_size": 2048}


def test_save_limits_rejects_out_of_range(config_dir):
    _, config_file = config_dir
    with pytest.raises(ConfigError):
        save_limits(max_entry_size=1)
    assert not config_file.exists()


def test_reset_limits(config_dir):
    save_config({"max_entry_size": 2048, "max_signature_size": 4096, "future_key": 1})
    reset_limits()
    assert load_raw_config() == {"future_key": 1}
    assert get_limits() == DEFAULT_LIMITS
