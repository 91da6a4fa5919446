from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies default injection, type coercion with warnings in lenient mode,
and exceptions in strict mode.
"""

import pytest

from depgather.core.pipeline.validator import validate_config
from depgather.domain.config import get_default_config


def test_empty_dict_yields_defaults():
    cfg, warnings = validate_config({})
    defaults = get_default_config()

    assert warnings == []
    for key in ("manifest_name", "write_manifest", "ldd_command", "max_symlink_hops", "ldd_timeout"):
        assert cfg[key] == defaults[key]


def test_non_dict_falls_back_to_defaults():
    cfg, warnings = validate_config(["not", "a", "dict"])
    assert cfg["manifest_name"] == "MANIFEST.txt"
    assert len(warnings) == 1


def test_non_dict_strict_raises():
    with pytest.raises(TypeError):
        validate_config("bad", strict=True)


def test_string_fields_are_stripped_and_blank_uses_default():
    cfg, _ = validate_config({"output_dir": "  /tmp/out  ", "ldd_command": "   "})
    assert cfg["output_dir"] == "/tmp/out"
    assert cfg["ldd_command"] == "ldd"


def test_bool_coercion_from_string():
    cfg, warnings = validate_config({"write_manifest": "no"})
    assert cfg["write_manifest"] is False
    assert any("write_manifest" in w for w in warnings)


def test_bool_strict_rejects_string():
    with pytest.raises(TypeError):
        validate_config({"write_manifest": "no"}, strict=True)


def test_max_symlink_hops_validation():
    assert validate_config({"max_symlink_hops": 8})[0]["max_symlink_hops"] == 8
    assert validate_config({"max_symlink_hops": "12"})[0]["max_symlink_hops"] == 12

    cfg, warnings = validate_config({"max_symlink_hops": 0})
    assert cfg["max_symlink_hops"] == 40
    assert warnings

    with pytest.raises(ValueError):
        validate_config({"max_symlink_hops": -1}, strict=True)


def test_ldd_timeout_validation():
    assert validate_config({"ldd_timeout": 30})[0]["ldd_timeout"] == 30.0
    assert validate_config({"ldd_timeout": "2.5"})[0]["ldd_timeout"] == 2.5
    assert validate_config({"ldd_timeout": None})[0]["ldd_timeout"] is None

    cfg, warnings = validate_config({"ldd_timeout": "soon"})
    assert cfg["ldd_timeout"] is None
    assert warnings


@pytest.mark.parametrize("name", ["sub/MANIFEST.txt", ".", ".."])
def test_manifest_name_must_be_plain(name):
    cfg, warnings = validate_config({"manifest_name": name})
    assert cfg["manifest_name"] == "MANIFEST.txt"
    assert warnings


def test_unknown_keys_are_preserved():
    cfg, _ = validate_config({"extra_key": 1})
    assert cfg["extra_key"] == 1
