from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between raw configuration sources (persisted JSON, CLI
overrides) and the engines. Handles type coercion and default value
injection, collecting warnings instead of failing unless strict mode is
requested.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from depgather.domain.config import get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Schema Definition
    string_fields = [
        "output_dir", "manifest_name", "ldd_command",
        "package_version", "package_section", "package_priority",
        "maintainer", "package_output_dir",
    ]
    bool_fields = ["write_manifest"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(
            merged.get(field), defaults.get(field, ""), field, warnings, strict
        )

    for field in bool_fields:
        merged[field] = _as_bool(
            merged.get(field), defaults.get(field, False), field, warnings, strict
        )

    merged["max_symlink_hops"] = _as_positive_int(
        merged.get("max_symlink_hops"), defaults["max_symlink_hops"],
        "max_symlink_hops", warnings, strict
    )
    merged["ldd_timeout"] = _as_optional_seconds(
        merged.get("ldd_timeout"), "ldd_timeout", warnings, strict
    )

    # 4. Domain-Specific Normalization
    merged["manifest_name"] = _normalize_manifest_name(
        merged["manifest_name"], defaults["manifest_name"], warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value

    if not strict and isinstance(value, str) and value.strip().isdigit() and int(value) > 0:
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return int(value)

    msg = f"Invalid field '{field}': expected positive int, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_optional_seconds(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[float]:
    """None (wait forever) or a positive number of seconds."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)

    if not strict and isinstance(value, str):
        try:
            seconds = float(value)
        except ValueError:
            seconds = 0.0
        if seconds > 0:
            warnings.append(f"Field '{field}' converted from '{value}' to {seconds}.")
            return seconds

    msg = f"Invalid field '{field}': expected positive number of seconds, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Timeout disabled.")
    return None


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_manifest_name(name: str, fallback: str, warnings: List[str], strict: bool) -> str:
    """The manifest always lives at the tree root, so it must be a bare file name."""
    if "/" not in name and name not in (".", ".."):
        return name

    msg = f"Invalid manifest name '{name}': must be a plain file name."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{fallback}'.")
    return fallback
