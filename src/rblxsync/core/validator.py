from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (JSON file,
CLI flags, environment) and the sync services. Handles type coercion,
URL normalization and default value injection, and builds the immutable
ScriptTarget once every required setting is present.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from rblxsync.domain.config import get_default_config
from rblxsync.domain.errors import ConfigurationError
from rblxsync.domain.instance import ScriptTarget

logger = logging.getLogger(__name__)

REQUIRED_TARGET_FIELDS = ("api_key", "universe_id", "place_id", "type_key")


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
    merged.update({k: v for k, v in config.items() if k in defaults})

    # 2. Schema Definition (Declarative mapping)
    string_fields = ["api_key", "universe_id", "place_id", "type_key", "base_url"]
    positive_float_fields = ["poll_interval", "request_timeout"]
    optional_float_fields = ["poll_timeout"]
    optional_int_fields = ["poll_max_attempts"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    # Path is kept verbatim: surrounding slashes are meaningful segments
    merged["path"] = _as_str(
        merged.get("path"), "", "path", warnings, strict, strip=False
    )

    for field in positive_float_fields:
        value = _as_number(merged.get(field), float, field, warnings, strict)
        merged[field] = value if value is not None else defaults[field]

    for field in optional_float_fields:
        merged[field] = _as_number(merged.get(field), float, field, warnings, strict)

    for field in optional_int_fields:
        merged[field] = _as_number(merged.get(field), int, field, warnings, strict)

    # 4. Domain-Specific Normalization
    if not merged["base_url"].endswith("/"):
        merged["base_url"] += "/"

    return merged, warnings


def require_target_fields(config: Dict[str, Any]) -> None:
    """
    Ensure every setting needed to address a script is present.

    Raises:
        ConfigurationError: Listing all missing keys.
    """
    missing = [k for k in REQUIRED_TARGET_FIELDS if not str(config.get(k) or "").strip()]
    if missing:
        raise ConfigurationError(missing)


def build_target(config: Dict[str, Any]) -> ScriptTarget:
    """
    Freeze a validated configuration into a ScriptTarget.

    Raises:
        ConfigurationError: If required settings are missing.
    """
    require_target_fields(config)
    return ScriptTarget(
        api_key=str(config["api_key"]),
        path=str(config.get("path") or ""),
        universe_id=str(config["universe_id"]),
        place_id=str(config["place_id"]),
        type_key=str(config["type_key"]),
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        strip: bool = True,
) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip() if strip else value
        return v if v else fallback

    # Numeric identifiers are common in hand-edited JSON
    if isinstance(value, int) and not isinstance(value, bool) and not strict:
        warnings.append(f"Field '{field}' converted from number {value} to str.")
        return str(value)

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_number(
        value: Any,
        kind: type,
        field: str,
        warnings: List[str],
        strict: bool,
) -> Optional[Any]:
    """Coerce positive numbers; None, zero and negatives disable the setting."""
    if value is None or isinstance(value, bool):
        return None

    number: Optional[Any] = None
    if isinstance(value, (int, float)):
        number = kind(value)
    elif isinstance(value, str) and not strict:
        try:
            number = kind(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {kind.__name__}.")
        except ValueError:
            number = None

    if number is None:
        msg = f"Invalid field '{field}': expected {kind.__name__}, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Setting ignored.")
        return None

    if number <= 0:
        msg = f"Field '{field}' must be positive, received {value}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Setting ignored.")
        return None

    return number
