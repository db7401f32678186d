"""Scan configuration loading and validation.

Provides strict/non-strict parsing of the YAML (or JSON) file that supplies
the default ``ClassFinder`` mode and filter chain.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_KEY_MODE = "mode"
CONFIG_KEY_FILTERS = "filters"
CONFIG_KEY_EXCLUDE = "exclude"
CONFIG_KEY_CONTINUE_ON_ERROR = "continue_on_error"

ModeSpec = Union[int, str, list]


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail_or_warn(msg: str, strict: bool, exc: Exception | None = None) -> None:
    if strict:
        raise ConfigValidationError(msg) from exc
    logger.warning("%s; continuing with defaults", msg)


def load_scan_config(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse a scan config file.

    ``.json`` files are read with :mod:`json`, everything else with YAML.
    In non-strict mode this returns an empty dict on read/parse failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                payload = json.load(f)
            else:
                payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        _fail_or_warn(f"Scan config file not found: {config_path}", strict, exc)
        return {}
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        _fail_or_warn(f"Failed to parse scan config at {config_path}: {exc}", strict, exc)
        return {}

    if payload is None:
        _fail_or_warn(f"Scan config file is empty: {config_path}", strict)
        return {}

    if not isinstance(payload, dict):
        _fail_or_warn(
            f"Unexpected scan config payload type: {type(payload).__name__}", strict
        )
        return {}

    return payload


@dataclass(frozen=True)
class FinderConfig:
    """Validated ``(mode, filters)`` pair plus scan defaults."""

    mode: ModeSpec | None = None
    filters: list[dict[str, Any]] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    continue_on_error: bool = False


def _parse_mode(raw: Any, strict: bool) -> ModeSpec | None:
    # Imported here: extraction.models itself imports from the core package.
    from extraction.models import KindMask

    if raw is None:
        return None
    if isinstance(raw, bool):
        _fail_or_warn("'mode' must be an integer, a kind name or a list of names", strict)
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        names = [raw]
    elif isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        names = list(raw)
    else:
        _fail_or_warn("'mode' must be an integer, a kind name or a list of names", strict)
        return None

    try:
        KindMask.from_names(names)
    except ValueError as exc:
        _fail_or_warn(f"Invalid 'mode': {exc}", strict, exc)
        return None
    return raw if isinstance(raw, str) else names


def _parse_filters(raw: Any, strict: bool) -> list[dict[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        _fail_or_warn("'filters' must be a list", strict)
        return []

    specs: list[dict[str, Any]] = []
    for idx, item in enumerate(raw):
        if isinstance(item, str):
            specs.append({"type": item})
        elif isinstance(item, dict) and isinstance(item.get("type"), str):
            specs.append(dict(item))
        else:
            _fail_or_warn(f"filters[{idx}] must be a name or an object with 'type'", strict)
    return specs


def _parse_exclude(raw: Any, strict: bool) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        return list(raw)
    _fail_or_warn("'exclude' must be a string or a list of strings", strict)
    return []


def parse_finder_config(payload: dict[str, Any], strict: bool = False) -> FinderConfig:
    """Validate a raw config mapping into a ``FinderConfig``.

    Unknown keys are ignored with a warning. Invalid values raise in strict
    mode and fall back to defaults otherwise.
    """
    known = {
        CONFIG_KEY_MODE,
        CONFIG_KEY_FILTERS,
        CONFIG_KEY_EXCLUDE,
        CONFIG_KEY_CONTINUE_ON_ERROR,
    }
    unknown = sorted(set(payload) - known)
    if unknown:
        logger.warning("Ignoring unknown scan config keys: %s", ", ".join(unknown))

    continue_on_error = payload.get(CONFIG_KEY_CONTINUE_ON_ERROR, False)
    if not isinstance(continue_on_error, bool):
        _fail_or_warn("'continue_on_error' must be a boolean", strict)
        continue_on_error = False

    return FinderConfig(
        mode=_parse_mode(payload.get(CONFIG_KEY_MODE), strict),
        filters=_parse_filters(payload.get(CONFIG_KEY_FILTERS), strict),
        exclude=_parse_exclude(payload.get(CONFIG_KEY_EXCLUDE), strict),
        continue_on_error=continue_on_error,
    )


def load_finder_config(config_path: str, strict: bool | None = None) -> FinderConfig:
    """Load and validate a scan config file in one step."""
    if strict is None:
        strict = resolve_strict_config_validation()
    return parse_finder_config(load_scan_config(config_path, strict=strict), strict=strict)
