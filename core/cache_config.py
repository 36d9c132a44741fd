"""Method cache configuration loading and validation.

The configuration is a small YAML document::

    cache_dir: output/method_cache
    fragment_seed: M000000
    comment_format: rdoc
    strict: false

Strict mode turns every problem into ``ConfigValidationError``; non-strict
mode logs a warning and falls back to the default for the offending key.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

import yaml

from core.fragment_sequence import DEFAULT_FRAGMENT_SEED

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = "output/method_cache"
DEFAULT_COMMENT_FORMAT = "rdoc"

_FRAGMENT_SEED_RE = re.compile(r"^[A-Za-z0-9]+$")


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass(frozen=True)
class CacheConfig:
    """Resolved settings for one documentation build."""

    cache_dir: str = DEFAULT_CACHE_DIR
    fragment_seed: str = DEFAULT_FRAGMENT_SEED
    comment_format: str = DEFAULT_COMMENT_FORMAT
    strict: bool = False


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_flag(value: Any) -> bool | None:
    """Interpret a YAML/env flag; ``None`` when the value is not a flag."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    return None


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; continuing with defaults", msg)


def load_config_payload(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Read the YAML config file.

    Returns an empty dict in non-strict mode when the file is missing,
    unreadable or not a mapping.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Cache config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse cache config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        _fail(f"Cache config file is empty: {config_path}", strict)
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected cache config payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def build_cache_config(payload: dict[str, Any], strict: bool = False) -> CacheConfig:
    """Validate a raw payload into a ``CacheConfig``."""
    raw_strict = payload.get("strict")
    if raw_strict is not None:
        parsed = _parse_flag(raw_strict)
        if parsed is None:
            _fail(f"strict must be a boolean, got {raw_strict!r}", strict)
            parsed = False
        strict = strict or parsed

    cache_dir = payload.get("cache_dir", DEFAULT_CACHE_DIR)
    if not isinstance(cache_dir, str) or not cache_dir.strip():
        _fail("cache_dir must be a non-empty string", strict)
        cache_dir = DEFAULT_CACHE_DIR

    fragment_seed = str(payload.get("fragment_seed", DEFAULT_FRAGMENT_SEED))
    if not _FRAGMENT_SEED_RE.match(fragment_seed):
        _fail(f"fragment_seed must be alphanumeric, got {fragment_seed!r}", strict)
        fragment_seed = DEFAULT_FRAGMENT_SEED

    comment_format = payload.get("comment_format", DEFAULT_COMMENT_FORMAT)
    if not isinstance(comment_format, str) or not comment_format.strip():
        _fail("comment_format must be a non-empty string", strict)
        comment_format = DEFAULT_COMMENT_FORMAT

    unknown = sorted(set(payload) - {"cache_dir", "fragment_seed", "comment_format", "strict"})
    if unknown:
        _fail("Unknown cache config keys: " + ", ".join(unknown), strict)

    return CacheConfig(
        cache_dir=cache_dir.strip(),
        fragment_seed=fragment_seed,
        comment_format=comment_format.strip(),
        strict=strict,
    )


def load_cache_config(config_path: str | None, strict: bool = False) -> CacheConfig:
    """Load ``config_path`` (or defaults when ``None``) into a ``CacheConfig``."""
    if config_path is None:
        return CacheConfig(strict=strict)
    payload = load_config_payload(config_path, strict=strict)
    return build_cache_config(payload, strict=strict)
