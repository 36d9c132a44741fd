"""Core shared contracts and utilities."""

from core.fragment_sequence import (
    DEFAULT_FRAGMENT_SEED,
    FragmentSequence,
    get_default_sequence,
    reset_default_sequence,
    string_successor,
)
from core.structured_logging import (
    configure_structured_logging,
    get_build_id,
    phase_scope,
    set_build_id,
)
from core.cache_config import (
    CacheConfig,
    ConfigValidationError,
    load_cache_config,
    resolve_strict_config_validation,
)
from core.build_report import write_build_report
from core.method_manifest import (
    AliasSpec,
    MethodManifest,
    MethodSpec,
    NamespaceSpec,
    load_method_manifest,
)

__all__ = [
    "DEFAULT_FRAGMENT_SEED",
    "FragmentSequence",
    "get_default_sequence",
    "reset_default_sequence",
    "string_successor",
    "configure_structured_logging",
    "get_build_id",
    "phase_scope",
    "set_build_id",
    "CacheConfig",
    "ConfigValidationError",
    "load_cache_config",
    "resolve_strict_config_validation",
    "write_build_report",
    "AliasSpec",
    "MethodManifest",
    "MethodSpec",
    "NamespaceSpec",
    "load_method_manifest",
]
