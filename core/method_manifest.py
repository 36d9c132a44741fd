"""Manifest contract describing the methods of a documentation build."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_VISIBILITIES = {"public", "protected", "private"}


@dataclass(frozen=True)
class AliasSpec:
    """Alias declared for a method."""

    name: str
    comment: str | None = None


@dataclass(frozen=True)
class MethodSpec:
    """One documented method as described in the manifest."""

    name: str | None
    params: str | None = None
    block_params: str | None = None
    call_seq: str | None = None
    singleton: bool = False
    visibility: str = "public"
    comment: str | None = None
    source: str | None = None
    aliases: list[AliasSpec] = field(default_factory=list)


@dataclass(frozen=True)
class NamespaceSpec:
    """A class or module and the methods it owns."""

    full_name: str
    methods: list[MethodSpec]
    path: str | None = None


@dataclass(frozen=True)
class MethodManifest:
    """Top-level manifest payload."""

    project_name: str
    namespaces: list[NamespaceSpec]

    @property
    def method_count(self) -> int:
        return sum(len(ns.methods) for ns in self.namespaces)


def _expect_dict(payload: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{ctx} must be an object")
    return payload


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _load_manifest_payload(path: str) -> dict[str, Any]:
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Manifest file not found: {manifest_path}")

    text = manifest_path.read_text(encoding="utf-8")
    if manifest_path.suffix.lower() == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    return _expect_dict(payload, "manifest")


def _parse_alias_spec(raw: Any, owner: str) -> AliasSpec:
    if isinstance(raw, str):
        raw = {"name": raw}
    payload = _expect_dict(raw, f"alias entry of '{owner}'")
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ValueError(f"method '{owner}': alias name is required")
    return AliasSpec(name=name, comment=_optional_str(payload, "comment"))


def _parse_method_spec(payload: dict[str, Any], namespace: str) -> MethodSpec:
    name = _optional_str(payload, "name")
    call_seq = _optional_str(payload, "call_seq")
    if not (name and name.strip()) and not call_seq:
        raise ValueError(f"namespace '{namespace}': method needs a name or call_seq")
    label = name or call_seq.splitlines()[0]

    visibility = str(payload.get("visibility", "public")).strip().lower()
    if visibility not in _VISIBILITIES:
        raise ValueError(
            f"method '{label}': visibility must be one of "
            f"{', '.join(sorted(_VISIBILITIES))}, got '{visibility}'"
        )

    aliases_raw = payload.get("aliases", [])
    if not isinstance(aliases_raw, list):
        raise ValueError(f"method '{label}': aliases must be a list")

    return MethodSpec(
        name=name.strip() if name else None,
        params=_optional_str(payload, "params"),
        block_params=_optional_str(payload, "block_params"),
        call_seq=call_seq,
        singleton=bool(payload.get("singleton", False)),
        visibility=visibility,
        comment=_optional_str(payload, "comment"),
        source=_optional_str(payload, "source"),
        aliases=[_parse_alias_spec(item, label) for item in aliases_raw],
    )


def _parse_namespace_spec(payload: dict[str, Any]) -> NamespaceSpec:
    full_name = str(payload.get("full_name", "")).strip()
    if not full_name:
        raise ValueError("namespace.full_name is required")

    methods_raw = payload.get("methods", [])
    if not isinstance(methods_raw, list):
        raise ValueError(f"namespace '{full_name}': methods must be a list")

    methods = [
        _parse_method_spec(_expect_dict(item, f"method entry of '{full_name}'"), full_name)
        for item in methods_raw
    ]
    return NamespaceSpec(
        full_name=full_name,
        methods=methods,
        path=_optional_str(payload, "path"),
    )


def load_method_manifest(path: str) -> MethodManifest:
    """Load and validate a method manifest from a YAML/JSON file."""
    payload = _load_manifest_payload(path)
    project_name = str(payload.get("project_name", "")).strip()
    if not project_name:
        raise ValueError("project_name is required")

    namespaces_raw = payload.get("namespaces")
    if not isinstance(namespaces_raw, list) or len(namespaces_raw) == 0:
        raise ValueError("namespaces must be a non-empty list")

    namespaces: list[NamespaceSpec] = []
    seen: set[str] = set()
    for raw in namespaces_raw:
        spec = _parse_namespace_spec(_expect_dict(raw, "namespace entry"))
        if spec.full_name in seen:
            raise ValueError(f"Duplicate namespace in manifest: {spec.full_name}")
        seen.add(spec.full_name)
        namespaces.append(spec)

    return MethodManifest(
        project_name=project_name,
        namespaces=namespaces,
    )
