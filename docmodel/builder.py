"""
Populate a build session from a method manifest.

This is the extraction step for manifest-driven builds: every namespace
becomes a container, every method a ``MethodRecord`` and every declared
alias both a ``MethodAlias`` on the original and a separate record that
points back at it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

from core.method_manifest import MethodManifest, MethodSpec
from docmodel.alias import MethodAlias
from docmodel.container import Namespace
from docmodel.method_record import MethodRecord
from docmodel.session import BuildSession
from docmodel.token_stream import Token

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Counters for one manifest build."""

    namespaces: int = 0
    methods: int = 0
    aliases: int = 0
    undocumented: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "namespaces": self.namespaces,
            "methods": self.methods,
            "aliases": self.aliases,
            "undocumented": self.undocumented,
        }


def source_tokens(source: str) -> List[Token]:
    """Split method source into one token per line."""
    return [
        Token(line_no=idx, char_no=0, text=line)
        for idx, line in enumerate(source.splitlines(keepends=True), start=1)
    ]


def _build_method(
    session: BuildSession,
    namespace: Namespace,
    spec: MethodSpec,
    stats: BuildStats,
) -> MethodRecord:
    record = session.new_method(spec.source, spec.name, container=namespace)
    record.singleton = spec.singleton
    record.visibility = spec.visibility
    record.params = spec.params
    record.block_params = spec.block_params
    record.call_seq = spec.call_seq
    record.comment = spec.comment
    if spec.source:
        record.collect_tokens()
        record.add_tokens(source_tokens(spec.source))

    for alias_spec in spec.aliases:
        alias = MethodAlias(
            None,
            record.name,
            alias_spec.name,
            alias_spec.comment,
            singleton=bool(spec.singleton),
        )
        alias.container = namespace
        record.add_alias(alias)

        alias_record = session.new_method(None, alias_spec.name, container=namespace)
        alias_record.singleton = record.singleton
        alias_record.visibility = record.visibility
        alias_record.params = record.params
        alias_record.block_params = record.block_params
        alias_record.comment = alias_spec.comment
        alias_record.is_alias_for = record
        stats.aliases += 1

    if not record.documented:
        stats.undocumented += 1
    stats.methods += 1
    return record


def populate_session(session: BuildSession, manifest: MethodManifest) -> BuildStats:
    """Create records for every method in ``manifest``.

    Returns:
        Counters for namespaces, methods, aliases and undocumented methods.
    """
    stats = BuildStats()
    for ns_spec in manifest.namespaces:
        namespace = session.adopt_container(
            Namespace(full_name=ns_spec.full_name, path=ns_spec.path or "")
        )
        stats.namespaces += 1
        for method_spec in ns_spec.methods:
            record = _build_method(session, namespace, method_spec, stats)
            logger.debug("Built %s (%s)", record.full_name, record.aref)

    logger.info(
        "Built %d methods (%d aliases) across %d namespaces",
        stats.methods,
        stats.aliases,
        stats.namespaces,
    )
    if stats.undocumented:
        logger.warning("%d methods have no comment", stats.undocumented)
    return stats
