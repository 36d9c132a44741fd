"""
JSON Lines persistence for method records.

Each line is one record in the fixed-order layout produced by
``MethodRecord.marshal_dump``. Parsed comments are written as tagged
objects so they load back as ``StructuredComment`` without re-parsing.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from cache.config import COMMENT_TAG, PROGRESS_LOG_INTERVAL
from core.cache_config import resolve_strict_config_validation
from docmodel.comment import CommentParser, StructuredComment
from docmodel.config import MARSHAL_RECORD_LENGTH
from docmodel.errors import UnsupportedFormatError
from docmodel.method_record import MethodRecord
from docmodel.session import BuildSession

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Statistics for a cache write or load."""

    records_written: int = 0
    records_loaded: int = 0
    records_skipped: int = 0
    aliases_written: int = 0
    aliases_loaded: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "records_written": self.records_written,
            "records_loaded": self.records_loaded,
            "records_skipped": self.records_skipped,
            "aliases_written": self.aliases_written,
            "aliases_loaded": self.aliases_loaded,
        }


def _encode_comment(comment: Any) -> Any:
    if isinstance(comment, StructuredComment):
        return {COMMENT_TAG: comment.to_dict()}
    return comment


def _decode_comment(payload: Any) -> Any:
    if isinstance(payload, dict) and COMMENT_TAG in payload:
        return StructuredComment.from_dict(payload[COMMENT_TAG])
    return payload


def encode_record(record: MethodRecord, parser: Optional[CommentParser] = None) -> List[Any]:
    """Export ``record`` into a JSON-safe list."""
    payload = record.marshal_dump(parser)
    payload[5] = _encode_comment(payload[5])
    payload[8] = [[full_name, _encode_comment(comment)] for full_name, comment in payload[8]]
    return payload


def decode_record(payload: Any) -> Any:
    """Undo ``encode_record``'s comment tagging.

    Payloads of the wrong shape are returned untouched so that
    ``MethodRecord.marshal_load`` reports the problem.
    """
    if not isinstance(payload, list) or len(payload) != MARSHAL_RECORD_LENGTH:
        return payload
    decoded = list(payload)
    decoded[5] = _decode_comment(decoded[5])
    decoded[8] = [
        [*snapshot[:-1], _decode_comment(snapshot[-1])]
        for snapshot in (decoded[8] or [])
    ]
    return decoded


def write_method_cache(
    records: Iterable[MethodRecord],
    file_path: str,
    parser: Optional[CommentParser] = None,
) -> CacheStats:
    """Stream ``records`` to ``file_path``, one JSON list per line."""
    stats = CacheStats()
    directory = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(directory, exist_ok=True)

    with open(file_path, "w", encoding="utf-8") as f:
        for record in records:
            payload = encode_record(record, parser)
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
            stats.records_written += 1
            stats.aliases_written += len(payload[8])
            if stats.records_written % PROGRESS_LOG_INTERVAL == 0:
                logger.info("Wrote %d records to %s", stats.records_written, file_path)

    logger.info(
        "Method cache written: %s (%d records, %d aliases)",
        file_path,
        stats.records_written,
        stats.aliases_written,
    )
    return stats


def iter_load_method_cache(
    file_path: str,
    session: Optional[BuildSession] = None,
    strict: Optional[bool] = None,
    stats: Optional[CacheStats] = None,
) -> Iterator[MethodRecord]:
    """Yield records loaded from ``file_path``.

    Args:
        file_path: JSON Lines cache written by ``write_method_cache``.
        session: When given, records are registered with it and take their
            fragment references from its sequence.
        strict: Raise on bad lines instead of skipping them. Defaults to
            ``STRICT_CONFIG_VALIDATION``.
        stats: Optional counters updated while loading.

    Raises:
        FileNotFoundError: If the cache file does not exist.
        UnsupportedFormatError: Strict mode, unknown record version.
        ValueError: Strict mode, undecodable or malformed line.
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Method cache not found: {file_path}")
    if strict is None:
        strict = resolve_strict_config_validation()
    if stats is None:
        stats = CacheStats()

    with open(file_path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                payload = decode_record(json.loads(line))
                if session is not None:
                    record = session.load_method(payload)
                else:
                    record = MethodRecord.from_marshal(payload)
            except UnsupportedFormatError as exc:
                if strict:
                    raise
                logger.warning("Skipping %s line %d: %s", file_path, line_no, exc)
                stats.records_skipped += 1
                continue
            except (ValueError, TypeError, IndexError) as exc:
                if strict:
                    raise ValueError(f"{file_path}:{line_no}: {exc}") from exc
                logger.warning("Skipping malformed %s line %d: %s", file_path, line_no, exc)
                stats.records_skipped += 1
                continue

            stats.records_loaded += 1
            stats.aliases_loaded += len(record.aliases)
            yield record


def load_method_cache(
    file_path: str,
    session: Optional[BuildSession] = None,
    strict: Optional[bool] = None,
) -> Tuple[List[MethodRecord], CacheStats]:
    """Load a whole cache file into memory."""
    stats = CacheStats()
    records = list(iter_load_method_cache(file_path, session=session, strict=strict, stats=stats))
    logger.info(
        "Method cache loaded: %s (%d records, %d skipped)",
        file_path,
        stats.records_loaded,
        stats.records_skipped,
    )
    return records, stats
