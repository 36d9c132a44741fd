"""Structured logging helpers carrying documentation build context.

Every log line emitted while a build runs carries the build id and the
current phase (``build``, ``write_cache``, ``verify_cache``...). Phases are
also timed so the build report can show where a run spent its time.
"""

from __future__ import annotations

import contextvars
import logging
import time
import uuid
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

_BUILD_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "build_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | build=%(build_id)s/%(phase)s | "
    "%(name)s | %(message)s"
)


class BuildContextFilter(logging.Filter):
    """Attach build_id/phase to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.build_id = _BUILD_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging with build/phase fields in every line."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    for handler in root_logger.handlers:
        if not any(isinstance(f, BuildContextFilter) for f in handler.filters):
            handler.addFilter(BuildContextFilter())


def set_build_id(build_id: str | None = None) -> str:
    """Set (or generate) the identifier of the current documentation build."""
    value = build_id or uuid.uuid4().hex[:12]
    _BUILD_ID_VAR.set(value)
    return value


def get_build_id() -> str:
    return _BUILD_ID_VAR.get("-")


def get_phase() -> str:
    return _PHASE_VAR.get("-")


@contextmanager
def phase_scope(
    phase: str,
    timings: dict[str, float] | None = None,
) -> Iterator[None]:
    """Run a build phase: tag its log lines and time it.

    When ``timings`` is given the elapsed seconds are stored under ``phase``,
    also when the block raises.
    """
    token = _PHASE_VAR.set(phase)
    started = time.perf_counter()
    logger.debug("Phase %s started", phase)
    try:
        yield
    except Exception:
        logger.warning("Phase %s failed after %.3fs", phase, time.perf_counter() - started)
        raise
    finally:
        elapsed = time.perf_counter() - started
        if timings is not None:
            timings[phase] = elapsed
        _PHASE_VAR.reset(token)
    logger.debug("Phase %s finished in %.3fs", phase, elapsed)
