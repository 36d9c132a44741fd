"""Build reports for method cache runs.

Each run writes ``<build_id>.json`` and refreshes ``latest.json``, a small
pointer an incremental build reads to find the previous run.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

DEFAULT_REPORT_DIR = "output/build_reports"
LATEST_REPORT_NAME = "latest.json"
REPORT_SCHEMA_VERSION = 1


def build_report_payload(
    report: dict[str, Any],
    build_id: str,
    phase_timings: dict[str, float] | None = None,
) -> dict[str, Any]:
    """Normalize a report: schema version, build id, timestamps, phases.

    A failed report names the last phase that ran as ``failed_phase``.
    """
    payload = dict(report)
    payload["schema_version"] = REPORT_SCHEMA_VERSION
    payload.setdefault("build_id", build_id)
    payload.setdefault("status", "unknown")
    payload.setdefault("finished_at", datetime.now(timezone.utc).isoformat())
    if phase_timings:
        payload["phase_seconds"] = {
            name: round(seconds, 3) for name, seconds in phase_timings.items()
        }
        if payload["status"] == "failed":
            payload.setdefault("failed_phase", list(phase_timings)[-1])
    return payload


def write_build_report(
    report: dict[str, Any],
    build_id: str,
    output_dir: str = DEFAULT_REPORT_DIR,
    phase_timings: dict[str, float] | None = None,
) -> str:
    """Write the report and the ``latest.json`` pointer; return the report path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = build_report_payload(report, build_id, phase_timings)
    path = os.path.join(output_dir, f"{payload['build_id']}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    latest = {
        "build_id": payload["build_id"],
        "status": payload["status"],
        "project_name": payload.get("project_name"),
        "finished_at": payload["finished_at"],
        "report": os.path.basename(path),
    }
    with open(os.path.join(output_dir, LATEST_REPORT_NAME), "w", encoding="utf-8") as f:
        json.dump(latest, f, indent=2, sort_keys=True)
    return path


def read_latest_build_report(output_dir: str = DEFAULT_REPORT_DIR) -> dict[str, Any] | None:
    """Return the ``latest.json`` pointer, or ``None`` before the first run."""
    path = os.path.join(output_dir, LATEST_REPORT_NAME)
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return payload if isinstance(payload, dict) else None
