#!/usr/bin/env python3
"""
Build the method cache for a documentation project.

Reads a method manifest, builds one record per documented method, writes the
records to the JSON Lines method cache and, optionally, reloads the cache to
check that it round-trips.

Usage:
    python run_method_cache.py --manifest docs/methods.yml
    python run_method_cache.py --manifest docs/methods.yml --config cache.yml --verify
    python run_method_cache.py --manifest docs/methods.yml --output-file out/methods.jsonl
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List

from cache.config import METHOD_CACHE_DIR, METHOD_CACHE_FILE
from core.build_report import read_latest_build_report, write_build_report
from core.cache_config import CacheConfig, load_cache_config
from core.method_manifest import load_method_manifest
from core.structured_logging import configure_structured_logging, phase_scope, set_build_id

logger = logging.getLogger(__name__)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Documented method cache builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_method_cache.py --manifest docs/methods.yml\n"
            "  python run_method_cache.py --manifest docs/methods.yml --verify\n"
        ),
    )
    parser.add_argument(
        "--manifest",
        required=True,
        help="YAML/JSON manifest describing namespaces and their methods.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML cache config (cache_dir, fragment_seed, comment_format, strict).",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help=f"Cache file to write. Default: <cache_dir>/{METHOD_CACHE_FILE}",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        default=False,
        help="Reload the written cache and compare names against the build.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=False,
        help="Fail on config problems and malformed cache lines.",
    )
    return parser.parse_args(argv)


def resolve_output_file(config: CacheConfig, output_file: str | None) -> str:
    if output_file:
        return output_file
    cache_dir = config.cache_dir or METHOD_CACHE_DIR
    return os.path.join(cache_dir, METHOD_CACHE_FILE)


def execute_build(
    manifest_path: str,
    config: CacheConfig,
    output_file: str,
    verify: bool = False,
    timings: Dict[str, float] | None = None,
) -> Dict[str, Any]:
    """Run the build/write/verify phases and return the report fields.

    Phase durations land in ``timings`` when a dict is passed.
    """
    from cache.method_cache import load_method_cache, write_method_cache
    from docmodel.builder import populate_session
    from docmodel.comment import PlainCommentParser
    from docmodel.session import BuildSession

    report: Dict[str, Any] = {"manifest": manifest_path, "output_file": output_file}

    with phase_scope("build", timings):
        manifest = load_method_manifest(manifest_path)
        session = BuildSession(
            fragment_seed=config.fragment_seed,
            comment_parser=PlainCommentParser(config.comment_format),
        )
        build_stats = populate_session(session, manifest)
        report["project_name"] = manifest.project_name
        report["build"] = build_stats.to_dict()

    with phase_scope("write_cache", timings):
        records = session.sorted_methods()
        write_stats = write_method_cache(records, output_file, session.comment_parser)
        report["write"] = write_stats.to_dict()

    if verify:
        with phase_scope("verify_cache", timings):
            loaded, load_stats = load_method_cache(output_file, strict=config.strict)
            expected = [record.full_name for record in records]
            actual = [record.full_name for record in loaded]
            mismatches = [
                {"expected": exp, "actual": act}
                for exp, act in zip(expected, actual)
                if exp != act
            ]
            if len(expected) != len(actual):
                mismatches.append({"expected": len(expected), "actual": len(actual)})
            report["verify"] = {**load_stats.to_dict(), "mismatches": mismatches}
            if mismatches:
                logger.error("Cache verification found %d mismatches", len(mismatches))
                report["status"] = "failed"
                return report
            logger.info("Cache verification passed (%d records)", len(actual))

    report["status"] = "success"
    return report


def main(argv: List[str] | None = None) -> None:
    configure_structured_logging(level=logging.INFO)
    args = parse_args(argv)
    build_id = set_build_id()

    report: Dict[str, Any] = {
        "build_id": build_id,
        "pipeline": "method_cache",
        "status": "failed",
    }
    timings: Dict[str, float] = {}
    previous = read_latest_build_report()
    if previous:
        report["previous_build_id"] = previous.get("build_id")
        logger.info(
            "Previous build %s finished with status %s",
            previous.get("build_id"),
            previous.get("status"),
        )
    try:
        config = load_cache_config(args.config, strict=args.strict_config)
        output_file = resolve_output_file(config, args.output_file)
        report.update(
            execute_build(args.manifest, config, output_file, verify=args.verify, timings=timings)
        )
        report_path = write_build_report(report, build_id, phase_timings=timings)
        logger.info("Build report written: %s", report_path)
        if report["status"] == "failed":
            sys.exit(1)
    except Exception as exc:
        report["error"] = str(exc)
        report_path = write_build_report(report, build_id, phase_timings=timings)
        logger.info("Build report written: %s", report_path)
        logger.error("Method cache build failed: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
