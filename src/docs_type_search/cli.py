"""Command-line entry point: load docs files and rank a query against them.

Example:
    docs-type-search --docs elm/core=docs/core.json "(a -> b) -> List a -> List b"
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson
from pydantic import ValidationError

from docs_type_search.adapters.docs_loader import load_docs_file
from docs_type_search.config import Settings
from docs_type_search.domain.errors import DocsLoadError
from docs_type_search.domain.model import NamedEntry
from docs_type_search.observability.logging import configure_logging
from docs_type_search.observability.metrics import get_metrics, init_metrics
from docs_type_search.observability.tracing import init_tracing
from docs_type_search.service_layer.search_service import PackageLoadReport, SearchService


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-type-search",
        description="Search package documentation by name or by type signature",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Name fragment (e.g. 'map') or type signature (e.g. 'a -> List a')",
    )
    parser.add_argument(
        "--docs",
        action="append",
        required=True,
        metavar="[PACKAGE=]PATH",
        help="docs.json file to index; repeat for more packages",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        help="Maximum results to print (defaults to DOCS_TYPE_SEARCH_MAX_RESULTS)",
    )
    parser.add_argument(
        "--chunks",
        action="store_true",
        help="Print each module's documentation chunks instead of searching",
    )
    parser.add_argument(
        "--metrics-file",
        type=Path,
        help="Write Prometheus metrics for this run to a file (textfile collector format)",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level",
    )
    return parser


def parse_docs_argument(value: str) -> tuple[str, Path]:
    """Split ``PACKAGE=PATH``; a bare path uses its parent directory or stem as the package id."""
    package_id, sep, raw_path = value.partition("=")
    if sep:
        return package_id, Path(raw_path)
    path = Path(value)
    if path.stem == "docs" and path.parent.name:
        return path.parent.name, path
    return path.stem, path


def _validate_args(args: argparse.Namespace) -> None:
    if args.max_results is not None and args.max_results < 1:
        raise ValueError("--max-results must be >= 1")
    if not args.chunks and not args.query.strip():
        raise ValueError("A query is required unless --chunks is given")


def _load_packages(service: SearchService, docs_args: Sequence[str]) -> list[PackageLoadReport]:
    reports: list[PackageLoadReport] = []
    for value in docs_args:
        package_id, path = parse_docs_argument(value)
        modules = load_docs_file(path)
        reports.append(service.load_package(package_id, modules))
    return reports


def _write_line(payload: dict) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode("utf-8") + "\n")


def _print_chunks(service: SearchService, reports: Sequence[PackageLoadReport]) -> None:
    for report in reports:
        for module in service.module_chunks(report.package_id):
            chunks = [
                {"entry": chunk.entry_name} if isinstance(chunk, NamedEntry) else {"prose": chunk.text}
                for chunk in module.chunks
            ]
            _write_line({"package": report.package_id, "module": module.module_name, "chunks": chunks})


def _print_results(service: SearchService, query: str, max_results: int | None) -> None:
    response = service.search(query, max_results)
    for result in response.results:
        _write_line(result.model_dump())
    if response.stats:
        logger.info(
            "%s search for %r: %d of %d entries",
            response.stats.mode,
            query,
            response.stats.matches,
            response.stats.candidates,
        )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        sys.stderr.write(f"Invalid configuration: {exc}\n")
        return 1

    configure_logging(args.log_level or settings.log_level, settings.log_json)
    init_tracing(settings.service_name)
    init_metrics(settings.service_name)

    try:
        _validate_args(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    service = SearchService(settings)
    try:
        reports = _load_packages(service, args.docs)
    except (DocsLoadError, ValueError) as exc:
        logger.error("Failed to load docs: %s", exc)
        return 1

    for report in reports:
        if report.modules_failed:
            logger.warning(
                "Package %s indexed partially; skipped modules: %s",
                report.package_id,
                ", ".join(report.modules_failed),
            )

    if args.chunks:
        _print_chunks(service, reports)
    else:
        _print_results(service, args.query, args.max_results)

    if args.metrics_file:
        try:
            args.metrics_file.write_bytes(get_metrics())
        except OSError as exc:
            logger.error("Failed to write metrics: %s", exc)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
