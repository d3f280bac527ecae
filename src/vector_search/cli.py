"""Search a JSON document collection from the command line.

Documents are read from a JSON array or a JSON-lines file. Each entry is either
a string (plain text document) or an object (record document whose keys can be
used as field filters).
"""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
import time
from typing import Any

from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
import orjson
from pydantic import ValidationError

from vector_search.config import Settings, get_settings
from vector_search.domain.documents import Document, SequenceValue, TextDocument
from vector_search.domain.errors import VectorSearchError
from vector_search.domain.search import SearchResult
from vector_search.observability.logging import configure_logging
from vector_search.observability.metrics import init_metrics, write_metrics
from vector_search.observability.tracing import init_tracing
from vector_search.search.engine import VectorSearchEngine
from vector_search.search.indexer import format_number
from vector_search.search.stopwords import configure_stop_words


logger = logging.getLogger(__name__)

SEPARATOR = "=" * 84
EXIT_INPUT_ERROR = 2


class DocumentFileError(VectorSearchError):
    """Raised when a document file cannot be read or parsed."""


def load_documents(path: Path) -> list[Any]:
    """Load raw documents from a JSON array or a JSON-lines file."""

    try:
        data = Path(path).expanduser().read_bytes()
    except OSError as exc:
        raise DocumentFileError(f"Cannot read {path}: {exc}") from exc

    if path.suffix.lower() in {".jsonl", ".ndjson"}:
        documents: list[Any] = []
        for line_number, line in enumerate(data.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                documents.append(orjson.loads(line))
            except orjson.JSONDecodeError as exc:
                raise DocumentFileError(f"{path}:{line_number}: invalid JSON ({exc})") from exc
        return documents

    try:
        payload = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise DocumentFileError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(payload, list):
        raise DocumentFileError(f"{path}: expected a JSON array of documents")
    return payload


def _value_text(value: Any) -> str:
    if isinstance(value, SequenceValue):
        return "\n".join(_value_text(item) for item in value.items)
    raw = value.to_python()
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return format_number(raw)
    return "" if raw is None else str(raw)


def render_document(document: Document) -> str:
    if isinstance(document, TextDocument):
        return document.text
    lines: list[str] = []
    for name, value in document.fields.items():
        text = _value_text(value)
        if isinstance(value, SequenceValue):
            lines.append(f"{name}:\n\n{text}")
        else:
            lines.append(f"{name}:\t{text}")
    return "\n".join(lines)


def render_result(engine: VectorSearchEngine, result: SearchResult) -> str:
    header = f"{result.score}"
    if result.field_key is not None:
        header += f"\t[{result.field_key}]"
    return f"{header}\n{render_document(engine.resolve(result))}"


def _result_payload(engine: VectorSearchEngine, result: SearchResult) -> dict[str, Any]:
    payload = result.model_dump()
    payload["document"] = engine.resolve(result).to_python()
    return payload


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vector-search", description=__doc__)
    parser.add_argument(
        "--stop-words",
        type=Path,
        default=None,
        help="One-word-per-line stop-word file (default: bundled list)",
    )
    parser.add_argument(
        "--language",
        default=None,
        help="Bundled stop-word list to use (default: VECTOR_SEARCH_STOP_WORDS_LANGUAGE or en)",
    )
    parser.add_argument("--log-level", default=None, help="Override VECTOR_SEARCH_LOG_LEVEL")
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Print OpenTelemetry spans and metrics for this run to stderr",
    )
    parser.add_argument(
        "--metrics-file",
        type=Path,
        default=None,
        help="Write Prometheus metrics for this run to a textfile-collector file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Rank documents against a query")
    search.add_argument("documents", type=Path, help="JSON array or JSON-lines document file")
    search.add_argument("query", help="Free-text query")
    search.add_argument(
        "--field",
        action="append",
        dest="fields",
        default=[],
        help="Restrict record documents to this field (repeatable)",
    )
    search.add_argument(
        "--deferred",
        action="store_true",
        help="Run the deferred (event loop) search path instead of the immediate one",
    )
    search.add_argument("--max-results", type=int, default=None, help="Maximum results to print")
    search.add_argument("--json", action="store_true", help="Print results as JSON")

    fields = subparsers.add_parser("fields", help="List record field names usable with --field")
    fields.add_argument("documents", type=Path, help="JSON array or JSON-lines document file")
    return parser


def _run_search(engine: VectorSearchEngine, args: argparse.Namespace, max_results: int) -> int:
    start = time.perf_counter()
    if args.deferred:
        results = asyncio.run(engine.search_async(args.query, args.fields))
    else:
        results = engine.search(args.query, args.fields)
    elapsed_ms = (time.perf_counter() - start) * 1000

    shown = results[:max_results]
    if args.json:
        payload = {
            "query": args.query,
            "fields": args.fields,
            "mode": "deferred" if args.deferred else "immediate",
            "elapsed_ms": elapsed_ms,
            "total": len(results),
            "results": [_result_payload(engine, result) for result in shown],
        }
        print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8"))
        return 0

    print(f"{len(results)} results in {elapsed_ms:.2f}ms")
    for result in shown:
        print()
        print(render_result(engine, result))
        print()
        print(SEPARATOR)
    return 0


def start_telemetry(service_name: str) -> list[Any]:
    """Install console exporters for spans and OTel metrics; return the providers to shut down."""

    tracer_provider = init_tracing(service_name, exporter=ConsoleSpanExporter(out=sys.stderr))
    meter_provider = init_metrics(
        service_name, readers=[PeriodicExportingMetricReader(ConsoleMetricExporter(out=sys.stderr))]
    )
    return [tracer_provider, meter_provider]


def _run(args: argparse.Namespace, settings: Settings) -> int:
    try:
        configure_stop_words(
            language=args.language or settings.stop_words_language,
            path=args.stop_words or settings.stop_words_file,
            extra=settings.get_extra_stop_words(),
        )
        documents = load_documents(args.documents)
        logger.debug("Loaded %d documents from %s", len(documents), args.documents)
        engine = VectorSearchEngine(documents, name=settings.engine_name)
    except VectorSearchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.command == "fields":
        for name in engine.fields():
            print(name)
        return 0

    max_results = args.max_results if args.max_results is not None else settings.max_results
    if max_results < 1:
        print("Error: --max-results must be at least 1", file=sys.stderr)
        return EXIT_INPUT_ERROR
    return _run_search(engine, args, max_results)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    configure_logging(args.log_level or settings.log_level, settings.log_json)

    providers = start_telemetry("vector-search") if args.telemetry else []
    try:
        exit_code = _run(args, settings)
    finally:
        for provider in providers:
            provider.shutdown()

    if exit_code == 0 and args.metrics_file is not None:
        try:
            write_metrics(args.metrics_file)
        except OSError as exc:
            print(f"Error: cannot write metrics to {args.metrics_file}: {exc}", file=sys.stderr)
            return EXIT_INPUT_ERROR
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
