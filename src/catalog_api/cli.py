"""Command line front end: run one catalog query against a database snapshot."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson
from pydantic import ValidationError

from catalog_api.adapters.collection import load_database
from catalog_api.config import Settings
from catalog_api.domain.errors import ApiError
from catalog_api.observability.logging import configure_logging
from catalog_api.observability.metrics import get_metrics
from catalog_api.observability.tracing import configure_trace_exporter
from catalog_api.service_layer.dispatcher import Action, ApiResponse, RequestDispatcher


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-api",
        description="Query a library catalog snapshot the way the v2 API does",
    )
    parser.add_argument("database", type=Path, help="Path to the database JSON snapshot")
    parser.add_argument(
        "action",
        nargs="?",
        default=Action.FIND.value,
        help=f"Action to run: {Action.FIND.value} or {Action.FIND_ONE.value} (default: {Action.FIND.value})",
    )
    parser.add_argument("--collection", help="Collection to query (defaults to the first one in the snapshot)")
    parser.add_argument("--name", help="Name term: literal, comma-separated alternatives, or glob")
    parser.add_argument("--version", dest="version_token", help="Return the files of this version (findOne only)")
    parser.add_argument("--fields", help="Comma-separated fields to return")
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Require an exact name match and attach the ETag header",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra collection filter (repeatable)",
    )
    parser.add_argument("--headers", action="store_true", help="Print response headers along with the data")
    parser.add_argument("--metrics", action="store_true", help="Print Prometheus metrics to stderr after the query")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    return parser


def _parse_filters(parser: argparse.ArgumentParser, raw_filters: Sequence[str]) -> dict[str, str]:
    filters: dict[str, str] = {}
    for raw in raw_filters:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            parser.error(f"--filter expects KEY=VALUE, got {raw!r}")
        filters[key.strip()] = value
    return filters


def build_query(args: argparse.Namespace, filters: dict[str, str]) -> dict[str, str]:
    query = dict(filters)
    for key, value in (("name", args.name), ("version", args.version_token), ("fields", args.fields)):
        if value:
            query[key] = value
    return query


def _dump(payload: object) -> str:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    filters = _parse_filters(parser, args.filters)

    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or settings.log_level, json_output=settings.log_json)
    configure_trace_exporter(settings.get_collector_config())

    try:
        database = load_database(args.database, etags_collection=settings.etags_collection)
        collection = database.get_collection(args.collection)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Cannot load database: %s", exc)
        return 1
    except KeyError as exc:
        logger.error("Unknown collection: %s", exc)
        return 1

    dispatcher = RequestDispatcher.from_settings(settings, etag_store=database.etag_store)
    outcome: dict[str, ApiError | ApiResponse | None] = {}

    def callback(error: ApiError | None, response: ApiResponse | None) -> None:
        outcome["error"] = error
        outcome["response"] = response

    dispatcher.process_request(collection, build_query(args, filters), args.action, args.exact, callback)
    if args.metrics:
        sys.stderr.write(get_metrics().decode("utf-8"))

    error = outcome.get("error")
    if error is not None:
        print(_dump(error.to_dict()), file=sys.stderr)
        return 1

    response = outcome["response"]
    print(_dump(response.model_dump() if args.headers else response.data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
