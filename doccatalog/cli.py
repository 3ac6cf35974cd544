from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .agent_records import convert_directory
from .api_client import ApiClient
from .config import Settings, load_catalog, load_settings
from .errors import ApiError, ConfigError
from .indexer import run_index_build

LOGGER = logging.getLogger(__name__)


def configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def cmd_build_index(args: argparse.Namespace, settings: Settings) -> int:
    catalog_path = args.catalog or settings.catalog_path
    try:
        catalog = load_catalog(catalog_path)
    except ConfigError as exc:
        LOGGER.error("Failed to load catalog: %s", exc)
        return 1
    max_chars = args.max_chars if args.max_chars is not None else settings.max_content_chars
    if max_chars <= 0:
        LOGGER.error("--max-chars must be positive, got %d", max_chars)
        return 1
    report = run_index_build(
        catalog,
        content_root=args.content_root or settings.content_root,
        output_path=args.output or settings.index_path,
        max_chars=max_chars,
    )
    for skipped in report.skipped:
        LOGGER.debug("Skipped %s (%s)", skipped.path, skipped.reason)
    return 0 if report.ok else 1


def cmd_convert_agents(args: argparse.Namespace, settings: Settings) -> int:
    directory = args.dir or settings.agents_dir
    report = convert_directory(
        directory,
        source_suffix=settings.record_suffix,
        target_suffix=settings.normalized_suffix,
    )
    LOGGER.info("Converted %d record(s).", len(report.converted))
    return 0 if report.ok else 1


def cmd_version(args: argparse.Namespace, settings: Settings) -> int:
    client = ApiClient(args.url or settings.api_url, token=settings.api_token)
    try:
        version = client.fetch_version()
    except ApiError as exc:
        LOGGER.error(str(exc))
        return 1
    print(f"v{version}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the documentation search index and normalize agent records.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build-index", help="Write the JSON search index from the catalog.")
    build.add_argument("--catalog", type=Path, help="Catalog YAML/JSON file (default: catalog.yaml)")
    build.add_argument("--content-root", type=Path, help="Directory catalog paths are relative to")
    build.add_argument("--output", type=Path, help="Index output path (default: search_index.json)")
    build.add_argument("--max-chars", type=int, help="Maximum content characters per entry")
    build.set_defaults(func=cmd_build_index)

    convert = subparsers.add_parser(
        "convert-agents",
        help="Convert agent *.yaml records to front-matter markdown (sources are removed).",
    )
    convert.add_argument("--dir", type=Path, help="Directory holding the agent records (default: agents)")
    convert.set_defaults(func=cmd_convert_agents)

    version = subparsers.add_parser("version", help="Query the server version endpoint.")
    version.add_argument("--url", help="Server base URL")
    version.set_defaults(func=cmd_version)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    return args.func(args, load_settings())
