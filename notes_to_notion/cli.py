from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigurationError, PodConfig, build_pod_config, load_env_file, read_pod_config_file
from .exporter import NotionExportPod
from .notion_client import NotionClient
from .parser import parse_note


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the command-line parser for the exporter CLI."""

    parser = argparse.ArgumentParser(description="Export markdown notes as pages under a Notion page.")
    parser.add_argument("--env", default=".env", help="Path to the .env file with the Notion token.")
    parser.add_argument("--config", help="YAML pod config with connection_id and parent_page_id.")
    parser.add_argument("--connection-id", help="ID of the Notion connected service.")
    parser.add_argument("--parent-page-id", help="ID of the Notion page receiving the exported notes.")
    parser.add_argument("--send", action="store_true", help="Actually create pages in Notion.")
    parser.add_argument(
        "--debug-log",
        action="store_true",
        help="Write full payloads and Notion responses to export.debug.log",
    )
    parser.add_argument("note_paths", nargs="+", help="Markdown files to export.")
    return parser


def resolve_pod_config(args: argparse.Namespace) -> PodConfig:
    """Load the pod config from --config, letting explicit flags override file values."""

    schema = NotionExportPod.config_schema()
    raw = read_pod_config_file(Path(args.config)) if args.config else {}
    if args.connection_id:
        raw["connection_id"] = args.connection_id
    if args.parent_page_id:
        raw["parent_page_id"] = args.parent_page_id
    return build_pod_config(raw, schema)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Entry point invoked by export_notes_to_notion.py or tests. Returns the exit status."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logger = configure_logging()
    debug_logger = configure_debug_logger() if args.debug_log else None

    try:
        pod_config = resolve_pod_config(args)
    except (ConfigurationError, OSError) as exc:
        print(f"[error] {exc}")
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        documents = [parse_note(Path(path)) for path in args.note_paths]
    except OSError as exc:
        print(f"[error] Could not read note: {exc}")
        logger.error("Could not read note: %s", exc)
        return 2
    logger.info("Starting export of %d notes", len(documents))

    if not args.send:
        pod = NotionExportPod(pod_config, client=None)
        conversions, errors = pod.convert_notes(documents)
        for conversion in conversions:
            print(json.dumps(conversion.payload, indent=2))
            if debug_logger:
                debug_logger.info(
                    "Payload for %s:\n%s", conversion.document_id, json.dumps(conversion.payload, indent=2)
                )
        for error in errors:
            print(f"[error] {error}")
        logger.info("Dry-run complete for %d notes", len(documents))
        return 1 if errors else 0

    try:
        env_config = load_env_file(Path(args.env))
    except (ConfigurationError, OSError) as exc:
        print(f"[error] Could not load env file: {exc}")
        logger.error("Could not load env file %s: %s", args.env, exc)
        return 2

    pod = NotionExportPod(pod_config, NotionClient(env_config.token), debug_logger=debug_logger)
    result = asyncio.run(pod.export_notes(documents))

    for outcome in result.created:
        print(f"[info] Created Notion page {outcome.notion_id} for {outcome.document_id}")
        logger.info("Created Notion page for %s at %s", outcome.document_id, outcome.url or outcome.notion_id)
    for error in result.errors:
        print(f"[error] {error}")
        logger.error("Export failed for %s: %s", error.document_id, error)

    if not result.ok:
        print(f"[warn] {len(result.errors)} of {len(documents)} notes failed")
        return 1
    return 0


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))


LOG_PATH = Path(__file__).resolve().parent.parent / "export.log"
DEBUG_LOG_PATH = Path(__file__).resolve().parent.parent / "export.debug.log"
LOGGER_NAME = "notes_to_notion"


def configure_logging() -> logging.Logger:
    """Set up the primary info-level logger that writes to export.log."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    return logger


def configure_debug_logger() -> logging.Logger:
    """Create or return the debug logger that captures payloads/API responses."""

    debug_logger = logging.getLogger(f"{LOGGER_NAME}.debug")
    if not debug_logger.handlers:
        debug_logger.setLevel(logging.INFO)
        handler = logging.FileHandler(DEBUG_LOG_PATH, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [DEBUG] %(message)s"))
        debug_logger.addHandler(handler)
    return debug_logger
