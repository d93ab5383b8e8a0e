# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review for correctness and security.

"""
Command-line interface for asnblock.

This module contains the main entry point and command-line argument handling.
By default it runs the HTTP server; ``--generate ASN`` prints one block-list
to stdout instead.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from asnblock.cache import DEFAULT_CACHE_DIR, BlocklistCache
from asnblock.config import load_config
from asnblock.debug_logger import init_debug_logger, shutdown_debug_logger
from asnblock.errors import CacheIOError, InvalidASNError, NetworkError
from asnblock.network_whois import DEFAULT_MAX_BYTES, DEFAULT_TIMEOUT, WHOIS_HOST, WHOIS_PORT
from asnblock.pipeline import BlocklistPipeline
from asnblock.server import DEFAULT_LISTEN_HOST, DEFAULT_PORT, BlocklistServer
from asnblock.validator import normalize_asn_param

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ASN = 2


def _configure_logging(log_level: str, log_file: Optional[str]) -> None:
    """Configure logging handlers for CLI execution."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


# Hardcoded defaults for config-overridable fields.
# Applied after config merging for any field still set to None.
_HARDCODED_DEFAULTS: Dict[str, Any] = {
    "listen_host": DEFAULT_LISTEN_HOST,
    "port": DEFAULT_PORT,
    "whois_host": WHOIS_HOST,
    "whois_port": WHOIS_PORT,
    "whois_timeout": DEFAULT_TIMEOUT,
    "max_response_bytes": DEFAULT_MAX_BYTES,
    "cache_dir": DEFAULT_CACHE_DIR,
    "log_level": "INFO",
}


def _apply_config_to_args(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """
    Overlay config file values onto a parsed argument namespace.

    Only fields that are still ``None`` (i.e. not explicitly set on the CLI)
    are updated.

    Args:
        args: Namespace returned by ``argparse.ArgumentParser.parse_args()``.
        config: Dictionary of values loaded from the config file.
    """
    for key, value in config.items():
        if hasattr(args, key) and getattr(args, key) is None:
            setattr(args, key, value)


def handle_options(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and validate command-line arguments."""
    parser = argparse.ArgumentParser(
        description="asnblock - Serve eMule/PeerGuardian dat block-lists of the prefixes announced by an ASN",
        epilog="Prefixes come from the RADb whois registry and are cached per ASN under --cache-dir.",
    )
    parser.add_argument(
        "-g",
        "--generate",
        type=str,
        default=None,
        metavar="ASN",
        help="Print the block-list for ASN to stdout and exit instead of serving HTTP",
    )
    parser.add_argument(
        "--listen-host",
        type=str,
        default=None,
        help=f"Address for the HTTP server to bind (default: {DEFAULT_LISTEN_HOST})",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help=f"HTTP port (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--whois-host",
        type=str,
        default=None,
        help=f"Whois registry host (default: {WHOIS_HOST})",
    )
    parser.add_argument(
        "--whois-port",
        type=int,
        default=None,
        help=f"Whois registry port (default: {WHOIS_PORT})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        dest="whois_timeout",
        type=float,
        default=None,
        help=f"Deadline in seconds for one whois session (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--max-response-bytes",
        type=int,
        default=None,
        help=f"Largest whois response accepted (default: {DEFAULT_MAX_BYTES})",
    )
    parser.add_argument(
        "-d",
        "--cache-dir",
        type=str,
        default=None,
        help=f"Directory holding cached block-lists (default: {DEFAULT_CACHE_DIR})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path for persistent logging",
    )
    parser.add_argument(
        "--debug-whois-log",
        type=str,
        default=None,
        help="Write a JSON-lines trace of every whois session to this file",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config file to load instead of ~/.asnblock.conf",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        default=False,
        help="Skip loading the config file",
    )

    args = parser.parse_args(argv)

    # Load and apply config file unless --no-config was given
    if not args.no_config:
        if args.config and not os.path.exists(args.config):
            parser.error(f"Config file '{args.config}' does not exist.")
        try:
            config = load_config(args.config)
            _apply_config_to_args(args, config)
        except (ValueError, ImportError) as exc:
            parser.error(str(exc))

    # Apply hardcoded defaults for any config-overridable field still at None
    for field, default in _HARDCODED_DEFAULTS.items():
        if getattr(args, field, None) is None:
            setattr(args, field, default)

    args.log_level = args.log_level.upper()
    if args.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        parser.error(f"Unsupported log level '{args.log_level}'.")
    if not 0 < args.port <= 65535:
        parser.error("--port must be between 1 and 65535.")
    if not 0 < args.whois_port <= 65535:
        parser.error("--whois-port must be between 1 and 65535.")
    if args.whois_timeout <= 0:
        parser.error("--timeout must be a positive number.")
    if args.max_response_bytes <= 0:
        parser.error("--max-response-bytes must be a positive integer.")
    return args


def build_pipeline(args: argparse.Namespace) -> BlocklistPipeline:
    """Create the pipeline described by parsed arguments."""
    return BlocklistPipeline(
        cache=BlocklistCache(os.path.expanduser(args.cache_dir)),
        whois_host=args.whois_host,
        whois_port=args.whois_port,
        timeout=args.whois_timeout,
        max_bytes=args.max_response_bytes,
    )


def generate_once(pipeline: BlocklistPipeline, raw_asn: str) -> int:
    """Write one block-list to stdout and return the process exit status."""
    try:
        result = pipeline.generate(normalize_asn_param(raw_asn))
    except InvalidASNError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_ASN
    except CacheIOError as exc:
        print(f"Error: Failed to read from cache: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except NetworkError as exc:
        print(f"Error: Failed to fetch IPs: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    sys.stdout.write(result.text)
    sys.stdout.flush()
    logger.debug("Block-list for %s came from %s", result.asn, result.source)
    return EXIT_OK


def run(args: argparse.Namespace) -> int:
    """Run asnblock with parsed arguments."""
    _configure_logging(args.log_level, args.log_file)
    if args.debug_whois_log:
        init_debug_logger(os.path.expanduser(args.debug_whois_log))
    try:
        pipeline = build_pipeline(args)
        if args.generate is not None:
            return generate_once(pipeline, args.generate)
        BlocklistServer(pipeline, host=args.listen_host, port=args.port, log_level=args.log_level).run()
        return EXIT_OK
    finally:
        shutdown_debug_logger()


def main() -> None:
    """Main entrypoint for the CLI - parses arguments and runs the application."""
    args = handle_options()
    sys.exit(run(args))
