"""Command-line entry point: ``runner-mock``.

Exit codes:
    0 - clean shutdown (SIGINT/SIGTERM)
    1 - startup failure (invalid configuration, port unavailable)
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Any

from runner_mock import __version__
from runner_mock.application import MockApplication
from runner_mock.config import ConfigLoader
from runner_mock.errors import MockServiceError
from runner_mock.logging import configure_logging
from runner_mock.server import MockServer

logger = logging.getLogger("runner_mock.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runner-mock",
        description="Mock runner-registration service for offline CI tests.",
    )
    parser.add_argument("--config", help="path to a YAML config file")
    parser.add_argument("--host", help="listen address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="listen port (default: 8080)")
    parser.add_argument(
        "--no-auth",
        action="store_true",
        help="accept every request regardless of the Authorization header",
    )
    parser.add_argument("--log-file", help="append request log lines to this file")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="console and file log level",
    )
    parser.add_argument(
        "--log-format",
        choices=["colored", "json", "text"],
        help="console log format",
    )
    parser.add_argument(
        "--partition-by-scope",
        action="store_true",
        help="list only runners registered under the requested org or repo",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command-line flags into a nested config override dict."""
    overrides: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        overrides.setdefault(section, {})[key] = value

    if args.host is not None:
        put("server", "host", args.host)
    if args.port is not None:
        put("server", "port", args.port)
    if args.no_auth:
        put("auth", "enabled", False)
    if args.log_file is not None:
        put("logging", "file", args.log_file)
    if args.log_level is not None:
        put("logging", "level", args.log_level)
    if args.log_format is not None:
        put("logging", "format", args.log_format)
    if args.partition_by_scope:
        put("registry", "partition_by_scope", True)

    return overrides


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader().load(args.config, overrides_from_args(args))
    except MockServiceError as e:
        print(f"runner-mock: {e}", file=sys.stderr)
        return 1

    try:
        configure_logging(config.logging)
    except OSError as e:
        reason = e.strerror or str(e)
        message = f"cannot open log file {config.logging.file}: {reason}"
        print(f"runner-mock: {message}", file=sys.stderr)
        return 1

    server = MockServer(MockApplication(config))

    def handle_signal(signum: int, frame: Any) -> None:
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        server.request_stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        server.run()
    except MockServiceError as e:
        logger.error("%s", e)
        if e.suggestion:
            logger.error("%s", e.suggestion)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
