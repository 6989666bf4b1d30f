"""Command-line entrypoint for the exporter."""

from __future__ import annotations

import argparse
import logging
import os

from jobs.config import load_config
from jobs.gather_once import main as run_gather_once


def _serve(host: str | None, port: int | None) -> int:
    import uvicorn

    config = load_config()
    logging.basicConfig(level=config.log_level)
    uvicorn.run(
        "api.main:app",
        host=host or config.listen_host,
        port=port or config.listen_port,
        log_level=config.log_level.lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="JSON API exporter")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Serve /metrics for Prometheus")
    serve_parser.add_argument("--host", help="Listen address (defaults to LISTEN_HOST)")
    serve_parser.add_argument("--port", type=int, help="Listen port (defaults to LISTEN_PORT)")

    gather_parser = subparsers.add_parser(
        "gather", help="Run a single gather cycle and print a summary"
    )

    for sub in (serve_parser, gather_parser):
        sub.add_argument(
            "--log-level",
            help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)",
        )

    subparsers.add_parser("list-targets", help="Show the configured target URLs")

    args = parser.parse_args(argv)

    if getattr(args, "log_level", None):
        os.environ["LOG_LEVEL"] = args.log_level

    if args.command == "list-targets":
        for url in load_config().targets:
            print(url)
        return 0

    if args.command == "gather":
        return run_gather_once()

    if args.command == "serve":
        return _serve(args.host, args.port)

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
