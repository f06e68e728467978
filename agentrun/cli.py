"""
Command-line interface for agentrun.
"""

import argparse
import sys

from agentrun.config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="agentrun - pausable agent runs server")
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    from agentrun.api import start_server
    from agentrun.utils.logging import configure_logging

    configure_logging(args.log_level, settings.json_logs)

    try:
        start_server(
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level.lower(),
        )
    except KeyboardInterrupt:
        print("\nShutting down agentrun server...")
        sys.exit(0)


if __name__ == "__main__":
    main()
