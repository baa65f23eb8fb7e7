"""Command-line interface for opsrelay.

Provides the main entry point for running the relay server or the
interactive terminal client.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="opsrelay",
        description="WebSocket relay to a Gemini model and a bash shell",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/opsrelay.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Start the WebSocket relay server")
    client_parser = subparsers.add_parser(
        "client", help="Relay terminal input to a running server's /ops endpoint"
    )
    client_parser.add_argument(
        "--url", type=str, default=None,
        help="WebSocket URL to connect to (default from config: ws://localhost:8080/ops)",
    )

    return parser.parse_args(argv)


def _serve(settings) -> None:
    """Build the provider and run the server until interrupted."""
    import uvicorn

    from opsrelay.model.gemini import GeminiProvider
    from opsrelay.server.app import create_app

    provider = GeminiProvider(
        api_key=settings.require_api_key(),
        model=settings.model.name,
        relax_safety=settings.model.relax_safety,
    )
    app = create_app(provider=provider, settings=settings)
    logger.info("Server starting on %s:%d", settings.server.host, settings.server.port)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the opsrelay CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from opsrelay.config.settings import ConfigError, load_settings
    from opsrelay.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        try:
            _serve(settings)
        except ConfigError as e:
            logger.critical("%s", e)
            sys.exit(1)

    elif args.command == "client":
        from opsrelay.client import run_client

        url = args.url or settings.client.url
        try:
            asyncio.run(run_client(url))
        except OSError as e:
            logger.critical("Failed to connect: %s", e)
            sys.exit(1)
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
