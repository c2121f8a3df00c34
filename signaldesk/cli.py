"""
CLI entry point for SignalDesk.

Usage:
    # Serve the API
    python -m signaldesk.cli serve --port 5000

    # Create the signals table
    python -m signaldesk.cli init-db

    # Delete every stored signal
    python -m signaldesk.cli clear
"""

import argparse
import logging

from signaldesk.core.config import settings
from signaldesk.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("signaldesk.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create the signals table in the configured database."""
    from signaldesk.infrastructure.signals.signal_repository import create_schema
    from signaldesk.interfaces.signals.dependencies import get_db_engine

    create_schema(get_db_engine())
    logger.info("Signals table ready.")


def cmd_clear(args: argparse.Namespace) -> None:
    """Delete the whole signal history."""
    from signaldesk.application.signals.clear_signals import ClearSignalsUseCase
    from signaldesk.infrastructure.signals.signal_repository import (
        SignalRepositoryAdapter,
    )
    from signaldesk.interfaces.signals.dependencies import get_db_engine

    result = ClearSignalsUseCase(SignalRepositoryAdapter(get_db_engine())).execute()
    logger.info("Deleted %d signals.", result.deleted)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SignalDesk CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=5000)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.set_defaults(func=cmd_serve)

    init_parser = subparsers.add_parser("init-db", help="Create the signals table")
    init_parser.set_defaults(func=cmd_init_db)

    clear_parser = subparsers.add_parser("clear", help="Delete all stored signals")
    clear_parser.set_defaults(func=cmd_clear)

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging(level=settings.log_level)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
