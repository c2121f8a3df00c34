"""
Logging configuration for SignalDesk.

One stdout handler, one format, configured once by the API factory or
the CLI. Never logs API keys, prompts or raw provider payloads.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request chatter from the server, the provider HTTP clients and the engine.
NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR). At DEBUG
            the third-party request loggers are left at their own levels,
            so outbound provider calls show up in the output.
    """
    root_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    if root_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
