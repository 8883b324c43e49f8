"""Logging setup for commitcraft."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(is_verbose: bool = False) -> None:
    """Send log records to stderr through rich.

    Args:
        is_verbose: Log DEBUG and up instead of WARNING and up.
    """
    log_level = logging.DEBUG if is_verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicate logs if called multiple times
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            level=log_level,
            rich_tracebacks=True,
            show_time=is_verbose,
            show_path=is_verbose,
        )
    )

    # SDK transports are chatty at DEBUG
    for name in ("httpx", "httpcore", "anthropic", "openai", "google_genai"):
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))
