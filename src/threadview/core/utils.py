"""Utility functions for the threadview client."""

import logging
import os
import sys
import uuid
from datetime import datetime
from typing import Optional

from rich.markup import escape


def make_session_id() -> str:
    """Generate a short 8-character UUID for session tracking."""
    return str(uuid.uuid4())[:8]


def _get_log_level() -> int:
    """Get log level from THREADVIEW_LOG_LEVEL environment variable.

    Supports: DEBUG, INFO, WARNING, ERROR (case-insensitive).
    Defaults to INFO if not set or invalid.

    Returns:
        Logging level constant
    """
    level_str = os.environ.get("THREADVIEW_LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(level_str, logging.INFO)


def setup_logger(
    session_id: str,
    trigger_type: str = "cli",
    detached_mode: bool = False,
) -> logging.Logger:
    """Set up the ``threadview`` logger to write to a session file and the console.

    The file always captures DEBUG. The console handler honours
    THREADVIEW_LOG_LEVEL and is skipped entirely in detached mode, which the
    TUI uses so log lines never draw over the screen.

    Args:
        session_id: The session ID
        trigger_type: Logical source of the run (e.g., "tui", "cli")
        detached_mode: If True, disable console handler

    Returns:
        Configured logger instance
    """
    logs_root = os.environ.get("THREADVIEW_LOG_DIR", os.path.join(os.getcwd(), ".threadview/logs"))
    log_dir = os.path.join(logs_root, session_id, trigger_type)
    os.makedirs(log_dir, exist_ok=True, mode=0o755)

    log_file = os.path.join(log_dir, "session.log")

    # Package logger so module loggers (threadview.core.client, ...) propagate here
    logger = logging.getLogger("threadview")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    logger.addHandler(file_handler)

    if not detached_mode:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_get_log_level())
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    logger.info(f"Threadview logger initialized - ID: {session_id} (detached={detached_mode})")
    logger.debug(f"Log file: {log_file}")

    return logger


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a comment timestamp for display in local time.

    Returns an empty string when the service sent no timestamp.
    """
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M:%S")


def escape_markup(text: str) -> str:
    """Escape console markup in user-supplied text."""
    return escape(text)


def truncate(text: str, limit: int = 100) -> str:
    """Shorten text for previews, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
