# macdevice/log_config.py
"""
Centralized logging configuration for macdevice.

Library modules only create named loggers. Entry points (the CLI) call
setup_logging() once to attach handlers:
 - a stderr stream handler for diagnostics
 - an optional rotating file handler
"""

import os
import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

# ---------------------------------------------------------------------
# Logging Configuration
# ---------------------------------------------------------------------
# Allow runtime log level control via environment variable
LOG_LEVEL_ENV_VAR = "MACDEVICE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_MARK = "_macdevice_handler"


def _resolve_level(level: Optional[str], debug_mode: bool) -> int:
    if debug_mode:
        return logging.DEBUG
    name = (level or os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(
    level: Optional[str] = None,
    debug_mode: bool = False,
    log_file: Union[str, Path, None] = None,
) -> logging.Logger:
    """Configure project-wide logging with optional debug mode and log file."""
    resolved = _resolve_level(level, debug_mode)

    root = logging.getLogger()
    root.setLevel(resolved)

    # Remove handlers from a previous call (avoid duplicates)
    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)
            h.close()

    formatter = logging.Formatter(LOG_FORMAT)

    # ----------------------------
    # Stream handler (stderr)
    # ----------------------------
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(resolved)
    stream_handler.setFormatter(formatter)
    setattr(stream_handler, _HANDLER_MARK, True)
    root.addHandler(stream_handler)

    # ----------------------------
    # File handler (optional)
    # ----------------------------
    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            # Use rotating handler to prevent huge logs
            file_handler = RotatingFileHandler(
                log_path,
                mode="a",
                maxBytes=5_242_880,  # 5MB
                backupCount=3,
                encoding="utf-8"
            )
        except OSError as e:
            logging.getLogger("macdevice").warning(
                f"Could not open log file {log_path}: {e}; logging to stderr only"
            )
        else:
            file_handler.setLevel(resolved)
            file_handler.setFormatter(formatter)
            setattr(file_handler, _HANDLER_MARK, True)
            root.addHandler(file_handler)

    # Capture Python warnings -> logging
    logging.captureWarnings(True)

    logger = logging.getLogger("macdevice")
    logger.debug(f"Logging initialized at {logging.getLevelName(resolved)}"
                 + (f", writing to {log_file}" if log_file else ""))
    return logger
