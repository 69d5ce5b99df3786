"""Centralized logging configuration for offline image patching."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TOOL_OUTPUT_LOGGER = "tool_output"


def setup_logging(
    log_file: Optional[str] = None, level: str = "WARNING"
) -> logging.Logger:
    """Configure console and log file output for a run.

    The log file is truncated so it only holds the current run. The file
    always records DEBUG; ``level`` only controls the console.

    Examples:
        # Console only
        setup_logging(level="INFO")

        # Console + file
        setup_logging("offline_patch.log", level="DEBUG")
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    _reset_handlers(root)

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    try:
        stream_handler.setLevel(getattr(logging, level.upper()))
    except AttributeError:
        stream_handler.setLevel(logging.INFO)  # fallback to INFO
    root.addHandler(stream_handler)

    tool_logger = get_tool_output_logger()
    tool_logger.propagate = False
    tool_logger.setLevel(logging.DEBUG)
    _reset_handlers(tool_logger)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Truncate once; both handlers below append to the same file
        path.write_text("", encoding="utf-8")

        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

        raw_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        raw_handler.setFormatter(logging.Formatter("%(message)s"))
        tool_logger.addHandler(raw_handler)
    else:
        tool_logger.addHandler(logging.NullHandler())

    return root


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def get_tool_output_logger() -> logging.Logger:
    """Get the logger that records raw external tool output."""
    return logging.getLogger(TOOL_OUTPUT_LOGGER)


def get_infrastructure_logger(module_name: str) -> logging.Logger:
    """Get logger for infrastructure modules."""
    return logging.getLogger(f"infrastructure.{module_name}")
