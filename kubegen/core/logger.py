"""Unified logging for kubegen with console and file output."""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

# Log file configuration
LOG_DIR = Path.home() / ".kubegen"
LOG_FILE = LOG_DIR / "kubegen.log"
ROOT_LOGGER = "kubegen"

# Track if file logging has been set up
_file_logging_configured = False


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False):
    """Set up file logging for kubegen operations.

    Args:
        log_file: Path to log file (defaults to ~/.kubegen/kubegen.log)
        verbose: Enable debug-level logging

    Note:
        Creates log directory if it doesn't exist.
        Falls back to /tmp if the home directory is not writable.
    """
    global _file_logging_configured

    if _file_logging_configured:
        return

    target_log_file = Path(log_file) if log_file else LOG_FILE

    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = Path("/tmp/kubegen.log")
        target_log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER)
    file_handler = logging.FileHandler(target_log_file)
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    file_formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    _file_logging_configured = True

    root_logger.info(f"kubegen logging initialized: {target_log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the kubegen hierarchy.

    The Rich console handler sits on the "kubegen" parent logger, so module
    loggers keep an unset level and follow whatever setup_file_logging()
    chose (INFO by default, DEBUG when verbose).

    Args:
        name: Logger name (typically __name__)
    """
    parent = logging.getLogger(ROOT_LOGGER)

    if not any(isinstance(h, RichHandler) for h in parent.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        parent.addHandler(handler)
        if parent.level == logging.NOTSET:
            parent.setLevel(logging.INFO)

    return logging.getLogger(name)
