"""
Centralized logging configuration for Plan Forge.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler

from config import settings

_LOGGING_CONFIGURED = False


def _configure_root_logging() -> None:
    """Configure root logger once so all module loggers print consistently."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Avoid double-adding handlers (e.g. on reload).
    def _has_stream_handler() -> bool:
        for h in root.handlers:
            if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler):
                return True
        return False

    def _has_file_handler(filename: str) -> bool:
        for h in root.handlers:
            if isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", "").endswith(filename):
                return True
        return False

    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    simple_formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if not _has_stream_handler():
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(simple_formatter)
        root.addHandler(console_handler)

    log_path = settings.get_log_path()
    if log_path is not None:
        log_path.mkdir(parents=True, exist_ok=True)
        if not _has_file_handler("plan_forge.log"):
            file_handler = RotatingFileHandler(
                log_path / "plan_forge.log",
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            root.addHandler(file_handler)

    _LOGGING_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a module logger, configuring the root handlers on first use.

    Args:
        name: Name of the logger (typically __name__ of the module)
    """
    _configure_root_logging()
    return logging.getLogger(name)
