"""
Logging system for expression validation.
Provides human-readable console logs and optional file output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

ANSI_RESET = "\033[0m"

# Level name color on the console; messages stay uncolored
LEVEL_COLORS = {
    logging.DEBUG: "\033[96m",     # cyan
    logging.INFO: "\033[92m",      # green
    logging.WARNING: "\033[93m",   # yellow
    logging.ERROR: "\033[91m",     # red
    logging.CRITICAL: "\033[1;91m",
}

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    def __init__(self):
        super().__init__(CONSOLE_FORMAT, datefmt="%H:%M:%S")

    def format(self, record):
        # Format a copy so file handlers sharing the record stay uncolored
        record = logging.makeLogRecord(record.__dict__)
        color = LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{record.levelname}{ANSI_RESET}"
        return super().format(record)


class ValidationLogger:
    """
    Central logging system for expression validation.

    Features:
    - Console output with colors
    - Optional daily log file (plain text) when a log directory is set
    - Separate channel for evaluation errors
    """

    _instance: Optional['ValidationLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: Optional[str] = None, log_level: str = "INFO"):
        if ValidationLogger._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._configure("expression_validation", log_level, "validation")
        self.error_logger = self._configure("expression_validation.errors", "ERROR", "errors")

        ValidationLogger._initialized = True

    def _configure(self, name: str, level: str, file_prefix: str) -> logging.Logger:
        """Attach a console handler, plus a daily file handler when log_dir is set."""
        logger = logging.getLogger(name)
        logger.setLevel(level.upper())
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = False

        console = logging.StreamHandler()
        console.setFormatter(ColoredFormatter())
        logger.addHandler(console)

        if self.log_dir is not None:
            day = datetime.now().strftime("%Y%m%d")
            handler = logging.FileHandler(self.log_dir / f"{file_prefix}_{day}.log", encoding="utf-8")
            handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(handler)

        return logger

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message (also to the errors file when logging to disk)."""
        self.main_logger.error(msg, *args, **kwargs)
        if self.log_dir is not None:
            self.error_logger.error(msg, *args, **kwargs)

    def outcome(self, expression: str, success: bool, member: Optional[str] = None, **fields):
        """
        Log a validation outcome as one pipe-separated line.

        Successes go to DEBUG, failures to INFO.

        Args:
            expression: Normalized expression that was evaluated
            success: Whether the invariant held
            member: Member name under validation (optional)
            **fields: Extra key=value pairs appended to the line
        """
        line = ["[VALID]" if success else "[INVALID]", f"expr={expression!r}"]
        if member is not None:
            line.append(f"member={member}")
        line.extend(f"{key}={value}" for key, value in fields.items())

        level = logging.DEBUG if success else logging.INFO
        self.main_logger.log(level, " | ".join(line))


# Global logger instance
_logger: Optional[ValidationLogger] = None


def get_logger(log_dir: Optional[str] = None, log_level: Optional[str] = None) -> ValidationLogger:
    """
    Get or create the global logger instance.

    Unset arguments fall back to the LOG_DIR / LOG_LEVEL configuration.
    """
    global _logger
    if _logger is None:
        if log_dir is None or log_level is None:
            from ..config.config import get_config
            log_config = get_config().log
            log_dir = log_dir if log_dir is not None else log_config.log_dir
            log_level = log_level if log_level is not None else log_config.level
        _logger = ValidationLogger(log_dir, log_level)
    return _logger


def setup_logger(log_dir: Optional[str] = None, log_level: str = "INFO") -> ValidationLogger:
    """Initialize the logger with custom settings, replacing any existing one."""
    global _logger
    ValidationLogger._initialized = False
    ValidationLogger._instance = None
    _logger = ValidationLogger(log_dir, log_level)
    return _logger
