"""
Logging utilities for Quicksilver.

Four verbosity levels are supported:

* ``QUIET``   – errors only
* ``NORMAL``  – progress and success messages
* ``VERBOSE`` – adds per-step details (e.g. assignment summaries)
* ``DEBUG``   – adds per-(task, courier) feasibility decisions

The level can be set programmatically (:func:`setup_logging`) or through the
``QUICKSILVER_LOG_LEVEL`` environment variable.  Once resolved, the effective
level is exported as ``QUICKSILVER_EFFECTIVE_LOG_LEVEL`` so that loggers created
later (or in worker processes) pick up the same configuration.
"""

import logging
import os
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class Colors:
    """ANSI color codes for terminal output."""

    GRAY = "\033[90m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols used to decorate log messages."""

    CHECK = "✓"
    CROSS = "✗"
    ROCKET = "🚀"
    GEAR = "⚙"
    WARNING = "⚠"
    TRUCK = "🚚"
    CLOCK = "⏱"
    PACKAGE = "📦"


_LEVEL_MAP = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

_THIRD_PARTY_LOGGERS = ("urllib3", "asyncio", "httpx", "uvicorn.access", "multipart")


class SimpleFormatter(logging.Formatter):
    """Formatter that colors the whole message according to its level."""

    COLORS = {
        "DEBUG": Colors.GRAY,
        "INFO": Colors.CYAN,
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED + Colors.BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{record.getMessage()}{Colors.RESET}"


class QuicksilverLogger:
    """Process-wide logger registry with level-aware helper methods."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            cls._configure_logger_level(logger, level)

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._configure_logger_level(logger, cls._current_level)
            cls._loggers[name] = logger
        return cls._loggers[name]

    @classmethod
    def _configure_logger_level(cls, logger: logging.Logger, level: LogLevel) -> None:
        """Apply ``level`` unless the environment pins an effective level."""
        env_level = os.getenv("QUICKSILVER_EFFECTIVE_LOG_LEVEL")
        if env_level:
            try:
                level = LogLevel[env_level.upper()]
            except KeyError:
                pass
        logger.setLevel(_LEVEL_MAP.get(level, logging.INFO))

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.GEAR) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("quicksilver.progress").info(
                f"{Colors.CYAN}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("quicksilver.success").info(
                f"{Colors.GREEN}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def info(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("quicksilver.info").info(message)

    @classmethod
    def detail(cls, message: str, prefix: str = "  ") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("quicksilver.detail").info(f"{prefix} {message}")

    @classmethod
    def debug(cls, message: str, logger_name: str = "quicksilver.debug") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str, symbol: str = Symbols.WARNING) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("quicksilver.warning").warning(
                f"{Colors.YELLOW}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        # Errors are shown at every level, including QUIET
        cls.get_logger("quicksilver.error").error(
            f"{Colors.RED}{symbol} {message}{Colors.RESET}"
        )


def suppress_third_party_logs() -> None:
    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root logger and the Quicksilver verbosity level.

    Args:
        level: Explicit level. When omitted, ``QUICKSILVER_LOG_LEVEL`` is
            consulted and ``NORMAL`` is used as the fallback.
    """
    if level is None:
        env_level = os.getenv("QUICKSILVER_LOG_LEVEL", "normal").upper()
        level = LogLevel.__members__.get(env_level, LogLevel.NORMAL)

    os.environ["QUICKSILVER_EFFECTIVE_LOG_LEVEL"] = level.name
    QuicksilverLogger.set_level(level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(SimpleFormatter())
    if level == LogLevel.QUIET:
        handler.setLevel(logging.ERROR)
    elif level == LogLevel.DEBUG:
        handler.setLevel(logging.DEBUG)
    else:
        handler.setLevel(logging.INFO)

    root.addHandler(handler)
    root.setLevel(_LEVEL_MAP.get(level, logging.INFO))
    suppress_third_party_logs()


class ProgressTracker:
    """tqdm-backed progress bar for multi-step CLI runs."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.show_progress = QuicksilverLogger.get_level().value >= LogLevel.NORMAL.value
        self.pbar = None
        if self.show_progress:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.CYAN}{Symbols.ROCKET} Dispatch{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar:30}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is not None:
            if message:
                color = Colors.GREEN if status == "success" else Colors.YELLOW
                symbol = Symbols.CHECK if status == "success" else Symbols.WARNING
                self.pbar.write(f"{color}{symbol} {message}{Colors.RESET}")
            self.pbar.update(1)
        self.current += 1

    def close(self, success: bool = True) -> None:
        if self.pbar is not None:
            if success:
                self.pbar.write(
                    f"\n{Colors.GREEN}{Symbols.CHECK} Dispatch completed successfully!{Colors.RESET}\n"
                )
            else:
                self.pbar.write(
                    f"\n{Colors.RED}{Symbols.CROSS} Dispatch stopped after {self.current}/{len(self.steps)} requests{Colors.RESET}\n"
                )
            self.pbar.close()


def log_progress(message: str, symbol: str = Symbols.GEAR) -> None:
    QuicksilverLogger.progress(message, symbol)


def log_success(message: str, symbol: str = Symbols.CHECK) -> None:
    QuicksilverLogger.success(message, symbol)


def log_info(message: str) -> None:
    QuicksilverLogger.info(message)


def log_detail(message: str, prefix: str = "  ") -> None:
    QuicksilverLogger.detail(message, prefix)


def log_debug(message: str, logger_name: str = "quicksilver.debug") -> None:
    QuicksilverLogger.debug(message, logger_name)


def log_warning(message: str, symbol: str = Symbols.WARNING) -> None:
    QuicksilverLogger.warning(message, symbol)


def log_error(message: str, symbol: str = Symbols.CROSS) -> None:
    QuicksilverLogger.error(message, symbol)
