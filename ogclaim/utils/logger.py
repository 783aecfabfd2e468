"""
Centralized logging configuration for ogclaim.

All loggers hang off the "ogclaim" root: ogclaim.merkle, ogclaim.snapshot,
ogclaim.generator, ogclaim.registry, ogclaim.claims, ogclaim.storage.*.
Console output is colored and goes to stderr, so command output on stdout
(proof JSON, roots) can be piped. A plain-text file log is optional.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import colorlog


ROOT_LOGGER = "ogclaim"
LOG_FILE_NAME = "ogclaim.log"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def parse_level(level: Union[int, str]) -> int:
    """
    Turn "debug" / "INFO" / "10" / logging.WARNING into a logging level.

    Raises:
        ValueError: unknown level name
    """
    if isinstance(level, int):
        return level
    if level.strip().isdigit():
        return int(level)
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


class OGClaimLogger:
    """Process-wide logging setup for ogclaim components"""

    _initialized = False
    _log_file: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: Union[int, str] = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = True,
    ):
        """
        Attach handlers to the ogclaim root logger. Later calls are no-ops
        until reset().

        Args:
            level: Level name or number
            log_dir: Directory for ogclaim.log (default ./logs)
            log_to_file: Also write a plain-text log file
        """
        if cls._initialized:
            return

        level = parse_level(level)
        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        root_logger.handlers.clear()
        root_logger.addHandler(_console_handler(level))

        if log_to_file:
            directory = Path(log_dir) if log_dir else Path("logs")
            directory.mkdir(parents=True, exist_ok=True)
            cls._log_file = directory / LOG_FILE_NAME
            root_logger.addHandler(_file_handler(cls._log_file, level))

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Child logger for one subsystem (e.g. 'merkle', 'registry').

        Imported library code gets console logging only; the CLI replaces
        it with the configured setup.
        """
        if not cls._initialized:
            cls.setup(log_to_file=False)
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")

    @classmethod
    def log_file(cls) -> Optional[Path]:
        """Path of the active log file, if file logging is on."""
        return cls._log_file

    @classmethod
    def reset(cls):
        """Close and drop handlers so setup() can run again."""
        root_logger = logging.getLogger(ROOT_LOGGER)
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()
        cls._initialized = False
        cls._log_file = None


def get_logger(name: str) -> logging.Logger:
    return OGClaimLogger.get_logger(name)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = True,
):
    """Replace any earlier logging setup"""
    OGClaimLogger.reset()
    OGClaimLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
