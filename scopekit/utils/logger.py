# file: scopekit/utils/logger.py

import logging
import sys
import os
import psutil
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Protocol


class ConfigLoader(Protocol):
    def section(self, name: str) -> Dict[str, Any]: ...
    def get_data_dir(self) -> Path: ...


CONSOLE_HANDLER_NAME = "scopekit_console_handler"
FILE_HANDLER_NAME = "scopekit_file_handler"
LOG_FILENAME = "scopekit.log"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(mem_rss_mb)4.1fMB] - %(message)s (%(filename)s:%(lineno)d)"


class MemoryLogFilter(logging.Filter):
    """Stamps each record with the resident memory of this process, in MB."""

    def __init__(self):
        super().__init__()
        try:
            self.process = psutil.Process(os.getpid())
        except psutil.NoSuchProcess:
            self.process = None

    def _rss_mb(self) -> float:
        if self.process is None:
            return 0.0
        try:
            return self.process.memory_info().rss / (1024 * 1024)
        except psutil.Error:
            return 0.0

    def filter(self, record):
        record.mem_rss_mb = self._rss_mb()
        return True


def _level_named(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def _install_once(root: logging.Logger, name: str, make: Callable[[], logging.Handler],
                  level: int, formatter: logging.Formatter, memory_filter: MemoryLogFilter) -> bool:
    """Adds the handler built by make() unless one with this name is already installed."""
    if any(h.get_name() == name for h in root.handlers):
        return False
    handler = make()
    handler.set_name(name)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(memory_filter)
    root.addHandler(handler)
    return True


def setup_logging(config_loader: ConfigLoader) -> Path:
    """
    Routes the root logger to stdout and to a rotating file under
    <data dir>/logs, with every line carrying process memory.

    The "logging" section sets the level and the rotation size and count.
    Handlers are named, so a second call only updates the root level.

    Returns:
        Path: The log file.
    """
    settings = config_loader.section("logging")
    level_name = settings.get("level", "INFO")
    level = _level_named(level_name)

    log_file = config_loader.get_data_dir() / "logs" / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    memory_filter = MemoryLogFilter()

    _install_once(root, CONSOLE_HANDLER_NAME, lambda: logging.StreamHandler(sys.stdout),
                  level, formatter, memory_filter)
    _install_once(
        root, FILE_HANDLER_NAME,
        lambda: RotatingFileHandler(
            log_file,
            maxBytes=int(settings.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(settings.get("backup_count", 5)),
            encoding='utf-8',
        ),
        level, formatter, memory_filter,
    )

    logging.info(f"--- Logging initialized at {level_name}, writing to {log_file} ---")
    return log_file
