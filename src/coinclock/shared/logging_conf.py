# src/coinclock/shared/logging_conf.py
"""
Logging Configuration - Root Logger Setup for the Service

Installs the handlers every coinclock logger propagates to: stdout for
supervisors that collect console output, and a size-rotated file when
LOG_FILE or LOG_DIR is configured. Uvicorn is started with log_config=None
so its loggers share these handlers too.

Files that USE this module:
- coinclock.app (main() calls setup_logging with values from Settings)

Files that this module USES:
- None (stdlib logging only)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "coinclock.log"

PathLike = Union[str, Path]


def resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """
    Pick the log file location; log_dir wins and gets the fixed file name.

    Returns:
        Path of the log file with its parent created, or None for no file logging
    """
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def build_handlers(
    log_path: Optional[Path],
    log_stdout: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if log_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_path is not None:
        handlers.append(
            RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )
    if not handlers:
        # stdout off and no file configured: errors still have to go somewhere
        handlers.append(logging.StreamHandler(sys.stderr))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_stdout: bool = True,
) -> None:
    """
    Replace the root logger's handlers and set its level.

    Args:
        level: Level name, case-insensitive (already validated by Settings)
        log_file: Rotating log file path
        log_dir: Directory for coinclock.log; takes precedence over log_file
        max_bytes: Size at which the file is rotated
        backup_count: Rotated files to keep
        log_stdout: Whether to log to stdout
    """
    log_path = resolve_log_path(log_file, log_dir)
    handlers = build_handlers(log_path, log_stdout, max_bytes, backup_count)

    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger(__name__).info(
        "Logging configured: level=%s, stdout=%s, file=%s", level.upper(), log_stdout, log_path
    )
