"""Logging setup for the fxa-oauth CLI.

Console output goes through a single stream handler on the root logger.
Alongside it, a DebugLogRecorder keeps every record at DEBUG level so that
a failed command can leave a complete debug log behind.
"""

import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

NOISY_HTTP_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
    "mohawk",
)

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(levelname)s %(name)s %(message)s"

logger = logging.getLogger(__name__)


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


class HttpRequestLogDowngradeFilter(logging.Filter):
    """Downgrade noisy third-party HTTP logs to DEBUG."""

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self.prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            for prefix in self.prefixes:
                if record.name.startswith(prefix):
                    record.levelno = logging.DEBUG
                    record.levelname = logging.getLevelName(logging.DEBUG)
                    break
        return True


class ConsoleLevelFilter(logging.Filter):
    """Let through records at or above a level.

    The root logger stays at DEBUG so the recorder sees everything; this
    filter applies the user's chosen level to the console only.
    """

    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.level


class DebugLogRecorder(logging.Handler):
    """Keep formatted log lines in memory for the debug log."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT))
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        for line in message.strip().splitlines():
            self.lines.append(line.rstrip())

    def clear(self) -> None:
        self.lines.clear()


def normalize_level(level: str | None) -> str:
    """Return a valid level name, defaulting to INFO."""
    parts = (level or "").split()
    name = parts[0].upper() if parts else "INFO"
    return name if name in VALID_LEVELS else "INFO"


def configure_root_logging(level: str = "INFO", stream=None) -> DebugLogRecorder:
    """Install the console handler and the debug recorder on the root logger.

    Returns:
        The recorder, for write_debug_log()
    """
    level = normalize_level(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))
    handler.addFilter(ConsoleLevelFilter(getattr(logging, level)))
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))

    recorder = DebugLogRecorder()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.addHandler(recorder)
    root_logger.setLevel(logging.DEBUG)

    set_noisy_http_logger_levels(level)
    return recorder


def write_debug_log(
    recorder: DebugLogRecorder,
    path: str | os.PathLike[str],
    argv: Sequence[str],
    version: str,
    code: object,
) -> Path:
    """Write the recorded log, plus run context, to path.

    Returns:
        The absolute path of the written file
    """
    target = Path(path).resolve()
    lines = [
        f"ERROR argv {list(argv)}",
        f"ERROR --version {version}",
        f"ERROR code {code}",
        *recorder.lines,
    ]
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return target


def remove_debug_log(path: str | os.PathLike[str]) -> None:
    """Delete a debug log left over from an earlier failed run."""
    Path(path).unlink(missing_ok=True)


__all__ = [
    "NOISY_HTTP_LOGGERS",
    "HttpRequestLogDowngradeFilter",
    "ConsoleLevelFilter",
    "DebugLogRecorder",
    "configure_root_logging",
    "normalize_level",
    "remove_debug_log",
    "set_noisy_http_logger_levels",
    "write_debug_log",
]
