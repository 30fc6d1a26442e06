"""Logging configuration for the extractor.

Console output for humans, daily JSONL files for structured events
(page fetches, chosen extraction method, LLM calls and their token usage).

Usage:
    from godseye.logging_config import get_logger, log_event

    logger = get_logger("fetcher")          # -> "godseye.fetcher"
    log_event("page_fetch", {"url": url, "length": 1234}, logger_name="fetcher")
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "LOG_DIR",
]

LOG_DIR = Path(os.getenv("GODSEYE_LOG_DIR", Path(__file__).parent.parent / "logs"))

PACKAGE_LOGGER = "godseye"

# Client libraries that log every request at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "google_genai")

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"


class EventFileHandler(logging.Handler):
    """Append each record as one JSON line to logs/<prefix>_YYYYMMDD.jsonl.

    Structured fields attached by log_event() are merged into the line, so a
    day's file can be filtered with `jq 'select(.event_type == "llm_call")'`.
    """

    def __init__(self, log_dir: Path, prefix: str = PACKAGE_LOGGER):
        super().__init__(level=logging.DEBUG)
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix

    def path_for(self, when: datetime) -> Path:
        return self.log_dir / f"{self.prefix}_{when:%Y%m%d}.jsonl"

    def to_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        when = datetime.fromtimestamp(record.created)
        entry: Dict[str, Any] = {
            "timestamp": when.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event_type = getattr(record, "event_type", None)
        if event_type:
            entry["event_type"] = event_type
        entry.update(getattr(record, "event_data", None) or {})
        if record.exc_info:
            entry["exception"] = logging.Formatter().formatException(record.exc_info)
        return entry

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = self.to_entry(record)
            line = json.dumps(entry, ensure_ascii=False, default=str)
            with open(self.path_for(datetime.fromtimestamp(record.created)), "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


class LevelColorFormatter(logging.Formatter):
    """Formatter that colours the level column when writing to a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool):
        super().__init__(CONSOLE_FORMAT, datefmt="%H:%M:%S")
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if not color:
            return message
        return message.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper()) if level else logging.INFO
    # Unknown names come back as the string "Level <NAME>"
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Configure the `godseye` logger tree.

    Safe to call more than once: existing handlers on the package logger are
    replaced, not duplicated.

    Args:
        level: Console level, as an int or a name like "DEBUG"
        log_to_file: Also write JSONL events (always at DEBUG)
        log_to_console: Write human-readable lines to stderr
        log_dir: Directory for JSONL files (default: LOG_DIR)

    Returns:
        The package logger
    """
    console_level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if log_to_console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(console_level)
        console.setFormatter(LevelColorFormatter(use_color=sys.stderr.isatty()))
        logger.addHandler(console)

    if log_to_file:
        logger.addHandler(EventFileHandler(log_dir or LOG_DIR))

    # File handler records DEBUG regardless of the console level
    logger.setLevel(logging.DEBUG if log_to_file else console_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Logger inside the package tree; bare names are prefixed with `godseye.`."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def log_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.INFO,
    logger_name: str = PACKAGE_LOGGER,
) -> None:
    """Emit a structured event.

    The optional 'message' key of data becomes the human-readable line;
    everything else lands as top-level fields in the JSONL entry.
    """
    fields = dict(data)
    message = fields.pop("message", event_type)
    get_logger(logger_name).log(
        level,
        message,
        extra={"event_type": event_type, "event_data": fields},
    )
