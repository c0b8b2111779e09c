# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for lidbench.

Every log line is one JSON object: timestamp, level, logger name, message,
plus whatever the caller attached through `extra`. Benchmark runs produce a
lot of per-language chatter, and JSON lines are what lets you grep or jq a
run afterwards to find out which language was skipped and why.

How this works:
  - The standard `logging` module does the routing, JsonFormatter does the
    serialization.
  - One handler always writes to stdout, a second one optionally to a file.
  - `get_logger` is the only way loggers get created in this package.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "lidbench.benchmark.corpus", "msg": "...", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came in
# through `extra` and belongs in the JSON output.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     : ISO 8601 UTC timestamp
      level  : log level name
      module : the logger name (usually the Python module path)
      msg    : the formatted message string

    Fields passed through `extra` are merged in. Their keys must not shadow
    LogRecord attributes such as `name` or `msg`; logging refuses those
    with a KeyError. If the record carries an exception, its formatted
    traceback lands under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Package-wide defaults for loggers that don't ask for anything specific.
# configure_logging() changes them once the CLI knows better.
_defaults: dict[str, object] = {"log_level": "INFO", "log_file": None}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _attach_file_handler(logger: logging.Logger, log_file: Path, level: int) -> None:
    resolved = str(log_file.resolve())
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == resolved:
            return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Modules call this once at import time with their `__name__`. Calling it
    again for the same name only updates the level, it never stacks a second
    stdout handler.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Falls back
                   to the package default set by configure_logging().
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level or str(_defaults["log_level"]))
    logger.setLevel(level)

    if log_file is None and _defaults["log_file"] is not None:
        log_file = Path(str(_defaults["log_file"]))

    if not logger.handlers:
        stdout_handler = logging.StreamHandler(stream=sys.stdout)
        stdout_handler.setFormatter(JsonFormatter())
        logger.addHandler(stdout_handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    if log_file is not None:
        _attach_file_handler(logger, log_file, level)

    # Don't propagate to root logger, we handle all output ourselves.
    logger.propagate = False

    return logger


def configure_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Set the package-wide level and optional log file for lidbench loggers.

    Module-level loggers are created at import time, before the CLI has
    parsed --log-level. This updates the ones that already exist and the
    defaults used by every logger created afterwards.
    """
    _resolve_log_level(log_level)
    _defaults["log_level"] = log_level
    _defaults["log_file"] = log_file
    for name in list(logging.Logger.manager.loggerDict):
        if name == "lidbench" or name.startswith("lidbench."):
            get_logger(name, log_level=log_level, log_file=log_file)
