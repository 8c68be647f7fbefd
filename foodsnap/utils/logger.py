"""Logging for FoodSnap.

One "foodsnap" logger, written to stdout as colored text or as JSON lines.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Services tag their records through `extra=` with the pipeline step
(`operation`: recognise, recipe, illustrate) and, where a model answer was
parsed, the parsing `strategy` that produced the result. Both formatters
show these when present.
"""

import json
import logging
import os
import sys
from typing import Any

CONTEXT_FIELDS = ("operation", "strategy")


def log_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the FoodSnap context fields set on a record."""
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if getattr(record, name, None) is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger, message, any context
            fields, and the traceback when one is attached.
        """
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **log_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class RichTextFormatter(logging.Formatter):
    """Colored single-line text with a per-level icon and a [operation/strategy] tag."""

    STYLES = {
        "DEBUG": ("\033[36m", "🔍"),
        "INFO": ("\033[32m", "🍳"),
        "WARNING": ("\033[33m", "⚠️"),
        "ERROR": ("\033[31m", "❌"),
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color, icon = self.STYLES.get(record.levelname, (self.RESET, ""))
        context = log_context(record)
        tag = f"[{'/'.join(str(v) for v in context.values())}] " if context else ""

        timestamp = self.formatTime(record, "%H:%M:%S")
        line = f"{color}{icon} {timestamp} {record.levelname:<8} {tag}{record.getMessage()}{self.RESET}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching a stdout handler on first use."""
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    json_output = os.getenv("LOG_TYPE", "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_output else RichTextFormatter())

    logger_instance.setLevel(level)
    logger_instance.addHandler(handler)
    return logger_instance


logger = get_logger("foodsnap")

# SDK and HTTP client request chatter
for _name in ("google_genai", "httpx", "aiohttp"):
    logging.getLogger(_name).setLevel(logging.WARNING)
