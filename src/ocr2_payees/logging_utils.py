from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.__dict__.get("tx_hash"):
            payload["tx_hash"] = record.__dict__["tx_hash"]
        if record.__dict__.get("context"):
            payload["context"] = record.__dict__["context"]
        return json.dumps(payload, default=str)


class ContextRichHandler(RichHandler):
    """Rich console handler that appends the structured context to the message."""

    def render_message(self, record: logging.LogRecord, message: str):  # type: ignore[override]
        context = record.__dict__.get("context")
        if context:
            message = f"{message} {json.dumps(context, default=str)}"
        return super().render_message(record, message)


def configure_logging(log_level: str = "INFO", log_dir: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Configure console logging and, optionally, a rotating JSON log file.

    Parameters
    ----------
    log_level:
        Logging level name (case insensitive).
    log_dir:
        Directory where ``ocr2_payees.log`` is written. No file is written when omitted.
    console:
        Console the log records are rendered on; defaults to stderr.
    """

    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(
        ContextRichHandler(console=console or Console(stderr=True), rich_tracebacks=True, show_path=False)
    )

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(os.path.join(log_dir, "ocr2_payees.log"), maxBytes=5_000_000, backupCount=5)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)


__all__ = ["ContextRichHandler", "JsonFormatter", "configure_logging"]
