from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s"
JSON_RENAMES = {"asctime": "timestamp", "levelname": "level"}


class CorrelationIdFilter(logging.Filter):
    """Stamps every record with the checkout run it belongs to."""

    def __init__(self, correlation_id: str):
        super().__init__()
        self._correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = self._correlation_id
        return True


def _json_default(value: object) -> object:
    # Decimal as its exact string
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    log_dir: Path,
    correlation_id: str,
    level: int | str = logging.INFO,
    console: bool = True,
) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)
    utc_day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    text_path = log_dir / f"cartcalc-{utc_day}.log"
    json_path = log_dir / f"cartcalc-{utc_day}.jsonl"

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(_resolve_level(level))

    correlation_filter = CorrelationIdFilter(correlation_id)
    text_formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    json_formatter = jsonlogger.JsonFormatter(fmt=JSON_FORMAT, rename_fields=JSON_RENAMES, json_default=_json_default)

    handlers: list[logging.Handler] = []
    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(text_formatter)
        handlers.append(stream_handler)

    text_handler = logging.FileHandler(text_path, encoding="utf-8")
    text_handler.setFormatter(text_formatter)
    handlers.append(text_handler)

    json_handler = logging.FileHandler(json_path, encoding="utf-8")
    json_handler.setFormatter(json_formatter)
    handlers.append(json_handler)

    for handler in handlers:
        handler.addFilter(correlation_filter)
        root.addHandler(handler)


def get_logger(name: str, correlation_id: str) -> logging.LoggerAdapter:
    base_logger = logging.getLogger(name)
    return logging.LoggerAdapter(base_logger, extra={"correlation_id": correlation_id})
