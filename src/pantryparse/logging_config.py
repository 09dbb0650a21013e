"""Structured logging for the parser.

Every utterance is parsed inside a :class:`LoggingContext` carrying an
utterance id and the resolved locale, so log lines from the tokenizer,
the accumulator and the collaborators can be grouped per utterance.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

from pantryparse.config import get_settings

utterance_id_ctx: ContextVar[str | None] = ContextVar("utterance_id", default=None)
locale_ctx: ContextVar[str | None] = ContextVar("locale", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "utterance_id": utterance_id_ctx,
    "locale": locale_ctx,
}

# Attributes every LogRecord has; anything else on a record came from `extra`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _current_context() -> dict[str, str]:
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    """Context stamped on the record by the adapter, else the live context."""
    context = _current_context()
    for name in _CONTEXT_VARS:
        value = getattr(record, name, None)
        if value:
            context[name] = value
    return context


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line; Chinese text is kept readable."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_context(record),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload["source"] = f"{record.module}:{record.funcName}:{record.lineno}"

        return json.dumps(payload, ensure_ascii=False, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable single-line format for local development."""

    default_format = "%(asctime)s | %(levelname)-8s | %(name)s%(context)s | %(message)s"

    def __init__(self) -> None:
        super().__init__(self.default_format, datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        context = _record_context(record)
        parts = []
        if "utterance_id" in context:
            parts.append(f"utt={context['utterance_id'][:8]}")
        if "locale" in context:
            parts.append(f"locale={context['locale']}")
        record.context = f" [{', '.join(parts)}]" if parts else ""
        return super().format(record)


class ContextLogger(logging.LoggerAdapter):
    """Adapter that stamps the utterance context onto each record."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**_current_context(), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    log_level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Install handlers for applications embedding the parser.

    The library never calls this itself; it only logs through module loggers.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to the
            ``log_level`` setting.
        json_format: Emit JSON lines. When None, JSON is used if ``LOG_FORMAT=json``
            or when output is not a terminal outside development.
        log_file: Also write to this file.
    """
    settings = get_settings()
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stdout.isatty() and not settings.is_development
        )

    level_name = (log_level or settings.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level_name, level = "INFO", logging.INFO

    formatter = StructuredJsonFormatter() if json_format else ContextualFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("pantryparse").setLevel(level)
    logging.getLogger("pantryparse.parse").setLevel(level)
    # Connection chatter from the classifier client
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    get_logger(__name__).info(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


def set_context(utterance_id: str | None = None, locale: str | None = None) -> None:
    """Set context for the current task until cleared."""
    if utterance_id is not None:
        utterance_id_ctx.set(utterance_id)
    if locale is not None:
        locale_ctx.set(locale)


def clear_context() -> None:
    for var in _CONTEXT_VARS.values():
        var.set(None)


class LoggingContext:
    """Scope the utterance context to a ``with`` block, restoring outer values on exit."""

    def __init__(self, utterance_id: str | None = None, locale: str | None = None):
        self.values = {"utterance_id": utterance_id, "locale": locale}
        self._tokens: list[tuple[ContextVar[str | None], Token]] = []

    def __enter__(self) -> "LoggingContext":
        for name, value in self.values.items():
            if value is not None:
                var = _CONTEXT_VARS[name]
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
