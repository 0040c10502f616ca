import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

PACKAGE_PREFIX = "course_intel."
DEFAULT_LOG_LEVEL = "INFO"
MAX_VALUE_LENGTH = 60
CORRELATION_ID_DISPLAY_LENGTH = 8


class LogKeys(str, Enum):
    """Log field keys shared by every course_intel logger."""

    CORRELATION_ID = "correlation_id"
    PLATFORM = "platform"
    TIMESTAMP = "timestamp"
    LOGGER = "logger"
    MESSAGE = "message"
    LEVEL = "level"
    EXTRA = "extra"


_STANDARD_FIELDS = frozenset(key.value for key in (LogKeys.TIMESTAMP, LogKeys.LOGGER, LogKeys.MESSAGE, LogKeys.LEVEL))


def _nest_extra_fields(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Rename ``event`` to ``message`` and move everything else (run and platform tags included) under ``extra``."""
    event_dict[LogKeys.MESSAGE.value] = event_dict.pop("event", "")
    extra = {key: event_dict.pop(key) for key in list(event_dict) if key not in _STANDARD_FIELDS}
    if extra:
        event_dict[LogKeys.EXTRA.value] = extra
    return event_dict


class HumanReadableFormatter:
    """One-line renderer for the CLI and the test suite.

    Format: HH:MM:SS [LEVEL] logger: message <platform> [key=value, ...] [id:correlation]
    """

    def __call__(self, _: WrappedLogger, __: str, event_dict: EventDict) -> str:
        extra = dict(event_dict.get(LogKeys.EXTRA.value, {}))
        platform = extra.pop(LogKeys.PLATFORM.value, "")
        correlation_id = extra.pop(LogKeys.CORRELATION_ID.value, "")

        line = (
            f"{self.format_timestamp(event_dict.get(LogKeys.TIMESTAMP.value, ''))} "
            f"[{event_dict.get(LogKeys.LEVEL.value, 'info').upper()}] "
            f"{self.format_logger_name(event_dict.get(LogKeys.LOGGER.value, ''))}: "
            f"{event_dict.get(LogKeys.MESSAGE.value, '')}"
        )
        if platform:
            line += f" <{platform}>"
        if extra:
            line += " [" + ", ".join(f"{key}={self.format_field_value(value)}" for key, value in extra.items()) + "]"
        if correlation_id:
            line += f" [id:{str(correlation_id)[:CORRELATION_ID_DISPLAY_LENGTH]}]"
        return line

    def format_field_value(self, value: Any) -> str:
        text = str(value)
        return f"{text[: MAX_VALUE_LENGTH - 3]}..." if len(text) > MAX_VALUE_LENGTH else text

    def format_timestamp(self, timestamp: str) -> str:
        if not timestamp:
            return ""
        try:
            return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).strftime("%H:%M:%S")
        except ValueError:
            return ""

    def format_logger_name(self, logger_name: str) -> str:
        """Strip the package prefix and keep at most the last two parts, e.g. "extraction.pipeline"."""
        if not logger_name.startswith(PACKAGE_PREFIX):
            return logger_name
        return ".".join(logger_name[len(PACKAGE_PREFIX) :].split(".")[-2:])


def configure_structlog(testing: bool = False) -> None:
    """Configure structured logging: JSON lines by default, one-line human output for the CLI and tests."""
    level = getattr(logging, os.environ.get("LOGGING_LEVEL", DEFAULT_LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", level=level, stream=sys.stdout)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.contextvars.merge_contextvars,
            _nest_extra_fields,
            structlog.processors.TimeStamper(fmt="iso"),
            HumanReadableFormatter() if testing else structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def clear_context_fields() -> None:
    structlog.contextvars.clear_contextvars()


def bind_context_vars(**kwargs: Any) -> None:
    """Bind run-level fields (correlation id, topic) to every following log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


@contextmanager
def platform_context(platform: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with the platform name."""
    with structlog.contextvars.bound_contextvars(**{LogKeys.PLATFORM.value: platform}):
        yield


def get_logger(name: str = "") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or __name__)  # type: ignore
