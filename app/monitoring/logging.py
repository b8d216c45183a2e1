"""
Structured logging for the blog content API.

structlog renders every record, including ones from stdlib loggers created
with ``getLogger(__name__)``:

- development: coloured console lines with rich tracebacks
- test / production: one JSON object per line

Before rendering, each event passes through the sanitizer. It escapes
control characters, masks bearer tokens, emails and card or phone numbers,
and blanks credential headers and secret-looking keys.

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger("app.services.post")
>>> logger.info("Post created", slug="hello-world-post")
"""

from logging import INFO, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.processors import json as struct_json
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger
from pythonjsonlogger.json import JsonFormatter

from app.configs import Settings
from app.utils.helpers import today_str

REDACTED = "[REDACTED]"

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-csrf-token",
    },
)

# Event keys whose values are never logged
SENSITIVE_KEY_PARTS: tuple[str, ...] = ("token", "secret", "password", "authorization")

# Applied in order; JWTs first because they contain dots
PII_PATTERNS: list[tuple[Pattern, str]] = [
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
    (re_compile(r"\b(?:\d{4}[-\s]?){3}\d{4}\b"), "[REDACTED_CC]"),
    # Standalone runs only, so UUIDs and slugs keep their digits
    (re_compile(r"(?<![\w-])\+?[1-9]\d{6,14}(?![\w-])"), "[REDACTED_PHONE]"),
]

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape line breaks and tabs, drop NUL bytes.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """
    Copy of `headers` with credential headers blanked.

    >>> sanitize_headers({"Authorization": "Bearer abc", "Accept": "*/*"})
    {'Authorization': '[REDACTED]', 'Accept': '*/*'}
    """
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_pii(message: str) -> str:
    """
    Mask tokens and personal data inside free text.

    >>> redact_pii("Login from jane@example.com")
    'Login from [REDACTED_EMAIL]'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def _clean(key: str, value: Any) -> Any:
    if _is_sensitive_key(key):
        return REDACTED
    if isinstance(value, str):
        return redact_pii(sanitize_log_message(value))
    if key.lower() == "headers" and isinstance(value, dict):
        return sanitize_headers(value)
    return value


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """
    structlog processor applying `_clean` to every top-level field.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: Event being built.

    Returns:
        The same event, sanitized in place.
    """
    for key, value in event_dict.items():
        event_dict[key] = _clean(key, value)
    return event_dict


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def get_renderer(settings: Settings, *, colors: bool = True) -> Processor:
    """Console renderer in development, JSON lines everywhere else."""
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer(serializer=struct_json.dumps)


def _structlog_chain() -> list[Processor]:
    # Events from structlog loggers, handed to the stdlib formatter at the end
    return [
        filter_by_level,
        merge_contextvars,
        add_logger_name,
        add_log_level,
        PositionalArgumentsFormatter(),
        StackInfoRenderer(),
        format_exc_info,
        UnicodeDecoder(),
        ProcessorFormatter.wrap_for_formatter,
    ]


def _stdlib_chain() -> list[Processor]:
    # Records from plain stdlib loggers
    return [merge_contextvars, add_log_level, add_timestamp, ExtraAdder()]


def _file_handler(path: str) -> RotatingFileHandler:
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
    )
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    return handler


def configure_logging(settings: Settings) -> None:
    """
    Route all logging through one structlog-formatted stream handler.

    With `LOG_TO_FILE` set, records at INFO and above are also written to
    `LOG_FILE` as JSON lines, rotated at 5 MiB.

    Safe to call repeatedly (each app built by `create_app` calls it);
    existing root handlers are closed and replaced.
    """
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=_structlog_chain(),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                sanitize_event_dict,
                get_renderer(settings),
            ],
            foreign_pre_chain=_stdlib_chain(),
        ),
    )
    root.addHandler(handler)

    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(settings.LOG_FILE))


def get_logger(name: str) -> BoundLogger:
    """Structured logger for key-value events."""
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Attach `request_id` to every event logged in the current context."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
