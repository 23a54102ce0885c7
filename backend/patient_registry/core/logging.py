"""
Structured logging for Patient Registry.

Log events identify patients by id only. Any event key that would carry a
name, birth date or address is masked before rendering, whatever the caller
passed in.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "patient-registry"

REDACTED = "[redacted]"

# Event keys that hold patient-identifying values
PHI_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "middle_name",
        "date_of_birth",
        "address",
        "address_line1",
        "address_line2",
        "zip_code",
        "firstName",
        "lastName",
        "middleName",
        "dateOfBirth",
        "addressLine1",
        "addressLine2",
        "zipCode",
        "payload",
        "body",
    }
)


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every entry with the service name."""
    event_dict["app"] = APP_NAME
    return event_dict


def redact_phi(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask patient-identifying values."""
    for key in PHI_FIELDS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _build_processors(json_logs: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        redact_phi,
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure structlog on top of the standard library root logger.

    Args:
        log_level: Minimum level name; unknown names fall back to INFO
        json_logs: Render one JSON object per line instead of console output
        log_file: Also append rendered lines to this file
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format="%(message)s", level=level, handlers=handlers, force=True)

    structlog.configure(
        processors=_build_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: str, **fields: str) -> None:
    """Attach request-scoped fields to every event logged while handling it."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically with ``__name__``."""
    return structlog.get_logger(name)
