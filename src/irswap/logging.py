"""Structured logging for swap settlement, built on structlog.

What is specific to irswap:
- Decimal leg amounts and rates, and settlement dates, may be passed to log
  calls as-is. render_domain_values turns them into exact strings, so JSON
  output never goes through float.
- settlement_context binds contract_id and period_end for the duration of one
  period's settlement; every event logged by the calculator, ledger and
  oracle inside it carries both fields.
- Output goes to stderr because irswap-settle prints settlement events as
  JSON on stdout.
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

import structlog


def render_domain_values(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render Decimal as its exact string and dates as ISO-8601."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
    return event_dict


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging, writing to stderr.

    contract_id and period_end bound via structlog.contextvars during a
    settlement are merged into every event. LOG_FORMAT selects the renderer:
    "json" for machine-readable output, "console" (default) otherwise.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_domain_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout is reserved for CLI output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)


@contextmanager
def settlement_context(contract_id: str, period_end: date) -> Iterator[None]:
    """Bind contract_id and period_end to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(
        contract_id=contract_id,
        period_end=period_end,
    ):
        yield
