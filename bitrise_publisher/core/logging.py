"""Structured logging via structlog.

Configures structlog once at process startup. Library modules log through
`logging.getLogger(__name__)`; `configure_structlog()` installs one stdout
handler on the root logger whose `ProcessorFormatter` runs those records
through the same processors as structlog events, so they carry
`transfer_key` too.

Renderer selection:
  debug=True  — `ConsoleRenderer` with colours for local runs.
  debug=False — `JSONRenderer` for CI log collectors.

ContextVar injection:
  The orchestrator binds the key of the current publish/fetch with
  `bind_transfer_key()`, and every structlog event carries it as
  `transfer_key` until the context manager exits.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

import structlog

_transfer_key_var: ContextVar[str] = ContextVar("transfer_key", default="")


def get_transfer_key() -> str:
    """Return the key of the transfer in progress, or empty string if none."""
    return _transfer_key_var.get()


@contextmanager
def bind_transfer_key(key: str) -> Iterator[None]:
    token = _transfer_key_var.set(key)
    try:
        yield
    finally:
        _transfer_key_var.reset(token)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject transfer_key from the ContextVar."""
    transfer_key = get_transfer_key()
    if transfer_key:
        event_dict["transfer_key"] = transfer_key
    return event_dict


HANDLER_NAME = "bitrise_publisher"


def configure_structlog(debug: bool = False) -> None:
    """Configure structlog and the stdlib root logger for the process lifetime.

    Calling multiple times is safe: the handler installed by a previous call
    is replaced rather than duplicated.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Records from logging.getLogger(__name__) run through the same chain.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    # httpx logs every request at INFO; keep it at WARNING outside debug.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
