"""structlog wiring driven by :class:`~cdata_issuer.config.LoggingConfig`."""
from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, Optional, TextIO

import structlog

from .config import LoggingConfig

PACKAGE_LOGGER = "cdata_issuer"


def _component(logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict.setdefault("component", getattr(logger, "name", None) or PACKAGE_LOGGER)
    return event_dict


def configure_logging(config: Optional[LoggingConfig] = None, *, stream: Optional[TextIO] = None) -> None:
    """Route the package's structlog events to ``stream`` (stdout by default).

    Only the ``cdata_issuer`` stdlib logger gets a handler, so the host
    application's root logging setup is left alone. In JSON mode each record
    is one line with ``ts``, ``level``, ``msg`` and ``component`` plus the
    bound context; otherwise structlog's console renderer is used.
    """

    settings = config or LoggingConfig()
    level = getattr(logging, settings.normalized_level())
    target = stream or sys.stdout

    handler = logging.StreamHandler(target)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    processors: list[Any] = [
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.stdlib.add_log_level,
        _component,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.json_output:
        processors += [structlog.processors.EventRenamer("msg"), structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=target.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


__all__ = ["PACKAGE_LOGGER", "configure_logging"]
