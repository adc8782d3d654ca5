"""OpenTelemetry helpers for procshell.

Spans are only recorded when enabled by environment. Without a configured
tracer provider the OpenTelemetry API hands out non-recording spans.
"""

from __future__ import annotations

import contextlib
import logging
import os
import typing as t

from opentelemetry import trace

from .__about__ import __version__

logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if not value:
        return None
    if value in {"1", "true"}:
        return True
    if value in {"0", "false"}:
        return False
    return None


def otel_enabled() -> bool:
    """Return True when span recording is enabled by environment.

    ``PROCSHELL_OTEL`` wins; otherwise an OTLP endpoint variable enables it.

    Examples
    --------
    >>> from procshell.otel import otel_enabled
    >>> _ = otel_enabled()
    """
    flag = _env_flag("PROCSHELL_OTEL")
    if flag is not None:
        return flag
    return bool(
        os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
        or os.environ.get("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    )


@contextlib.contextmanager
def start_span(name: str, **attributes: str | int | bool) -> t.Iterator[t.Any]:
    """Start a span around a shell lifecycle step.

    Examples
    --------
    >>> from procshell.otel import start_span
    >>> with start_span("procshell.test", command="echo"):
    ...     pass
    """
    if not otel_enabled():
        yield None
        return
    tracer = trace.get_tracer("procshell", __version__)
    with tracer.start_as_current_span(name, attributes=attributes) as span:
        yield span


__all__ = [
    "otel_enabled",
    "start_span",
]
