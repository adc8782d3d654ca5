"""Structured diagnostics for best-effort failure paths.

procshell.diagnostics
~~~~~~~~~~~~~~~~~~~~~

Failures that never abort a shell (environment injection, terminating the
process, closing streams) are recorded as :class:`ShellDiagnostic` events on
the shell and logged as they are emitted.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import typing as t

logger = logging.getLogger(__name__)


class DiagnosticKind(enum.Enum):
    """Kinds of tolerated failures."""

    EnvironmentNotApplied = "ENVIRONMENT_NOT_APPLIED"
    TerminateFailed = "TERMINATE_FAILED"
    StreamCloseFailed = "STREAM_CLOSE_FAILED"
    StreamBindFailed = "STREAM_BIND_FAILED"


DIAGNOSTIC_LOG_LEVEL_MAP: dict[DiagnosticKind, int] = {
    DiagnosticKind.EnvironmentNotApplied: logging.WARNING,
    DiagnosticKind.TerminateFailed: logging.DEBUG,
    DiagnosticKind.StreamCloseFailed: logging.DEBUG,
    DiagnosticKind.StreamBindFailed: logging.WARNING,
}


@dataclasses.dataclass(frozen=True)
class ShellDiagnostic:
    """A tolerated failure and the context it happened in.

    Examples
    --------
    >>> d = ShellDiagnostic(
    ...     DiagnosticKind.EnvironmentNotApplied,
    ...     "Failed to set environment",
    ...     {"command": "echo hi"},
    ...     error=TypeError("bad value"),
    ... )
    >>> str(d)
    'ENVIRONMENT_NOT_APPLIED: Failed to set environment (TypeError: bad value)'
    """

    kind: DiagnosticKind
    message: str
    context: t.Mapping[str, t.Any] = dataclasses.field(default_factory=dict)
    error: BaseException | None = None

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.message}"
        if self.error is not None:
            text += f" ({type(self.error).__name__}: {self.error})"
        return text

    def log(self, log: logging.Logger | None = None) -> None:
        """Write the event to ``log`` at the level for its kind."""
        log = log or logger
        level = DIAGNOSTIC_LOG_LEVEL_MAP[self.kind]
        log.log(level, "%s context=%s", self, dict(self.context))
        if self.error is not None and log.isEnabledFor(logging.DEBUG):
            log.debug("%s failure details", self.kind.value, exc_info=self.error)
