"""Provide exceptions used by procshell.

procshell.exc
~~~~~~~~~~~~~

Notes
-----
Exceptions in this module inherit from :exc:`ProcShellException`. Programmer
errors are :exc:`ContractViolation`, bad input is :exc:`InvalidArgument` and
process creation problems are :exc:`SpawnFailure`.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Sequence


class ProcShellException(Exception):
    """Base exception for all procshell errors."""


class InvalidArgument(ProcShellException, ValueError):
    """Raised if a caller-supplied value is unusable."""


class EmptyCommand(InvalidArgument):
    """Raised if a shell command has no tokens."""

    def __init__(self, *args: object) -> None:
        super().__init__("No process shell command(s)")


class MissingUserIdentity(InvalidArgument):
    """Raised if the command needs a user name and none could be resolved."""

    def __init__(self, placeholder: str, key: str, *args: object) -> None:
        super().__init__(
            f"Command contains {placeholder} but no value for {key} was resolved",
        )


class ContractViolation(ProcShellException, RuntimeError):
    """Base exception for lifecycle methods called out of order."""


class SessionNotSet(ContractViolation):
    """Raised if a shell is started before a session is bound."""

    def __init__(self, *args: object) -> None:
        super().__init__("No server session bound before start")


class SessionAlreadySet(ContractViolation):
    """Raised if a session is bound to a shell a second time."""

    def __init__(self, *args: object) -> None:
        super().__init__("Server session already set")


class ShellAlreadyStarted(ContractViolation):
    """Raised if a shell is started twice, or its session set after start."""

    def __init__(self, command: str | None = None, *args: object) -> None:
        if command is not None:
            super().__init__(f"Shell already started: {command}")
        else:
            super().__init__("Shell already started")


class ShellNotStarted(ContractViolation):
    """Raised if a process query is made before the shell has started."""

    def __init__(self, command: str | None = None, *args: object) -> None:
        if command is not None:
            super().__init__(f"Shell not started: {command}")
        else:
            super().__init__("Shell not started")


class ShellDestroyed(ContractViolation):
    """Raised if a destroyed shell is started."""

    def __init__(self, command: str | None = None, *args: object) -> None:
        if command is not None:
            super().__init__(f"Shell destroyed before start: {command}")
        else:
            super().__init__("Shell destroyed before start")


class SpawnFailure(ProcShellException, OSError):
    """Raised if the operating system could not create the process."""

    def __init__(self, command: str, *args: object) -> None:
        super().__init__(f"Failed to start process for command: {command}")


class WaitInterrupted(ProcShellException):
    """Raised if waiting for the process exit code was interrupted.

    This is never an exit status; the process may still be running.
    """

    def __init__(self, command: str | None = None, *args: object) -> None:
        if command is not None:
            super().__init__(f"Interrupted while waiting for: {command}")
        else:
            super().__init__("Interrupted while waiting for process exit")


class EnvironmentApplicationError(ProcShellException):
    """Raised internally if resolved variables cannot be applied to the child."""


class StreamCloseError(ProcShellException):
    """Aggregate of errors raised while closing shell streams.

    Examples
    --------
    >>> error = StreamCloseError([OSError("broken pipe"), ValueError("closed")])
    >>> len(error.errors)
    2
    >>> str(error)
    '2 error(s) while closing streams: OSError, ValueError'
    """

    def __init__(self, errors: Sequence[BaseException], *args: object) -> None:
        self.errors = list(errors)
        names = ", ".join(type(e).__name__ for e in self.errors)
        super().__init__(f"{len(self.errors)} error(s) while closing streams: {names}")


class WaitTimeout(ProcShellException):
    """Raised when a function times out waiting for a condition."""
