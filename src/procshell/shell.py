"""Process-backed shell for remote session channels.

procshell.shell
~~~~~~~~~~~~~~~

A :class:`ProcessShell` spawns one operating system process for a shell or
command request and exposes its stdin, stdout and stderr through terminal-mode
filters.

Lifecycle: unstarted, running, then terminated with an exit code. Being
destroyed is an independent flag: :meth:`ProcessShell.destroy` may run in any
state, any number of times. The process handle outlives the streams, so
:meth:`ProcessShell.exit_value` keeps working after :meth:`ProcessShell.destroy`.
"""

from __future__ import annotations

import logging
import threading
import typing as t

from . import exc
from ._internal.launcher import ProcessLauncher
from .command import CommandSpec
from .common import close_quietly
from .constants import USER_ENV_KEY
from .diagnostics import DiagnosticKind, ShellDiagnostic
from .environment import (
    Environment,
    resolve_shell_environment,
    resolve_shell_tty_options,
)
from .otel import start_span
from .tty import TtyFilterInputStream, TtyFilterOutputStream

if t.TYPE_CHECKING:
    import subprocess
    import sys
    import types
    from collections.abc import Iterable, Mapping
    from os import PathLike

    from .constants import PtyMode
    from .environment import ServerSession

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

logger = logging.getLogger(__name__)


class ProcessShell:
    """Bridge a session's streams to a locally spawned process.

    Parameters
    ----------
    command : iterable of str or :class:`~procshell.command.CommandSpec`
        Program and arguments. A ``$USER`` token is replaced by the session
        user at start.
    session : :class:`~procshell.environment.ServerSession`, optional
        Owning session. Can also be bound later, once, with
        :meth:`set_session` or :meth:`start`.
    cwd : str or PathLike, optional
        Working directory of the process.

    Examples
    --------
    >>> from procshell.test.session import StubSession
    >>> shell = ProcessShell(['echo', '$USER'], StubSession())
    >>> shell.start(Environment(env={'USER': 'alice'}))
    >>> shell.command.args
    ['echo', 'alice']
    >>> shell.output_stream.read()
    b'alice\\n'
    >>> shell.exit_value()
    0
    >>> shell.destroy()
    >>> shell.exit_value()
    0
    """

    #: Filter class for the process stdout and stderr.
    output_stream_class: type[TtyFilterInputStream] = TtyFilterInputStream

    #: Filter class for the process stdin.
    input_stream_class: type[TtyFilterOutputStream] = TtyFilterOutputStream

    def __init__(
        self,
        command: Iterable[str] | CommandSpec,
        session: ServerSession | None = None,
        *,
        cwd: str | PathLike[str] | None = None,
    ) -> None:
        if isinstance(command, CommandSpec):
            self._command = command
        else:
            self._command = CommandSpec(command)
        self._session = session
        self.cwd = cwd

        self._lock = threading.Lock()
        self._start_attempted = False
        self._destroyed = False
        self._process: subprocess.Popen[bytes] | None = None
        self._exit_status: int | None = None

        self._in: TtyFilterOutputStream | None = None
        self._out: TtyFilterInputStream | None = None
        self._err: TtyFilterInputStream | None = None

        #: Tolerated failures, in the order they happened.
        self.diagnostics: list[ShellDiagnostic] = []

    @property
    def command(self) -> CommandSpec:
        """Command, after user substitution once started."""
        return self._command

    @property
    def session(self) -> ServerSession | None:
        """Owning session."""
        return self._session

    @property
    def process(self) -> subprocess.Popen[bytes] | None:
        """Process handle; kept after :meth:`destroy`."""
        return self._process

    @property
    def input_stream(self) -> TtyFilterOutputStream | None:
        """Bytes written here reach the process stdin."""
        return self._in

    @property
    def output_stream(self) -> TtyFilterInputStream | None:
        """Bytes read here come from the process stdout."""
        return self._out

    @property
    def error_stream(self) -> TtyFilterInputStream | None:
        """Bytes read here come from the process stderr (and echo)."""
        return self._err

    @property
    def destroyed(self) -> bool:
        """Whether :meth:`destroy` has run."""
        return self._destroyed

    def set_session(self, session: ServerSession) -> None:
        """Bind the owning session. Allowed once, before start.

        Raises
        ------
        :exc:`exc.InvalidArgument`
            If ``session`` is ``None``.
        :exc:`exc.ShellAlreadyStarted`
            If the shell was already started.
        :exc:`exc.SessionAlreadySet`
            If a session is already bound.
        """
        if session is None:
            msg = "No server session"
            raise exc.InvalidArgument(msg)
        with self._lock:
            if self._start_attempted:
                raise exc.ShellAlreadyStarted(str(self))
            if self._session is not None:
                raise exc.SessionAlreadySet
            self._session = session

    def start(
        self,
        environment: Environment | None = None,
        session: ServerSession | None = None,
    ) -> None:
        """Spawn the process and bind the streams.

        A shell starts at most once. If spawning fails the shell is unusable
        and should be discarded.

        Parameters
        ----------
        environment : :class:`~procshell.environment.Environment`, optional
            Variables and terminal modes requested by the peer.
        session : :class:`~procshell.environment.ServerSession`, optional
            Binds the session if none is bound yet.

        Raises
        ------
        :exc:`exc.SessionNotSet`
            If no session is bound.
        :exc:`exc.ShellAlreadyStarted`, :exc:`exc.ShellDestroyed`
            If the shell was started before, or destroyed before or while
            starting.
        :exc:`exc.MissingUserIdentity`
            If the command has ``$USER`` and no user name is known.
        :exc:`exc.SpawnFailure`
            If the operating system could not create the process.
        """
        if environment is None:
            environment = Environment()
        with self._lock:
            if self._destroyed:
                raise exc.ShellDestroyed(str(self))
            if self._start_attempted:
                raise exc.ShellAlreadyStarted(str(self))
            if session is not None:
                if self._session is not None and self._session is not session:
                    raise exc.SessionAlreadySet
                self._session = session
            if self._session is None:
                raise exc.SessionNotSet
            self._start_attempted = True

        with start_span("procshell.start", command=str(self)):
            variables = self.resolve_shell_environment(environment.env)
            user = self.resolve_shell_user(variables)
            self._command = self._command.substitute_user(user)

            launcher = ProcessLauncher(self._command.args, cwd=self.cwd)
            diagnostic = launcher.apply_environment(variables)
            if diagnostic is not None:
                self._emit(diagnostic)

            logger.debug(
                "Starting shell with command: %r and env: %s",
                launcher.args,
                sorted(variables),
            )
            process = launcher.Popen()
            with self._lock:
                self._process = process
                destroyed = self._destroyed
            if destroyed:
                logger.debug("Shell %s destroyed while starting", self)
                self._terminate(process)
                close_quietly([process.stdin, process.stdout, process.stderr])
                raise exc.ShellDestroyed(str(self))

            self._bind_streams(process, environment.pty_modes)

    def _bind_streams(
        self,
        process: subprocess.Popen[bytes],
        pty_modes: Mapping[PtyMode, int],
    ) -> None:
        try:
            modes = self.resolve_shell_tty_options(pty_modes)
            self._out = self.output_stream_class(process.stdout, modes)
            self._err = self.output_stream_class(process.stderr, modes)
            self._in = self.input_stream_class(process.stdin, self._err, modes)
        except Exception as e:
            self._emit(
                ShellDiagnostic(
                    DiagnosticKind.StreamBindFailed,
                    f"Failed ({type(e).__name__}) to bind streams",
                    {"command": str(self), "pid": process.pid},
                    error=e,
                ),
            )
            self.destroy()
            # Unwrapped pipes are not reachable through the filters.
            close_quietly([process.stdin, process.stdout, process.stderr])
            raise

    def resolve_shell_environment(self, env: Mapping[str, str]) -> dict[str, str]:
        """Return the variables passed to the process.

        Override to filter, rewrite or add variables.
        """
        return resolve_shell_environment(env)

    def resolve_shell_user(self, variables: Mapping[str, str]) -> str | None:
        """Return the user name substituted for ``$USER`` in the command.

        ``USER`` from the resolved environment wins, then the session's
        ``username``. Removing ``USER`` in :meth:`resolve_shell_environment`
        therefore does not hide the session user; override this method to
        change where the name comes from. ``None`` means no user is known.
        """
        user = variables.get(USER_ENV_KEY)
        if user is None:
            user = getattr(self._session, "username", None)
        return user

    def resolve_shell_tty_options(
        self,
        modes: Mapping[PtyMode, int],
    ) -> dict[PtyMode, int]:
        """Return the terminal modes honored by the stream filters.

        Override for other client compatibility policies.
        """
        return resolve_shell_tty_options(modes, self._session)

    def _require_process(self) -> subprocess.Popen[bytes]:
        process = self._process
        if process is None:
            raise exc.ShellNotStarted(str(self))
        return process

    def is_alive(self) -> bool:
        """Return True while the process runs.

        Raises
        ------
        :exc:`exc.ShellNotStarted`
            If the process was never spawned.
        """
        process = self._require_process()
        if self._exit_status is not None:
            return False
        status = process.poll()
        if status is None:
            return True
        self._exit_status = status
        return False

    def exit_value(self) -> int:
        """Return the process exit code, waiting for the process to exit.

        Once observed the code is kept and returned without blocking. A
        process killed by a signal reports ``-signal``.

        Raises
        ------
        :exc:`exc.ShellNotStarted`
            If the process was never spawned.
        :exc:`exc.WaitInterrupted`
            If the wait was interrupted; the process may still be running.
        """
        process = self._require_process()
        if self._exit_status is not None:
            return self._exit_status
        try:
            status = process.wait()
        except KeyboardInterrupt as e:
            raise exc.WaitInterrupted(str(self)) from e
        self._exit_status = status
        return status

    def destroy(self) -> None:
        """Terminate the process and close the streams.

        Safe before start, more than once, and while another thread waits in
        :meth:`exit_value`. Failures are recorded in :attr:`diagnostics` and
        logged, never raised. The process handle is kept.
        """
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True
            process = self._process

        with start_span("procshell.destroy", command=str(self)):
            closeables: list[t.Any] = [self._in, self._out, self._err]
            if process is not None:
                logger.debug("Destroy process for %s", self)
                self._terminate(process)
                # Raw pipes may not be wrapped yet.
                closeables += [process.stdin, process.stdout, process.stderr]

            errors = close_quietly(closeables)
            if errors:
                error = exc.StreamCloseError(errors)
                self._emit(
                    ShellDiagnostic(
                        DiagnosticKind.StreamCloseFailed,
                        f"{error} while destroying streams of '{self}'",
                        {"command": str(self)},
                        error=error,
                    ),
                )
                for suppressed in errors:
                    logger.debug(
                        "Suppressed %s while destroying streams of '%s': %s",
                        type(suppressed).__name__,
                        self,
                        suppressed,
                    )

    def _terminate(self, process: subprocess.Popen[bytes]) -> None:
        try:
            process.terminate()
        except OSError as e:
            self._emit(
                ShellDiagnostic(
                    DiagnosticKind.TerminateFailed,
                    f"Failed ({type(e).__name__}) to terminate process",
                    {"command": str(self), "pid": process.pid},
                    error=e,
                ),
            )

    def _emit(self, diagnostic: ShellDiagnostic) -> None:
        self.diagnostics.append(diagnostic)
        diagnostic.log(logger)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.destroy()

    def __str__(self) -> str:
        display = self._command.display if self._command else ""
        return display or object.__repr__(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._command.display!r})"
