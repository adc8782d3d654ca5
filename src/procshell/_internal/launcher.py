"""Invokable :mod:`subprocess` wrapper for shell processes.

Note
----
This is an internal API not covered by versioning policy.

Examples
--------
:class:`~ProcessLauncher` collects what :class:`subprocess.Popen` needs, can be
inspected and tweaked, then spawns with three unbuffered binary pipes:

>>> launcher = ProcessLauncher(['echo', 'hi'])
>>> launcher.apply_environment({'GREETING': 'hi'}) is None
True
>>> launcher.env['GREETING']
'hi'
>>> proc = launcher.Popen()
>>> proc.stdout.read()
b'hi\\n'
>>> proc.wait()
0
>>> for stream in (proc.stdin, proc.stdout, proc.stderr):
...     stream.close()
"""

from __future__ import annotations

import dataclasses
import logging
import os
import subprocess
import typing as t

from procshell import exc
from procshell.diagnostics import DiagnosticKind, ShellDiagnostic

if t.TYPE_CHECKING:
    from collections.abc import Mapping
    from os import PathLike

logger = logging.getLogger(__name__)


def build_environment(
    variables: Mapping[str, str],
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return ``base`` (default :data:`os.environ`) updated with ``variables``.

    Raises
    ------
    :exc:`procshell.exc.EnvironmentApplicationError`
        If a name or value cannot be passed to a child process.

    Examples
    --------
    >>> build_environment({'USER': 'alice'}, base={'HOME': '/home/alice'})
    {'HOME': '/home/alice', 'USER': 'alice'}

    >>> build_environment({'A=B': 'x'}, base={})
    Traceback (most recent call last):
    ...
    procshell.exc.EnvironmentApplicationError: Illegal environment variable name: 'A=B'
    """
    merged = dict(os.environ if base is None else base)
    for name, value in variables.items():
        if not isinstance(name, str) or not isinstance(value, str):
            msg = f"Environment entries must be str: {name!r}={value!r}"
            raise exc.EnvironmentApplicationError(msg)
        if not name or "=" in name or "\0" in name:
            msg = f"Illegal environment variable name: {name!r}"
            raise exc.EnvironmentApplicationError(msg)
        if "\0" in value:
            msg = f"Illegal value for environment variable {name}"
            raise exc.EnvironmentApplicationError(msg)
        merged[name] = value
    return merged


@dataclasses.dataclass
class ProcessLauncher:
    """Spawn request for a shell process.

    Attributes
    ----------
    args : list of str
        Program and arguments.
    env : dict, optional
        Complete child environment. ``None`` inherits the parent's.
    cwd : str or PathLike, optional
        Working directory of the child.
    """

    args: list[str]
    env: dict[str, str] | None = None
    cwd: str | PathLike[str] | None = None

    def apply_environment(
        self,
        variables: Mapping[str, str],
    ) -> ShellDiagnostic | None:
        """Merge ``variables`` over the inherited environment, best-effort.

        Returns
        -------
        :class:`~procshell.diagnostics.ShellDiagnostic` or None
            Set if the variables could not be applied; ``env`` is then left
            ``None`` so the process starts with the inherited environment.
        """
        if not variables:
            return None
        try:
            self.env = build_environment(variables)
        except Exception as e:
            self.env = None
            return ShellDiagnostic(
                DiagnosticKind.EnvironmentNotApplied,
                f"Failed ({type(e).__name__}) to set environment",
                {"command": subprocess.list2cmdline(self.args)},
                error=e,
            )
        return None

    def Popen(self) -> subprocess.Popen[bytes]:
        """Start the process with piped stdin, stdout and stderr.

        Raises
        ------
        :exc:`procshell.exc.SpawnFailure`
            If the operating system refuses to create the process.
        """
        cmdline = subprocess.list2cmdline(self.args)
        try:
            return subprocess.Popen(
                self.args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
                close_fds=True,
                env=self.env,
                cwd=self.cwd,
            )
        except OSError as e:
            logger.exception("Exception for %s", cmdline)
            raise exc.SpawnFailure(cmdline) from e
