"""Session environment and per-client policy for process shells.

procshell.environment
~~~~~~~~~~~~~~~~~~~~~

The session/channel layer hands a :class:`Environment` to
:meth:`procshell.shell.ProcessShell.start`. The resolvers here decide which
variables and terminal modes are actually passed on to the process.
"""

from __future__ import annotations

import dataclasses
import logging
import typing as t

from .constants import PUTTY_SOFTWARE_PREFIX, PUTTY_TTY_OPTIONS, PtyMode

if t.TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class ServerSession(t.Protocol):
    """Session attributes consumed by a process shell."""

    @property
    def client_version(self) -> str | None:
        """Client identification string, e.g. ``SSH-2.0-OpenSSH_9.6``."""
        ...

    @property
    def username(self) -> str | None:
        """Authenticated user name, if known."""
        ...


@dataclasses.dataclass
class Environment:
    """Variables and terminal modes requested by the remote peer.

    Examples
    --------
    >>> env = Environment(env={'USER': 'alice'}, pty_modes={PtyMode.ECHO: 1})
    >>> env.get('USER')
    'alice'
    >>> env.get('HOME') is None
    True
    """

    env: dict[str, str] = dataclasses.field(default_factory=dict)
    pty_modes: dict[PtyMode, int] = dataclasses.field(default_factory=dict)

    def get(self, name: str) -> str | None:
        """Return variable ``name``, or ``None``."""
        return self.env.get(name)


def resolve_shell_environment(env: Mapping[str, str]) -> dict[str, str]:
    """Return the variables to pass to the child process.

    Identity policy; the input mapping is never mutated.

    >>> source = {'USER': 'alice'}
    >>> resolved = resolve_shell_environment(source)
    >>> resolved == source, resolved is source
    (True, False)
    """
    return dict(env)


def is_putty_client(session: ServerSession | None) -> bool:
    """Return True if ``session`` was opened by a PuTTY family client.

    The software part of the identification string
    (``SSH-protoversion-softwareversion comments``) is checked.

    Examples
    --------
    >>> from procshell.test.session import StubSession
    >>> is_putty_client(StubSession(client_version='SSH-2.0-PuTTY_Release_0.81'))
    True
    >>> is_putty_client(StubSession(client_version='SSH-2.0-OpenSSH_9.6'))
    False
    >>> is_putty_client(None)
    False
    """
    if session is None:
        return False
    version = getattr(session, "client_version", None)
    if not version:
        return False
    parts = version.split("-", 2)
    software = parts[2] if len(parts) == 3 else version
    return software.lower().startswith(PUTTY_SOFTWARE_PREFIX)


def resolve_shell_tty_options(
    modes: Mapping[PtyMode, int],
    session: ServerSession | None = None,
) -> dict[PtyMode, int]:
    """Return the terminal modes honored by the stream filters.

    PuTTY clients get :data:`~procshell.constants.PUTTY_TTY_OPTIONS` whatever
    they negotiated; those modes also work with standard clients.

    Examples
    --------
    >>> from procshell.test.session import StubSession
    >>> resolve_shell_tty_options({PtyMode.OCRNL: 1})
    {<PtyMode.OCRNL: 73>: 1}
    >>> putty = StubSession(client_version='SSH-2.0-PuTTY_Release_0.81')
    >>> sorted(resolve_shell_tty_options({PtyMode.OCRNL: 1}, putty))
    [<PtyMode.ICRNL: 36>, <PtyMode.ECHO: 53>, <PtyMode.ONLCR: 72>]
    """
    if is_putty_client(session):
        logger.debug("using PuTTY terminal modes for %s", session)
        return dict(PUTTY_TTY_OPTIONS)
    return dict(modes)


def enabled_modes(
    modes: Mapping[PtyMode, int],
    supported: t.AbstractSet[PtyMode],
) -> frozenset[PtyMode]:
    """Return the ``supported`` modes switched on (non-zero) in ``modes``.

    >>> sorted(enabled_modes({PtyMode.ECHO: 1, PtyMode.ICRNL: 0}, {PtyMode.ECHO}))
    [<PtyMode.ECHO: 53>]
    """
    return frozenset(mode for mode, value in modes.items() if value and mode in supported)
