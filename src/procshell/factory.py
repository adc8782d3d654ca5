"""Factories creating one :class:`~procshell.shell.ProcessShell` per request.

procshell.factory
~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import sys
import typing as t

from .command import CommandSpec
from .shell import ProcessShell

if t.TYPE_CHECKING:
    from collections.abc import Iterable
    from os import PathLike

    from .environment import ServerSession

logger = logging.getLogger(__name__)

#: Interactive login shell used on POSIX systems.
POSIX_INTERACTIVE_COMMAND = ("/bin/sh", "-i", "-l")

#: Command interpreter used on Windows.
WINDOWS_INTERACTIVE_COMMAND = ("cmd.exe",)

WINDOWS_COMMAND_PREFIX = ("cmd.exe", "/C")


def resolve_effective_command(
    command: CommandSpec,
    platform: str | None = None,
) -> CommandSpec:
    """Return the command as it should be spawned on ``platform``.

    Windows commands run through ``cmd.exe /C`` so shell built-ins work.

    Examples
    --------
    >>> resolve_effective_command(CommandSpec(['dir']), platform='win32').tokens
    ('cmd.exe', '/C', 'dir')
    >>> resolve_effective_command(CommandSpec(['cmd.exe']), platform='win32').tokens
    ('cmd.exe',)
    >>> resolve_effective_command(CommandSpec(['ls']), platform='linux').tokens
    ('ls',)
    """
    platform = sys.platform if platform is None else platform
    if platform != "win32":
        return command
    if command[0].lower() == WINDOWS_COMMAND_PREFIX[0]:
        return command
    return CommandSpec((*WINDOWS_COMMAND_PREFIX, *command))


class ProcessShellFactory:
    """Create a fresh shell for each session request.

    Examples
    --------
    >>> factory = ProcessShellFactory(['echo', '$USER'])
    >>> first, second = factory.create_shell(), factory.create_shell()
    >>> first is second
    False
    >>> str(first)
    'echo $USER'
    """

    shell_class: type[ProcessShell] = ProcessShell

    def __init__(
        self,
        command: Iterable[str] | CommandSpec,
        *,
        cwd: str | PathLike[str] | None = None,
    ) -> None:
        if isinstance(command, CommandSpec):
            self.command = command
        else:
            self.command = CommandSpec(command)
        self.cwd = cwd

    def create_shell(self, session: ServerSession | None = None) -> ProcessShell:
        """Return a new, unstarted shell for ``session``."""
        command = resolve_effective_command(self.command)
        logger.debug("creating shell for command: %s", command)
        return self.shell_class(command, session, cwd=self.cwd)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.command.display!r})"


class InteractiveProcessShellFactory(ProcessShellFactory):
    """Factory for the platform's interactive shell."""

    def __init__(self, *, cwd: str | PathLike[str] | None = None) -> None:
        if sys.platform == "win32":
            super().__init__(WINDOWS_INTERACTIVE_COMMAND, cwd=cwd)
        else:
            super().__init__(POSIX_INTERACTIVE_COMMAND, cwd=cwd)
