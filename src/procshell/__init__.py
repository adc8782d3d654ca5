"""procshell, a process-backed shell adapter for remote session channels."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .command import CommandSpec
from .constants import PtyMode
from .environment import Environment, ServerSession
from .factory import InteractiveProcessShellFactory, ProcessShellFactory
from .shell import ProcessShell

__all__ = (
    "CommandSpec",
    "Environment",
    "InteractiveProcessShellFactory",
    "ProcessShell",
    "ProcessShellFactory",
    "PtyMode",
    "ServerSession",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
)
