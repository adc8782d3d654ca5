"""In-memory session for tests."""

from __future__ import annotations

import dataclasses

from .constants import OPENSSH_CLIENT_VERSION


@dataclasses.dataclass
class StubSession:
    """Minimal :class:`procshell.environment.ServerSession`.

    >>> StubSession()
    StubSession(client_version='SSH-2.0-OpenSSH_9.6', username=None)
    """

    client_version: str | None = OPENSSH_CLIENT_VERSION
    username: str | None = None
