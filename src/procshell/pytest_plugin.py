"""procshell pytest plugin."""

from __future__ import annotations

import getpass
import logging
import typing as t

import pytest

from procshell.environment import Environment
from procshell.shell import ProcessShell
from procshell.test.session import StubSession

if t.TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def shell_user_name() -> str:
    """Return the user name placed in :func:`shell_environment`."""
    return getpass.getuser()


@pytest.fixture
def stub_session(shell_user_name: str) -> StubSession:
    """Return a session of a standards-conforming (OpenSSH) client."""
    return StubSession(username=shell_user_name)


@pytest.fixture
def shell_environment(shell_user_name: str) -> Environment:
    """Return an :class:`~procshell.environment.Environment` with ``USER`` set.

    No terminal modes are negotiated, so the process streams pass through
    unchanged.
    """
    return Environment(env={"USER": shell_user_name})


@pytest.fixture
def process_shell(
    request: pytest.FixtureRequest,
    stub_session: StubSession,
) -> t.Callable[..., ProcessShell]:
    """Return a factory of :class:`~procshell.shell.ProcessShell`.

    Every shell created is destroyed at teardown.

    >>> def test_example(process_shell, shell_environment) -> None:
    ...     shell = process_shell(['true'])
    ...     shell.start(shell_environment)
    ...     assert shell.exit_value() == 0
    """
    created: list[ProcessShell] = []

    def factory(
        command: Iterable[str],
        session: StubSession | None = None,
        **kwargs: t.Any,
    ) -> ProcessShell:
        shell = ProcessShell(
            command,
            stub_session if session is None else session,
            **kwargs,
        )
        created.append(shell)
        return shell

    def fin() -> None:
        for shell in created:
            shell.destroy()

    request.addfinalizer(fin)

    return factory
