"""Tests for procshell.environment resolvers."""

from __future__ import annotations

import typing as t

import pytest

from procshell.constants import PUTTY_TTY_OPTIONS, PtyMode
from procshell.environment import (
    Environment,
    enabled_modes,
    is_putty_client,
    resolve_shell_environment,
    resolve_shell_tty_options,
)
from procshell.test.constants import OPENSSH_CLIENT_VERSION, PUTTY_CLIENT_VERSION
from procshell.test.session import StubSession


def test_resolve_shell_environment_does_not_mutate() -> None:
    """The default policy copies its input."""
    source = {"USER": "alice", "LANG": "C.UTF-8"}
    resolved = resolve_shell_environment(source)
    assert resolved == source
    resolved["EXTRA"] = "1"
    assert "EXTRA" not in source


class PuttyClientFixture(t.NamedTuple):
    """Test fixture for is_putty_client()."""

    test_id: str
    client_version: str | None
    expected: bool


PUTTY_CLIENT_FIXTURES: list[PuttyClientFixture] = [
    PuttyClientFixture(
        test_id="putty_release",
        client_version=PUTTY_CLIENT_VERSION,
        expected=True,
    ),
    PuttyClientFixture(
        test_id="putty_snapshot_lowercase",
        client_version="SSH-2.0-putty_snapshot",
        expected=True,
    ),
    PuttyClientFixture(
        test_id="putty_with_comment",
        client_version="SSH-2.0-PuTTY_Release_0.78 Windows",
        expected=True,
    ),
    PuttyClientFixture(
        test_id="openssh",
        client_version=OPENSSH_CLIENT_VERSION,
        expected=False,
    ),
    PuttyClientFixture(
        test_id="putty_in_comment_only",
        client_version="SSH-2.0-OpenSSH_9.6 putty",
        expected=False,
    ),
    PuttyClientFixture(
        test_id="no_version",
        client_version=None,
        expected=False,
    ),
    PuttyClientFixture(
        test_id="empty_version",
        client_version="",
        expected=False,
    ),
]


@pytest.mark.parametrize(
    list(PuttyClientFixture._fields),
    PUTTY_CLIENT_FIXTURES,
    ids=[test.test_id for test in PUTTY_CLIENT_FIXTURES],
)
def test_is_putty_client(
    test_id: str,
    client_version: str | None,
    expected: bool,
) -> None:
    """PuTTY is detected from the software part of the client version."""
    assert is_putty_client(StubSession(client_version=client_version)) is expected


NEGOTIATED_MODES: dict[PtyMode, int] = {
    PtyMode.OCRNL: 1,
    PtyMode.ECHO: 0,
    PtyMode.TTY_OP_ISPEED: 38400,
}


def test_resolve_tty_options_passthrough() -> None:
    """Standard clients keep their negotiated modes."""
    session = StubSession(client_version=OPENSSH_CLIENT_VERSION)
    resolved = resolve_shell_tty_options(NEGOTIATED_MODES, session)
    assert resolved == NEGOTIATED_MODES
    assert resolved is not NEGOTIATED_MODES


def test_resolve_tty_options_without_session() -> None:
    """No session is treated as a standard client."""
    assert resolve_shell_tty_options(NEGOTIATED_MODES) == NEGOTIATED_MODES


@pytest.mark.parametrize(
    "modes",
    [NEGOTIATED_MODES, {}, {PtyMode.ECHO: 1, PtyMode.ICRNL: 1, PtyMode.ONLCR: 1}],
    ids=["negotiated", "empty", "already_putty"],
)
def test_resolve_tty_options_putty(modes: dict[PtyMode, int]) -> None:
    """PuTTY clients always get the fixed mode set."""
    session = StubSession(client_version=PUTTY_CLIENT_VERSION)
    resolved = resolve_shell_tty_options(modes, session)
    assert resolved == PUTTY_TTY_OPTIONS
    resolved[PtyMode.ECHO] = 0
    assert PUTTY_TTY_OPTIONS[PtyMode.ECHO] == 1


def test_enabled_modes() -> None:
    """Only supported modes with a non-zero value are enabled."""
    modes = {PtyMode.ECHO: 1, PtyMode.ICRNL: 0, PtyMode.ONLCR: 5}
    assert enabled_modes(modes, {PtyMode.ECHO, PtyMode.ICRNL}) == {PtyMode.ECHO}


def test_environment_defaults() -> None:
    """Environment defaults are empty and independent."""
    first, second = Environment(), Environment()
    first.env["USER"] = "alice"
    assert second.env == {}
    assert second.pty_modes == {}
    assert first.get("USER") == "alice"
