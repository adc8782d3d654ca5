"""Tests for procshell.factory."""

from __future__ import annotations

import pathlib
import sys

import pytest

from procshell.command import CommandSpec
from procshell.environment import Environment
from procshell.factory import (
    POSIX_INTERACTIVE_COMMAND,
    InteractiveProcessShellFactory,
    ProcessShellFactory,
    resolve_effective_command,
)
from procshell.test.session import StubSession


@pytest.mark.parametrize(
    ("tokens", "platform", "expected"),
    [
        (["dir"], "win32", ("cmd.exe", "/C", "dir")),
        (["CMD.EXE", "/K"], "win32", ("CMD.EXE", "/K")),
        (["ls", "-l"], "linux", ("ls", "-l")),
        (["ls"], "darwin", ("ls",)),
    ],
    ids=["windows_wrapped", "windows_cmd_kept", "linux", "darwin"],
)
def test_resolve_effective_command(
    tokens: list[str],
    platform: str,
    expected: tuple[str, ...],
) -> None:
    """Only Windows commands are wrapped in the command interpreter."""
    assert resolve_effective_command(CommandSpec(tokens), platform).tokens == expected


def test_factory_creates_independent_shells() -> None:
    """Each request gets a new shell bound to its own session."""
    factory = ProcessShellFactory(["echo", "$USER"])
    alice, bob = StubSession(username="alice"), StubSession(username="bob")
    shells = [factory.create_shell(alice), factory.create_shell(bob)]

    outputs = []
    for shell in shells:
        with shell:
            shell.start(Environment())
            assert shell.output_stream is not None
            outputs.append(shell.output_stream.read())
            assert shell.exit_value() == 0

    assert outputs == [b"alice\n", b"bob\n"]
    assert factory.command.tokens == ("echo", "$USER")
    assert repr(factory) == "ProcessShellFactory('echo $USER')"


def test_factory_passes_cwd(tmp_path: pathlib.Path) -> None:
    """The factory working directory reaches the shell."""
    shell = ProcessShellFactory(["pwd"], cwd=tmp_path).create_shell(StubSession())
    assert shell.cwd == tmp_path


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
def test_interactive_factory_posix() -> None:
    """The interactive factory runs a login shell on POSIX."""
    factory = InteractiveProcessShellFactory()
    assert factory.command.tokens == POSIX_INTERACTIVE_COMMAND

    with factory.create_shell(StubSession()) as shell:
        shell.start(Environment())
        assert shell.input_stream is not None
        assert shell.output_stream is not None
        shell.input_stream.write(b"echo procshell-$((40 + 2))\nexit 9\n")
        assert b"procshell-42" in shell.output_stream.read()
        assert shell.exit_value() == 9
