"""Conftest.py (root-level).

Doctest namespace fixtures live here so pytest's doctest plugin sees them and
conftest.py stays out of the wheel.
"""

from __future__ import annotations

import typing as t

import pytest
from _pytest.doctest import DoctestItem

from procshell.constants import PtyMode
from procshell.environment import Environment
from procshell.shell import ProcessShell
from procshell.test.session import StubSession


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["ProcessShell"] = ProcessShell
        doctest_namespace["Environment"] = Environment
        doctest_namespace["PtyMode"] = PtyMode
        doctest_namespace["StubSession"] = StubSession
