"""Helpers for testing procshell and downstream session layers."""

from __future__ import annotations

from .retry import retry_until
from .session import StubSession

__all__ = ["StubSession", "retry_until"]
