"""Metadata package for procshell."""

from __future__ import annotations

__title__ = "procshell"
__package_name__ = "procshell"
__version__ = "0.1.0"
__description__ = "Process-backed shell adapter for remote session channels"
__email__ = "procshell@users.noreply.github.com"
__author__ = "procshell contributors"
__github__ = "https://github.com/procshell/procshell"
__docs__ = "https://procshell.readthedocs.io"
__tracker__ = "https://github.com/procshell/procshell/issues"
__pypi__ = "https://pypi.org/project/procshell/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- procshell contributors"
