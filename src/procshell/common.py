"""Helper functions for procshell.

procshell.common
~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class Closeable(t.Protocol):
    """Anything with a ``close()`` method."""

    def close(self) -> None:
        """Release the resource."""
        ...


def close_quietly(closeables: Iterable[Closeable | None]) -> list[Exception]:
    """Close every item, collecting failures instead of raising.

    ``None`` entries are skipped. A failure never stops the remaining closes.

    Returns
    -------
    list of Exception
        Errors raised by ``close()``, in order.

    Examples
    --------
    >>> import io
    >>> class Broken:
    ...     def close(self):
    ...         raise OSError("broken pipe")
    >>> ok = io.BytesIO()
    >>> errors = close_quietly([Broken(), None, ok])
    >>> [str(e) for e in errors], ok.closed
    (['broken pipe'], True)
    """
    errors: list[Exception] = []
    for closeable in closeables:
        if closeable is None:
            continue
        try:
            closeable.close()
        except Exception as e:
            errors.append(e)
    return errors
