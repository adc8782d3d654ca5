"""Command tokens for a process shell.

procshell.command
~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import logging
import typing as t

from . import exc
from .constants import USER_ENV_KEY, USER_PLACEHOLDER

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class CommandSpec:
    """Ordered, immutable command tokens.

    The tokens are copied from the caller, so mutating the original collection
    never reaches a running shell. Substitution returns a new instance.

    Parameters
    ----------
    tokens : iterable of str
        Command components. A bare string counts as one token.

    Raises
    ------
    :exc:`exc.EmptyCommand`
        If ``tokens`` is ``None`` or empty.

    Examples
    --------
    >>> spec = CommandSpec(['echo', '$USER'])
    >>> spec.tokens
    ('echo', '$USER')
    >>> spec.display
    'echo $USER'
    >>> spec.substitute_user('alice').args
    ['echo', 'alice']

    Empty tokens are kept:

    >>> CommandSpec(['printf', '', 'x']).display
    'printf  x'

    >>> CommandSpec([])
    Traceback (most recent call last):
    ...
    procshell.exc.EmptyCommand: No process shell command(s)
    """

    tokens: tuple[str, ...]
    display: str = dataclasses.field(init=False, repr=False, compare=False)

    def __init__(self, tokens: Iterable[str] | str | None) -> None:
        if tokens is None:
            raise exc.EmptyCommand
        if isinstance(tokens, str):
            tokens = (tokens,)
        copied = tuple(tokens)
        if not copied:
            raise exc.EmptyCommand
        object.__setattr__(self, "tokens", copied)
        object.__setattr__(self, "display", " ".join(copied))

    @classmethod
    def of(cls, *tokens: str) -> CommandSpec:
        """Return a spec from positional tokens.

        >>> CommandSpec.of('ls', '-l').display
        'ls -l'
        """
        return cls(tokens)

    @property
    def args(self) -> list[str]:
        """Return a fresh argument list for :class:`subprocess.Popen`."""
        return list(self.tokens)

    def substitute(self, placeholder: str, value: str) -> CommandSpec:
        """Return a copy with every token equal to ``placeholder`` replaced.

        Parameters
        ----------
        placeholder : str
            Exact token to replace. Partial matches are left alone.
        value : str
            Replacement token.

        Examples
        --------
        >>> CommandSpec(['id', '$USER', 'x$USER']).substitute('$USER', 'bob').tokens
        ('id', 'bob', 'x$USER')
        """
        if placeholder not in self.tokens:
            return self
        return CommandSpec(value if token == placeholder else token for token in self)

    def substitute_user(
        self,
        user: str | None,
        placeholder: str = USER_PLACEHOLDER,
    ) -> CommandSpec:
        """Replace the user placeholder with ``user``.

        Raises
        ------
        :exc:`exc.MissingUserIdentity`
            If the placeholder is present and ``user`` is ``None``.
        """
        if placeholder not in self.tokens:
            return self
        if user is None:
            raise exc.MissingUserIdentity(placeholder, USER_ENV_KEY)
        substituted = self.substitute(placeholder, user)
        logger.debug("substituted %s: %s -> %s", placeholder, self, substituted)
        return substituted

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> str:
        return self.tokens[index]

    def __str__(self) -> str:
        return self.display
