"""Terminal-mode aware stream filters.

procshell.tty
~~~~~~~~~~~~~

Binary decorators around the raw pipes of a shell process that apply the
negotiated output and input modes (newline translation and echo).
"""

from __future__ import annotations

import io
import logging
import threading
import typing as t

from .constants import INPUT_TRANSLATION_MODES, OUTPUT_TRANSLATION_MODES, PtyMode
from .environment import enabled_modes

if t.TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CR = 0x0D
LF = 0x0A


class TtyFilterInputStream(io.RawIOBase):
    """Readable filter for bytes going from the process to the peer.

    Examples
    --------
    >>> raw = io.BytesIO(b"one\\ntwo\\r\\n")
    >>> TtyFilterInputStream(raw, {PtyMode.ONLCR: 1}).read()
    b'one\\r\\ntwo\\r\\n'

    Echoed bytes are served before the raw stream:

    >>> stream = TtyFilterInputStream(io.BytesIO(b"out"), {})
    >>> stream.echo(b"ls\\n")
    >>> stream.read()
    b'ls\\nout'
    """

    def __init__(self, raw: t.BinaryIO, modes: Mapping[PtyMode, int]) -> None:
        super().__init__()
        self._raw = raw
        self.modes = enabled_modes(modes, OUTPUT_TRANSLATION_MODES)
        self._echo = bytearray()
        self._pending = bytearray()
        self._lock = threading.Lock()
        self._last = -1
        self._at_column_zero = True

    @property
    def raw(self) -> t.BinaryIO:
        """Wrapped process stream."""
        return self._raw

    def readable(self) -> bool:
        return True

    def echo(self, data: bytes) -> None:
        """Queue ``data`` to be read ahead of the process output."""
        with self._lock:
            self._echo += data

    def readinto(self, buffer: t.Any) -> int:
        size = len(buffer)
        if size == 0:
            return 0
        with self._lock:
            if not self._pending and self._echo:
                self._pending += self._translate(bytes(self._echo))
                self._echo.clear()
        if not self._pending:
            chunk = self._raw.read(size)
            if not chunk:
                return 0
            translated = self._translate(chunk)
            with self._lock:
                self._pending += translated
        with self._lock:
            count = min(size, len(self._pending))
            buffer[:count] = self._pending[:count]
            del self._pending[:count]
        return count

    def _translate(self, data: bytes) -> bytes:
        if not self.modes:
            return data
        out = bytearray()
        for c in data:
            if c == LF and PtyMode.ONLCR in self.modes and self._last != CR:
                out += b"\r\n"
                self._at_column_zero = True
            elif c == CR and PtyMode.OCRNL in self.modes:
                out.append(LF)
                self._at_column_zero = PtyMode.ONLRET in self.modes
            elif c == CR and PtyMode.ONOCR in self.modes and self._at_column_zero:
                pass
            else:
                out.append(c)
                if c == CR:
                    self._at_column_zero = True
                elif c == LF:
                    self._at_column_zero = PtyMode.ONLRET in self.modes
                else:
                    self._at_column_zero = False
            self._last = c
        return bytes(out)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._raw.close()
        finally:
            super().close()


class TtyFilterOutputStream(io.RawIOBase):
    """Writable filter for bytes going from the peer to the process.

    With ``ECHO`` enabled the translated bytes are also queued on ``echo``,
    typically the filter of the process error stream.

    Examples
    --------
    >>> raw = io.BytesIO()
    >>> echo = TtyFilterInputStream(io.BytesIO(), {})
    >>> stream = TtyFilterOutputStream(raw, echo, {PtyMode.ICRNL: 1, PtyMode.ECHO: 1})
    >>> stream.write(b"ls\\r")
    3
    >>> raw.getvalue()
    b'ls\\n'
    >>> echo.read()
    b'ls\\n'
    """

    def __init__(
        self,
        raw: t.BinaryIO,
        echo: TtyFilterInputStream | None,
        modes: Mapping[PtyMode, int],
    ) -> None:
        super().__init__()
        self._raw = raw
        self._echo = echo
        self.modes = enabled_modes(modes, INPUT_TRANSLATION_MODES)

    @property
    def raw(self) -> t.BinaryIO:
        """Wrapped process stream."""
        return self._raw

    def writable(self) -> bool:
        return True

    def write(self, data: t.Any) -> int:
        if self.closed:
            msg = "write to closed stream"
            raise ValueError(msg)
        data = bytes(data)
        translated = self._translate(data)
        view = memoryview(translated)
        while view:
            written = self._raw.write(view)
            if written is None:
                continue
            view = view[written:]
        self._raw.flush()
        if self._echo is not None and PtyMode.ECHO in self.modes:
            self._echo.echo(translated)
        return len(data)

    def _translate(self, data: bytes) -> bytes:
        if not self.modes:
            return data
        out = bytearray()
        for c in data:
            if c == CR and PtyMode.IGNCR in self.modes:
                continue
            if c == CR and PtyMode.ICRNL in self.modes:
                out.append(LF)
            elif c == LF and PtyMode.INLCR in self.modes:
                out.append(CR)
            else:
                out.append(c)
        return bytes(out)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._raw.close()
        finally:
            super().close()
