"""Constant variables for procshell."""

from __future__ import annotations

import enum

#: Command token replaced by the session user name at start.
USER_PLACEHOLDER = "$USER"

#: Environment variable holding the session user name.
USER_ENV_KEY = "USER"

#: Client software prefix used by PuTTY and its derivatives (plink, pscp).
PUTTY_SOFTWARE_PREFIX = "putty"


class PtyMode(enum.IntEnum):
    """Terminal modes negotiated in an SSH ``pty-req``.

    Values are the opcodes of RFC 4254 section 8 (``IUTF8`` from RFC 8160).

    Examples
    --------
    >>> PtyMode.ECHO
    <PtyMode.ECHO: 53>
    >>> PtyMode(72).name
    'ONLCR'
    """

    TTY_OP_END = 0
    VINTR = 1
    VQUIT = 2
    VERASE = 3
    VKILL = 4
    VEOF = 5
    VEOL = 6
    VEOL2 = 7
    VSTART = 8
    VSTOP = 9
    VSUSP = 10
    VDSUSP = 11
    VREPRINT = 12
    VWERASE = 13
    VLNEXT = 14
    VFLUSH = 15
    VSWTCH = 16
    VSTATUS = 17
    VDISCARD = 18
    IGNPAR = 30
    PARMRK = 31
    INPCK = 32
    ISTRIP = 33
    INLCR = 34
    IGNCR = 35
    ICRNL = 36
    IUCLC = 37
    IXON = 38
    IXANY = 39
    IXOFF = 40
    IMAXBEL = 41
    IUTF8 = 42
    ISIG = 50
    ICANON = 51
    XCASE = 52
    ECHO = 53
    ECHOE = 54
    ECHOK = 55
    ECHONL = 56
    NOFLSH = 57
    TOSTOP = 58
    IEXTEN = 59
    ECHOCTL = 60
    ECHOKE = 61
    PENDIN = 62
    OPOST = 70
    OLCUC = 71
    ONLCR = 72
    OCRNL = 73
    ONOCR = 74
    ONLRET = 75
    CS7 = 90
    CS8 = 91
    PARENB = 92
    PARODD = 93
    TTY_OP_ISPEED = 128
    TTY_OP_OSPEED = 129


#: Modes the process-to-peer filter honors.
OUTPUT_TRANSLATION_MODES: frozenset[PtyMode] = frozenset(
    {PtyMode.ONLCR, PtyMode.OCRNL, PtyMode.ONOCR, PtyMode.ONLRET},
)

#: Modes the peer-to-process filter honors.
INPUT_TRANSLATION_MODES: frozenset[PtyMode] = frozenset(
    {PtyMode.ECHO, PtyMode.INLCR, PtyMode.ICRNL, PtyMode.IGNCR},
)

#: Modes substituted for PuTTY clients; they behave with OpenSSH clients too.
PUTTY_TTY_OPTIONS: dict[PtyMode, int] = {
    PtyMode.ECHO: 1,
    PtyMode.ICRNL: 1,
    PtyMode.ONLCR: 1,
}
