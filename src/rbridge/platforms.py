"""
Host operating system classification.

Every platform-dependent decision (Rscript discovery, output line endings)
takes a ``Platform`` value as an argument, so tests can exercise Windows
behaviour on Linux and vice versa.
"""
from __future__ import annotations

import sys
from enum import Enum
from typing import Optional, Union

from .errors import UnsupportedPlatformError


class Platform(str, Enum):
    """Operating system family."""
    WIN = "win"
    LIN = "lin"
    MAC = "mac"

    @property
    def line_separator(self) -> str:
        """Line separator R uses when printing on this platform."""
        return '\r\n' if self is Platform.WIN else '\n'


_UNIX_PREFIXES = ('linux', 'openbsd', 'freebsd')


def classify_platform(sys_platform: Optional[str] = None) -> Platform:
    """
    Map a ``sys.platform`` identifier to a ``Platform``.

    Anything that is neither Windows nor Linux/BSD is treated as macOS.
    """
    if sys_platform is None:
        sys_platform = sys.platform

    if sys_platform == 'win32':
        return Platform.WIN
    if sys_platform.startswith(_UNIX_PREFIXES):
        return Platform.LIN
    return Platform.MAC


def resolve_platform(value: Union[Platform, str, None] = None) -> Platform:
    """
    Normalize a platform argument.

    Parameters
    ----------
    value : Platform, str or None
        A ``Platform``, its short name ('win', 'lin', 'mac'), or None to
        detect the running system.

    Raises
    ------
    UnsupportedPlatformError
        If ``value`` is a string that names no known platform.
    """
    if value is None:
        return classify_platform()
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).lower())
    except ValueError:
        raise UnsupportedPlatformError(value) from None
