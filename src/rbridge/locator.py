"""
Rscript discovery.

Resolves the path of the Rscript executable on every call. Nothing is
cached, so installing or removing R between calls is picked up.

Windows
    ``<root>/<latest version>/bin/Rscript.exe`` where ``<root>`` defaults
    to ``C:\\Program Files\\R`` and the latest version is the last entry
    in lexicographic order. The composed path is not checked for existence.
Linux / macOS
    ``which Rscript`` when no directory is given, otherwise
    ``<directory>/Rscript``, which must exist.
"""
from __future__ import annotations

import logging
import os
from typing import Callable, Optional, Union

from .config import (
    RSCRIPT_NAME,
    RSCRIPT_WINDOWS_NAME,
    WHICH_COMMAND,
    WINDOWS_BIN_DIR,
    WINDOWS_R_ROOT,
)
from .errors import REngineNotFoundError, UnsupportedPlatformError
from .executor import ExecutionResult, run_sync
from .platforms import Platform, resolve_platform

logger = logging.getLogger(__name__)


def locate_rscript(
    r_binaries_location: Optional[str] = None,
    platform: Union[Platform, str, None] = None,
    *,
    run: Callable[[str], ExecutionResult] = run_sync,
) -> str:
    """
    Find the Rscript executable.

    Parameters
    ----------
    r_binaries_location : str, optional
        Directory to use instead of automatic discovery. On Windows this is
        the root holding one directory per R version; elsewhere it is the
        directory holding the ``Rscript`` binary itself.
    platform : Platform or str, optional
        Platform classification. Detected from the running system if omitted.
    run : callable, optional
        Command runner used for ``which``.

    Returns
    -------
    str
        Path to the Rscript executable

    Raises
    ------
    REngineNotFoundError
        If no executable could be found
    UnsupportedPlatformError
        If the platform cannot be classified
    """
    platform = resolve_platform(platform)
    path = r_binaries_location
    installation = None

    if platform is Platform.WIN:
        if not path:
            path = WINDOWS_R_ROOT
        installation = _latest_windows_rscript(path)
    elif platform in (Platform.LIN, Platform.MAC):
        if not path:
            result = run(WHICH_COMMAND)
            if result.ok:
                installation = result.output.replace('\n', '')
            path = installation or RSCRIPT_NAME
        else:
            path = os.path.join(path, RSCRIPT_NAME)
            if os.path.exists(path):
                installation = path
    else:
        raise UnsupportedPlatformError(platform)

    if not installation:
        raise REngineNotFoundError(path)

    logger.debug("Using Rscript at %s", installation)
    return installation


def _latest_windows_rscript(root: str) -> Optional[str]:
    """Compose the Rscript path inside the highest version directory of ``root``."""
    if not os.path.exists(root):
        return None

    versions = sorted(os.listdir(root))
    if not versions:
        return None

    return os.path.join(root, versions[-1], WINDOWS_BIN_DIR, RSCRIPT_WINDOWS_NAME)
