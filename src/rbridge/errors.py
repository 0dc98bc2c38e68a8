"""
Exception Types for the R Bridge.

Callers distinguish a misconfigured installation (``REngineNotFoundError``)
from a failing R script (``RScriptError``). Both derive from
``BaseRIntegrationError`` so a single ``except`` clause can catch either.

Validation problems with call arguments (missing method name, missing
file location) are raised as the builtin ``ValueError``.
"""
from __future__ import annotations

from typing import Optional, Union


class BaseRIntegrationError(Exception):
    """Base exception for all R integration errors."""


class REngineNotFoundError(BaseRIntegrationError):
    """
    Raised when no usable Rscript executable could be located.

    Attributes
    ----------
    path : str, optional
        The path or override directory that was tried.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        super().__init__(f"R Engine not found. See www.r-project.org. (path: {path})")


class RScriptError(BaseRIntegrationError):
    """
    Raised when Rscript ran but produced no output.

    Attributes
    ----------
    diagnostic : str or BaseException
        Raw stderr text from R, or the exception raised while running it.
    """

    def __init__(self, diagnostic: Union[str, BaseException, None]):
        self.diagnostic = diagnostic
        super().__init__(str(diagnostic) if diagnostic else 'Rscript produced no output')


class UnsupportedPlatformError(BaseRIntegrationError):
    """Raised when the host operating system cannot be classified."""

    def __init__(self, platform: object):
        self.platform = platform
        super().__init__(f"Cannot determine OS type: {platform!r}")
