"""
R Bridge Package.

Runs R expressions, scripts and functions through the Rscript executable and
returns their printed output as Python values.

Usage
-----
    from rbridge import call_standard_method, execute_r_command

    execute_r_command("print(sum(1:10))")           # [55]
    call_standard_method('paste', {'x': 'a', 'y': 'b', 'sep': '-'})
    # ['a-b']

Errors
------
    REngineNotFoundError  Rscript could not be located
    RScriptError          R ran but printed nothing (stderr attached)
    ValueError            missing method name, file location or params
"""
from __future__ import annotations

from .bridge import (
    RBridge,
    call_method,
    call_method_async,
    call_standard_method,
    execute_r_command,
    execute_r_command_async,
    execute_r_script,
)
from .errors import (
    BaseRIntegrationError,
    REngineNotFoundError,
    RScriptError,
    UnsupportedPlatformError,
)
from .locator import locate_rscript
from .parsing import filter_multiline, to_series
from .platforms import Platform, classify_platform
from .synthesis import build_call

__version__ = '0.1.0'

__all__ = [
    # Errors
    'BaseRIntegrationError',
    'REngineNotFoundError',
    'RScriptError',
    'UnsupportedPlatformError',
    # Façade
    'RBridge',
    'execute_r_command',
    'execute_r_command_async',
    'execute_r_script',
    'call_method',
    'call_method_async',
    'call_standard_method',
    # Building blocks
    'Platform',
    'classify_platform',
    'locate_rscript',
    'build_call',
    'filter_multiline',
    'to_series',
]
