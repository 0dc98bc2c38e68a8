"""
R Bridge: run R expressions, scripts and functions through Rscript.

Every operation follows the same steps: locate Rscript, build the command,
run it, and parse stdout with ``filter_multiline``. If R prints nothing the
call fails with ``RScriptError`` carrying R's diagnostic output.

Usage
-----
    from rbridge import RBridge

    r = RBridge()
    r.execute_r_command("print(1 + 1)")                 # [2]
    r.call_standard_method('mean', [[1, 2, 3]])         # [2]
    r.call_method('stats.R', 'summarize', {'x': [1, 2]})
    await r.execute_r_command_async("print(pi)")

Each call starts one independent Rscript process. There is no timeout and
no limit on concurrent processes.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional, Union

from . import config
from .errors import RScriptError
from .executor import ExecutionResult, run_async, run_sync
from .locator import locate_rscript
from .parsing import filter_multiline
from .platforms import Platform, resolve_platform
from .synthesis import Params, build_call, print_call, source_and_print

logger = logging.getLogger(__name__)


class RBridge:
    """
    Rscript invocation façade.

    Parameters
    ----------
    r_binaries_location : str, optional
        Directory to search for Rscript instead of automatic discovery.
        Defaults to the RBRIDGE_R_HOME environment variable.
    platform : Platform or str, optional
        Platform classification used for discovery and output parsing.
        Detected from the running system if omitted.
    """

    def __init__(
        self,
        r_binaries_location: Optional[str] = None,
        platform: Union[Platform, str, None] = None,
    ):
        self.r_binaries_location = r_binaries_location or config.R_BINARIES_LOCATION
        self.platform = resolve_platform(platform or config.PLATFORM_OVERRIDE)

    def locate(self) -> str:
        """Return the Rscript path. Resolved again on every call."""
        return locate_rscript(self.r_binaries_location, self.platform)

    # -------------------------------------------------------------------------
    # Expressions and scripts
    # -------------------------------------------------------------------------

    def execute_r_command(self, command: str) -> list:
        """
        Evaluate a single-line R expression.

        Only values printed to stdout (``print()``, ``cat()``) are returned.

        Raises
        ------
        REngineNotFoundError
            If Rscript cannot be found
        RScriptError
            If R produced no output
        """
        return self._handle(run_sync(self._expression_command(self.locate(), command)))

    async def execute_r_command_async(self, command: str) -> list:
        """
        Evaluate a single-line R expression without blocking the event loop.

        Rscript discovery runs in a worker thread, since it may shell out
        to ``which``.
        """
        rscript = await asyncio.to_thread(self.locate)
        return self._handle(await run_async(self._expression_command(rscript, command)))

    def execute_r_script(self, file_location: str) -> list:
        """
        Run an R script file.

        Prefer ``print()`` over ``cat()`` in the script; ``cat()`` output
        needs an explicit trailing newline to be split correctly.

        Raises
        ------
        FileNotFoundError
            If ``file_location`` does not exist
        """
        if not os.path.exists(file_location):
            raise FileNotFoundError(f'The file "{file_location}" doesn\'t exist')

        rscript = self.locate()

        return self._handle(run_sync(f'"{rscript}" "{file_location}"'))

    # -------------------------------------------------------------------------
    # Function calls
    # -------------------------------------------------------------------------

    def call_method(self, file_location: str, method_name: str, params: Params) -> list:
        """
        Call a function defined in an R file.

        Parameters
        ----------
        file_location : str
            R file defining the function; it is sourced first
        method_name : str
            Function name
        params : list or mapping
            Positional arguments, or argument names mapped to values

        Raises
        ------
        ValueError
            If any of the arguments is missing
        """
        return self.execute_r_command(self._method_expression(file_location, method_name, params))

    async def call_method_async(self, file_location: str, method_name: str, params: Params) -> list:
        """Async variant of ``call_method``."""
        expression = self._method_expression(file_location, method_name, params)
        return await self.execute_r_command_async(expression)

    def call_standard_method(self, method_name: str, params: Params) -> list:
        """Call a function available in a plain R session (base, stats, ...)."""
        return self.execute_r_command(print_call(build_call(method_name, params)))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _expression_command(self, rscript: str, expression: str) -> str:
        return f'"{rscript}" -e "{expression}"'

    def _method_expression(self, file_location: str, method_name: str, params: Params) -> str:
        if not file_location:
            raise ValueError("Please provide valid parameters - file_location cannot be empty")
        return source_and_print(file_location, build_call(method_name, params))

    def _handle(self, result: ExecutionResult) -> list:
        if not result.ok:
            logger.warning("Rscript failed: %s", result.failure)
            raise RScriptError(result.failure)
        return filter_multiline(result.output, self.platform)


# =============================================================================
# Module-level shortcuts (fresh bridge per call)
# =============================================================================

def execute_r_command(command: str, r_binaries_location: Optional[str] = None) -> list:
    """Evaluate a single-line R expression. See ``RBridge.execute_r_command``."""
    return RBridge(r_binaries_location).execute_r_command(command)


async def execute_r_command_async(command: str, r_binaries_location: Optional[str] = None) -> list:
    return await RBridge(r_binaries_location).execute_r_command_async(command)


def execute_r_script(file_location: str, r_binaries_location: Optional[str] = None) -> list:
    return RBridge(r_binaries_location).execute_r_script(file_location)


def call_method(
    file_location: str,
    method_name: str,
    params: Params,
    r_binaries_location: Optional[str] = None,
) -> list:
    return RBridge(r_binaries_location).call_method(file_location, method_name, params)


async def call_method_async(
    file_location: str,
    method_name: str,
    params: Params,
    r_binaries_location: Optional[str] = None,
) -> list:
    return await RBridge(r_binaries_location).call_method_async(file_location, method_name, params)


def call_standard_method(
    method_name: str,
    params: Params,
    r_binaries_location: Optional[str] = None,
) -> list:
    return RBridge(r_binaries_location).call_standard_method(method_name, params)
