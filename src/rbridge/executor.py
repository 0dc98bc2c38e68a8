"""
Shell command execution.

Two entry points share one result contract: ``run_sync`` blocks until the
process exits, ``run_async`` suspends the calling coroutine instead. The
command string is passed to the shell as-is; quoting is the caller's job.

There is no timeout. A hung R process hangs the caller.
"""
from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

Diagnostic = Union[str, BaseException]

# Undecodable bytes in R output are replaced with U+FFFD on both paths
OUTPUT_ENCODING = 'utf-8'


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of one shell command.

    Exactly one of ``output`` and ``failure`` is set.

    Attributes
    ----------
    output : str, optional
        Captured stdout, present only when it is non-empty
    failure : str or BaseException, optional
        Captured stderr text, or the exception raised while running the
        command, when no stdout was produced
    """

    output: Optional[str] = None
    failure: Optional[Diagnostic] = None

    def __post_init__(self):
        if (self.output is None) == (self.failure is None):
            raise ValueError("ExecutionResult needs exactly one of output or failure")

    @property
    def ok(self) -> bool:
        return self.output is not None

    @classmethod
    def from_streams(cls, stdout: str, stderr: str) -> 'ExecutionResult':
        """Build a result from the streams of a process that exited cleanly."""
        if stdout:
            return cls(output=stdout)
        return cls(failure=stderr)


def run_sync(command: str) -> ExecutionResult:
    """
    Run a shell command and wait for it to finish.

    Parameters
    ----------
    command : str
        Complete command line

    Returns
    -------
    ExecutionResult
        stdout on success; on a non-zero exit the process's stderr (or the
        exception itself when stderr is empty)
    """
    logger.debug("Running: %s", command)
    try:
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            encoding=OUTPUT_ENCODING,
            errors='replace',
            check=True,
        )
    except subprocess.CalledProcessError as e:
        logger.debug("Command exited with status %s", e.returncode)
        return ExecutionResult(failure=e.stderr or e)
    except OSError as e:
        return ExecutionResult(failure=e)

    return ExecutionResult.from_streams(completed.stdout, completed.stderr)


async def run_async(command: str) -> ExecutionResult:
    """
    Run a shell command without blocking the event loop.

    Same contract as ``run_sync``. A non-zero exit is reported as a message
    naming the command followed by the process's stderr.
    """
    logger.debug("Running (async): %s", command)
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return ExecutionResult(failure=e)

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout = stdout_bytes.decode(OUTPUT_ENCODING, errors='replace')
    stderr = stderr_bytes.decode(OUTPUT_ENCODING, errors='replace')

    if process.returncode != 0:
        logger.debug("Command exited with status %s", process.returncode)
        return ExecutionResult(failure=f"Command failed: {command}\n{stderr}")

    return ExecutionResult.from_streams(stdout, stderr)
