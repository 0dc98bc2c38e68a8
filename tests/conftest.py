#!/usr/bin/env python3
"""
Shared pytest fixtures for the test suite.

This module provides common fixtures used across test modules including:
- Temporary directories and R script files
- Fake Rscript executables that stand in for a real R installation
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to Python path for test imports
_project_root = Path(__file__).parent.parent
_src_path = _project_root / 'src'
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

import shutil
import stat
import tempfile
from typing import Union

import pytest


# ============================================================
# PATH FIXTURES
# ============================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that is cleaned up after tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def r_script_file(temp_dir) -> Path:
    """Create an R script that defines a function and prints a value."""
    path = temp_dir / 'analysis.R'
    path.write_text(
        'add_one <- function(x) x + 1\n'
        'print(add_one(41))\n'
    )
    return path


# ============================================================
# FAKE RSCRIPT FIXTURES
# ============================================================

def _write_executable(directory: Path, body: str) -> Path:
    path = directory / 'Rscript'
    path.write_text('#!/bin/sh\n' + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def echo_rscript_dir(temp_dir) -> Path:
    """
    Directory holding a fake Rscript that echoes what it was asked to run.

    ``Rscript -e EXPR`` prints EXPR; ``Rscript FILE`` prints the file.
    """
    bin_dir = temp_dir / 'bin'
    bin_dir.mkdir()
    _write_executable(
        bin_dir,
        'if [ "$1" = "-e" ]; then printf \'%s\\n\' "$2"; else cat "$1"; fi\n',
    )
    return bin_dir


@pytest.fixture
def printing_rscript_dir(temp_dir):
    """Factory for a fake Rscript that prints fixed stdout/stderr and exits with a status."""
    def make(stdout: Union[str, bytes] = '', stderr: str = '', status: int = 0) -> Path:
        bin_dir = temp_dir / f'bin_{status}_{len(stdout)}_{len(stderr)}'
        bin_dir.mkdir()
        out_file = bin_dir / 'stdout.txt'
        err_file = bin_dir / 'stderr.txt'
        out_file.write_bytes(stdout if isinstance(stdout, bytes) else stdout.encode())
        err_file.write_text(stderr)
        _write_executable(
            bin_dir,
            f'cat "{out_file}"\ncat "{err_file}" >&2\nexit {status}\n',
        )
        return bin_dir
    return make
