"""
Configuration constants for the R bridge.

This module centralizes Rscript discovery defaults and the settings that can
be overridden per deployment through environment variables or a YAML file.

Usage
-----
    from rbridge.config import RSCRIPT_NAME, WINDOWS_R_ROOT, load_settings

    settings = load_settings()               # defaults + environment
    settings = load_settings('rbridge.yml')  # defaults + environment + file

Environment
-----------
RBRIDGE_R_HOME
    Directory containing the Rscript binary (skips automatic discovery).
RBRIDGE_PLATFORM
    Force a platform classification ('win', 'lin' or 'mac').
RBRIDGE_LOG_LEVEL
    Log level used by the command-line interface.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


# =============================================================================
# RSCRIPT DISCOVERY
# =============================================================================

# Executable name on Unix-like systems
RSCRIPT_NAME = 'Rscript'

# Executable name and location inside an R version directory on Windows
RSCRIPT_WINDOWS_NAME = 'Rscript.exe'
WINDOWS_BIN_DIR = 'bin'

# Default installation root on Windows (one sub-directory per R version)
WINDOWS_R_ROOT = 'C:\\Program Files\\R'

# Shell command used to resolve Rscript on the PATH
WHICH_COMMAND = f'which {RSCRIPT_NAME}'


# =============================================================================
# DEPLOYMENT OVERRIDES
# =============================================================================

R_BINARIES_LOCATION = os.environ.get('RBRIDGE_R_HOME') or None
PLATFORM_OVERRIDE = os.environ.get('RBRIDGE_PLATFORM') or None
LOG_LEVEL = os.environ.get('RBRIDGE_LOG_LEVEL', 'WARNING')

# Settings file looked up in the working directory when none is given
DEFAULT_SETTINGS_FILE = 'rbridge.yml'

_SETTINGS_KEYS = ('r_binaries_location', 'platform', 'log_level')
_PLATFORM_NAMES = ('win', 'lin', 'mac')


@dataclass(frozen=True)
class BridgeSettings:
    """Resolved bridge configuration."""
    r_binaries_location: Optional[str] = None
    platform: Optional[str] = None
    log_level: str = 'WARNING'


def load_settings(path: Union[str, Path, None] = None) -> BridgeSettings:
    """
    Load bridge settings.

    Defaults come from the module constants (which already reflect the
    environment). Values in the YAML file take precedence.

    Parameters
    ----------
    path : str or Path, optional
        YAML settings file. If not given, ``rbridge.yml`` in the current
        directory is used when present.

    Returns
    -------
    BridgeSettings
        Validated settings

    Raises
    ------
    FileNotFoundError
        If an explicit ``path`` does not exist
    ValueError
        If the file is not valid YAML or its contents are invalid
    """
    settings = BridgeSettings(
        r_binaries_location=R_BINARIES_LOCATION,
        platform=PLATFORM_OVERRIDE,
        log_level=LOG_LEVEL,
    )

    if path is None:
        candidate = Path.cwd() / DEFAULT_SETTINGS_FILE
        if not candidate.exists():
            validate_config(settings)
            return settings
        path = candidate

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    import yaml
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")

    unknown = sorted(set(data) - set(_SETTINGS_KEYS))
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")

    logger.debug("Loaded settings from %s", path)
    settings = replace(settings, **{k: v for k, v in data.items() if v is not None})
    validate_config(settings)
    return settings


def validate_config(settings: BridgeSettings) -> bool:
    """
    Validate bridge settings.

    Returns
    -------
    bool
        True if all validations pass

    Raises
    ------
    ValueError
        If any setting is invalid
    """
    errors = []

    if settings.platform is not None and str(settings.platform).lower() not in _PLATFORM_NAMES:
        errors.append(
            f"platform must be one of {', '.join(_PLATFORM_NAMES)}: {settings.platform}"
        )

    if settings.r_binaries_location is not None and not isinstance(settings.r_binaries_location, str):
        errors.append(f"r_binaries_location must be a string: {settings.r_binaries_location!r}")

    if not isinstance(logging.getLevelName(str(settings.log_level).upper()), int):
        errors.append(f"log_level is not a logging level: {settings.log_level}")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))

    return True
