"""
Rscript output parsing.

R prints vectors with positional prefixes (``[1] 3.14``) and one value per
line. ``filter_multiline`` removes the prefixes, normalizes whitespace and
then either decodes the whole output as one JSON document or splits it into
tokens:

- ``NA``  -> None
- ``NaN`` -> float('nan')
- anything else -> the token as a string, with double quotes removed

Whitespace runs (including spaces inside printed strings) are token
boundaries, matching how the output is normalized.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Union

from .platforms import Platform, resolve_platform

_INDEX_PREFIX = re.compile(r'\[\d+\] ')
_WHITESPACE = re.compile(r'\s+')

MISSING = 'NA'
NOT_A_NUMBER = 'NaN'


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _decode_json(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def filter_multiline(raw: str, platform: Union[Platform, str, None] = None) -> list:
    """
    Parse the stdout of an Rscript run.

    Parameters
    ----------
    raw : str
        Raw stdout text
    platform : Platform or str, optional
        Selects the line separator. Detected if omitted.

    Returns
    -------
    list
        ``[value]`` when the whole output is a JSON document, otherwise one
        entry per token
    """
    separator = resolve_platform(platform).line_separator

    text = _INDEX_PREFIX.sub('', raw)
    text = text.rstrip()
    text = _WHITESPACE.sub(separator, text)

    try:
        return [_decode_json(text)]
    except ValueError:
        pass

    return [_convert_token(token) for token in text.split(separator)]


def _convert_token(token: str) -> Union[str, float, None]:
    if token == MISSING:
        return None
    if token == NOT_A_NUMBER:
        return math.nan
    return token.replace('"', '')


def to_series(parsed: list):
    """
    Convert parsed output to a pandas Series.

    Token lists where every present value is numeric are coerced to float;
    missing values become NaN. A single structured value is kept as-is in
    a one-element object Series.
    """
    import pandas as pd

    if len(parsed) == 1 and isinstance(parsed[0], (dict, list)):
        return pd.Series(parsed, dtype=object)

    series = pd.Series(parsed, dtype=object)
    present = series.dropna()
    try:
        pd.to_numeric(present)
    except (ValueError, TypeError):
        return series
    return pd.to_numeric(series)
