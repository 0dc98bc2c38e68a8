"""
R call expression synthesis.

Turns a function name and Python arguments into an R call string:

    >>> build_call('mean', [[1, 2, None]])
    'mean(c(1,2,NA))'
    >>> build_call('paste', {'x': 'a', 'sep': '-'})
    "paste(x='a',sep='-')"

Strings are wrapped in single quotes verbatim. Embedded quotes are NOT
escaped, so arguments must come from trusted input.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

Params = Union[list, tuple, Mapping]

SEPARATOR = ','
MISSING = 'NA'


def convert_param(value: Any) -> str:
    """
    Serialize one argument value, followed by a separator.

    Lists and tuples become ``c(...)`` (recursively), strings become
    single-quoted literals, None becomes ``NA``, booleans become
    ``TRUE``/``FALSE`` and anything else uses ``str()``.
    """
    if isinstance(value, (list, tuple)):
        inner = ''.join(convert_param(item) for item in value)
        return f"c({_strip_separator(inner)})" + SEPARATOR
    if isinstance(value, str):
        return f"'{value}'" + SEPARATOR
    if value is None:
        return MISSING + SEPARATOR
    if isinstance(value, bool):
        return ('TRUE' if value else 'FALSE') + SEPARATOR
    return f"{value}" + SEPARATOR


def build_call(method_name: str, params: Params) -> str:
    """
    Build an R call expression.

    Parameters
    ----------
    method_name : str
        R function name
    params : list, tuple or mapping
        Positional arguments, or a mapping of argument name to value

    Returns
    -------
    str
        The call, e.g. ``f(1,'a',c(2,3))`` or ``f(x=1,y=c(2,3))``

    Raises
    ------
    ValueError
        If ``method_name`` is empty or ``params`` is None
    """
    if not method_name or params is None:
        raise ValueError("Please provide valid parameters - method_name and params cannot be empty")

    if isinstance(params, Mapping):
        body = ''.join(f"{name}={convert_param(value)}" for name, value in params.items())
    elif isinstance(params, (list, tuple)):
        body = ''.join(convert_param(value) for value in params)
    else:
        raise ValueError(f"params must be a list or a mapping, got {type(params).__name__}")

    return f"{method_name}({_strip_separator(body)})"


def print_call(call: str) -> str:
    """Wrap a call so Rscript prints its value."""
    return f"print({call})"


def source_and_print(file_location: str, call: str) -> str:
    """Source an R file, then print the value of ``call``."""
    return f"source('{file_location}'); {print_call(call)}"


def _strip_separator(text: str) -> str:
    if text.endswith(SEPARATOR):
        return text[:-len(SEPARATOR)]
    return text
