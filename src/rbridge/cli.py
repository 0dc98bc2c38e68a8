#!/usr/bin/env python3
"""
Module: cli.py
Purpose: Command-line interface for running R through the bridge.

Commands
--------
eval : Evaluate a single-line R expression
    Options: --async
script : Run an R script file
call : Call an R function with positional or named arguments
    Options: --file, --named
locate : Print the Rscript path that would be used

Usage
-----
    rbridge eval "print(1:3)"
    rbridge script analysis.R
    rbridge call mean "[1, 2, 3]"
    rbridge call summarize x=[1,2] label=total --file stats.R --named
    rbridge --platform lin --r-home /opt/R/bin locate

Arguments to ``call`` are decoded as JSON when possible (numbers, lists,
null) and otherwise passed as strings. Results are printed one JSON value
per line.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional

from .bridge import RBridge
from .config import BridgeSettings, load_settings
from .errors import BaseRIntegrationError


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        prog='rbridge',
        description='Run R expressions, scripts and functions via Rscript',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument('--r-home', help='Directory containing Rscript')
    p.add_argument('--platform', choices=['win', 'lin', 'mac'], help='Override platform detection')
    p.add_argument('--config', '-c', help='YAML settings file (default: ./rbridge.yml)')
    p.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    sub = p.add_subparsers(dest='cmd', required=True)

    p_eval = sub.add_parser('eval', help='Evaluate a single-line R expression')
    p_eval.add_argument('expression', help='R expression, e.g. "print(1:3)"')
    p_eval.add_argument(
        '--async',
        dest='use_async',
        action='store_true',
        help='Run through the asynchronous executor'
    )

    p_script = sub.add_parser('script', help='Run an R script file')
    p_script.add_argument('file', help='Path to the R script')

    p_call = sub.add_parser('call', help='Call an R function')
    p_call.add_argument('method', help='Function name')
    p_call.add_argument('args', nargs='*', help='Arguments (JSON or plain strings)')
    p_call.add_argument('--file', '-f', help='R file defining the function')
    p_call.add_argument(
        '--named',
        action='store_true',
        help='Treat arguments as name=value pairs'
    )

    sub.add_parser('locate', help='Print the Rscript path')

    return p.parse_args(argv)


def decode_argument(text: str) -> Any:
    """Decode a command-line argument as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def build_params(args: list[str], named: bool):
    """Turn command-line arguments into call parameters."""
    if not named:
        return [decode_argument(a) for a in args]

    params = {}
    for arg in args:
        name, sep, value = arg.partition('=')
        if not sep or not name:
            raise ValueError(f"Expected name=value, got: {arg}")
        params[name] = decode_argument(value)
    return params


def run(args: argparse.Namespace, settings: BridgeSettings) -> list:
    """Execute the selected command and return its parsed output."""
    bridge = RBridge(
        r_binaries_location=args.r_home or settings.r_binaries_location,
        platform=args.platform or settings.platform,
    )

    if args.cmd == 'eval':
        if args.use_async:
            return asyncio.run(bridge.execute_r_command_async(args.expression))
        return bridge.execute_r_command(args.expression)
    elif args.cmd == 'script':
        return bridge.execute_r_script(args.file)
    elif args.cmd == 'call':
        params = build_params(args.args, args.named)
        if args.file:
            return bridge.call_method(args.file, args.method, params)
        return bridge.call_standard_method(args.method, params)
    elif args.cmd == 'locate':
        return [bridge.locate()]

    raise ValueError(f"Unknown command: {args.cmd}")


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except (ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else settings.log_level.upper()
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        output = run(args, settings)
    except (BaseRIntegrationError, ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for value in output:
        print(json.dumps(value))
    return 0


if __name__ == '__main__':
    sys.exit(main())
