"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Utility functions - debug output flag, debug_print, error
"""

import os

# Debug output, off unless CKBSIGNER_DEBUG is set
f_debug: bool = os.environ.get("CKBSIGNER_DEBUG", "").lower() in ("1", "true", "yes")


def set_debug(flag: bool) -> None:
    """Turn debug output on or off at runtime"""
    global f_debug
    f_debug = bool(flag)


def _format(format_str: str, args: tuple) -> str:
    try:
        return format_str % args if args else format_str
    except (TypeError, ValueError):
        # Fallback if formatting fails
        return format_str + " " + " ".join(str(arg) for arg in args)


def debug_print(format_str: str, *args) -> None:
    """
    Print a diagnostic line when f_debug is set

    Args:
        format_str: Format string (supports %s, %d, etc.)
        *args: Arguments for format string
    """
    if not f_debug:
        return
    print(_format(format_str, args))


def error(format_str: str, *args) -> bool:
    """
    Error reporting function

    Formats error message and prints it with "ERROR: " prefix.
    Always returns False for use in return statements.

    Args:
        format_str: Format string (supports %s, %d, etc.)
        *args: Arguments for format string

    Returns:
        Always returns False

    Example:
        if recovered != pubkey:
            return error("verify_recoverable() : pubkey mismatch %s", recovered.hex())
    """
    print(f"ERROR: {_format(format_str, args)}")
    return False
