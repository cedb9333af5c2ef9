"""
Unified CLI Error Handling
==========================

Maps every fatal condition to a distinct, stable exit code so callers can
tell failures apart without parsing messages.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from hexcrc.errors import (
    CapacityExceededError,
    FileExtensionError,
    HexFormatError,
    UnsupportedFeatureError,
)


class ExitCode(IntEnum):
    """Exit codes of the hexcrc tool."""
    SUCCESS = 0
    NO_PARAMETERS = -1          # No arguments, or a flag without its value
    FILE_EXTENSION_ERROR = -2   # Input/output name is not a .hex file
    UNKNOWN_FLAG = -3           # Unrecognised command-line flag
    NO_INPUT_FILE = -4          # -i not given
    LINE_CHECKSUM_ERROR = -5    # Malformed line or line checksum mismatch
    UNSUPPORTED_FEATURE = -6    # 20-bit segment addressing
    FILE_OPEN_ERROR = -7        # Input or output file cannot be opened
    CAPACITY_EXCEEDED = -8      # Image larger than the 1 MiB bound
    INTERNAL_ERROR = 1          # Unexpected internal error


def exit_code_for(error: BaseException) -> ExitCode:
    """Return the exit code reported for an exception."""
    if isinstance(error, FileExtensionError):
        return ExitCode.FILE_EXTENSION_ERROR
    if isinstance(error, HexFormatError):
        return ExitCode.LINE_CHECKSUM_ERROR
    if isinstance(error, UnsupportedFeatureError):
        return ExitCode.UNSUPPORTED_FEATURE
    if isinstance(error, CapacityExceededError):
        return ExitCode.CAPACITY_EXCEEDED
    if isinstance(error, OSError):
        return ExitCode.FILE_OPEN_ERROR
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with its exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    code = exit_code_for(error)

    if code == ExitCode.FILE_OPEN_ERROR:
        filename = getattr(error, "filename", None) or error
        click.echo(f"Error: can not open file {filename}", err=True)
    elif code == ExitCode.INTERNAL_ERROR:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)

    sys.exit(code)
