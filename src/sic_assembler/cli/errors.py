"""
sicasm Exit Codes and Error Reporting
=====================================

Maps every failure of an assembly run onto one of four exit codes.

Failure Classes
---------------
```
usage       missing or malformed argument        -> INVALID_ARGS (2)
I/O         unreadable source, unwritable output -> INVALID_ARGS (2)
structural  bounds, START/END misuse, operands   -> BUILD_ERROR (1)
numeric     operand not in the expected radix    -> BUILD_ERROR (1)
```

Structural and numeric failures arrive as SicError subclasses and are
printed with their source location. Anything else is an assembler bug and
exits with INTERNAL_ERROR; -v adds the traceback.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from sic_assembler.errors import SicError


class ExitCode(IntEnum):
    """Process exit status of sicasm."""
    SUCCESS = 0
    BUILD_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


def exit_code_for(error: Exception) -> ExitCode:
    """Return the exit code an exception maps to."""
    if isinstance(error, SicError):
        return ExitCode.BUILD_ERROR
    # FileNotFoundError, PermissionError, disk full and the like
    if isinstance(error, (click.BadParameter, OSError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an error on stderr and exit with its exit code.

    Args:
        error: The exception that aborted the run
        verbose: Print the traceback of internal errors
        error_type: Prefix for assembly errors (e.g. "Assembly")

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)

    if code is ExitCode.BUILD_ERROR:
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
    elif code is ExitCode.INVALID_ARGS:
        click.echo(f"Error: {error}", err=True)
    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()

    sys.exit(code)
