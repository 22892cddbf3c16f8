"""
Exit codes for CLI commands.

Gateway errors map to a small set of process exit codes so scripts can tell a
rejected admission from an unreachable backend.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

import typer

from ..errors import AdmissionRejected, BackendError, ResourceError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Looked up by class name first, then by isinstance fallback below
EXIT_CODES = {
    "ValueError": 2,
    "RpcError": 3,
    "StreamError": 3,
    "BackendError": 3,
    "AdmissionRejected": 4,
    "ResourceError": 5,
    "LocationRejected": 5,
}

FALLBACK_EXIT_CODE = 3


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    - 2: invalid input (ValueError)
    - 3: backend call or stream failed, or unknown error
    - 4: admission rejected by policy
    - 5: resolved location could not be opened

    Args:
        exc: Exception to map

    Returns:
        Exit code, with 3 as fallback for unknown exceptions
    """
    code = EXIT_CODES.get(type(exc).__name__)
    if code is not None:
        return code
    if isinstance(exc, AdmissionRejected):
        return 4
    if isinstance(exc, ResourceError):
        return 5
    if isinstance(exc, BackendError):
        return 3
    if isinstance(exc, ValueError):
        return 2
    return FALLBACK_EXIT_CODE


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Run a command body, turning any failure into an error line and exit code.

    ``typer.Exit`` raised by the body passes through untouched.
    """
    try:
        return func()
    except typer.Exit:
        raise
    except Exception as e:
        logger.debug("command failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
