"""
Resource translators used by the gateway.

Two stateless helpers sit between backend responses and domain results:

- ``open_for`` turns a backend-resolved location into an open file handle,
  using the open mode the operation requires.
- ``drain`` consumes a server stream to completion and builds a collection,
  or fails without returning anything if the stream breaks part way.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, BinaryIO, Callable, Iterable, List, Optional, Tuple, TypeVar

from .errors import ResourceError, StreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")

__all__ = ["OpenMode", "open_for", "drain", "rpc_status", "describe"]


class OpenMode(str, Enum):
    """Open mode per operation kind."""
    UPLOAD_APPEND = "ab"       # create if absent, append (resumable chunked uploads)
    MANIFEST_TRUNCATE = "wb"   # create if absent, truncate (manifests are replaced wholesale)
    READ = "rb"                # read-only, fail if absent


def open_for(mode: OpenMode, location: str) -> BinaryIO:
    """
    Open a backend-resolved location.

    The returned handle is owned by the caller, who must close it.

    Args:
        mode: Operation-specific open mode
        location: Location string exactly as returned by the backend

    Returns:
        Binary file handle

    Raises:
        ResourceError: If the location cannot be opened (absent, denied, ...)
    """
    flags = OpenMode(mode).value
    try:
        return open(location, flags)
    except (OSError, ValueError) as e:
        # ValueError: location the OS cannot represent (embedded NUL)
        raise ResourceError(f"Cannot open {location} ({mode.name}): {e}", location=location) from e


def rpc_status(exc: BaseException) -> Tuple[Any, str]:
    """Extract ``(code, details)`` from a gRPC error, tolerating partial implementations."""
    code = exc.code() if callable(getattr(exc, "code", None)) else None
    details = exc.details() if callable(getattr(exc, "details", None)) else None
    return code, details or str(exc)


def _cancel(stream: Any) -> None:
    cancel = getattr(stream, "cancel", None)
    if callable(cancel):
        cancel()


def drain(stream: Iterable[T], build: Callable[[List[T]], C], *, operation: str = "stream") -> C:
    """
    Consume a server stream to end-of-stream and build a collection from it.

    All-or-nothing: if the stream fails before end-of-stream, the items
    received so far are discarded and ``StreamError`` is raised. The stream is
    cancelled when it supports cancellation.

    Args:
        stream: Server stream (iterator of wire messages)
        build: Builds the result collection from the complete item list
        operation: Operation name used in error messages

    Returns:
        Whatever ``build`` returns for the complete item list

    Raises:
        StreamError: On any failure while iterating, or a malformed item
    """
    items: List[T] = []
    try:
        for item in stream:
            items.append(item)
    except Exception as e:
        # grpc.RpcError, or any other failure raised by the stream iterator
        _cancel(stream)
        code, details = rpc_status(e)
        logger.warning(f"{operation}: stream failed after {len(items)} items: {details}")
        raise StreamError(
            f"Failure streaming from server during {operation}: {details}",
            operation=operation,
            code=code,
        ) from e

    try:
        return build(items)
    except ValueError as e:
        raise StreamError(f"Malformed item streamed during {operation}: {e}", operation=operation) from e


def describe(code: Optional[Any]) -> str:
    """Readable name for a gRPC status code."""
    return getattr(code, "name", None) or str(code)
