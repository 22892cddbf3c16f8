"""
Gateway error classes.

Every failure the gateway reports is a ``BackendError``. Subclasses say which
seam failed (unary call, stream, local resource, admission policy) but callers
that only care whether "the operation happened" can catch the base class.
The underlying cause is always chained via ``raise ... from``.
"""
from __future__ import annotations

from typing import Any, Optional


class BackendError(RuntimeError):
    """
    Base class for all gateway errors.

    Treat any instance as "the operation did not happen"; the gateway never
    returns partial results alongside an error.
    """
    pass


class RpcError(BackendError):
    """
    A unary RPC could not complete.

    Raised when:
    - the channel is unavailable or the deadline is exceeded
    - the backend rejects the call with a non-OK status
    - the backend response cannot be mapped onto domain values
    """

    def __init__(self, message: str, operation: Optional[str] = None, code: Any = None):
        super().__init__(message)
        self.operation = operation
        self.code = code


class StreamError(BackendError):
    """
    A server stream (catalog, tags) failed before end-of-stream.

    Items received before the failure are discarded.
    """

    def __init__(self, message: str, operation: Optional[str] = None, code: Any = None):
        super().__init__(message)
        self.operation = operation
        self.code = code


class ResourceError(BackendError):
    """
    Opening a backend-resolved location failed.

    Raised when:
    - a read location does not exist
    - permission is denied on a read or write location
    """

    def __init__(self, message: str, location: Optional[str] = None):
        super().__init__(message)
        self.location = location


class LocationRejected(ResourceError):
    """A backend-supplied location falls outside the configured location root."""
    pass


class AdmissionRejected(BackendError):
    """
    The admission controller answered ``valid == false``.

    ``reason`` is the backend-supplied text, unmodified.
    """

    def __init__(self, reason: str):
        super().__init__(f"Failed validation: {reason}")
        self.reason = reason


__all__ = [
    "BackendError",
    "RpcError",
    "StreamError",
    "ResourceError",
    "LocationRejected",
    "AdmissionRejected",
]
