"""
Backend channel holder.

Owns one gRPC channel and hands out the two typed sub-clients bound to it.
Both sub-clients share the same channel object; nothing here opens a second
connection.
"""
from __future__ import annotations

import logging

import grpc

from .settings import Settings
from .wire.services import AdmissionControllerStub, RegistryStub

logger = logging.getLogger(__name__)

__all__ = ["BackendChannel"]


class BackendChannel:
    """
    Shared channel to the registry backend.

    The channel outlives the sub-clients built from it; ``close()`` releases it
    once, after which no new sub-clients may be created.
    """

    def __init__(self, channel: grpc.Channel):
        self._channel = channel
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> BackendChannel:
        """
        Open an insecure channel to ``settings.backend_address``.

        Channel authentication is out of scope; callers needing TLS build
        their own ``grpc.Channel`` and pass it to the constructor.
        """
        options = [
            ("grpc.max_send_message_length", settings.max_message_bytes),
            ("grpc.max_receive_message_length", settings.max_message_bytes),
        ]
        logger.debug(f"Opening backend channel to {settings.backend_address}")
        return cls(grpc.insecure_channel(settings.backend_address, options=options))

    @property
    def channel(self) -> grpc.Channel:
        return self._channel

    @property
    def closed(self) -> bool:
        return self._closed

    def registry(self) -> RegistryStub:
        """Registry operations sub-client on the shared channel."""
        self._check_open()
        return RegistryStub(self._channel)

    def admission(self) -> AdmissionControllerStub:
        """Admission control sub-client on the shared channel."""
        self._check_open()
        return AdmissionControllerStub(self._channel)

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("Backend channel is closed")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._channel.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
