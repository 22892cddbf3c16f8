"""
Per-command resources for the CLI.

Each command gets one context holding its settings and, once needed, a backend
channel and a gateway over it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .channel import BackendChannel
from .operations.facade import RegistryGateway
from .settings import Settings, create_settings_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    The channel and gateway are created on first access and reused for the
    rest of the command; ``close()`` releases the channel.
    """
    settings: Settings
    _channel: Optional[BackendChannel] = None
    _gateway: Optional[RegistryGateway] = None

    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.

        Returns:
            CLIContext with settings loaded from environment
        """
        return cls(settings=create_settings_from_env())

    @property
    def channel(self) -> BackendChannel:
        if self._channel is None:
            self._channel = BackendChannel.from_settings(self.settings)
        return self._channel

    @property
    def gateway(self) -> RegistryGateway:
        """
        Get or create the gateway (lazy initialization).

        Returns:
            RegistryGateway bound to this context's channel
        """
        if self._gateway is None:
            self._gateway = RegistryGateway.from_channel(self.channel, settings=self.settings)
        return self._gateway

    def close(self) -> None:
        """Close the channel; later access builds a fresh channel and gateway."""
        if self._channel is not None:
            self._channel.close()
        self._channel = None
        self._gateway = None
