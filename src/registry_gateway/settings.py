"""
Settings and configuration for the registry gateway.

Invalid values fail on construction, before any channel is opened.
"""
from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Optional

__all__ = ["Settings", "create_settings_from_env", "DEFAULT_BACKEND_ADDRESS"]

DEFAULT_BACKEND_ADDRESS = "127.0.0.1:51000"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for the gateway.

    backend_address: host:port of the backend RPC endpoint
    rpc_timeout_s: deadline applied to every unary call and stream
    max_message_bytes: max send/receive message size on the channel
    location_root: if set, backend locations outside this directory are refused
    """
    backend_address: str = DEFAULT_BACKEND_ADDRESS
    rpc_timeout_s: float = 30.0
    max_message_bytes: int = 4 * 1024 * 1024
    location_root: Optional[str] = None

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.backend_address:
            raise ValueError("backend_address is required")

        # host:port, [ipv6]:port, or a grpc target scheme such as unix:/path
        address_pattern = r"^(?:[a-z][a-z0-9+.-]*:.+|\[[0-9a-fA-F:]+\]:[0-9]+|[a-zA-Z0-9.-]+:[0-9]+)$"
        if not re.match(address_pattern, self.backend_address):
            raise ValueError(f"Invalid backend_address format: {self.backend_address}")

        if not (math.isfinite(self.rpc_timeout_s) and self.rpc_timeout_s > 0):
            raise ValueError(f"rpc_timeout_s must be positive and finite, got {self.rpc_timeout_s}")

        if self.max_message_bytes <= 0:
            raise ValueError(f"max_message_bytes must be positive, got {self.max_message_bytes}")

        if self.location_root is not None and not os.path.isabs(self.location_root):
            raise ValueError(f"location_root must be an absolute path, got {self.location_root}")


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - REGISTRY_GATEWAY_BACKEND (default: 127.0.0.1:51000)
        - REGISTRY_GATEWAY_RPC_TIMEOUT (default: 30.0)
        - REGISTRY_GATEWAY_MAX_MESSAGE_BYTES (default: 4194304)
        - REGISTRY_GATEWAY_LOCATION_ROOT (optional)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    return Settings(
        backend_address=os.getenv("REGISTRY_GATEWAY_BACKEND") or DEFAULT_BACKEND_ADDRESS,
        rpc_timeout_s=get_float("REGISTRY_GATEWAY_RPC_TIMEOUT", 30.0),
        max_message_bytes=get_int("REGISTRY_GATEWAY_MAX_MESSAGE_BYTES", 4 * 1024 * 1024),
        location_root=os.getenv("REGISTRY_GATEWAY_LOCATION_ROOT") or None,
    )
