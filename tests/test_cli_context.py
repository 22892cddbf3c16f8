"""
Tests for the per-command CLI context.
"""
from __future__ import annotations

from unittest.mock import Mock, patch

from registry_gateway.cli_context import CLIContext
from registry_gateway.operations import RegistryGateway
from registry_gateway.settings import Settings


class TestCLIContext:

    def test_from_env_uses_environment(self, monkeypatch):
        monkeypatch.setenv("REGISTRY_GATEWAY_BACKEND", "backend:6000")
        assert CLIContext.from_env().settings.backend_address == "backend:6000"

    def test_gateway_built_lazily_and_reused(self):
        ctx = CLIContext(settings=Settings())
        with patch("registry_gateway.channel.grpc.insecure_channel") as insecure_channel:
            gw = ctx.gateway
            assert ctx.gateway is gw

        insecure_channel.assert_called_once()
        assert isinstance(gw, RegistryGateway)
        assert gw.timeout == ctx.settings.rpc_timeout_s

    def test_close_drops_channel_and_gateway(self):
        ctx = CLIContext(settings=Settings())
        with patch("registry_gateway.channel.grpc.insecure_channel",
                   side_effect=lambda *a, **kw: Mock()) as insecure_channel:
            first_channel = ctx.channel
            first_gateway = ctx.gateway
            ctx.close()

            assert first_channel.closed
            first_channel.channel.close.assert_called_once_with()

            second_gateway = ctx.gateway
            assert second_gateway is not first_gateway
            assert not ctx.channel.closed
            assert insecure_channel.call_count == 2

    def test_close_without_channel_is_noop(self):
        ctx = CLIContext(settings=Settings())
        ctx.close()
        ctx.close()
