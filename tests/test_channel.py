"""
Tests for the backend channel holder and the typed sub-clients.
"""
from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from registry_gateway.channel import BackendChannel
from registry_gateway.operations import RegistryGateway
from registry_gateway.settings import Settings
from registry_gateway.wire import AdmissionService, RegistryService
from registry_gateway.wire import messages as m
from registry_gateway.wire.services import AdmissionControllerStub, RegistryStub


class TestBackendChannel:

    def test_sub_clients_share_one_channel(self):
        raw = Mock()
        holder = BackendChannel(raw)

        registry = holder.registry()
        admission = holder.admission()

        assert registry.channel is raw
        assert admission.channel is raw

    def test_gateway_from_channel_shares_channel(self, settings):
        raw = Mock()
        gw = RegistryGateway.from_channel(BackendChannel(raw), settings=settings)

        assert isinstance(gw.registry, RegistryStub)
        assert isinstance(gw.admission, AdmissionControllerStub)
        assert gw.registry.channel is gw.admission.channel is raw
        assert gw.timeout == settings.rpc_timeout_s

    def test_close_releases_once(self):
        raw = Mock()
        with BackendChannel(raw) as holder:
            holder.close()
        assert holder.closed
        raw.close.assert_called_once_with()

    def test_no_sub_clients_after_close(self):
        holder = BackendChannel(Mock())
        holder.close()
        with pytest.raises(ValueError, match="closed"):
            holder.registry()

    def test_from_settings_opens_insecure_channel(self):
        settings = Settings(backend_address="backend:51000", max_message_bytes=1024)
        with patch("registry_gateway.channel.grpc.insecure_channel") as insecure_channel:
            holder = BackendChannel.from_settings(settings)

        insecure_channel.assert_called_once_with("backend:51000", options=[
            ("grpc.max_send_message_length", 1024),
            ("grpc.max_receive_message_length", 1024),
        ])
        assert holder.channel is insecure_channel.return_value


class TestStubs:

    def test_registry_stub_method_paths(self):
        raw = Mock()
        RegistryStub(raw)

        unary = [c.args[0] for c in raw.unary_unary.call_args_list]
        streams = [c.args[0] for c in raw.unary_stream.call_args_list]
        assert unary == [
            "/trow.Registry/RequestUpload",
            "/trow.Registry/CompleteUpload",
            "/trow.Registry/GetWriteLocationForBlob",
            "/trow.Registry/GetWriteLocationForManifest",
            "/trow.Registry/GetReadLocationForManifest",
            "/trow.Registry/GetReadLocationForBlob",
            "/trow.Registry/VerifyManifest",
        ]
        assert streams == ["/trow.Registry/GetCatalog", "/trow.Registry/ListTags"]

    def test_admission_stub_method_path(self):
        raw = Mock()
        AdmissionControllerStub(raw)
        raw.unary_unary.assert_called_once()
        assert raw.unary_unary.call_args.args[0] == "/trow.AdmissionController/ValidateAdmission"

    def test_codecs_round_trip_messages(self):
        raw = Mock()
        AdmissionControllerStub(raw)
        kwargs = raw.unary_unary.call_args.kwargs

        payload = kwargs["request_serializer"](m.AdmissionRequest(
            api_version="v1", uid="u", image="i", namespace="n", operation="CREATE"))
        assert isinstance(payload, bytes)

        response = kwargs["response_deserializer"](b'{"valid": false, "reason": "nope", "extra": 1}')
        assert response == m.AdmissionResponse(valid=False, reason="nope")

    def test_stubs_satisfy_protocols(self):
        assert isinstance(RegistryStub(Mock()), RegistryService)
        assert isinstance(AdmissionControllerStub(Mock()), AdmissionService)
