"""
Typed sub-clients for the two backend services.

Each stub binds one callable per RPC method to a shared ``grpc.Channel``,
mirroring the shape of generated gRPC stubs. The Protocols describe that
shape so the gateway can be driven by in-memory fakes in tests.
"""
from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol, runtime_checkable

import grpc

from . import messages as m

REGISTRY_SERVICE = "trow.Registry"
ADMISSION_SERVICE = "trow.AdmissionController"

__all__ = [
    "REGISTRY_SERVICE",
    "ADMISSION_SERVICE",
    "RegistryService",
    "AdmissionService",
    "RegistryStub",
    "AdmissionControllerStub",
    "method_path",
]


def method_path(service: str, method: str) -> str:
    """Full gRPC method path, e.g. ``/trow.Registry/RequestUpload``."""
    return f"/{service}/{method}"


@runtime_checkable
class RegistryService(Protocol):
    """Registry operations: upload lifecycle, locations, verification, enumeration."""

    def RequestUpload(self, request: m.UploadRequest, timeout: Optional[float] = None) -> m.UploadDetails:
        ...

    def CompleteUpload(self, request: m.CompleteRequest, timeout: Optional[float] = None) -> m.CompletedUpload:
        ...

    def GetWriteLocationForBlob(self, request: m.BlobRef, timeout: Optional[float] = None) -> m.WriteLocation:
        ...

    def GetWriteLocationForManifest(self, request: m.ManifestRef, timeout: Optional[float] = None) -> m.WriteLocation:
        ...

    def GetReadLocationForManifest(self, request: m.ManifestRef,
                                   timeout: Optional[float] = None) -> m.ManifestReadLocation:
        ...

    def GetReadLocationForBlob(self, request: m.DownloadRef, timeout: Optional[float] = None) -> m.BlobReadLocation:
        ...

    def VerifyManifest(self, request: m.ManifestRef, timeout: Optional[float] = None) -> m.VerifiedManifestResult:
        ...

    def GetCatalog(self, request: m.CatalogRequest, timeout: Optional[float] = None) -> Iterator[m.CatalogEntry]:
        ...

    def ListTags(self, request: m.CatalogEntry, timeout: Optional[float] = None) -> Iterator[m.Tag]:
        ...


@runtime_checkable
class AdmissionService(Protocol):
    """Admission control: a single validate call."""

    def ValidateAdmission(self, request: m.AdmissionRequest,
                          timeout: Optional[float] = None) -> m.AdmissionResponse:
        ...


def _unary(channel: grpc.Channel, service: str, method: str, response: type) -> Any:
    return channel.unary_unary(
        method_path(service, method),
        request_serializer=m.WireMessage.to_bytes,
        response_deserializer=response.from_bytes,
    )


def _stream(channel: grpc.Channel, service: str, method: str, response: type) -> Any:
    return channel.unary_stream(
        method_path(service, method),
        request_serializer=m.WireMessage.to_bytes,
        response_deserializer=response.from_bytes,
    )


class RegistryStub:
    """Registry sub-client bound to a channel."""

    def __init__(self, channel: grpc.Channel):
        self.channel = channel
        self.RequestUpload = _unary(channel, REGISTRY_SERVICE, "RequestUpload", m.UploadDetails)
        self.CompleteUpload = _unary(channel, REGISTRY_SERVICE, "CompleteUpload", m.CompletedUpload)
        self.GetWriteLocationForBlob = _unary(
            channel, REGISTRY_SERVICE, "GetWriteLocationForBlob", m.WriteLocation)
        self.GetWriteLocationForManifest = _unary(
            channel, REGISTRY_SERVICE, "GetWriteLocationForManifest", m.WriteLocation)
        self.GetReadLocationForManifest = _unary(
            channel, REGISTRY_SERVICE, "GetReadLocationForManifest", m.ManifestReadLocation)
        self.GetReadLocationForBlob = _unary(
            channel, REGISTRY_SERVICE, "GetReadLocationForBlob", m.BlobReadLocation)
        self.VerifyManifest = _unary(channel, REGISTRY_SERVICE, "VerifyManifest", m.VerifiedManifestResult)
        self.GetCatalog = _stream(channel, REGISTRY_SERVICE, "GetCatalog", m.CatalogEntry)
        self.ListTags = _stream(channel, REGISTRY_SERVICE, "ListTags", m.Tag)


class AdmissionControllerStub:
    """Admission controller sub-client bound to a channel."""

    def __init__(self, channel: grpc.Channel):
        self.channel = channel
        self.ValidateAdmission = _unary(channel, ADMISSION_SERVICE, "ValidateAdmission", m.AdmissionResponse)
