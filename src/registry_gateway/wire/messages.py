"""
Wire messages exchanged with the backend.

These Pydantic models are the request/response contract of the two backend
services. They are serialized as JSON bytes on the channel and never leave the
gateway: callers only see the domain types in ``registry_gateway.types``.
"""
from __future__ import annotations

from typing import Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

M = TypeVar("M", bound="WireMessage")


class WireMessage(BaseModel):
    """Base for all wire messages; unknown fields from newer backends are ignored."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls: Type[M], payload: bytes) -> M:
        return cls.model_validate_json(payload)


# Upload lifecycle

class UploadRequest(WireMessage):
    repo_name: str


class UploadDetails(WireMessage):
    uuid: str


class CompleteRequest(WireMessage):
    repo_name: str
    uuid: str
    user_digest: str


class CompletedUpload(WireMessage):
    digest: str


# Location resolution

class BlobRef(WireMessage):
    """Reference to an in-progress upload."""
    repo_name: str
    uuid: str


class ManifestRef(WireMessage):
    repo_name: str
    reference: str


class DownloadRef(WireMessage):
    """Reference to a stored blob."""
    repo_name: str
    digest: str


class WriteLocation(WireMessage):
    path: str


class ManifestReadLocation(WireMessage):
    path: str
    content_type: str
    digest: str


class BlobReadLocation(WireMessage):
    path: str


class VerifiedManifestResult(WireMessage):
    digest: str
    content_type: str


# Enumeration

class CatalogRequest(WireMessage):
    pass


class CatalogEntry(WireMessage):
    repo_name: str


class Tag(WireMessage):
    tag: str


# Admission control

class AdmissionRequest(WireMessage):
    api_version: str
    uid: str
    image: str
    namespace: str
    operation: str


class AdmissionResponse(WireMessage):
    valid: bool
    reason: str = Field(default="")


__all__ = [
    "WireMessage",
    "UploadRequest",
    "UploadDetails",
    "CompleteRequest",
    "CompletedUpload",
    "BlobRef",
    "ManifestRef",
    "DownloadRef",
    "WriteLocation",
    "ManifestReadLocation",
    "BlobReadLocation",
    "VerifiedManifestResult",
    "CatalogRequest",
    "CatalogEntry",
    "Tag",
    "AdmissionRequest",
    "AdmissionResponse",
]
