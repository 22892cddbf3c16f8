"""
Registry Gateway facade - domain operations over the backend RPC services.

Provides one method per domain verb. Each method builds a wire request from
domain values, issues the call on the right sub-client, and maps the response
back into a domain value. Every failure surfaces as a ``BackendError``.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Optional, TypeVar

import grpc

from ..channel import BackendChannel
from ..errors import AdmissionRejected, RpcError, StreamError
from ..locations import LocationPolicy
from ..settings import Settings
from ..translators import OpenMode, describe, drain, open_for, rpc_status
from ..types import (
    AcceptedUpload,
    AdmissionReview,
    BlobReader,
    Digest,
    ManifestReader,
    RepoCatalog,
    RepoName,
    TagList,
    UploadId,
    UploadInfo,
    VerifiedManifest,
)
from ..wire import messages as m
from ..wire.services import AdmissionService, RegistryService

logger = logging.getLogger(__name__)

R = TypeVar("R")


class RegistryGateway:
    """
    Client-side facade over the registry and admission controller services.

    Design Notes: Registry Gateway

    The gateway is the only place that knows about the wire contract. It holds
    two sub-clients (registry, admission) that share one channel and no other
    state, so a single instance may be used from many threads at once.

    - Inputs are domain values that validated themselves on construction
    - Unary failures become ``RpcError``; stream failures ``StreamError``
    - Opening a resolved location fails with ``ResourceError``
    - A negative admission answer becomes ``AdmissionRejected``

    Handles returned by the ``get_*`` methods belong to the caller. The gateway
    keeps no reference to them and never closes them.
    """

    def __init__(self, registry: RegistryService, admission: AdmissionService, *,
                 settings: Optional[Settings] = None,
                 location_policy: Optional[LocationPolicy] = None):
        """
        Initialize the gateway.

        Args:
            registry: Registry operations sub-client
            admission: Admission control sub-client
            settings: Optional settings; supplies the per-call deadline
            location_policy: Optional confinement for backend locations
                (defaults to the policy described by settings, if any)
        """
        self.registry = registry
        self.admission = admission
        self.settings = settings
        self.timeout = settings.rpc_timeout_s if settings is not None else None
        if location_policy is None:
            location_policy = LocationPolicy.from_settings(settings)
        self.location_policy = location_policy

    @classmethod
    def from_channel(cls, channel: BackendChannel, settings: Optional[Settings] = None, *,
                     location_policy: Optional[LocationPolicy] = None) -> RegistryGateway:
        """Build a gateway whose two sub-clients share ``channel``."""
        return cls(channel.registry(), channel.admission(), settings=settings,
                   location_policy=location_policy)

    # Upload lifecycle

    def request_upload(self, repo_name: RepoName) -> UploadInfo:
        """
        Start a new upload session.

        Returns:
            Upload id issued by the backend with a zeroed byte range
        """
        req = m.UploadRequest(repo_name=repo_name.value)
        resp = self._call("request_upload", self.registry.RequestUpload, req)
        upload_id = self._map("request_upload", lambda: UploadId(resp.uuid))
        return UploadInfo(upload_id=upload_id, repo_name=repo_name, range=(0, 0))

    def complete_upload(self, repo_name: RepoName, upload_id: UploadId, digest: Digest) -> AcceptedUpload:
        """
        Finalize an upload, asserting the caller's digest.

        The digest in the result is the one the backend reports, which is the
        source of truth even if it differs from ``digest``.
        """
        req = m.CompleteRequest(repo_name=repo_name.value, uuid=upload_id.value, user_digest=digest.value)
        resp = self._call("complete_upload", self.registry.CompleteUpload, req)
        return self._map(
            "complete_upload",
            lambda: AcceptedUpload(digest=Digest(resp.digest), repo_name=repo_name),
        )

    # Write sinks

    def get_write_sink_for_upload(self, repo_name: RepoName, upload_id: UploadId) -> BinaryIO:
        """
        Open the storage location of an in-progress upload for appending.

        Repeated calls for the same upload append to what was written before,
        which is what chunked and resumed uploads rely on.
        """
        req = m.BlobRef(repo_name=repo_name.value, uuid=upload_id.value)
        resp = self._call("get_write_sink_for_upload", self.registry.GetWriteLocationForBlob, req)
        return self._open(OpenMode.UPLOAD_APPEND, resp.path)

    def get_write_sink_for_manifest(self, repo_name: RepoName, reference: str) -> BinaryIO:
        """Open a manifest location for writing; existing content is truncated."""
        req = m.ManifestRef(repo_name=repo_name.value, reference=reference)
        resp = self._call("get_write_sink_for_manifest", self.registry.GetWriteLocationForManifest, req)
        return self._open(OpenMode.MANIFEST_TRUNCATE, resp.path)

    # Readers

    def get_reader_for_manifest(self, repo_name: RepoName, reference: str) -> ManifestReader:
        """Open a manifest read-only, bundled with its content type and digest."""
        req = m.ManifestRef(repo_name=repo_name.value, reference=reference)
        resp = self._call("get_reader_for_manifest", self.registry.GetReadLocationForManifest, req)
        digest = self._map("get_reader_for_manifest", lambda: Digest(resp.digest))
        handle = self._open(OpenMode.READ, resp.path)
        return ManifestReader(handle, content_type=resp.content_type, digest=digest)

    def get_reader_for_blob(self, repo_name: RepoName, digest: Digest) -> BlobReader:
        """Open a blob read-only, bundled with the requested digest."""
        req = m.DownloadRef(repo_name=repo_name.value, digest=digest.value)
        resp = self._call("get_reader_for_blob", self.registry.GetReadLocationForBlob, req)
        handle = self._open(OpenMode.READ, resp.path)
        return BlobReader(handle, digest=digest)

    # Verification

    def verify_manifest(self, repo_name: RepoName, reference: str) -> VerifiedManifest:
        """Ask the backend to validate a manifest; digest and content type are the backend's."""
        req = m.ManifestRef(repo_name=repo_name.value, reference=reference)
        resp = self._call("verify_manifest", self.registry.VerifyManifest, req)
        return self._map(
            "verify_manifest",
            lambda: VerifiedManifest(
                repo_name=repo_name,
                digest=Digest(resp.digest),
                reference=reference,
                content_type=resp.content_type,
            ),
        )

    # Enumeration

    def get_catalog(self) -> RepoCatalog:
        """Enumerate all repositories; never returns a partial catalog."""
        stream = self._open_stream("get_catalog", self.registry.GetCatalog, m.CatalogRequest())
        return drain(
            stream,
            lambda entries: RepoCatalog.from_names(RepoName(e.repo_name) for e in entries),
            operation="get_catalog",
        )

    def list_tags(self, repo_name: RepoName) -> TagList:
        """Enumerate the tags of one repository; never returns a partial list."""
        stream = self._open_stream("list_tags", self.registry.ListTags, m.CatalogEntry(repo_name=repo_name.value))
        return drain(
            stream,
            lambda tags: TagList.from_tags(repo_name, (t.tag for t in tags)),
            operation="list_tags",
        )

    # Admission control

    def validate_admission(self, review: AdmissionReview) -> None:
        """
        Submit an admission review.

        Returns normally only when the backend answers ``valid``.

        Raises:
            AdmissionRejected: With the backend's reason, verbatim
            RpcError: If the call itself fails
        """
        req = m.AdmissionRequest(
            api_version=review.api_version,
            uid=review.uid,
            image=review.image,
            namespace=review.namespace,
            operation=review.operation,
        )
        resp = self._call("validate_admission", self.admission.ValidateAdmission, req)
        if not resp.valid:
            logger.info(f"Admission rejected for {review.image} ({review.uid}): {resp.reason}")
            raise AdmissionRejected(resp.reason)

    # Helpers

    def _call(self, operation: str, method: Callable, request: m.WireMessage):
        """Issue a unary call, mapping transport failures to ``RpcError``."""
        logger.debug(f"{operation}: {type(request).__name__}")
        try:
            return method(request, timeout=self.timeout)
        except grpc.RpcError as e:
            code, details = rpc_status(e)
            logger.warning(f"{operation} failed: {describe(code)}: {details}")
            raise RpcError(f"{operation} failed: {describe(code)}: {details}",
                           operation=operation, code=code) from e

    def _open_stream(self, operation: str, method: Callable, request: m.WireMessage):
        """Start a server stream; a failure before the first item is still a stream failure."""
        logger.debug(f"{operation}: {type(request).__name__}")
        try:
            return method(request, timeout=self.timeout)
        except grpc.RpcError as e:
            code, details = rpc_status(e)
            logger.warning(f"{operation} failed to start: {details}")
            raise StreamError(f"Failure streaming from server during {operation}: {details}",
                              operation=operation, code=code) from e

    def _open(self, mode: OpenMode, location: str) -> BinaryIO:
        if self.location_policy is not None:
            self.location_policy.check(location)
        return open_for(mode, location)

    @staticmethod
    def _map(operation: str, build: Callable[[], R]) -> R:
        """Build a domain value from a response, treating invalid values as a failed call."""
        try:
            return build()
        except ValueError as e:
            raise RpcError(f"{operation}: malformed backend response: {e}", operation=operation) from e


__all__ = ["RegistryGateway"]
