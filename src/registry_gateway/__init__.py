"""
Registry Gateway - domain-level client for the registry backend RPC services.

Callers work with domain values and receive domain results or a
``BackendError``; the RPC contract stays inside this package.
"""
from .channel import BackendChannel
from .errors import (
    AdmissionRejected,
    BackendError,
    LocationRejected,
    ResourceError,
    RpcError,
    StreamError,
)
from .operations.facade import RegistryGateway
from .settings import Settings, create_settings_from_env
from .types import (
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

__version__ = "0.1.0"

__all__ = [
    "BackendChannel",
    "RegistryGateway",
    "Settings",
    "create_settings_from_env",
    "BackendError",
    "RpcError",
    "StreamError",
    "ResourceError",
    "LocationRejected",
    "AdmissionRejected",
    "AcceptedUpload",
    "AdmissionReview",
    "BlobReader",
    "Digest",
    "ManifestReader",
    "RepoCatalog",
    "RepoName",
    "TagList",
    "UploadId",
    "UploadInfo",
    "VerifiedManifest",
]
