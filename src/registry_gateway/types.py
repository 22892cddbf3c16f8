"""
Domain value types for the registry gateway.

These are the only types callers of the gateway see. They carry no protocol
detail and validate their own invariants on construction, so the gateway
itself never re-validates inputs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Iterator, Tuple

__all__ = [
    "RepoName",
    "Digest",
    "UploadId",
    "UploadInfo",
    "AcceptedUpload",
    "VerifiedManifest",
    "ManifestReader",
    "BlobReader",
    "RepoCatalog",
    "TagList",
    "AdmissionReview",
]

# OCI digest grammar: algorithm ":" encoded
_DIGEST_RE = re.compile(r"^[a-z0-9]+(?:[+._-][a-z0-9]+)*:[a-zA-Z0-9=_-]+$")
_SHA256_RE = re.compile(r"^[a-f0-9]{64}$")


@dataclass(frozen=True)
class RepoName:
    """Repository identifier, e.g. ``library/alpine``."""
    value: str

    def __post_init__(self) -> None:
        if not self.value or self.value.strip() != self.value:
            raise ValueError(f"Invalid repository name: {self.value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Digest:
    """
    Algorithm-qualified content hash.

    Invariants:
    - format is ``algorithm:encoded``
    - sha256 digests carry exactly 64 lowercase hex characters
    """
    value: str

    def __post_init__(self) -> None:
        if not _DIGEST_RE.match(self.value):
            raise ValueError(f"Invalid digest format: {self.value!r}")
        if self.algorithm == "sha256" and not _SHA256_RE.match(self.encoded):
            raise ValueError(f"sha256 digest must be 64 lowercase hex chars: {self.value!r}")

    @property
    def algorithm(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def encoded(self) -> str:
        return self.value.split(":", 1)[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UploadId:
    """Opaque upload session token issued by the backend."""
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Upload id must not be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UploadInfo:
    """Result of starting an upload session."""
    upload_id: UploadId
    repo_name: RepoName
    range: Tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class AcceptedUpload:
    """Result of completing an upload; the digest is backend-confirmed."""
    digest: Digest
    repo_name: RepoName


@dataclass(frozen=True)
class VerifiedManifest:
    """Backend-authoritative verification result for a manifest."""
    repo_name: RepoName
    digest: Digest
    reference: str
    content_type: str


class _ScopedReader:
    """
    Read handle that is released exactly once.

    Usable as a context manager; ``close()`` is idempotent so an explicit
    close followed by scope exit does not double-release the handle.
    """

    def __init__(self, handle: BinaryIO):
        self._handle = handle
        self._closed = False

    @property
    def handle(self) -> BinaryIO:
        return self._handle

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        if self._closed:
            raise ValueError("I/O operation on closed reader")
        return self._handle.read(size)

    def __iter__(self) -> Iterator[bytes]:
        chunk = self.read(65536)
        while chunk:
            yield chunk
            chunk = self.read(65536)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._handle.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class ManifestReader(_ScopedReader):
    """Scoped manifest handle plus the backend's content type and digest."""

    def __init__(self, handle: BinaryIO, content_type: str, digest: Digest):
        super().__init__(handle)
        self.content_type = content_type
        self.digest = digest

    def __repr__(self) -> str:
        return f"ManifestReader(digest={self.digest.value!r}, content_type={self.content_type!r})"


class BlobReader(_ScopedReader):
    """Scoped blob handle bound to one digest."""

    def __init__(self, handle: BinaryIO, digest: Digest):
        super().__init__(handle)
        self.digest = digest

    def __repr__(self) -> str:
        return f"BlobReader(digest={self.digest.value!r})"


@dataclass(frozen=True)
class RepoCatalog:
    """Set of known repositories; order is not significant."""
    repos: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_names(cls, names: Iterable[RepoName]) -> RepoCatalog:
        return cls(repos=frozenset(names))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return any(repo.value == item for repo in self.repos)
        return item in self.repos

    def __iter__(self) -> Iterator[RepoName]:
        return iter(sorted(self.repos, key=lambda r: r.value))

    def __len__(self) -> int:
        return len(self.repos)


@dataclass(frozen=True)
class TagList:
    """Tags of one repository, in the order the backend streamed them."""
    repo_name: RepoName
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_tags(cls, repo_name: RepoName, tags: Iterable[str]) -> TagList:
        # dict preserves first-seen order while dropping duplicates
        return cls(repo_name=repo_name, tags=tuple(dict.fromkeys(tags)))

    def __contains__(self, tag: object) -> bool:
        return tag in self.tags

    def __iter__(self) -> Iterator[str]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)


@dataclass(frozen=True)
class AdmissionReview:
    """A proposed workload change submitted for policy validation."""
    api_version: str
    uid: str
    image: str
    namespace: str
    operation: str

    def __post_init__(self) -> None:
        for name in ("api_version", "uid", "image", "namespace", "operation"):
            if not getattr(self, name):
                raise ValueError(f"AdmissionReview.{name} is required")
