"""
Wire package - the opaque RPC contract used by the gateway.

Nothing in here is part of the public API; callers work with domain types.
"""
from .services import (
    ADMISSION_SERVICE,
    REGISTRY_SERVICE,
    AdmissionControllerStub,
    AdmissionService,
    RegistryService,
    RegistryStub,
)

__all__ = [
    "ADMISSION_SERVICE",
    "REGISTRY_SERVICE",
    "AdmissionControllerStub",
    "AdmissionService",
    "RegistryService",
    "RegistryStub",
]
