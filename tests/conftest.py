"""Root pytest configuration for registry-gateway tests."""
import pytest

from registry_gateway.operations import RegistryGateway
from registry_gateway.settings import Settings

from tests.fakes import FakeAdmission, FakeRegistry


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: test drives a real in-process gRPC server"
    )


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep tests independent of the caller's environment."""
    for var in ("REGISTRY_GATEWAY_BACKEND", "REGISTRY_GATEWAY_RPC_TIMEOUT",
                "REGISTRY_GATEWAY_MAX_MESSAGE_BYTES", "REGISTRY_GATEWAY_LOCATION_ROOT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings():
    """Standard test settings."""
    return Settings(backend_address="127.0.0.1:51000", rpc_timeout_s=5.0)


@pytest.fixture
def registry(tmp_path):
    """Fake registry backend storing files under a temporary directory."""
    return FakeRegistry(tmp_path / "backend")


@pytest.fixture
def admission():
    """Fake admission controller that admits everything."""
    return FakeAdmission()


@pytest.fixture
def gateway(registry, admission, settings):
    """Gateway wired to the fakes."""
    return RegistryGateway(registry, admission, settings=settings)
