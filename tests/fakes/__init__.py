# Fake implementations for testing

from .fake_backend import FakeAdmission, FakeRegistry, FakeRpcError, ScriptedStream

__all__ = ["FakeAdmission", "FakeRegistry", "FakeRpcError", "ScriptedStream"]
