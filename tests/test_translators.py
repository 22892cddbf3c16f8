"""
Tests for the resource translators.

Validates the open mode table and the all-or-nothing stream consumption.
"""
from __future__ import annotations

import grpc
import pytest

from registry_gateway.errors import ResourceError, StreamError
from registry_gateway.translators import OpenMode, drain, open_for, rpc_status

from tests.fakes import FakeRpcError, ScriptedStream


class TestOpenFor:

    def test_append_mode_creates_and_appends(self, tmp_path):
        location = str(tmp_path / "upload")
        with open_for(OpenMode.UPLOAD_APPEND, location) as sink:
            sink.write(b"abc")
        with open_for(OpenMode.UPLOAD_APPEND, location) as sink:
            sink.write(b"def")
        assert (tmp_path / "upload").read_bytes() == b"abcdef"

    def test_truncate_mode_replaces_content(self, tmp_path):
        location = str(tmp_path / "manifest")
        with open_for(OpenMode.MANIFEST_TRUNCATE, location) as sink:
            sink.write(b"a much longer first manifest")
        with open_for(OpenMode.MANIFEST_TRUNCATE, location) as sink:
            sink.write(b"short")
        assert (tmp_path / "manifest").read_bytes() == b"short"

    def test_read_mode_reads(self, tmp_path):
        (tmp_path / "blob").write_bytes(b"payload")
        with open_for(OpenMode.READ, str(tmp_path / "blob")) as handle:
            assert handle.read() == b"payload"

    def test_read_mode_fails_if_absent(self, tmp_path):
        location = str(tmp_path / "missing")
        with pytest.raises(ResourceError) as exc_info:
            open_for(OpenMode.READ, location)
        assert exc_info.value.location == location
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert not (tmp_path / "missing").exists()

    def test_write_into_missing_directory_fails(self, tmp_path):
        with pytest.raises(ResourceError):
            open_for(OpenMode.UPLOAD_APPEND, str(tmp_path / "no" / "such" / "dir" / "file"))

    @pytest.mark.parametrize("mode", list(OpenMode))
    def test_unrepresentable_location_is_a_resource_error(self, tmp_path, mode):
        location = f"{tmp_path}/a\x00b"
        with pytest.raises(ResourceError) as exc_info:
            open_for(mode, location)
        assert exc_info.value.location == location
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestDrain:

    def test_complete_stream_builds_collection(self):
        stream = ScriptedStream(["x", "y", "z"])
        assert drain(stream, set) == {"x", "y", "z"}
        assert not stream.cancelled

    def test_empty_stream(self):
        assert drain(ScriptedStream([]), list) == []

    def test_error_mid_stream_discards_partial_items(self):
        error = FakeRpcError(grpc.StatusCode.UNAVAILABLE, "connection reset")
        stream = ScriptedStream(["a", "b"], error=error)
        built = []

        with pytest.raises(StreamError) as exc_info:
            drain(stream, lambda items: built.append(items), operation="get_catalog")

        assert built == []
        assert stream.pulled == 2
        assert stream.cancelled
        assert exc_info.value.operation == "get_catalog"
        assert exc_info.value.code is grpc.StatusCode.UNAVAILABLE
        assert exc_info.value.__cause__ is error
        assert "connection reset" in str(exc_info.value)

    def test_malformed_item_is_a_stream_failure(self):
        def build(items):
            raise ValueError("bad repo name")

        with pytest.raises(StreamError, match="bad repo name"):
            drain(ScriptedStream(["ok"]), build, operation="list_tags")

    def test_non_grpc_iterator_failure_is_a_stream_failure(self):
        cause = ConnectionResetError("peer went away")
        stream = ScriptedStream(["a"], error=cause)

        with pytest.raises(StreamError) as exc_info:
            drain(stream, list, operation="get_catalog")

        assert stream.cancelled
        assert exc_info.value.code is None
        assert exc_info.value.__cause__ is cause
        assert "peer went away" in str(exc_info.value)


class TestRpcStatus:

    def test_extracts_code_and_details(self):
        code, details = rpc_status(FakeRpcError(grpc.StatusCode.NOT_FOUND, "missing"))
        assert code is grpc.StatusCode.NOT_FOUND
        assert details == "missing"

    def test_plain_rpc_error(self):
        code, details = rpc_status(grpc.RpcError("opaque"))
        assert code is None
        assert details == "opaque"
