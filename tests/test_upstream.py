"""Tests for crates.io / GitHub lookups."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from cranelift_tools.exceptions import UpstreamError
from cranelift_tools.upstream import UpstreamClient


def _response(payload=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error:
        response.raise_for_status.side_effect = status_error
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    with patch("cranelift_tools.upstream.requests.Session") as session_class:
        yield session_class.return_value


class TestNewestVersion:
    def test_returns_newest_version(self, session):
        session.get.return_value = _response({"crate": {"newest_version": "0.60.0"}})

        with UpstreamClient(timeout=5.0) as client:
            assert client.newest_version("cranelift-codegen") == "0.60.0"

        session.get.assert_called_once_with(
            "https://crates.io/api/v1/crates/cranelift-codegen", timeout=5.0
        )

    def test_sets_user_agent(self, session):
        session.get.return_value = _response({"crate": {"newest_version": "0.60.0"}})

        UpstreamClient().newest_version("cranelift-codegen")

        headers = session.headers.update.call_args.args[0]
        assert "User-Agent" in headers

    def test_missing_field(self, session):
        session.get.return_value = _response({"errors": [{"detail": "Not Found"}]})

        with pytest.raises(UpstreamError, match="newest_version"):
            UpstreamClient().newest_version("cranelift-nope")

    def test_http_error(self, session):
        session.get.return_value = _response(
            status_error=requests.HTTPError("503 Service Unavailable")
        )

        with pytest.raises(UpstreamError, match="503"):
            UpstreamClient().newest_version("cranelift-codegen")

    def test_connection_error(self, session):
        session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(UpstreamError) as exc_info:
            UpstreamClient().newest_version("cranelift-codegen")
        assert exc_info.value.context["url"].startswith("https://crates.io/")

    def test_invalid_json(self, session):
        session.get.return_value = _response(json_error=ValueError("Expecting value"))

        with pytest.raises(UpstreamError):
            UpstreamClient().newest_version("cranelift-codegen")


class TestHeadCommit:
    def test_returns_sha(self, session):
        session.get.return_value = _response({"sha": "abc123", "commit": {}})

        assert UpstreamClient().head_commit("bytecodealliance/wasmtime") == "abc123"
        assert session.get.call_args.args[0] == (
            "https://api.github.com/repos/bytecodealliance/wasmtime/commits/HEAD"
        )

    def test_missing_sha(self, session):
        session.get.return_value = _response({"message": "API rate limit exceeded"})

        with pytest.raises(UpstreamError, match="no sha"):
            UpstreamClient().head_commit("bytecodealliance/wasmtime")


class TestSession:
    def test_session_reused_and_closed(self, session):
        session.get.return_value = _response({"sha": "abc123"})
        client = UpstreamClient()

        client.head_commit("a/b")
        client.head_commit("a/b")
        client.close()

        session.close.assert_called_once()
        assert client._session is None
