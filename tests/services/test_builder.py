"""Tests for build_request and RequestBuilderService."""

import json
from pathlib import Path
from urllib.parse import parse_qsl, unquote

import pytest

from commandwire.config.settings import WireSettings
from commandwire.domain.errors import BodySerializationError, InvalidURLError
from commandwire.domain.types import HTTPMethod
from commandwire.services.builder import RequestBuilderService, build_request, serialize_body
from tests.conftest import make_command


class TestUrl:
    def test_scheme_is_https(self) -> None:
        request = build_request(make_command())
        assert request.url.startswith("https://")

    def test_no_host_leaves_authority_empty(self) -> None:
        request = build_request(make_command("/1/indexes/products"))
        assert request.url == "https:///1/indexes/products"
        assert request.path == "/1/indexes/products"

    def test_host(self) -> None:
        request = build_request(make_command(), host="app-dsn.example.net")
        assert request.url == "https://app-dsn.example.net/1/indexes/products"

    def test_ipv6_host(self) -> None:
        request = build_request(make_command(), host="[::1]:8443")
        assert request.url == "https://[::1]:8443/1/indexes/products"
        assert request.path == "/1/indexes/products"

    def test_invalid_host(self) -> None:
        with pytest.raises(InvalidURLError):
            build_request(make_command(), host="not a host")

    @pytest.mark.parametrize(
        "path", ["/1/indexes/products", "/1/indexes/my index/query", "/1/indexes/ünï/settings"]
    )
    def test_unencoded_path_decodes_back(self, path: str) -> None:
        assert unquote(build_request(make_command(path)).path) == path

    @pytest.mark.parametrize(
        "path", ["/1/indexes/x/objects/a%3Ab", "/1/indexes/x/objects/a%2Fb"]
    )
    def test_encoded_path_kept_once(self, path: str) -> None:
        assert build_request(make_command(path)).path == path

    def test_double_encoded_path(self) -> None:
        request = build_request(make_command("/1/indexes/x/gid%253A%252F%252Fy"))
        assert request.path == "/1/indexes/x/gid%3A%2F%2Fy"

    def test_relative_path_rejected(self) -> None:
        with pytest.raises(InvalidURLError):
            build_request(make_command("1/indexes"))


class TestQuery:
    def test_url_parameters(self) -> None:
        request = build_request(make_command(url_parameters={"query": "hello world"}))
        assert request.query == "query=hello%20world"
        assert dict(parse_qsl(request.query)) == {"query": "hello world"}

    def test_no_parameters_no_query(self) -> None:
        request = build_request(make_command(headers={"X-Forwarded-For": "1.2.3.4"}))
        assert "?" not in request.url

    def test_query_appended_after_path(self) -> None:
        request = build_request(
            make_command("/1/indexes/x", url_parameters={"page": "2", "hitsPerPage": "10"}),
            host="example.com",
        )
        assert request.url == "https://example.com/1/indexes/x?page=2&hitsPerPage=10"


class TestMethodAndHeaders:
    @pytest.mark.parametrize("method", list(HTTPMethod))
    def test_method(self, method: HTTPMethod) -> None:
        assert build_request(make_command(method=method)).method is method

    def test_option_headers_applied(self) -> None:
        request = build_request(make_command(headers={"X-Algolia-UserToken": "user-1"}))
        assert request.headers == {"X-Algolia-UserToken": "user-1"}

    def test_no_options_no_headers(self) -> None:
        assert build_request(make_command()).headers == {}

    def test_caller_headers_override_defaults(self) -> None:
        request = build_request(
            make_command(headers={"user-agent": "mine/1.0"}),
            default_headers={"User-Agent": "commandwire/0.1.0"},
        )
        assert request.header("User-Agent") == "mine/1.0"
        assert len(request.headers) == 1


class TestBody:
    def test_raw_body(self) -> None:
        request = build_request(make_command(method="POST", body=b'{"a":1}'))
        assert request.body == b'{"a":1}'

    def test_options_body_wins_over_raw_body(self) -> None:
        request = build_request(
            make_command(method="POST", body=b'{"a":1}', options_body={"b": 2})
        )
        assert json.loads(request.body) == {"b": 2}

    def test_empty_options_body_keeps_raw_body(self) -> None:
        request = build_request(make_command(method="POST", body=b'{"a":1}', options_body={}))
        assert request.body == b'{"a":1}'

    def test_options_body_without_raw_body(self) -> None:
        request = build_request(make_command(method="POST", options_body={"q": "é"}))
        assert request.body == '{"q":"é"}'.encode()

    def test_unserializable_options_body(self) -> None:
        with pytest.raises(BodySerializationError):
            build_request(make_command(method="POST", options_body={"ids": {1, 2}}))

    def test_command_not_modified(self) -> None:
        command = make_command(method="POST", body=b"{}", options_body={"b": 2})
        before = command.model_dump()
        build_request(command)
        assert command.model_dump() == before


class TestSerializeBody:
    def test_compact(self) -> None:
        assert serialize_body({"a": [1, 2], "b": None}) == b'{"a":[1,2],"b":null}'

    def test_nan_rejected(self) -> None:
        with pytest.raises(BodySerializationError):
            serialize_body({"score": float("nan")})


class TestRequestBuilderService:
    def test_success(self, settings: WireSettings) -> None:
        result = RequestBuilderService(settings).build(make_command())
        assert result.ok
        assert result.op == "build_request"
        request = result.data["request"]
        assert result.data["url"] == request.url
        assert request.header("User-Agent") == settings.headers.user_agent

    def test_host_from_settings(self, tmp_path: Path) -> None:
        settings = WireSettings.load(start=tmp_path, host="search.example.com")
        result = RequestBuilderService(settings).build(make_command())
        assert result.data["url"] == "https://search.example.com/1/indexes/products"

    def test_explicit_host_overrides_settings(self, tmp_path: Path) -> None:
        settings = WireSettings.load(start=tmp_path, host="search.example.com")
        result = RequestBuilderService(settings).build(make_command(), host="other.example.com")
        assert result.data["url"].startswith("https://other.example.com/")

    def test_invalid_url_reported(self, settings: WireSettings) -> None:
        result = RequestBuilderService(settings).build(make_command("relative/path"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_URL"
        assert result.error.detail == {"component": "path", "value": "relative/path"}

    def test_body_serialization_reported(self, settings: WireSettings) -> None:
        command = make_command(method="POST", options_body={"when": object()})
        result = RequestBuilderService(settings).build(command)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "BODY_SERIALIZATION"
