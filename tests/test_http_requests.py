"""
Tests for request descriptors and the request construction helpers.
"""

import dataclasses
import json

import pytest
from pydantic import BaseModel

from restcheck import (
    USE_GLOBAL_TIMEOUT,
    ApiHeader,
    ContentType,
    FormUrlEncodedRequest,
    GeneralRequest,
    HTTPMethod,
    InvalidJsonError,
    JsonRequest,
    Response,
)


class TestHttpRequest:
    """Test the immutable request descriptor."""

    def test_defaults(self):
        request = GeneralRequest.get("http://sushi.test/sushi")
        assert request.name == "GET http://sushi.test/sushi"
        assert request.method == HTTPMethod.GET
        assert request.content_type is None
        assert request.body is None
        assert request.headers == ()
        assert request.timeout == USE_GLOBAL_TIMEOUT

    def test_is_immutable(self):
        request = GeneralRequest.get("http://sushi.test/")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.url = "http://elsewhere.test/"

    def test_with_methods_return_copies(self):
        original = GeneralRequest.get("http://sushi.test/")
        modified = original.with_header("Accept", "application/json")
        assert original.headers == ()
        assert modified.headers == (ApiHeader("Accept", "application/json"),)

    def test_headers_keep_order_and_duplicates(self):
        request = (
            GeneralRequest.get("http://sushi.test/")
            .with_header("X-Tag", "a")
            .with_header("Accept", "*/*")
            .with_header("X-Tag", "b")
        )
        assert [(h.name, h.value) for h in request.headers] == [("X-Tag", "a"), ("Accept", "*/*"), ("X-Tag", "b")]
        assert request.has_header("x-tag")
        assert not request.has_header("Authorization")

    def test_route_param_values_are_strings(self):
        request = GeneralRequest.get("http://sushi.test/sushi/{id}").with_route_param("id", 5)
        assert request.route_params[0].value == "5"

    def test_timeout_override(self):
        request = GeneralRequest.get("http://sushi.test/").with_timeout(1500)
        assert request.timeout == 1500
        assert request.with_timeout(USE_GLOBAL_TIMEOUT).timeout == USE_GLOBAL_TIMEOUT

    def test_negative_timeout_is_rejected(self):
        with pytest.raises(ValueError):
            GeneralRequest.get("http://sushi.test/").with_timeout(-5)


class TestGeneralRequest:
    """Test the general request builders."""

    @pytest.mark.parametrize("builder,method", [
        (GeneralRequest.get, HTTPMethod.GET),
        (GeneralRequest.head, HTTPMethod.HEAD),
        (GeneralRequest.options, HTTPMethod.OPTIONS),
        (GeneralRequest.post, HTTPMethod.POST),
        (GeneralRequest.put, HTTPMethod.PUT),
        (GeneralRequest.patch, HTTPMethod.PATCH),
        (GeneralRequest.delete, HTTPMethod.DELETE),
    ])
    def test_methods(self, builder, method):
        assert builder("http://sushi.test/").method == method

    def test_body_defaults_to_plain_text(self):
        request = GeneralRequest.post("http://sushi.test/", "hello")
        assert request.body == "hello"
        assert request.content_type == ContentType("text/plain", "UTF-8")


class TestJsonRequest:
    """Test the JSON request builders."""

    def test_post_from_string(self):
        request = JsonRequest.post_from_string("http://sushi.test/sushi", '{"name": "sashimi"}')
        assert request.method == HTTPMethod.POST
        assert request.body == '{"name": "sashimi"}'
        assert request.content_type.mime_type == "application/json"

    @pytest.mark.parametrize("builder,method", [
        (JsonRequest.put_from_string, HTTPMethod.PUT),
        (JsonRequest.patch_from_string, HTTPMethod.PATCH),
        (JsonRequest.delete_from_string, HTTPMethod.DELETE),
    ])
    def test_other_methods(self, builder, method):
        assert builder("http://sushi.test/", "{}").method == method

    def test_invalid_json_is_rejected(self):
        with pytest.raises(InvalidJsonError):
            JsonRequest.post_from_string("http://sushi.test/", "{name: sashimi")

    def test_from_file(self, tmp_path):
        path = tmp_path / "create_sushi_request.json"
        path.write_text('{"name": "sashimi", "price": "5.60"}', encoding="utf-8")

        request = JsonRequest.post_from_file("http://sushi.test/sushi", path)

        assert json.loads(request.body) == {"name": "sashimi", "price": "5.60"}

    def test_from_model_dict(self):
        request = JsonRequest.from_model(HTTPMethod.PUT, "http://sushi.test/", {"name": "maki"})
        assert json.loads(request.body) == {"name": "maki"}

    def test_from_pydantic_model(self):
        class Order(BaseModel):
            name: str
            quantity: int

        request = JsonRequest.from_model(HTTPMethod.POST, "http://sushi.test/", Order(name="maki", quantity=2))
        assert json.loads(request.body) == {"name": "maki", "quantity": 2}

    def test_from_unserializable_model(self):
        with pytest.raises(InvalidJsonError):
            JsonRequest.from_model(HTTPMethod.POST, "http://sushi.test/", object())


class TestFormUrlEncodedRequest:
    """Test the form request builders."""

    def test_post(self):
        request = FormUrlEncodedRequest.post("http://sushi.test/", {"name": "maki roll", "tags": ["a", "b"]})
        assert request.body == "name=maki+roll&tags=a&tags=b"
        assert request.content_type.mime_type == "application/x-www-form-urlencoded"

    def test_put(self):
        assert FormUrlEncodedRequest.put("http://sushi.test/", {}).method == HTTPMethod.PUT


class TestContentTypeAndResponse:
    """Test content type parsing and response accessors."""

    def test_parse(self):
        content_type = ContentType.parse('application/JSON; charset="utf-8"')
        assert content_type == ContentType("application/json", "utf-8")
        assert str(content_type) == "application/json; charset=utf-8"

    def test_parse_blank(self):
        assert ContentType.parse(None) is None
        assert ContentType.parse("  ") is None

    def test_response_headers_are_case_insensitive(self):
        response = Response(
            status_code=200,
            headers=(ApiHeader("Set-Cookie", "a=1"), ApiHeader("set-cookie", "b=2")),
        )
        assert response.header("SET-COOKIE") == "a=1"
        assert response.header_values("Set-Cookie") == ("a=1", "b=2")
        assert response.header("Missing") is None

    def test_unknown_charset_falls_back_to_utf8(self):
        response = Response(status_code=200, content_type=ContentType.parse("text/plain; charset=foo"),
                            body="caf\u00e9".encode("utf-8"))
        assert response.text == "caf\u00e9"

    def test_response_json(self):
        response = Response(status_code=200, content_type=ContentType("application/json"), body=b'{"a": [1]}')
        assert response.json() == {"a": [1]}
