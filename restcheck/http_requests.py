"""
Helpers for constructing common kinds of HTTP requests.

Each helper returns an immutable ``HttpRequest`` that can be refined further
with its ``with_*`` methods before being handed to ``RestCheck.request``.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlencode

from .exceptions import InvalidJsonError
from .models import (
    APPLICATION_FORM_URLENCODED,
    APPLICATION_JSON,
    TEXT_PLAIN,
    ContentType,
    HTTPMethod,
    HttpRequest,
)

PathLike = Union[str, Path]


def _default_name(method: HTTPMethod, url: str) -> str:
    return f"{method.value} {url}"


def _read_file(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")


class GeneralRequest:
    """Builders for requests with an arbitrary (or no) body."""

    @staticmethod
    def of(method: HTTPMethod, url: str, body: Any = None,
           content_type: Optional[ContentType] = None) -> HttpRequest:
        """Create a request, defaulting to a plain text content type when a body is given."""
        if content_type is None and body is not None:
            content_type = TEXT_PLAIN
        return HttpRequest(
            name=_default_name(method, url),
            url=url,
            method=method,
            content_type=content_type,
            body=body,
        )

    @classmethod
    def get(cls, url: str) -> HttpRequest:
        """Create a GET request."""
        return cls.of(HTTPMethod.GET, url)

    @classmethod
    def head(cls, url: str) -> HttpRequest:
        """Create a HEAD request."""
        return cls.of(HTTPMethod.HEAD, url)

    @classmethod
    def options(cls, url: str) -> HttpRequest:
        """Create an OPTIONS request."""
        return cls.of(HTTPMethod.OPTIONS, url)

    @classmethod
    def post(cls, url: str, body: Any = None) -> HttpRequest:
        """Create a POST request."""
        return cls.of(HTTPMethod.POST, url, body)

    @classmethod
    def put(cls, url: str, body: Any = None) -> HttpRequest:
        """Create a PUT request."""
        return cls.of(HTTPMethod.PUT, url, body)

    @classmethod
    def patch(cls, url: str, body: Any = None) -> HttpRequest:
        """Create a PATCH request."""
        return cls.of(HTTPMethod.PATCH, url, body)

    @classmethod
    def delete(cls, url: str, body: Any = None) -> HttpRequest:
        """Create a DELETE request."""
        return cls.of(HTTPMethod.DELETE, url, body)


class JsonRequest:
    """Builders for requests carrying a JSON body.

    String bodies are validated at construction time so that a malformed
    document is reported before any network traffic happens.
    """

    @staticmethod
    def from_string(method: HTTPMethod, url: str, json_text: str) -> HttpRequest:
        try:
            json.loads(json_text)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(f"Request body for {method.value} {url} is not valid JSON: {e}") from e
        return GeneralRequest.of(method, url, json_text, APPLICATION_JSON)

    @classmethod
    def from_file(cls, method: HTTPMethod, url: str, path: PathLike) -> HttpRequest:
        return cls.from_string(method, url, _read_file(path))

    @classmethod
    def from_model(cls, method: HTTPMethod, url: str, model: Any) -> HttpRequest:
        """Serialize a dict, list or Pydantic model into the request body."""
        if hasattr(model, "model_dump_json"):
            json_text = model.model_dump_json()
        else:
            try:
                json_text = json.dumps(model)
            except (TypeError, ValueError) as e:
                raise InvalidJsonError(f"Cannot serialize {type(model).__name__} to JSON: {e}") from e
        return GeneralRequest.of(method, url, json_text, APPLICATION_JSON)

    @classmethod
    def post_from_string(cls, url: str, json_text: str) -> HttpRequest:
        return cls.from_string(HTTPMethod.POST, url, json_text)

    @classmethod
    def put_from_string(cls, url: str, json_text: str) -> HttpRequest:
        return cls.from_string(HTTPMethod.PUT, url, json_text)

    @classmethod
    def patch_from_string(cls, url: str, json_text: str) -> HttpRequest:
        return cls.from_string(HTTPMethod.PATCH, url, json_text)

    @classmethod
    def delete_from_string(cls, url: str, json_text: str) -> HttpRequest:
        return cls.from_string(HTTPMethod.DELETE, url, json_text)

    @classmethod
    def post_from_file(cls, url: str, path: PathLike) -> HttpRequest:
        return cls.from_file(HTTPMethod.POST, url, path)

    @classmethod
    def put_from_file(cls, url: str, path: PathLike) -> HttpRequest:
        return cls.from_file(HTTPMethod.PUT, url, path)

    @classmethod
    def patch_from_file(cls, url: str, path: PathLike) -> HttpRequest:
        return cls.from_file(HTTPMethod.PATCH, url, path)

    @classmethod
    def delete_from_file(cls, url: str, path: PathLike) -> HttpRequest:
        return cls.from_file(HTTPMethod.DELETE, url, path)


class FormUrlEncodedRequest:
    """Builders for requests carrying an url-encoded form body."""

    @staticmethod
    def of(method: HTTPMethod, url: str, data: Mapping[str, Any]) -> HttpRequest:
        return GeneralRequest.of(method, url, urlencode(data, doseq=True), APPLICATION_FORM_URLENCODED)

    @classmethod
    def post(cls, url: str, data: Mapping[str, Any]) -> HttpRequest:
        return cls.of(HTTPMethod.POST, url, data)

    @classmethod
    def put(cls, url: str, data: Mapping[str, Any]) -> HttpRequest:
        return cls.of(HTTPMethod.PUT, url, data)
