"""
Core data models for describing HTTP calls and their responses.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")

# Timeout sentinel meaning "use the globally configured timeout"
USE_GLOBAL_TIMEOUT = -1


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class ContentType:
    """A media type with an optional character set."""

    mime_type: str
    charset: Optional[str] = None

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ContentType"]:
        """Parse a Content-Type header value, returning None for blank input."""
        if not value or not value.strip():
            return None
        parts = [part.strip() for part in value.split(";")]
        charset = None
        for param in parts[1:]:
            key, _, param_value = param.partition("=")
            if key.strip().lower() == "charset" and param_value:
                charset = param_value.strip().strip('"')
        return cls(parts[0].lower(), charset)

    @property
    def is_json(self) -> bool:
        return self.mime_type == "application/json" or self.mime_type.endswith("+json")

    def __str__(self) -> str:
        if self.charset:
            return f"{self.mime_type}; charset={self.charset}"
        return self.mime_type


APPLICATION_JSON = ContentType("application/json", "UTF-8")
APPLICATION_FORM_URLENCODED = ContentType("application/x-www-form-urlencoded", "UTF-8")
TEXT_PLAIN = ContentType("text/plain", "UTF-8")


@dataclass(frozen=True)
class ApiHeader:
    """An HTTP header sent with a request or received in a response."""

    name: str
    value: str


@dataclass(frozen=True)
class ApiQueryParam:
    """A query string parameter appended to the request URL."""

    name: str
    value: str


@dataclass(frozen=True)
class RouteParam:
    """A value substituted for a ``{name}`` placeholder in the request URL."""

    name: str
    value: str


@dataclass(frozen=True)
class HttpRequest:
    """Immutable description of one HTTP request.

    Headers and query parameters keep their insertion order and may repeat.
    A ``timeout`` (in milliseconds) of ``USE_GLOBAL_TIMEOUT`` defers to the
    configured global timeout; ``0`` waits indefinitely.

    The ``with_*`` methods return modified copies.
    """

    name: str
    url: str
    method: HTTPMethod
    content_type: Optional[ContentType] = None
    headers: Tuple[ApiHeader, ...] = ()
    query_params: Tuple[ApiQueryParam, ...] = ()
    route_params: Tuple[RouteParam, ...] = ()
    body: Any = None
    timeout: int = USE_GLOBAL_TIMEOUT

    def with_name(self, name: str) -> "HttpRequest":
        return replace(self, name=name)

    def with_header(self, name: str, value: str) -> "HttpRequest":
        return replace(self, headers=self.headers + (ApiHeader(name, value),))

    def with_query_param(self, name: str, value: str) -> "HttpRequest":
        return replace(self, query_params=self.query_params + (ApiQueryParam(name, value),))

    def with_route_param(self, name: str, value: Any) -> "HttpRequest":
        return replace(self, route_params=self.route_params + (RouteParam(name, str(value)),))

    def with_content_type(self, content_type: Optional[ContentType]) -> "HttpRequest":
        return replace(self, content_type=content_type)

    def with_body(self, body: Any) -> "HttpRequest":
        return replace(self, body=body)

    def with_timeout(self, timeout: int) -> "HttpRequest":
        """Override the global timeout for this request.

        Args:
            timeout: Milliseconds for each of the connect and read phases,
                0 for no timeout, or USE_GLOBAL_TIMEOUT

        Returns:
            A copy of this request with the new timeout
        """
        if timeout < 0 and timeout != USE_GLOBAL_TIMEOUT:
            raise ValueError(f"Invalid timeout: {timeout}")
        return replace(self, timeout=timeout)

    def has_header(self, name: str) -> bool:
        """Check if the request carries a header, ignoring case."""
        return any(header.name.lower() == name.lower() for header in self.headers)


@dataclass(frozen=True)
class Response:
    """An HTTP response as produced by the transport."""

    status_code: int
    status_text: str = ""
    headers: Tuple[ApiHeader, ...] = ()
    content_type: Optional[ContentType] = None
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        """Get the first value of a header, ignoring case."""
        for header in self.headers:
            if header.name.lower() == name.lower():
                return header.value
        return None

    def header_values(self, name: str) -> Tuple[str, ...]:
        """Get every value of a repeated header, in received order."""
        return tuple(header.value for header in self.headers if header.name.lower() == name.lower())

    @property
    def text(self) -> str:
        """Get the body decoded with the response charset (UTF-8 when unspecified or unknown)."""
        charset = self.content_type.charset if self.content_type and self.content_type.charset else "utf-8"
        try:
            codecs.lookup(charset)
        except LookupError:
            charset = "utf-8"
        return self.body.decode(charset, errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(self.text)


@dataclass(frozen=True)
class ModelResponse(Generic[T]):
    """A response together with the model decoded from it."""

    response: Response
    model: Optional[T] = field(default=None)

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def status_text(self) -> str:
        return self.response.status_text

    @property
    def headers(self) -> Tuple[ApiHeader, ...]:
        return self.response.headers

    @property
    def content_type(self) -> Optional[ContentType]:
        return self.response.content_type

    @property
    def body(self) -> bytes:
        return self.response.body

    @property
    def text(self) -> str:
        return self.response.text

    def header(self, name: str) -> Optional[str]:
        return self.response.header(name)

    def json(self) -> Any:
        return self.response.json()
