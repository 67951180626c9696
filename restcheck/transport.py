"""
Transports perform the network I/O for a described request.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from .config import Configuration, GlobalRequestAttributes
from .exceptions import TransportError
from .models import ApiHeader, ContentType, HttpRequest, Response

# Set up logger for this module
logger = logging.getLogger(__name__)

_ROUTE_PARAM_PATTERN = re.compile(r"\{(\w+)\}")


class Transport(ABC):
    """Abstract interface for anything that can send an ``HttpRequest``."""

    @abstractmethod
    def execute(self, request: HttpRequest, configuration: Configuration) -> Response:
        """Send the request and return the response.

        Raises:
            TransportError: If no response could be obtained
        """
        pass


def build_url(request: HttpRequest, attributes: GlobalRequestAttributes) -> str:
    """Substitute ``{name}`` placeholders, request route params overriding global ones."""
    values = dict(attributes.route_params)
    values.update({param.name: param.value for param in request.route_params})

    def substitute(match):
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return quote(str(values[name]), safe="")

    return _ROUTE_PARAM_PATTERN.sub(substitute, request.url)


def build_query_params(request: HttpRequest, attributes: GlobalRequestAttributes) -> List[Tuple[str, str]]:
    """Global query parameters followed by the request's own, duplicates kept."""
    params = list(attributes.query_params.items())
    params.extend((param.name, param.value) for param in request.query_params)
    return params


def build_headers(request: HttpRequest, attributes: GlobalRequestAttributes) -> Dict[str, str]:
    """Merge global and request headers.

    A request header replaces a global header of the same name (ignoring
    case). Repeated request headers are folded into one comma-separated value.
    The request's content type is only added when no Content-Type header was
    given explicitly.
    """
    merged: Dict[str, Tuple[str, List[str]]] = {}
    for name, value in attributes.headers.items():
        merged[name.lower()] = (name, [value])

    overridden = set()
    for header in request.headers:
        key = header.name.lower()
        if key not in overridden:
            merged[key] = (header.name, [])
            overridden.add(key)
        merged[key][1].append(header.value)

    if request.content_type is not None and "content-type" not in merged:
        merged["content-type"] = ("Content-Type", [str(request.content_type)])

    return {name: ", ".join(values) for name, values in merged.values()}


def encode_body(request: HttpRequest) -> Optional[bytes]:
    """Serialize the request body into bytes."""
    body = request.body
    if body is None:
        return None
    charset = "utf-8"
    if request.content_type is not None and request.content_type.charset:
        charset = request.content_type.charset
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode(charset)
    if isinstance(body, Path):
        return body.read_bytes()
    if hasattr(body, "model_dump_json"):
        return body.model_dump_json().encode(charset)
    if isinstance(body, (dict, list)):
        return json.dumps(body).encode(charset)
    if hasattr(body, "read"):
        data = body.read()
        return data.encode(charset) if isinstance(data, str) else data
    raise TypeError(f"Cannot serialize request body of type {type(body).__name__}")


def convert_response(http_response: requests.Response) -> Response:
    """Convert a ``requests`` response into a harness ``Response``."""
    return Response(
        status_code=http_response.status_code,
        status_text=http_response.reason or "",
        headers=tuple(ApiHeader(name, value) for name, value in http_response.headers.items()),
        content_type=ContentType.parse(http_response.headers.get("Content-Type")),
        body=http_response.content or b"",
    )


class RequestsTransport(Transport):
    """Transport backed by a ``requests.Session``.

    The effective timeout bounds the connect and the read phase separately,
    so a call may take up to about twice the timeout. Redirects are returned
    as-is rather than followed.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session

    def execute(self, request: HttpRequest, configuration: Configuration) -> Response:
        # Create session if not exists (reuse for all requests)
        if self.session is None:
            self.session = requests.Session()

        attributes = configuration.global_request_attributes
        timeout_ms = configuration.effective_timeout(request)
        timeout = None if timeout_ms == 0 else (timeout_ms / 1000.0, timeout_ms / 1000.0)

        kwargs: Dict[str, Any] = {
            "method": request.method.value,
            "url": build_url(request, attributes),
            "headers": build_headers(request, attributes),
            "params": build_query_params(request, attributes),
            "timeout": timeout,
            "allow_redirects": False,
        }
        body = encode_body(request)
        if body is not None:
            kwargs["data"] = body

        logger.debug(f"Sending {kwargs['method']} {kwargs['url']} (timeout: {timeout})")
        try:
            http_response = self.session.request(**kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", original_exception=e) from e

        logger.debug(f"Received {http_response.status_code} from {kwargs['url']}")
        return convert_response(http_response)

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
