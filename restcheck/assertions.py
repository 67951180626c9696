"""
Assertions and callbacks run against a decoded response.

Both are plain callables invoked as ``fn(status_code, response, model)`` where
``response`` is a ``ModelResponse``. Assertions signal a violation by raising
``AssertionError`` (a bare ``assert`` is enough); callbacks perform post-call
side effects such as capturing an identifier for a follow-up request.
"""

import copy
import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

import jsonschema

from .exceptions import AssertionFailure, InvalidJsonError
from .models import ContentType, ModelResponse

Assertions = Callable[[int, ModelResponse, Any], None]
Callback = Callable[[int, ModelResponse, Any], None]


def no_assertions(status_code: int, response: ModelResponse, model: Any) -> None:
    """Assertions that always pass."""


def no_callback(status_code: int, response: ModelResponse, model: Any) -> None:
    """Callback that does nothing."""


def run_assertions(assertions: Assertions, model_response: ModelResponse) -> None:
    """Invoke assertions, letting any violation propagate to the caller."""
    assertions(model_response.status_code, model_response, model_response.model)


def run_callback(callback: Callback, model_response: ModelResponse) -> None:
    """Invoke the post-call callback, letting any exception propagate."""
    callback(model_response.status_code, model_response, model_response.model)


class ResponseAssertions:
    """Checks the status code and, optionally, the content type and headers."""

    def __init__(self, expected_status: int, content_type: Optional[str] = None,
                 headers: Optional[Mapping[str, str]] = None):
        self.expected_status = expected_status
        self.content_type = ContentType.parse(content_type)
        self.headers: Dict[str, str] = dict(headers or {})

    def __call__(self, status_code: int, response: ModelResponse, model: Any) -> None:
        if status_code != self.expected_status:
            raise AssertionFailure(f"Expected status code {self.expected_status} but was {status_code}")

        if self.content_type is not None and not self._content_type_matches(response.content_type):
            raise AssertionFailure(f"Expected content type {self.content_type} but was {response.content_type}")

        for name, expected_value in self.headers.items():
            actual_value = response.header(name)
            if actual_value != expected_value:
                raise AssertionFailure(f"Expected header {name} to be {expected_value!r} but was {actual_value!r}")

    def _content_type_matches(self, actual: Optional[ContentType]) -> bool:
        if actual is None or actual.mime_type != self.content_type.mime_type:
            return False
        # A charset is only checked when one was asked for
        if self.content_type.charset is None:
            return True
        return (actual.charset or "").lower() == self.content_type.charset.lower()


def _pointer_tokens(pointer: str) -> Tuple[str, ...]:
    if pointer == "":
        return ()
    if not pointer.startswith("/"):
        raise ValueError(f"Invalid JSON pointer: {pointer!r}")
    return tuple(token.replace("~1", "/").replace("~0", "~") for token in pointer[1:].split("/"))


def _resolve(document: Any, tokens: Tuple[str, ...]) -> Tuple[bool, Any]:
    """Follow pointer tokens into a document, returning (found, value)."""
    current = document
    for token in tokens:
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return False, None
    return True, current


def _assign(document: Any, tokens: Tuple[str, ...], value: Any) -> None:
    found, parent = _resolve(document, tokens[:-1])
    if not found:
        return
    last = tokens[-1]
    if isinstance(parent, dict) and last in parent:
        parent[last] = value
    elif isinstance(parent, list) and last.isdigit() and int(last) < len(parent):
        parent[int(last)] = value


class JsonResponseAssertions:
    """Checks the status code and that the body equals an expected JSON document.

    Properties named by ``ignore_values_for_properties`` must be present in
    the response but may hold any value, which is useful for generated
    identifiers and timestamps.
    """

    def __init__(self, expected_status: int, expected_json: Any):
        self.expected_status = expected_status
        self.expected_json = expected_json
        self.ignored_pointers: Tuple[str, ...] = ()

    @classmethod
    def from_string(cls, expected_status: int, json_text: str) -> "JsonResponseAssertions":
        try:
            expected = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(f"Expected response is not valid JSON: {e}") from e
        return cls(expected_status, expected)

    @classmethod
    def from_file(cls, expected_status: int, path: Union[str, Path]) -> "JsonResponseAssertions":
        return cls.from_string(expected_status, Path(path).read_text(encoding="utf-8"))

    def ignore_values_for_properties(self, *pointers: str) -> "JsonResponseAssertions":
        for pointer in pointers:
            _pointer_tokens(pointer)
        self.ignored_pointers = self.ignored_pointers + tuple(pointers)
        return self

    def __call__(self, status_code: int, response: ModelResponse, model: Any) -> None:
        if status_code != self.expected_status:
            raise AssertionFailure(f"Expected status code {self.expected_status} but was {status_code}")

        if response.content_type is None or not response.content_type.is_json:
            raise AssertionFailure(f"Expected a JSON content type but was {response.content_type}")

        try:
            actual = response.json()
        except ValueError as e:
            raise AssertionFailure(f"Response body is not valid JSON: {e}") from e

        expected = self._expected_for(actual, self.ignored_pointers)
        if expected != actual:
            raise AssertionFailure(
                "Actual response body is not as expected.\n"
                f"Expected: {json.dumps(expected, indent=2, sort_keys=True)}\n"
                f"Actual: {json.dumps(actual, indent=2, sort_keys=True)}"
            )

    def _expected_for(self, actual: Any, pointers: Iterable[str]) -> Any:
        expected = copy.deepcopy(self.expected_json)
        for pointer in pointers:
            tokens = _pointer_tokens(pointer)
            if not tokens:
                return actual
            found, value = _resolve(actual, tokens)
            if found:
                _assign(expected, tokens, copy.deepcopy(value))
        return expected


class JsonSchemaAssertions:
    """Checks that the body is a JSON document valid against a JSON Schema.

    The status code is only checked when ``expected_status`` is given.
    """

    def __init__(self, schema: Mapping[str, Any], expected_status: Optional[int] = None):
        try:
            jsonschema.validators.validator_for(schema).check_schema(schema)
        except jsonschema.SchemaError as e:
            raise InvalidJsonError(f"Not a valid JSON schema: {e.message}") from e
        self.schema = schema
        self.expected_status = expected_status

    @classmethod
    def from_string(cls, json_text: str, expected_status: Optional[int] = None) -> "JsonSchemaAssertions":
        try:
            schema = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(f"JSON schema is not valid JSON: {e}") from e
        return cls(schema, expected_status)

    @classmethod
    def from_file(cls, path: Union[str, Path], expected_status: Optional[int] = None) -> "JsonSchemaAssertions":
        return cls.from_string(Path(path).read_text(encoding="utf-8"), expected_status)

    def __call__(self, status_code: int, response: ModelResponse, model: Any) -> None:
        if self.expected_status is not None and status_code != self.expected_status:
            raise AssertionFailure(f"Expected status code {self.expected_status} but was {status_code}")

        if response.content_type is None or not response.content_type.is_json:
            raise AssertionFailure(f"Expected a JSON content type but was {response.content_type}")

        try:
            actual = response.json()
        except ValueError as e:
            raise AssertionFailure(f"Response body is not valid JSON: {e}") from e

        try:
            jsonschema.validate(instance=actual, schema=self.schema)
        except jsonschema.ValidationError as e:
            location = "/" + "/".join(str(part) for part in e.absolute_path)
            raise AssertionFailure(f"Response body does not match the JSON schema at {location}: {e.message}") from e
