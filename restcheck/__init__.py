"""
A fluent harness for HTTP acceptance tests.

Describe a request, optionally bind the response to a typed model, supply
assertions and a post-call callback, then execute. Decoding uses a chain of
pluggable decoders (Pydantic-backed JSON decoding out of the box) and every
call reports its outcome to registered listeners.
"""

from .assertions import (
    JsonResponseAssertions,
    JsonSchemaAssertions,
    ResponseAssertions,
    no_assertions,
    no_callback,
)
from .call import (
    AssertionsBuilder,
    CallbackBuilder,
    CallController,
    ExecuteRequestBuilder,
    PostExecutionBuilder,
    RequestBuilder,
)
from .config import Configuration, GlobalRequestAttributes, load_configuration
from .decoders import (
    DecoderChain,
    DecodingHints,
    JsonResponseDecoder,
    ResponseDecoder,
    TextResponseDecoder,
)
from .events import (
    CallErrorEvent,
    CallFailedEvent,
    CallFinishedEvent,
    CallListener,
    CallStartedEvent,
    EventPublisher,
    LoggingListener,
)
from .exceptions import (
    AssertionFailure,
    ConfigurationError,
    DecodeMismatch,
    ExecutionError,
    InvalidJsonError,
    RestCheckError,
    StateOrderError,
    TransportError,
)
from .factory import RestCheck
from .http_requests import FormUrlEncodedRequest, GeneralRequest, JsonRequest
from .models import (
    USE_GLOBAL_TIMEOUT,
    ApiHeader,
    ApiQueryParam,
    ContentType,
    HTTPMethod,
    HttpRequest,
    ModelResponse,
    Response,
    RouteParam,
)
from .outcome import AssertionFailed, ExecutionFailed, Outcome, Success
from .state_machine import CallState, CallStateMachine
from .transport import RequestsTransport, Transport

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "RestCheck",
    "RequestBuilder",
    "AssertionsBuilder",
    "CallbackBuilder",
    "ExecuteRequestBuilder",
    "PostExecutionBuilder",
    "CallController",
    "CallState",
    "CallStateMachine",
    "HttpRequest",
    "HTTPMethod",
    "ContentType",
    "ApiHeader",
    "ApiQueryParam",
    "RouteParam",
    "Response",
    "ModelResponse",
    "USE_GLOBAL_TIMEOUT",
    "GeneralRequest",
    "JsonRequest",
    "FormUrlEncodedRequest",
    "ResponseDecoder",
    "DecoderChain",
    "DecodingHints",
    "JsonResponseDecoder",
    "TextResponseDecoder",
    "ResponseAssertions",
    "JsonResponseAssertions",
    "JsonSchemaAssertions",
    "no_assertions",
    "no_callback",
    "CallListener",
    "LoggingListener",
    "EventPublisher",
    "CallStartedEvent",
    "CallFailedEvent",
    "CallErrorEvent",
    "CallFinishedEvent",
    "Outcome",
    "Success",
    "AssertionFailed",
    "ExecutionFailed",
    "Configuration",
    "GlobalRequestAttributes",
    "load_configuration",
    "Transport",
    "RequestsTransport",
    "RestCheckError",
    "StateOrderError",
    "AssertionFailure",
    "DecodeMismatch",
    "ExecutionError",
    "TransportError",
    "InvalidJsonError",
    "ConfigurationError",
]
