"""
Test support for the harness: in-memory transports, a local HTTP server and the sushi domain.
"""

from .drivers import (
    CountingDecoder,
    ExplodingDecoder,
    FailingTransport,
    MockTransport,
    json_response,
    text_response,
)
from .dsl import Sushi, SushiType, create_sushi_request, get_sushi_request
from .http_drivers import SushiServer

__all__ = [
    'CountingDecoder',
    'ExplodingDecoder',
    'FailingTransport',
    'MockTransport',
    'json_response',
    'text_response',
    'Sushi',
    'SushiType',
    'create_sushi_request',
    'get_sushi_request',
    'SushiServer',
]
