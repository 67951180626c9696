"""
Entry point for declaring calls.

A ``RestCheck`` context is created once by the composing application (or
test fixture) and passed to wherever calls are declared. It carries the
shared configuration, transport, decoders and listeners that every call it
creates is prepared with.
"""

import logging
from typing import Iterable, List, Optional

from .call import CallController, RequestBuilder
from .config import Configuration
from .decoders import JsonResponseDecoder, ResponseDecoder, TextResponseDecoder
from .events import CallListener, LoggingListener
from .models import HttpRequest
from .transport import RequestsTransport, Transport

# Set up logger for this module
logger = logging.getLogger(__name__)


class RestCheck:
    """Creates and prepares calls.

    With ``isolate_listener_errors`` a failing listener is logged and the
    remaining listeners are still notified.

    Subclasses can override ``prepare_call`` to configure each call further,
    for example to attach listeners that feed a report.
    """

    def __init__(self, configuration: Optional[Configuration] = None, transport: Optional[Transport] = None,
                 decoders: Optional[Iterable[ResponseDecoder]] = None,
                 listeners: Optional[Iterable[CallListener]] = None, suppress_assertions: bool = False,
                 isolate_listener_errors: bool = False):
        self.configuration = configuration or Configuration()
        self.transport = transport or RequestsTransport()
        self.decoders: List[ResponseDecoder] = list(decoders or [])
        self.listeners: List[CallListener] = list(listeners or [])
        self.suppress_assertions = suppress_assertions
        self.isolate_listener_errors = isolate_listener_errors

    @classmethod
    def default(cls, configuration: Optional[Configuration] = None,
                transport: Optional[Transport] = None) -> "RestCheck":
        """Create a context with the stock JSON and text decoders and a logging listener."""
        return cls(
            configuration=configuration,
            transport=transport,
            decoders=[JsonResponseDecoder(), TextResponseDecoder()],
            listeners=[LoggingListener()],
        )

    def register_decoder(self, decoder: ResponseDecoder) -> None:
        self.decoders.append(decoder)

    def register_listener(self, listener: CallListener) -> None:
        self.listeners.append(listener)

    def request(self, message: str, request: HttpRequest) -> RequestBuilder:
        """Start declaring a call.

        Args:
            message: Describes the test being performed, used in reports;
                may be empty
            request: The request to send

        Returns:
            A builder for binding, assertions, callback and execution
        """
        controller: CallController = CallController(message, request)
        controller.suppress_assertions = self.suppress_assertions
        controller.publisher.isolate_errors = self.isolate_listener_errors
        controller.configuration = self.configuration
        controller.transport = self.transport
        for decoder in self.decoders:
            controller.register_decoder(decoder)
        for listener in self.listeners:
            controller.register_listener(listener)
        self.prepare_call(controller)
        logger.debug(f"Prepared call: {controller.descriptive_text}")
        return RequestBuilder(controller)

    def prepare_call(self, controller: CallController) -> None:
        """Hook for subclasses to configure each new call."""
        pass
