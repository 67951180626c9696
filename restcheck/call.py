"""
Execution of a single described call and the fluent builder views over it.

A ``CallController`` owns everything configured for one call. The builder
views returned to callers wrap the controller and expose only the operations
legal in the current phase; the controller's state machine still rejects any
stale view used out of order.
"""

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from .assertions import Assertions, Callback, no_assertions, no_callback, run_assertions, run_callback
from .config import Configuration
from .decoders import DecoderChain, DecodingHints, ResponseDecoder
from .events import (
    CallErrorEvent,
    CallFailedEvent,
    CallFinishedEvent,
    CallListener,
    CallStartedEvent,
    EventPublisher,
)
from .models import HttpRequest, ModelResponse, Response
from .outcome import AssertionFailed, ExecutionFailed, Outcome, Success
from .state_machine import CallState, CallStateMachine
from .transport import RequestsTransport, Transport

# Set up logger for this module
logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M")


class CallController(Generic[T]):
    """Owns the configuration of one call and runs its execution pipeline."""

    def __init__(self, message: str, request: HttpRequest):
        if message is None:
            raise ValueError("message cannot be None")
        if request is None:
            raise ValueError("request cannot be None")
        self.message = message
        self.request = request
        self.decoders = DecoderChain()
        self.publisher = EventPublisher()
        self.configuration: Optional[Configuration] = None
        self.transport: Optional[Transport] = None
        self.suppress_assertions = False
        self.model_type: Optional[Type[T]] = None
        self.assertions: Assertions = no_assertions
        self.callback: Callback = no_callback
        self._state_machine = CallStateMachine()
        self._model: Optional[T] = None
        self._model_response: Optional[ModelResponse[T]] = None
        self._outcome: Optional[Outcome] = None

    @property
    def state(self) -> CallState:
        return self._state_machine.state

    @property
    def descriptive_text(self) -> str:
        if not self.message:
            return self.request.name
        return f"{self.request.name} - {self.message}"

    @property
    def model(self) -> Optional[T]:
        """The decoded model, or None if decoding never succeeded."""
        return self._model

    @property
    def model_response(self) -> Optional[ModelResponse[T]]:
        """The decoded response, or None if decoding never succeeded."""
        return self._model_response

    @property
    def outcome(self) -> Optional[Outcome]:
        """The classification of the executed call, or None before ``call()``."""
        return self._outcome

    def register_decoder(self, decoder: ResponseDecoder) -> None:
        self.decoders.register(decoder)

    def register_listener(self, listener: CallListener) -> None:
        self.publisher.register(listener)

    def bind(self, model_type: Type[M]) -> "CallController[M]":
        if model_type is None:
            raise ValueError("model_type cannot be None")
        self._state_machine.transition(CallState.INITIALISED, CallState.BOUND)
        self.model_type = model_type
        return self

    def set_assertions(self, assertions: Assertions) -> None:
        if assertions is None:
            raise ValueError("assertions cannot be None")
        self._state_machine.transition(CallState.BOUND, CallState.ASSERTIONS)
        self.assertions = assertions

    def set_callback(self, callback: Callback) -> None:
        # Not guarded by the state machine: a callback may be replaced at any time
        if callback is None:
            raise ValueError("callback cannot be None")
        self.callback = callback

    def call(self) -> Outcome:
        """Execute the call and publish its outcome.

        Outcome-level failures never escape; they are reported through the
        listeners and the returned ``Outcome``. Exactly one finished event
        is published, after at most one failed or error event.

        Raises:
            StateOrderError: If the call has already been executed
        """
        self._state_machine.transition(CallState.ASSERTIONS, CallState.EXECUTED)
        self._model = None
        self._model_response = None

        logger.debug(f"Executing call: {self.descriptive_text}")
        outcome = self._execute()
        self._outcome = outcome
        try:
            if isinstance(outcome, AssertionFailed):
                self.publisher.call_failed(CallFailedEvent(self.request, outcome.response, outcome.cause))
            elif isinstance(outcome, ExecutionFailed):
                self.publisher.call_error(CallErrorEvent(self.request, outcome.response, outcome.cause))
        finally:
            self.publisher.call_finished(CallFinishedEvent(self.request, outcome.response))
        return outcome

    def _execute(self) -> Outcome:
        response: Optional[Response] = None
        try:
            self.publisher.call_started(CallStartedEvent(self.request))
            response = self._get_transport().execute(self.request, self._get_configuration())

            hints = DecodingHints(self.model_type)
            model = self.decoders.decode(response, hints)
            model_response = ModelResponse(response, model)
            self._model = model
            self._model_response = model_response

            if self.suppress_assertions:
                logger.debug(f"Assertions suppressed for call: {self.descriptive_text}")
            else:
                run_assertions(self.assertions, model_response)
        except AssertionError as e:
            logger.debug(f"Call {self.descriptive_text} failed verification: {e}")
            return AssertionFailed(response, e)
        except Exception as e:
            logger.debug(f"Call {self.descriptive_text} raised {type(e).__name__}: {e}")
            return ExecutionFailed(response, e)

        try:
            run_callback(self.callback, model_response)
        except Exception as e:
            # Includes AssertionError: a failing callback is a fault, not a verification failure
            logger.debug(f"Callback for {self.descriptive_text} raised {type(e).__name__}: {e}")
            return ExecutionFailed(response, e)

        return Success(model, response)

    def _get_configuration(self) -> Configuration:
        if self.configuration is None:
            self.configuration = Configuration()
        return self.configuration

    def _get_transport(self) -> Transport:
        if self.transport is None:
            self.transport = RequestsTransport()
        return self.transport


class _CallView(Generic[T]):
    """Base for the phase views; holds nothing but the controller."""

    __slots__ = ("_controller",)

    def __init__(self, controller: CallController):
        self._controller = controller

    @property
    def controller(self) -> CallController:
        return self._controller


class PostExecutionBuilder(_CallView[T]):
    """Read-only view of an executed call."""

    __slots__ = ()

    @property
    def model(self) -> Optional[T]:
        return self._controller.model

    @property
    def response(self) -> Optional[ModelResponse[T]]:
        return self._controller.model_response

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._controller.outcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self._controller.outcome, Success)


class ExecuteRequestBuilder(_CallView[T]):
    """Phase in which the call can only be executed."""

    __slots__ = ()

    def call(self) -> PostExecutionBuilder[T]:
        self._controller.call()
        return PostExecutionBuilder(self._controller)


class CallbackBuilder(ExecuteRequestBuilder[T]):
    """Phase in which a post-call callback may be supplied."""

    __slots__ = ()

    def then_do(self, callback: Callback) -> ExecuteRequestBuilder[T]:
        self._controller.set_callback(callback)
        return ExecuteRequestBuilder(self._controller)


class AssertionsBuilder(CallbackBuilder[T]):
    """Phase in which assertions may be supplied."""

    __slots__ = ()

    def with_assertions(self, assertions: Assertions) -> CallbackBuilder[T]:
        self._controller.set_assertions(assertions)
        return CallbackBuilder(self._controller)


class RequestBuilder(AssertionsBuilder[Any]):
    """Initial phase: the response may still be bound to a model type."""

    __slots__ = ()

    def bind(self, model_type: Type[M]) -> AssertionsBuilder[M]:
        return AssertionsBuilder(self._controller.bind(model_type))
