"""
Lifecycle events published while a call executes, and the listeners that observe them.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .models import HttpRequest, Response

# Set up logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallStartedEvent:
    """Published before the request is sent."""

    request: HttpRequest


@dataclass(frozen=True)
class CallFailedEvent:
    """Published when a response did not satisfy the call's verification."""

    request: HttpRequest
    response: Optional[Response]
    cause: BaseException


@dataclass(frozen=True)
class CallErrorEvent:
    """Published when the call could not be carried out at all."""

    request: HttpRequest
    response: Optional[Response]
    cause: BaseException


@dataclass(frozen=True)
class CallFinishedEvent:
    """Published exactly once per call, always as the last notification."""

    request: HttpRequest
    response: Optional[Response]


class CallListener:
    """Base class for call observers. Override only the hooks you need."""

    def call_started(self, event: CallStartedEvent) -> None:
        pass

    def call_failed(self, event: CallFailedEvent) -> None:
        pass

    def call_error(self, event: CallErrorEvent) -> None:
        pass

    def call_finished(self, event: CallFinishedEvent) -> None:
        pass


class LoggingListener(CallListener):
    """Writes every lifecycle event to the standard logging system."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def call_started(self, event: CallStartedEvent) -> None:
        request = event.request
        self.log.info(f"Call started: {request.name} ({request.method.value} {request.url})")

    def call_failed(self, event: CallFailedEvent) -> None:
        status = event.response.status_code if event.response else None
        self.log.warning(f"Call failed: {event.request.name} (status: {status}): {event.cause}")

    def call_error(self, event: CallErrorEvent) -> None:
        self.log.error(f"Call error: {event.request.name}: {type(event.cause).__name__}: {event.cause}")

    def call_finished(self, event: CallFinishedEvent) -> None:
        status = event.response.status_code if event.response else None
        self.log.info(f"Call finished: {event.request.name} (status: {status})")


class EventPublisher:
    """Notifies registered listeners, in registration order, on the publishing thread.

    By default a listener exception propagates out of ``publish`` and the
    remaining listeners are not notified. With ``isolate_errors`` the
    exception is logged and notification continues.
    """

    def __init__(self, listeners: Optional[Iterable[CallListener]] = None, isolate_errors: bool = False):
        self._listeners: List[CallListener] = list(listeners or [])
        self.isolate_errors = isolate_errors

    def register(self, listener: CallListener) -> None:
        if listener is None:
            raise ValueError("listener cannot be None")
        self._listeners.append(listener)

    def __iter__(self) -> Iterator[CallListener]:
        return iter(self._listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def call_started(self, event: CallStartedEvent) -> None:
        self._publish("call_started", event)

    def call_failed(self, event: CallFailedEvent) -> None:
        self._publish("call_failed", event)

    def call_error(self, event: CallErrorEvent) -> None:
        self._publish("call_error", event)

    def call_finished(self, event: CallFinishedEvent) -> None:
        self._publish("call_finished", event)

    def _publish(self, hook: str, event) -> None:
        if event is None:
            raise ValueError("event cannot be None")
        for listener in list(self._listeners):
            if not self.isolate_errors:
                getattr(listener, hook)(event)
                continue
            try:
                getattr(listener, hook)(event)
            except Exception:
                logger.exception(f"Listener {type(listener).__name__} failed handling {hook}")
