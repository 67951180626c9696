"""
Exceptions raised by the acceptance test harness.
"""
from typing import Any, Optional


class RestCheckError(Exception):
    """Base exception for harness errors."""

    pass


class StateOrderError(RestCheckError):
    """Raised when a builder operation is invoked out of its declared order."""

    def __init__(self, message="Call builder methods have been called out of order", current_state=None,
                 required_state=None):
        self.message = message
        self.current_state = current_state
        self.required_state = required_state
        super().__init__(self.message)


class AssertionFailure(AssertionError):
    """A verification condition on the response was violated.

    Subclasses ``AssertionError`` so that plain ``assert`` statements inside
    user assertions are classified the same way.
    """

    pass


class DecodeMismatch(AssertionFailure):
    """Raised when no decoder produced a model of the requested type."""

    def __init__(self, expected_type: Any, candidate: Optional[Any] = None):
        self.expected_type = expected_type
        self.candidate = candidate
        type_name = getattr(expected_type, "__name__", repr(expected_type))
        super().__init__(f"Could not parse response into model object of type {type_name}")


class ExecutionError(RestCheckError):
    """An unexpected failure while executing a call."""

    pass


class TransportError(ExecutionError):
    """Raised when the HTTP request could not be performed."""

    def __init__(self, message="Failed to perform HTTP request", original_exception=None):
        self.message = message
        self.original_exception = original_exception
        super().__init__(self.message)


class InvalidJsonError(RestCheckError, ValueError):
    """Raised when a request body or expected document is not valid JSON."""

    pass


class ConfigurationError(RestCheckError):
    """Raised when the harness configuration cannot be loaded."""

    pass
