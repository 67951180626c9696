"""
The single result classification of an executed call.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from .models import Response

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The call completed, decoded, passed its assertions and ran its callback."""

    model: Optional[T]
    response: Response

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True)
class AssertionFailed:
    """The response violated the call's assertions or could not be decoded as bound."""

    response: Optional[Response]
    cause: AssertionError

    @property
    def succeeded(self) -> bool:
        return False


@dataclass(frozen=True)
class ExecutionFailed:
    """The call could not be carried out: transport, decoder or callback fault."""

    response: Optional[Response]
    cause: BaseException

    @property
    def succeeded(self) -> bool:
        return False


Outcome = Union[Success[Any], AssertionFailed, ExecutionFailed]
