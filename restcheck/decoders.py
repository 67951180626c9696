"""
Response decoders and the chain that resolves a typed model from a response.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, get_origin

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError
from typing_extensions import is_typeddict

from .exceptions import DecodeMismatch
from .models import Response

# Set up logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodingHints:
    """The model type a caller asked the response to be decoded into.

    A ``model_type`` of None means the call is untyped.
    """

    model_type: Any = None

    def accepts(self, candidate: Any) -> bool:
        """Check whether a decoded candidate satisfies the requested type."""
        if self.model_type is None or self.model_type is Any:
            return True
        expected = get_origin(self.model_type) or self.model_type
        if is_typeddict(expected):
            return isinstance(candidate, dict)
        if isinstance(expected, type):
            try:
                return isinstance(candidate, expected)
            except TypeError:
                # Protocols that are not runtime checkable cannot be verified
                return True
        # Special forms such as Union cannot be checked with isinstance
        return True


class ResponseDecoder:
    """Base class for response decoders."""

    def decode(self, response: Response, hints: DecodingHints) -> Optional[Any]:
        """Attempt to decode the response.

        Returns:
            The decoded object, or None if this decoder cannot handle the response
        """
        raise NotImplementedError


class JsonResponseDecoder(ResponseDecoder):
    """Decodes JSON bodies, validating them into the hinted type with Pydantic."""

    def __init__(self):
        self._adapters: Dict[Any, TypeAdapter] = {}

    def decode(self, response: Response, hints: DecodingHints) -> Optional[Any]:
        if response.content_type is None or not response.content_type.is_json or not response.body:
            return None
        try:
            data = response.json()
        except ValueError as e:
            logger.debug(f"Response body is not valid JSON: {e}")
            return None

        if hints.model_type is None:
            return data

        try:
            return self._adapter_for(hints.model_type).validate_python(data)
        except PydanticUserError:
            logger.debug(f"No validation schema can be generated for {hints.model_type!r}")
            return None
        except ValidationError as e:
            logger.debug(f"JSON body does not validate as {hints.model_type!r}: {e.error_count()} error(s)")
            return None

    def _adapter_for(self, model_type: Any) -> TypeAdapter:
        if model_type not in self._adapters:
            self._adapters[model_type] = TypeAdapter(model_type)
        return self._adapters[model_type]


class TextResponseDecoder(ResponseDecoder):
    """Returns the body text for untyped calls or calls bound to ``str``."""

    def decode(self, response: Response, hints: DecodingHints) -> Optional[Any]:
        if hints.model_type is str:
            return response.text
        if hints.model_type is None and response.body:
            return response.text
        return None


class DecoderChain:
    """Ordered, append-only collection of decoders.

    Decoders are asked in registration order and the first one to produce a
    result wins; later decoders are never consulted.
    """

    def __init__(self, decoders: Optional[Iterable[ResponseDecoder]] = None):
        self._decoders: List[ResponseDecoder] = list(decoders or [])

    def register(self, decoder: ResponseDecoder) -> None:
        if decoder is None:
            raise ValueError("decoder cannot be None")
        self._decoders.append(decoder)

    def __iter__(self) -> Iterator[ResponseDecoder]:
        return iter(self._decoders)

    def __len__(self) -> int:
        return len(self._decoders)

    def decode(self, response: Response, hints: DecodingHints) -> Optional[Any]:
        """Resolve the model for a response.

        Args:
            response: The response to decode
            hints: The requested model type

        Returns:
            The decoded model, or None for an untyped call no decoder handled

        Raises:
            DecodeMismatch: If a model type was requested and no decoder
                produced an instance of it
        """
        candidate = None
        for decoder in self._decoders:
            candidate = decoder.decode(response, hints)
            if candidate is not None:
                logger.debug(f"Response decoded by {type(decoder).__name__} into {type(candidate).__name__}")
                break

        if hints.model_type is None:
            return candidate
        if candidate is None or not hints.accepts(candidate):
            raise DecodeMismatch(hints.model_type, candidate)
        return candidate
