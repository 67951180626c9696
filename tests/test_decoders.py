"""
Tests for response decoders and the decoder chain.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol
from unittest.mock import Mock

import pytest
from pydantic import BaseModel
from pydantic.errors import PydanticUserError
from typing_extensions import TypedDict

from restcheck import (
    ContentType,
    DecodeMismatch,
    DecoderChain,
    DecodingHints,
    JsonResponseDecoder,
    Response,
    TextResponseDecoder,
)
from tests.framework.drivers import CountingDecoder, json_response, text_response


class Widget:
    def __init__(self, name):
        self.name = name


class SpecialWidget(Widget):
    pass


class Gadget(BaseModel):
    name: str
    size: int


@dataclass
class Gizmo:
    name: str


class SushiDict(TypedDict):
    name: str


class Named(Protocol):
    name: str


class TestDecodingHints:
    """Test type acceptance of decoded candidates."""

    def test_untyped_accepts_anything(self):
        assert DecodingHints().accepts(object())

    def test_exact_type(self):
        assert DecodingHints(Widget).accepts(Widget("a"))

    def test_subclass_is_accepted(self):
        assert DecodingHints(Widget).accepts(SpecialWidget("a"))

    def test_unrelated_type_is_rejected(self):
        assert not DecodingHints(Widget).accepts("not a widget")

    def test_generic_alias_checks_origin(self):
        assert DecodingHints(List[int]).accepts([1, 2])
        assert not DecodingHints(List[int]).accepts({"a": 1})

    def test_any_accepts_anything(self):
        assert DecodingHints(Any).accepts(3)

    def test_typeddict_checks_for_a_dict(self):
        assert DecodingHints(SushiDict).accepts({"name": "sashimi"})
        assert not DecodingHints(SushiDict).accepts(["sashimi"])

    def test_unchecked_protocol_accepts_candidate(self):
        assert DecodingHints(Named).accepts(Widget("a"))


class TestDecoderChain:
    """Test decoder ordering and first-match semantics."""

    def setup_method(self):
        self.response = json_response(200, {"name": "widget"})

    def test_first_matching_decoder_wins(self):
        widget = Widget("from d2")
        d1 = CountingDecoder(None)
        d2 = CountingDecoder(widget)
        d3 = CountingDecoder(Widget("never"))
        chain = DecoderChain([d1, d2, d3])

        model = chain.decode(self.response, DecodingHints(Widget))

        assert model is widget
        assert d1.invocations == 1
        assert d2.invocations == 1
        assert d3.invocations == 0

    def test_decoders_receive_the_hints(self):
        decoder = CountingDecoder(Widget("w"))
        DecoderChain([decoder]).decode(self.response, DecodingHints(Widget))
        assert decoder.hints == [DecodingHints(Widget)]

    def test_later_decoders_not_consulted_even_on_type_mismatch(self):
        d1 = CountingDecoder("a string")
        d2 = CountingDecoder(Widget("w"))
        chain = DecoderChain([d1, d2])

        with pytest.raises(DecodeMismatch) as exc_info:
            chain.decode(self.response, DecodingHints(Widget))

        assert d2.invocations == 0
        assert exc_info.value.expected_type is Widget
        assert "Widget" in str(exc_info.value)

    def test_no_candidate_for_typed_call_is_a_mismatch(self):
        chain = DecoderChain([CountingDecoder(None)])

        with pytest.raises(DecodeMismatch):
            chain.decode(self.response, DecodingHints(Widget))

    def test_empty_chain_typed_call_is_a_mismatch(self):
        with pytest.raises(DecodeMismatch):
            DecoderChain().decode(self.response, DecodingHints(Widget))

    def test_untyped_call_without_candidate_is_none(self):
        assert DecoderChain([CountingDecoder(None)]).decode(self.response, DecodingHints()) is None

    def test_untyped_call_accepts_any_candidate(self):
        chain = DecoderChain([CountingDecoder(42)])
        assert chain.decode(self.response, DecodingHints()) == 42

    def test_decode_mismatch_is_an_assertion_error(self):
        with pytest.raises(AssertionError):
            DecoderChain().decode(self.response, DecodingHints(Widget))

    def test_register_appends_in_order(self):
        chain = DecoderChain()
        first = CountingDecoder()
        second = CountingDecoder()
        chain.register(first)
        chain.register(second)
        assert list(chain) == [first, second]
        assert len(chain) == 2

    def test_register_none_is_rejected(self):
        with pytest.raises(ValueError):
            DecoderChain().register(None)


class TestJsonResponseDecoder:
    """Test JSON decoding with Pydantic validation."""

    def setup_method(self):
        self.decoder = JsonResponseDecoder()

    def test_untyped_returns_parsed_json(self):
        response = json_response(200, {"name": "sashimi"})
        assert self.decoder.decode(response, DecodingHints()) == {"name": "sashimi"}

    def test_pydantic_model(self):
        response = json_response(200, {"name": "dial", "size": "3"})
        gadget = self.decoder.decode(response, DecodingHints(Gadget))
        assert gadget == Gadget(name="dial", size=3)

    def test_dataclass(self):
        response = json_response(200, {"name": "cog"})
        assert self.decoder.decode(response, DecodingHints(Gizmo)) == Gizmo(name="cog")

    def test_generic_list_of_models(self):
        response = json_response(200, [{"name": "a", "size": 1}, {"name": "b", "size": 2}])
        gadgets = self.decoder.decode(response, DecodingHints(List[Gadget]))
        assert [g.name for g in gadgets] == ["a", "b"]

    def test_dict_hint(self):
        response = json_response(200, {"a": 1})
        assert self.decoder.decode(response, DecodingHints(Dict[str, int])) == {"a": 1}

    def test_typeddict(self):
        response = json_response(200, {"name": "sashimi"})
        assert self.decoder.decode(response, DecodingHints(SushiDict)) == {"name": "sashimi"}

    def test_typeddict_chain_result_is_accepted(self):
        chain = DecoderChain([JsonResponseDecoder(), TextResponseDecoder()])
        model = chain.decode(json_response(200, {"name": "sashimi"}), DecodingHints(SushiDict))
        assert model == {"name": "sashimi"}

    def test_schema_error_is_no_result(self):
        self.decoder._adapter_for = Mock(side_effect=PydanticUserError("unsupported type", code=None))
        assert self.decoder.decode(json_response(200, {"name": "dial"}), DecodingHints(Gadget)) is None

    def test_validation_failure_is_no_result(self):
        response = json_response(200, {"name": "dial"})
        assert self.decoder.decode(response, DecodingHints(Gadget)) is None

    def test_unsupported_type_is_no_result(self):
        response = json_response(200, {"name": "dial"})
        assert self.decoder.decode(response, DecodingHints(Widget)) is None

    def test_non_json_content_type_is_no_result(self):
        assert self.decoder.decode(text_response(200, "{}"), DecodingHints()) is None

    def test_vendor_json_content_type(self):
        response = Response(
            status_code=200,
            content_type=ContentType.parse("application/problem+json"),
            body=b'{"title": "oops"}',
        )
        assert self.decoder.decode(response, DecodingHints()) == {"title": "oops"}

    def test_invalid_json_is_no_result(self):
        response = Response(status_code=200, content_type=ContentType("application/json"), body=b"{not json")
        assert self.decoder.decode(response, DecodingHints()) is None

    def test_empty_body_is_no_result(self):
        response = Response(status_code=204, content_type=ContentType("application/json"), body=b"")
        assert self.decoder.decode(response, DecodingHints()) is None


class TestTextResponseDecoder:
    """Test plain text decoding."""

    def setup_method(self):
        self.decoder = TextResponseDecoder()

    def test_str_hint(self):
        assert self.decoder.decode(text_response(200, "hello"), DecodingHints(str)) == "hello"

    def test_untyped_with_body(self):
        assert self.decoder.decode(text_response(200, "hello"), DecodingHints()) == "hello"

    def test_untyped_without_body(self):
        assert self.decoder.decode(Response(status_code=204), DecodingHints()) is None

    def test_other_hint_is_no_result(self):
        assert self.decoder.decode(text_response(200, "hello"), DecodingHints(Widget)) is None

    def test_charset_is_honoured(self):
        response = Response(
            status_code=200,
            content_type=ContentType("text/plain", "latin-1"),
            body="café".encode("latin-1"),
        )
        assert self.decoder.decode(response, DecodingHints(str)) == "café"

    def test_json_then_text_chain_falls_back_to_text(self):
        chain = DecoderChain([JsonResponseDecoder(), TextResponseDecoder()])
        assert chain.decode(text_response(200, "plain"), DecodingHints(str)) == "plain"
