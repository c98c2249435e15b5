from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from recall_agent.config.core import EMPTY_RESPONSE_TEXT
from recall_agent.response.normalize import extract_text


@pytest.mark.parametrize("raw", [None, "", {}, []])
def test_falsy_response_yields_placeholder(raw):
    assert extract_text(raw) == EMPTY_RESPONSE_TEXT


def test_plain_string_is_returned_verbatim():
    assert extract_text("  hi there\n") == "  hi there\n"


def test_response_field_wins():
    assert extract_text({"response": "direct", "output": [{"text": "ignored"}]}) == "direct"


def test_nested_result_output_text():
    assert extract_text({"result": {"output_text": "nested"}}) == "nested"


def test_output_items_are_joined_skipping_empty():
    raw = {"output": [{"text": "a"}, {"content": "b"}, {}]}
    assert extract_text(raw) == "a\nb"


def test_output_item_field_preference():
    raw = {"output": [{"text": None, "content": "c", "output_text": "o"}, {"output_text": "o2"}]}
    assert extract_text(raw) == "c\no2"


def test_empty_leading_field_drops_the_item():
    raw = {"output": [{"text": "a"}, {"text": "", "content": "b"}]}
    assert extract_text(raw) == "a"


def test_output_items_with_content_parts():
    # Responses API shape: message items carrying a list of text parts
    raw = SimpleNamespace(
        output=[
            SimpleNamespace(type="reasoning", content=None, summary=[]),
            SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text="Hello!")]),
        ]
    )
    assert extract_text(raw) == "Hello!"


def test_empty_output_falls_back_to_serialization():
    assert extract_text({"output": [{}, {"text": ""}]}) == '{"output": [{}, {"text": ""}]}'


def test_unknown_mapping_is_serialized():
    assert extract_text({"foo": 1}) == '{"foo": 1}'


def test_sdk_model_is_serialized_as_json():
    class Unknown(BaseModel):
        status: str

    assert extract_text(Unknown(status="done")) == '{"status":"done"}'


def test_non_container_object_uses_str():
    assert extract_text(42) == "42"
