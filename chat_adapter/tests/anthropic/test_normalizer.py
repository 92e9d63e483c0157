"""Message normalization: system hoisting, merging, first-turn and empty-turn rules."""
from __future__ import annotations

from types import MappingProxyType

import pytest

from chat_adapter.anthropic import normalize
from chat_adapter.base.errors import ValidationError
from chat_adapter.base.models import ImagePart, Message, TextPart, ToolInvocation, ToolResult


def test_system_messages_are_hoisted_and_joined_in_order():
    conv = normalize(
        [
            Message("system", "Be brief."),
            Message("user", "hi"),
            Message("system", "Answer in French."),
            Message("assistant", "bonjour"),
            Message("user", "ça va?"),
        ]
    )
    assert conv.system_prompt == "Be brief.\n\nAnswer in French."  # nosec B101
    assert [m.role for m in conv.messages] == ["user", "assistant", "user"]  # nosec B101


def test_no_system_prompt_is_none():
    assert normalize([Message("user", "hi")]).system_prompt is None  # nosec B101


def test_adjacent_same_role_messages_merge_in_order():
    conv = normalize(
        [
            Message("user", "a"),
            Message("user", [TextPart("b"), TextPart("c")]),
            Message("system", "s"),
            Message("user", "d"),
            Message("assistant", "x"),
            Message("assistant", "y"),
        ]
    )
    assert len(conv.messages) == 2  # nosec B101
    assert [b["text"] for b in conv.messages[0].content] == ["a", "b", "c", "d"]  # nosec B101
    assert [b["text"] for b in conv.messages[1].content] == ["x", "y"]  # nosec B101


def test_merge_is_associative():
    parts = [Message("user", p) for p in ("1", "2", "3")]
    once = normalize(parts)
    pre_merged = normalize([Message("user", [TextPart("1"), TextPart("2")]), Message("user", "3")])
    assert once.messages == pre_merged.messages  # nosec B101


def test_first_turn_must_be_user():
    with pytest.raises(ValidationError, match="first turn"):
        normalize([Message("system", "s"), Message("assistant", "hello")])


def test_empty_conversation_is_rejected():
    with pytest.raises(ValidationError):
        normalize([])
    with pytest.raises(ValidationError):
        normalize([Message("system", "only system")])


def test_empty_message_is_rejected_after_merge():
    with pytest.raises(ValidationError, match="no content"):
        normalize([Message("user", "hi"), Message("assistant", [])])
    # an empty message merged into a non-empty neighbour is fine
    conv = normalize([Message("user", []), Message("user", "hi")])
    assert len(conv.messages[0].content) == 1  # nosec B101


def test_unknown_role_is_rejected():
    with pytest.raises(ValidationError, match="unknown role"):
        normalize([Message("tool", "x")])  # type: ignore[arg-type]


def test_system_message_must_be_text():
    with pytest.raises(ValidationError):
        normalize([Message("system", [ImagePart("image/png", "AAAA")]), Message("user", "hi")])


def test_content_parts_map_one_to_one():
    conv = normalize(
        [
            Message("user", [TextPart("look"), ImagePart("image/png", "AAAA")]),
            Message("assistant", [ToolInvocation("t1", "get_weather", '{"location": "SF"}')]),
            Message("user", [ToolResult("t1", "sunny"), ToolResult("t2", [TextPart("oops")], is_error=True)]),
        ]
    )
    user, assistant, result = conv.messages
    assert user.content[1] == {  # nosec B101
        "type": "image",
        "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"},
    }
    assert assistant.content[0] == {"type": "tool_use", "id": "t1", "name": "get_weather", "input": {"location": "SF"}}  # nosec B101
    assert result.content[0] == {"type": "tool_result", "tool_use_id": "t1", "content": "sunny"}  # nosec B101
    assert result.content[1]["is_error"] is True  # nosec B101
    assert conv.has_images  # nosec B101


def test_unparsable_tool_arguments_are_a_validation_error():
    with pytest.raises(ValidationError, match="not valid JSON"):
        normalize([Message("user", "hi"), Message("assistant", [ToolInvocation("t1", "f", '{"loc')])])


def test_read_only_mapping_arguments_are_accepted():
    args = MappingProxyType({"location": "SF"})
    conv = normalize([Message("user", "hi"), Message("assistant", [ToolInvocation("t1", "get_weather", args)])])
    block = conv.messages[1].content[0]
    assert block["input"] == {"location": "SF"}  # nosec B101
    assert type(block["input"]) is dict  # nosec B101


def test_non_object_tool_arguments_are_rejected():
    with pytest.raises(ValidationError, match="JSON object"):
        normalize([Message("user", "hi"), Message("assistant", [ToolInvocation("t1", "f", "[1, 2]")])])


def test_leading_user_turn_mode_is_explicit():
    msgs = [Message("system", "rules"), Message("user", "hi")]
    conv = normalize(msgs, system_prompt_mode="leading_user_turn")
    assert conv.system_prompt is None  # nosec B101
    assert conv.messages[0].content[0] == {"type": "text", "text": "rules"}  # nosec B101
    assert conv.messages[0].content[1] == {"type": "text", "text": "hi"}  # nosec B101


def test_leading_user_turn_allows_assistant_after_system():
    conv = normalize([Message("system", "rules"), Message("assistant", "hello")], system_prompt_mode="leading_user_turn")
    assert [m.role for m in conv.messages] == ["user", "assistant"]  # nosec B101
