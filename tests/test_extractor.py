import json

import pytest

from zenned.importer import decode_provider_body, extract_reply_text, extract_text, parse_schedule


class _ExplodingDict(dict):
    def items(self):
        raise RuntimeError("boom")


def test_flat_string_is_returned_trimmed():
    assert extract_text("hello") == "hello"
    assert extract_text("  hello \n") == "hello"


@pytest.mark.parametrize("raw", [None, [], {}, "", "   ", [None, {}], {"a": [[], {"b": None}]}])
def test_empty_shapes_give_empty_string(raw):
    assert extract_text(raw) == ""


def test_duplicate_leaf_kept_once_at_first_position():
    line = "Sun/Standup (09:00-09:30)"
    raw = {"choices": [{"text": line, "message": {"role": "assistant", "content": line}}]}
    assert extract_text(raw) == f"{line}\nassistant"


def test_known_text_keys_come_before_other_keys():
    raw = {"id": "resp-1", "output_text": "third", "content": "second", "text": "first"}
    assert extract_text(raw) == "first\nsecond\nthird\nresp-1"


def test_numbers_and_booleans_are_stringified():
    assert extract_text({"a": 1, "b": True, "c": None, "d": 2.5, "e": False}) == "1\ntrue\n2.5\nfalse"


def test_nested_outputs_shape():
    raw = {"outputs": [{"content": [{"type": "output_text", "text": "Mon/Review (10:00-11:00)"}]}]}
    text = extract_text(raw)
    assert text.splitlines()[0] == "Mon/Review (10:00-11:00)"


def test_traversal_errors_degrade_to_empty_string():
    assert extract_text(_ExplodingDict(a="x")) == ""


def test_decode_provider_body():
    assert decode_provider_body('{"text": "x"}') == {"text": "x"}
    assert decode_provider_body("Sun/A (09:00-10:00)") == "Sun/A (09:00-10:00)"
    assert decode_provider_body(b'["a"]') == ["a"]
    assert decode_provider_body({"already": "decoded"}) == {"already": "decoded"}


def test_chat_completion_body_parses_into_records():
    content = ("Sun (2024-03-10)/Standup :: daily sync (09:00-09:30)\n"
               "Mon (2024-03-11)/Review (10:00-11:00)")
    body = json.dumps({
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1710000000,
        "model": "nvidia/llama-3.1-nemotron-ultra-253b-v1",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {"prompt_tokens": 120, "completion_tokens": 40, "total_tokens": 160},
    })
    text = extract_text(decode_provider_body(body))
    assert content in text
    records = parse_schedule(text, "2024-03-10")
    assert [(r.date, r.title, r.description) for r in records] == [
        ("2024-03-10", "Standup", "daily sync"),
        ("2024-03-11", "Review", ""),
    ]


def test_reply_text_leaves_out_response_metadata():
    body = json.dumps({
        "id": "chatcmpl-2",
        "object": "chat.completion",
        "created": 1710000000,
        "model": "thudm/chatglm3-6b",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": "Mon/Review (10:00-11:00)"},
            "finish_reason": "stop",
        }],
        "usage": {"prompt_tokens": 80, "completion_tokens": 12, "total_tokens": 92},
    })
    text = extract_reply_text(decode_provider_body(body))
    assert text == "Mon/Review (10:00-11:00)"
    records = parse_schedule(text, "2024-03-10")
    assert [(r.date, r.title) for r in records] == [("2024-03-11", "Review")]


def test_reply_text_follows_delta_and_outputs_shapes():
    assert extract_reply_text({"choices": [{"delta": {"role": "assistant", "content": "Tue/A"}}]}) == "Tue/A"
    assert extract_reply_text({"outputs": [{"text": "Wed/B"}], "model": "x"}) == "Wed/B"
    assert extract_reply_text({"choices": [{"index": 0, "finish_reason": "length"}]}) == ""


def test_reply_text_without_container_falls_back_to_all_leaves():
    assert extract_reply_text({"result": {"text": "Sun/A"}}) == "Sun/A"
    assert extract_reply_text("Sun/A (09:00-10:00)") == "Sun/A (09:00-10:00)"


def test_decode_provider_body_keeps_too_deep_json_as_text():
    deep = "[" * 100000 + "]" * 100000
    assert decode_provider_body(deep) == deep
