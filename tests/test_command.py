"""
Tests for the request defaults and the upstream body decoding.
"""

import pytest
from starlette.datastructures import Headers

from relay.features.chat_relay.client import UpstreamReply
from relay.features.chat_relay.command import ChatCompletionCommand, DEFAULT_MODEL
from relay.features.chat_relay.handler import decode_upstream_body, resolve_site_url


@pytest.mark.unit
def test_empty_body_uses_all_defaults():
    payload = ChatCompletionCommand.from_body({}).to_payload()

    assert payload == {
        "model": "xiaomi/mimo-v2-flash:free",
        "messages": [],
        "temperature": 0.35,
        "top_p": 0.9,
        "max_tokens": 900,
    }
    assert list(payload) == ["model", "messages", "temperature", "top_p", "max_tokens"]
    assert isinstance(payload["max_tokens"], int)


@pytest.mark.unit
@pytest.mark.parametrize("body", [None, [], "hello", 42])
def test_non_object_body_is_treated_as_empty(body):
    assert ChatCompletionCommand.from_body(body).to_payload()["model"] == DEFAULT_MODEL


@pytest.mark.unit
def test_supplied_values_pass_through():
    messages = [{"role": "user", "content": "hi", "name": "anna"}]
    command = ChatCompletionCommand.from_body(
        {"model": "foo/bar", "messages": messages, "temperature": 0.1, "max_tokens": 64}
    )

    assert command.model == "foo/bar"
    assert command.messages == messages
    assert command.temperature == 0.1
    assert command.top_p == 0.9
    assert command.max_tokens == 64


@pytest.mark.unit
def test_model_is_trimmed_and_blank_falls_back():
    assert ChatCompletionCommand.from_body({"model": "  foo/bar \n"}).model == "foo/bar"
    assert ChatCompletionCommand.from_body({"model": "   "}).model == DEFAULT_MODEL
    assert ChatCompletionCommand.from_body({"model": 7}).model == DEFAULT_MODEL


@pytest.mark.unit
def test_messages_must_be_a_list():
    assert ChatCompletionCommand.from_body({"messages": {"role": "user"}}).messages == []
    assert ChatCompletionCommand.from_body({"messages": "hi"}).messages == []


@pytest.mark.unit
@pytest.mark.parametrize("value", [True, None, "0.7", float("nan"), float("inf"), [0.7]])
def test_non_finite_numbers_fall_back(value):
    command = ChatCompletionCommand.from_body(
        {"temperature": value, "top_p": value, "max_tokens": value}
    )

    assert command.temperature == 0.35
    assert command.top_p == 0.9
    assert command.max_tokens == 900


@pytest.mark.unit
def test_integer_sampling_values_stay_integers():
    payload = ChatCompletionCommand.from_body({"temperature": 1, "max_tokens": 2048}).to_payload()

    assert payload["temperature"] == 1
    assert isinstance(payload["temperature"], int)
    assert payload["max_tokens"] == 2048


@pytest.mark.unit
def test_site_url_prefers_forwarded_headers():
    headers = Headers(headers={
        "X-Forwarded-Host": "chat.example.com",
        "X-Forwarded-Proto": "http",
        "Host": "internal:3000",
    })
    assert resolve_site_url(headers) == "http://chat.example.com"


@pytest.mark.unit
def test_site_url_falls_back_to_host_and_https():
    assert resolve_site_url(Headers(headers={"Host": "relay.local"})) == "https://relay.local"
    assert resolve_site_url(Headers(headers={"X-Forwarded-Host": "", "Host": "relay.local"})) == "https://relay.local"


@pytest.mark.unit
def test_site_url_is_empty_without_host():
    assert resolve_site_url(Headers(headers={"X-Forwarded-Proto": "http"})) == ""
    assert resolve_site_url({}) == ""


@pytest.mark.unit
def test_decode_passes_json_through():
    assert decode_upstream_body(UpstreamReply(200, '{"choices": [{"index": 0}]}')) == {
        "choices": [{"index": 0}]
    }


@pytest.mark.unit
def test_decode_wraps_text_and_truncates():
    reply = UpstreamReply(502, "  " + "x" * 1000 + "  ")
    body = decode_upstream_body(reply)

    assert body == {"error": {"message": "x" * 800}}


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   \n"])
def test_decode_reports_status_when_body_is_blank(text):
    assert decode_upstream_body(UpstreamReply(503, text)) == {
        "error": {"message": "Upstream returned non-JSON. HTTP 503"}
    }


@pytest.mark.unit
def test_decode_rejects_nan_constants():
    assert decode_upstream_body(UpstreamReply(200, "NaN")) == {"error": {"message": "NaN"}}


@pytest.mark.unit
def test_integers_beyond_float_range_fall_back():
    huge = int("1" + "0" * 400)
    command = ChatCompletionCommand.from_body(
        {"temperature": huge, "top_p": -huge, "max_tokens": huge}
    )

    assert command.temperature == 0.35
    assert command.top_p == 0.9
    assert command.max_tokens == 900
