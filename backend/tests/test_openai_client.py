"""Tests for the OpenAI-compatible client wrapper."""

from types import SimpleNamespace

import pytest

from premo.ai import openai_client as openai_client_module
from premo.ai.openai_client import DEFAULT_CHAT_MODEL, OpenAIClient, extract_content


class _FakeCompletions:
    def __init__(self, owner):
        self._owner = owner

    def create(self, messages, model: str, **kwargs):
        if self._owner.api_key == "bad-key":
            raise RuntimeError("provider rejected key")
        self._owner.calls.append({"messages": messages, "model": model, **kwargs})
        return {
            "choices": [{"message": {"role": "assistant", "content": "ok"}}],
            "model": model,
        }


class _FakeOpenAI:
    instances = 0

    def __init__(self, api_key: str, base_url=None):
        type(self).instances += 1
        self.api_key = api_key
        self.base_url = base_url
        self.calls = []
        self.chat = SimpleNamespace(completions=_FakeCompletions(self))


@pytest.fixture
def fake_openai(monkeypatch):
    _FakeOpenAI.instances = 0
    monkeypatch.setattr(openai_client_module, "OpenAI", _FakeOpenAI)
    return _FakeOpenAI


def test_chat_forwards_model_and_extra_kwargs(fake_openai):
    client = OpenAIClient(api_key="live-key", base_url="https://example.test/v1")

    response = client.chat(
        messages=[{"role": "user", "content": "hello"}],
        response_format={"type": "json_object"},
    )

    assert response["model"] == DEFAULT_CHAT_MODEL
    sdk = client.client
    assert sdk.base_url == "https://example.test/v1"
    assert sdk.calls[0]["response_format"] == {"type": "json_object"}


def test_live_client_is_created_once(fake_openai):
    client = OpenAIClient(api_key="live-key")
    client.chat(messages=[{"role": "user", "content": "one"}])
    client.chat(messages=[{"role": "user", "content": "two"}], model="other-model")

    assert fake_openai.instances == 1
    assert [call["model"] for call in client.client.calls] == [DEFAULT_CHAT_MODEL, "other-model"]


def test_errors_propagate_without_retry(fake_openai):
    client = OpenAIClient(api_key="bad-key")
    with pytest.raises(RuntimeError, match="provider rejected key"):
        client.chat(messages=[{"role": "user", "content": "hello"}])
    assert fake_openai.instances == 1


def test_demo_mode_uses_responder(fake_openai):
    seen = []

    def responder(messages):
        seen.append(messages)
        return '{"demo": true}'

    client = OpenAIClient(api_key="  ", demo_responder=responder)
    response = client.chat(messages=[{"role": "user", "content": "hi"}])

    assert client.demo_mode
    assert fake_openai.instances == 0
    assert response["model"] == "demo-fallback"
    assert extract_content(response) == '{"demo": true}'
    assert seen == [[{"role": "user", "content": "hi"}]]


def test_demo_mode_without_responder_explains_missing_key():
    client = OpenAIClient()
    content = extract_content(client.chat(messages=[{"role": "user", "content": "hi"}]))
    assert "PREMO_API_KEY" in content


def test_extract_content_handles_sdk_objects_and_parts():
    sdk_response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"a": 1}'))]
    )
    assert extract_content(sdk_response) == '{"a": 1}'

    parts_response = {
        "choices": [{"message": {"content": [{"text": "first"}, {"text": "second"}]}}]
    }
    assert extract_content(parts_response) == "first\nsecond"


def test_extract_content_returns_empty_for_missing_content():
    assert extract_content({"choices": []}) == ""
    assert extract_content({"choices": [{"message": {"content": None}}]}) == ""
    assert extract_content(SimpleNamespace(choices=[])) == ""
