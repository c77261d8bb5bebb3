"""OpenAI-compatible chat client with an offline demo mode."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from openai import OpenAI

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_CHAT_MODEL = "gemini-2.5-flash"

DemoResponder = Callable[[List[Dict[str, str]]], str]


def _unavailable_responder(_messages: List[Dict[str, str]]) -> str:
    return "AI unavailable: set PREMO_API_KEY for live responses."


class _DemoCompletions:
    """Imitates the `create(...)` callable under `chat.completions`."""

    def __init__(self, responder: DemoResponder):
        self._responder = responder

    def create(self, messages: List[Dict[str, str]], *_args, **_kwargs):
        return {
            "choices": [
                {"message": {"role": "assistant", "content": self._responder(messages)}}
            ],
            "model": "demo-fallback",
        }


class _DemoChat:
    def __init__(self, responder: DemoResponder):
        self.completions = _DemoCompletions(responder)


class _DemoClient:
    """Stands in for the SDK client when no API key is configured."""

    def __init__(self, responder: DemoResponder):
        self.chat = _DemoChat(responder)


class OpenAIClient:
    """Thin wrapper around one OpenAI-compatible endpoint with demo mode."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_chat_model: str | None = None,
        demo_responder: DemoResponder | None = None,
    ):
        self.api_key = self._clean(api_key)
        self.base_url = self._clean(base_url) or DEFAULT_BASE_URL
        self.default_chat_model = self._clean(default_chat_model) or DEFAULT_CHAT_MODEL
        self._demo_responder = demo_responder or _unavailable_responder
        self._live_client: Optional[OpenAI] = None
        self._demo_client: Optional[_DemoClient] = None

    @staticmethod
    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @property
    def demo_mode(self) -> bool:
        return self.api_key is None

    def _get_demo_client(self) -> _DemoClient:
        if not self._demo_client:
            self._demo_client = _DemoClient(self._demo_responder)
        return self._demo_client

    def _get_live_client(self) -> OpenAI:
        if self._live_client is None:
            logger.debug("Creating OpenAI SDK client for {}", self.base_url)
            self._live_client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._live_client

    @property
    def client(self) -> OpenAI | _DemoClient:
        if self.demo_mode:
            return self._get_demo_client()
        return self._get_live_client()

    def chat(self, messages: List[Dict[str, str]], model: str | None = None, **kwargs) -> Any:
        """Issue a single chat-completion request. Errors propagate to the caller."""
        chosen_model = model or self.default_chat_model
        return self.client.chat.completions.create(messages=messages, model=chosen_model, **kwargs)


def extract_content(resp: Any) -> str:
    """Return the first choice's message text from a dict or SDK response."""

    def _normalize(content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict):
                    text_value = item.get("text") or item.get("content")
                else:
                    text_value = getattr(item, "text", None) or getattr(item, "content", None)
                if isinstance(text_value, str):
                    parts.append(text_value)
            return "\n".join(parts).strip()
        return str(content)

    if isinstance(resp, dict):
        choices = resp.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return _normalize(message.get("content"))

    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    if isinstance(message, dict):
        return _normalize(message.get("content"))
    return _normalize(getattr(message, "content", None))
