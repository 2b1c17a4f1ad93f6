"""
Chat-completion client used by the AI flows.

Two wire dialects are supported: Ollama's native ``/api/chat`` and the
OpenAI-compatible ``/v1/chat/completions``. Both are asked for a single,
non-streamed JSON reply.
"""

from dataclasses import dataclass

import httpx
import structlog

from cyberwatch.config import settings
from cyberwatch.errors import GenerationFailure

logger = structlog.get_logger()

OLLAMA_CHAT_PATH = "/api/chat"
OPENAI_CHAT_PATH = "/v1/chat/completions"


@dataclass
class LLMMessage:
    role: str
    content: str


@dataclass
class LLMResponse:
    content: str
    model: str = ""


def _ollama_payload(model: str, messages: list[dict], temperature: float, json_output: bool) -> dict:
    payload = {"model": model, "messages": messages, "stream": False, "options": {"temperature": temperature}}
    if json_output:
        payload["format"] = "json"
    return payload


def _openai_payload(model: str, messages: list[dict], temperature: float, json_output: bool) -> dict:
    payload = {"model": model, "messages": messages, "temperature": temperature}
    if json_output:
        payload["response_format"] = {"type": "json_object"}
    return payload


def _ollama_reply(data: dict) -> str:
    return (data.get("message") or {}).get("content") or ""


def _openai_reply(data: dict) -> str:
    choices = data.get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content") or ""


class LLMBackend:
    """Async chat client for the configured provider ("ollama" or any OpenAI-compatible server)."""

    def __init__(
        self,
        provider: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.provider = provider or settings.ai_provider
        self.base_url = (base_url or settings.ai_base_url).rstrip("/")
        self.model = model or settings.ai_model
        self.api_key = api_key or settings.ai_api_key
        self.timeout = timeout or settings.ai_timeout
        self._transport = transport

    @property
    def is_ollama(self) -> bool:
        return self.provider == "ollama"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.3,
        json_output: bool = False,
    ) -> LLMResponse:
        """Send one chat request and return the assistant text.

        HTTP errors propagate as ``httpx.HTTPError``; a 200 reply that is not a
        chat-completion JSON object raises ``GenerationFailure``.
        """
        wire_messages = [{"role": m.role, "content": m.content} for m in messages]
        if self.is_ollama:
            path, build, reply = OLLAMA_CHAT_PATH, _ollama_payload, _ollama_reply
        else:
            path, build, reply = OPENAI_CHAT_PATH, _openai_payload, _openai_reply

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                f"{self.base_url}{path}",
                json=build(self.model, wire_messages, temperature, json_output),
                headers=self._headers(),
            )
            resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("LLM backend returned a non-JSON body", provider=self.provider, status=resp.status_code)
            raise GenerationFailure("AI backend returned a non-JSON response") from e
        if not isinstance(data, dict):
            raise GenerationFailure("AI backend returned an unexpected response shape")

        try:
            content = reply(data)
        except (AttributeError, IndexError, TypeError) as e:
            raise GenerationFailure("AI backend returned an unexpected response shape") from e
        if not isinstance(content, str):
            raise GenerationFailure("AI backend returned an unexpected response shape")

        logger.debug("LLM reply received", provider=self.provider, model=data.get("model", self.model))
        return LLMResponse(content=content, model=str(data.get("model") or self.model))
