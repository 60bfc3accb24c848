from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from lockin.config import Settings
from lockin.services.errors import LLMError

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(content: str) -> str:
    text = (content or "").strip()
    text = _FENCE_OPEN.sub("", text)
    text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def _reject_constant(name: str) -> Any:
    raise LLMError(f"LLM returned non-finite number: {name}")


def parse_json_content(content: str) -> dict[str, Any]:
    try:
        parsed = json.loads(strip_code_fences(content), parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise LLMError(f"LLM returned invalid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise LLMError("LLM returned JSON that is not an object")
    return parsed


class LLMClient:
    """Thin chat-completions client for an OpenAI-compatible provider."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, config: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "LLMClient":
        return cls(
            api_key=config.llm_api_key,
            base_url=config.llm_base_url,
            model=config.llm_model,
            timeout=config.llm_timeout_seconds,
            transport=transport,
        )

    async def complete_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Send one chat completion and return the reply parsed as a JSON object.

        Raises ``LLMError`` on transport errors, non-2xx responses, a missing
        ``choices[0].message.content`` or content that is not a JSON object.
        Wrapping ```json fences are tolerated.
        """
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/chat/completions", json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise LLMError(f"LLM request failed: {exc}") from exc

        if response.status_code >= 400:
            raise LLMError(f"LLM API error: {response.status_code}")

        try:
            payload = response.json()
            content = payload["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise LLMError("LLM response missing choices[0].message.content") from exc

        return parse_json_content(content)
