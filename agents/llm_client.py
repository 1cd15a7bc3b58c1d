from __future__ import annotations

import json
from typing import Any

import httpx

from logging_config import get_logger
from services.errors import AdvisorError


logger = get_logger(__name__)


class LLMClient:
    """Single-shot client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "https://api.openai.com/v1",
        timeout_seconds: float = 45.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 2048,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            payload["response_format"] = response_format

        data = await self._post_json("/chat/completions", payload)
        choices = data.get("choices") or []
        if not choices:
            raise AdvisorError("AI service returned no choices")

        message = choices[0].get("message") or {}
        content = message.get("content")

        if isinstance(content, str):
            return content

        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict) and item.get("type") == "text":
                    parts.append(str(item.get("text", "")))
                elif isinstance(item, str):
                    parts.append(item)
            return "".join(parts)

        raise AdvisorError("Unable to parse AI service content")

    async def chat_json(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> dict[str, Any]:
        content = await self.chat(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as err:
            raise AdvisorError("AI service returned invalid JSON") from err
        if not isinstance(payload, dict):
            raise AdvisorError("AI service returned a non-object JSON value")
        return payload

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise AdvisorError("LLM_API_KEY is not configured")

        url = f"{self.api_base}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as err:
            logger.warning("llm_call_failed", status_code=err.response.status_code, model=self.model)
            raise AdvisorError(f"AI service responded with {err.response.status_code}") from err
        except httpx.RequestError as err:
            logger.warning("llm_call_failed", error=str(err), model=self.model)
            raise AdvisorError("Failed to reach the AI service") from err
        except ValueError as err:
            raise AdvisorError("AI service returned a non-JSON body") from err
