"""OpenRouter HTTP adapter."""
from __future__ import annotations

from typing import Dict, Iterable, Optional

import httpx

from ..errors import LLMError


class OpenRouterProvider:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 model: str = "openai/gpt-4o-mini", timeout: float = 60.0):
        self.client = httpx.Client(timeout=timeout)
        self.api_key = api_key
        self.base = base_url or "https://openrouter.ai/api/v1"
        self.model = model

    def chat_completion(self, messages: Iterable[Dict[str, str]], model: Optional[str] = None,
                        temperature: float = 0.0, max_tokens: Optional[int] = None) -> str:
        url = f"{self.base}/chat/completions"
        payload = {"model": model or self.model, "messages": list(messages), "temperature": temperature}
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            r = self.client.post(url, json=payload, headers=headers)
            r.raise_for_status()
            j = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"openrouter request failed: {e}") from e
        choices = j.get("choices") or []
        if not choices:
            raise LLMError("openrouter returned no choices")
        return (choices[0].get("message") or {}).get("content") or ""
