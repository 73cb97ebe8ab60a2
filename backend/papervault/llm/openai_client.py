"""OpenAI chat completions wrapper (also works with OpenAI-compatible servers)."""
from __future__ import annotations

from typing import Dict, Iterable, Optional

import openai

from ..errors import LLMError


class OpenAIProvider:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 model: str = "gpt-4o-mini", timeout: float = 60.0):
        try:
            self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        except openai.OpenAIError as e:
            raise LLMError(f"openai client could not be created: {e}") from e
        self.model = model

    def chat_completion(self, messages: Iterable[Dict[str, str]], model: Optional[str] = None,
                        temperature: float = 0.0, max_tokens: Optional[int] = None) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model or self.model,
                messages=list(messages),
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise LLMError(f"openai request failed: {e}") from e
        if not resp.choices:
            raise LLMError("openai returned no choices")
        return resp.choices[0].message.content or ""
