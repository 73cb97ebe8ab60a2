"""Abstract LLM provider interface and factory."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol

from flask import Flask, current_app
from loguru import logger


class CompletionProvider(Protocol):
    def chat_completion(self, messages: Iterable[Dict[str, str]], model: Optional[str] = None,
                        temperature: float = 0.0, max_tokens: Optional[int] = None) -> str: ...


def get_llm_provider(kind: str, **kwargs) -> CompletionProvider:
    kind = kind.lower()
    if kind == "openai":
        from .openai_client import OpenAIProvider
        return OpenAIProvider(**kwargs)
    if kind == "openrouter":
        from .openrouter_client import OpenRouterProvider
        return OpenRouterProvider(**kwargs)
    raise ValueError(f"unsupported llm provider: {kind}")


class LLMExt:
    """Flask extension holding a lazily built completion provider."""

    def __init__(self) -> None:
        self._provider: Optional[CompletionProvider] = None
        self._settings: Dict[str, Optional[str]] = {}
        self.kind = "openai"

    def init_app(self, app: Flask) -> None:
        self.kind = app.config.get("LLM_PROVIDER", "openai")
        self._settings = {
            "api_key": app.config.get("LLM_API_KEY"),
            "base_url": app.config.get("LLM_BASE_URL"),
            "model": app.config.get("LLM_MODEL"),
        }
        app.extensions["llm"] = self

    @property
    def provider(self) -> CompletionProvider:
        if self._provider is None:
            settings = {k: v for k, v in self._settings.items() if v}
            self._provider = get_llm_provider(self.kind, **settings)
            logger.info("llm provider ready: {}", self.kind)
        return self._provider

    @provider.setter
    def provider(self, value: CompletionProvider) -> None:
        self._provider = value


def current_llm() -> LLMExt:
    return current_app.extensions["llm"]
