"""Chat-completion clients for the supported LLM providers."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

PROVIDERS = ("openai", "azure", "anthropic", "deepseek", "custom")

DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
    "custom": "https://api.openai.com/v1",
    "azure": "",
}
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "deepseek": "deepseek-chat",
    "anthropic": "claude-3-5-sonnet-latest",
    "custom": "gpt-4o-mini",
    "azure": "gpt-4o-mini",
}
ANTHROPIC_VERSION = "2023-06-01"


class LLMError(RuntimeError):
    pass


@dataclass
class LLMConfig:
    api_key: str
    provider: str = "openai"
    api_base_url: str = ""
    model: str = ""
    temperature: float = 0.4
    max_tokens: int = 2048
    timeout_s: Optional[float] = 120.0

    def resolved(self) -> "LLMConfig":
        provider = self.provider if self.provider in PROVIDERS else "openai"
        return LLMConfig(
            api_key=self.api_key.strip(),
            provider=provider,
            api_base_url=(self.api_base_url or DEFAULT_BASE_URLS[provider]).strip().rstrip("/"),
            model=(self.model or DEFAULT_MODELS[provider]).strip(),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout_s=self.timeout_s,
        )


def build_endpoint(base_url: str) -> str:
    trimmed = base_url.strip().rstrip("/")
    if trimmed.lower().endswith("/chat/completions"):
        return trimmed
    return f"{trimmed}/chat/completions"


class ChatCompletionClient(ABC):
    """One system + user turn in, the assistant's raw text out."""

    @abstractmethod
    def complete(self, system: str, user: str) -> str:
        raise NotImplementedError


class OpenAICompatibleClient(ChatCompletionClient):
    def __init__(self, cfg: LLMConfig) -> None:
        self.cfg = cfg

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Authorization": f"Bearer {self.cfg.api_key}"}

    def _payload(self, system: str, user: str) -> Dict[str, Any]:
        return {
            "model": self.cfg.model,
            "temperature": self.cfg.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }

    def complete(self, system: str, user: str) -> str:
        r = requests.post(
            build_endpoint(self.cfg.api_base_url),
            headers=self._headers(),
            json=self._payload(system, user),
            timeout=self.cfg.timeout_s,
        )
        if not r.ok:
            raise LLMError(f"LLM request failed: {r.status_code} {r.text[:500]}")
        data = r.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            raise LLMError("LLM response missing content.")
        return content


class AzureOpenAIClient(OpenAICompatibleClient):
    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "api-key": self.cfg.api_key}


class AnthropicClient(ChatCompletionClient):
    def __init__(self, cfg: LLMConfig) -> None:
        self.cfg = cfg

    def complete(self, system: str, user: str) -> str:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.cfg.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        payload = {
            "model": self.cfg.model,
            "max_tokens": self.cfg.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": [{"type": "text", "text": user}]}],
        }
        r = requests.post(
            f"{self.cfg.api_base_url}/messages",
            headers=headers,
            json=payload,
            timeout=self.cfg.timeout_s,
        )
        if not r.ok:
            raise LLMError(f"Anthropic request failed: {r.status_code} {r.text[:500]}")
        data = r.json()
        try:
            content = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            raise LLMError("Anthropic response missing content.")
        return content


def init_llm(cfg: LLMConfig) -> ChatCompletionClient:
    if not cfg.api_key.strip():
        raise ValueError("An API key is required for LLM mode.")
    cfg = cfg.resolved()
    if cfg.provider == "anthropic":
        return AnthropicClient(cfg)
    if cfg.provider == "azure":
        if not cfg.api_base_url:
            raise ValueError("Azure provider requires --api-base-url.")
        return AzureOpenAIClient(cfg)
    return OpenAICompatibleClient(cfg)
