"""
OpenAI chat provider.

Thin async wrapper over chat completions. Errors propagate: the validator,
summarizer and upgrader each decide how to degrade.
"""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ..config import get_settings
from .base import BaseLLMProvider


class OpenAIChatProvider(BaseLLMProvider):
    """OpenAI chat completions implementation."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 client: Optional[AsyncOpenAI] = None):
        settings = get_settings()
        self.model = model or settings.openai_model
        if client is not None:
            self.client = client
            return

        key = api_key if api_key is not None else settings.openai_api_key
        if not key:
            raise ValueError("Missing OPENAI_API_KEY environment variable")
        self.client = AsyncOpenAI(api_key=key)

    @property
    def name(self) -> str:
        return "openai"

    async def complete(
        self,
        prompt: str,
        json_mode: bool = False,
        system: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
    ) -> str:
        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            print(f"[LLM] {self.model} request failed: {e}", flush=True)
            raise

        return response.choices[0].message.content or ""
