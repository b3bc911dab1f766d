"""
DeepSeek AI Provider
Legal Purifier - Multi-Provider Support

DeepSeek uses OpenAI-compatible API format.
"""

from typing import Optional, List

try:
    from openai import AsyncOpenAI
    HAS_OPENAI = True
except ImportError:
    HAS_OPENAI = False

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
)
from .openai_provider import OpenAIProvider


class DeepSeekProvider(BaseAIProvider):
    """
    DeepSeek AI Provider

    Uses OpenAI-compatible API format; last resort in the default order.
    """

    MODELS = {
        "deepseek-chat": "DeepSeek Chat (V3)",
        "deepseek-reasoner": "DeepSeek Reasoner (R1)",
    }

    DEFAULT_MODEL = "deepseek-chat"
    BASE_URL = "https://api.deepseek.com"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.DEEPSEEK

    async def initialize(self) -> None:
        """Initialize DeepSeek client (OpenAI-compatible)"""
        if not HAS_OPENAI:
            raise ImportError("openai package not installed. Run: pip install openai")

        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url or self.BASE_URL
        )

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using DeepSeek"""
        if not self._client:
            await self.initialize()

        response = await self._client.chat.completions.create(
            model=kwargs.get("model", self.config.model),
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            messages=OpenAIProvider._convert_messages(messages, system_prompt)
        )

        choice = response.choices[0]
        content = choice.message.content or ""

        return AIResponse(
            content=content,
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens
            } if response.usage else None,
            finish_reason=choice.finish_reason,
            raw_response=response
        )
