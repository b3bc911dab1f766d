"""
Claude AI Provider - Anthropic
Legal Purifier - Multi-Provider Support
"""

from typing import Optional, List

try:
    import anthropic
    HAS_ANTHROPIC = True
except ImportError:
    HAS_ANTHROPIC = False

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
)


class ClaudeProvider(BaseAIProvider):
    """
    Anthropic Claude AI Provider

    Supports:
    - Claude Sonnet 4 (recommended for legal translation)
    - Claude 3.5 Haiku (fast, cost-effective)
    """

    MODELS = {
        "claude-sonnet-4-20250514": "Claude Sonnet 4 (Latest)",
        "claude-3-5-sonnet-20241022": "Claude 3.5 Sonnet",
        "claude-3-5-haiku-20241022": "Claude 3.5 Haiku",
    }

    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.CLAUDE

    async def initialize(self) -> None:
        """Initialize Anthropic client"""
        if not HAS_ANTHROPIC:
            raise ImportError("anthropic package not installed. Run: pip install anthropic")

        self._client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            base_url=self.config.base_url
        )

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using Claude"""
        if not self._client:
            await self.initialize()

        response = await self._client.messages.create(
            model=kwargs.get("model", self.config.model),
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            system=system_prompt or "",
            messages=[{"role": msg.role, "content": msg.content} for msg in messages]
        )

        # Text blocks only; the API may interleave other block types
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", "text") == "text"
        )

        return AIResponse(
            content=text,
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens
            },
            finish_reason=response.stop_reason,
            raw_response=response
        )
