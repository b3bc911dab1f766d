"""
Google Gemini Provider
Legal Purifier - Multi-Provider Support
"""

from typing import Optional, List, Dict, Any

try:
    import google.generativeai as genai
    from google.generativeai.types import HarmCategory, HarmBlockThreshold
    HAS_GEMINI = True
except ImportError:
    HAS_GEMINI = False

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
)


class GeminiProvider(BaseAIProvider):
    """
    Google Gemini AI Provider

    Supports:
    - Gemini 2.0 Flash
    - Gemini 1.5 Pro / Flash
    """

    MODELS = {
        "gemini-2.0-flash": "Gemini 2.0 Flash",
        "gemini-1.5-pro": "Gemini 1.5 Pro",
        "gemini-1.5-flash": "Gemini 1.5 Flash",
    }

    DEFAULT_MODEL = "gemini-2.0-flash"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.GEMINI

    async def initialize(self) -> None:
        """Initialize Gemini client"""
        if not HAS_GEMINI:
            raise ImportError(
                "google-generativeai package not installed. "
                "Run: pip install google-generativeai"
            )

        genai.configure(api_key=self.config.api_key)

        # Criminal-law text (violence, abuse cases) trips the default filters
        self._safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
        }

        self._client = genai.GenerativeModel(
            model_name=self.config.model,
            safety_settings=self._safety_settings,
            generation_config={
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_tokens,
            }
        )

    @staticmethod
    def _convert_messages(
        messages: List[AIMessage],
        system_prompt: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Convert AIMessage to Gemini format (system prompt prepended to the first turn)"""
        contents = []
        system_text = system_prompt + "\n\n" if system_prompt else ""

        for i, msg in enumerate(messages):
            role = "user" if msg.role == "user" else "model"
            text_content = msg.content
            if i == 0 and system_text:
                text_content = system_text + text_content
            contents.append({"role": role, "parts": [text_content]})

        return contents

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using Gemini"""
        if not self._client:
            await self.initialize()

        response = await self._client.generate_content_async(
            self._convert_messages(messages, system_prompt),
            generation_config={
                "temperature": kwargs.get("temperature", self.config.temperature),
                "max_output_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            }
        )

        usage = None
        if getattr(response, 'usage_metadata', None):
            usage = {
                "input_tokens": response.usage_metadata.prompt_token_count,
                "output_tokens": response.usage_metadata.candidates_token_count
            }

        # response.text raises when the candidate was blocked; the caller records it
        return AIResponse(
            content=response.text,
            model=self.config.model,
            provider=self.provider_type,
            usage=usage,
            finish_reason=response.candidates[0].finish_reason.name if response.candidates else None,
            raw_response=response
        )
