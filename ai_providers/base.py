"""
Base AI Provider - Abstract Interface
Legal Purifier - Multi-Provider Support

Providers are untrusted for purity: whatever they return is scored by the
quality gate before it reaches a caller.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
from enum import Enum

from config.constants import PROVIDER_MAX_TOKENS, PROVIDER_TEMPERATURE
from core.language import Language, get_language_info


class AIProviderType(Enum):
    """Supported AI Providers"""
    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"


@dataclass
class AIMessage:
    """Unified message format across providers"""
    role: str  # "user", "assistant", "system"
    content: str


@dataclass
class AIResponse:
    """Unified response format"""
    content: str
    model: str
    provider: AIProviderType
    usage: Optional[Dict[str, int]] = None  # tokens used
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = None


@dataclass
class AIConfig:
    """Provider configuration"""
    api_key: str
    model: str
    max_tokens: int = PROVIDER_MAX_TOKENS
    temperature: float = PROVIDER_TEMPERATURE
    base_url: Optional[str] = None  # For custom endpoints


def _language_label(code: Optional[str]) -> str:
    language = Language.parse(code)
    if language is None:
        return "the source language (detect it)"
    info = get_language_info(language)
    return f"{info.name} ({info.native_name})"


def build_translation_prompt(
    source_lang: Optional[str],
    target_lang: str,
    context: Any = None,
) -> str:
    """System prompt asking for output written only in the target script"""
    target = Language.parse(target_lang)
    target_label = _language_label(target_lang)
    script = get_language_info(target).script.value if target else "target"

    lines = [
        f"You are a legal translator for the Algerian legal system, translating "
        f"from {_language_label(source_lang)} into {target_label}.",
        "",
        "Rules:",
        f"- Write the answer exclusively in {target_label} using the {script} script",
        "- Never leave words, tags, labels or fragments in any other script",
        "- Translate legal terms (kafala, hiba, morabaha, article titles) into the target language",
        "- Keep numbers, article references and dates as they are",
        "- Preserve paragraphs and line breaks",
    ]
    # Caller context is opaque; only plain strings are useful to the model
    if isinstance(context, str) and context.strip():
        lines += ["", f"Context: {context.strip()}"]
    lines += ["", "Output ONLY the translated text, no explanations."]
    return "\n".join(lines)


class BaseAIProvider(ABC):
    """
    Abstract base class for AI providers.
    Providers implement initialize() and complete(); translate() is shared.
    """

    MODELS: Dict[str, str] = {}
    DEFAULT_MODEL: str = ""

    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def provider_type(self) -> AIProviderType:
        """Return the provider type"""
        pass

    @property
    def name(self) -> str:
        return self.provider_type.value

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection"""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """
        Generate a completion from the AI model.

        Args:
            messages: List of conversation messages
            system_prompt: Optional system prompt
            **kwargs: Provider-specific parameters (model, max_tokens, temperature)

        Returns:
            AIResponse with the generated content
        """
        pass

    async def translate(
        self,
        text: str,
        source_lang: Optional[str],
        target_lang: str,
        context: Any = None,
    ) -> str:
        """
        Translate text into the target language.

        Args:
            text: Text to translate
            source_lang: Source language code, None when unknown
            target_lang: Target language code
            context: Opaque caller context, forwarded unmodified

        Returns:
            The translated text (may be empty; callers treat that as no result)
        """
        response = await self.complete(
            [AIMessage(role="user", content=text)],
            system_prompt=build_translation_prompt(source_lang, target_lang, context),
        )
        return (response.content or "").strip()

    async def health_check(self) -> bool:
        """Check if the provider is available"""
        try:
            response = await self.complete(
                messages=[AIMessage(role="user", content="Hi")],
                max_tokens=5
            )
            return response.content is not None
        except Exception:
            return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"
