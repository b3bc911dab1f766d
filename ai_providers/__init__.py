"""
AI Providers Package
Legal Purifier - Multi-Provider Support

Supports:
- OpenAI GPT (gpt-4o, gpt-4o-mini, etc.)
- Anthropic Claude (claude-sonnet-4, claude-3.5-haiku, etc.)
- Google Gemini (gemini-2.0-flash, gemini-1.5-pro, etc.)
- DeepSeek (deepseek-chat, deepseek-reasoner)

Usage:
    from ai_providers import create_provider_manager

    manager = create_provider_manager(
        api_keys={"openai": "sk-...", "claude": "sk-ant-..."},
        order=["openai", "claude"],
    )
    for provider in manager.providers():
        text = await provider.translate("الشهود", "ar", "fr")
"""

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig,
    build_translation_prompt,
)

from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .deepseek_provider import DeepSeekProvider

from .manager import (
    AIProviderManager,
    ProviderInfo,
    PROVIDER_REGISTRY,
    PROVIDER_INFO,
    create_provider_manager,
    parse_provider_type,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "AIProviderType",
    "AIMessage",
    "AIResponse",
    "AIConfig",
    "build_translation_prompt",

    # Providers
    "ClaudeProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "DeepSeekProvider",

    # Manager
    "AIProviderManager",
    "ProviderInfo",
    "PROVIDER_REGISTRY",
    "PROVIDER_INFO",
    "create_provider_manager",
    "parse_provider_type",
]

__version__ = "1.0.0"
