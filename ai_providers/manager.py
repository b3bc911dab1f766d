"""
AI Provider Manager
Legal Purifier - Multi-Provider Support

Builds the ordered provider list the translation orchestrator walks through.
"""

import logging
from typing import Optional, Dict, Iterable, List, Type
from dataclasses import dataclass

from .base import BaseAIProvider, AIProviderType, AIConfig
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .deepseek_provider import DeepSeekProvider

logger = logging.getLogger(__name__)


@dataclass
class ProviderInfo:
    """Information about an AI provider"""
    type: AIProviderType
    name: str
    description: str
    models: Dict[str, str]
    default_model: str
    env_key: str  # Environment variable name for API key


# Registry of all available providers
PROVIDER_REGISTRY: Dict[AIProviderType, Type[BaseAIProvider]] = {
    AIProviderType.OPENAI: OpenAIProvider,
    AIProviderType.CLAUDE: ClaudeProvider,
    AIProviderType.GEMINI: GeminiProvider,
    AIProviderType.DEEPSEEK: DeepSeekProvider,
}

# Provider information
PROVIDER_INFO: Dict[AIProviderType, ProviderInfo] = {
    AIProviderType.OPENAI: ProviderInfo(
        type=AIProviderType.OPENAI,
        name="OpenAI GPT",
        description="GPT-4o - Strong Arabic and French output",
        models=OpenAIProvider.MODELS,
        default_model=OpenAIProvider.DEFAULT_MODEL,
        env_key="OPENAI_API_KEY"
    ),
    AIProviderType.CLAUDE: ProviderInfo(
        type=AIProviderType.CLAUDE,
        name="Anthropic Claude",
        description="Claude - Careful legal register",
        models=ClaudeProvider.MODELS,
        default_model=ClaudeProvider.DEFAULT_MODEL,
        env_key="ANTHROPIC_API_KEY"
    ),
    AIProviderType.GEMINI: ProviderInfo(
        type=AIProviderType.GEMINI,
        name="Google Gemini",
        description="Gemini - Fast, multilingual",
        models=GeminiProvider.MODELS,
        default_model=GeminiProvider.DEFAULT_MODEL,
        env_key="GOOGLE_API_KEY"
    ),
    AIProviderType.DEEPSEEK: ProviderInfo(
        type=AIProviderType.DEEPSEEK,
        name="DeepSeek",
        description="DeepSeek V3 - Cost-effective fallback",
        models=DeepSeekProvider.MODELS,
        default_model=DeepSeekProvider.DEFAULT_MODEL,
        env_key="DEEPSEEK_API_KEY"
    ),
}

_ALIASES = {
    "openai": AIProviderType.OPENAI,
    "gpt": AIProviderType.OPENAI,
    "claude": AIProviderType.CLAUDE,
    "anthropic": AIProviderType.CLAUDE,
    "gemini": AIProviderType.GEMINI,
    "google": AIProviderType.GEMINI,
    "deepseek": AIProviderType.DEEPSEEK,
}


def parse_provider_type(name: str) -> Optional[AIProviderType]:
    return _ALIASES.get((name or "").strip().lower())


class AIProviderManager:
    """
    Holds configured providers in priority order.

    Usage:
        manager = AIProviderManager(
            api_keys={"openai": "sk-...", "gemini": "..."},
            order=["openai", "claude", "gemini"],
        )
        manager.providers()    # [OpenAIProvider, GeminiProvider]; claude has no key
    """

    def __init__(
        self,
        api_keys: Optional[Dict[str, str]] = None,
        order: Optional[Iterable[str]] = None,
        models: Optional[Dict[str, str]] = None,
    ):
        self._api_keys: Dict[AIProviderType, str] = {}
        for name, key in (api_keys or {}).items():
            ptype = parse_provider_type(name)
            if ptype and key:
                self._api_keys[ptype] = key

        self._models: Dict[AIProviderType, str] = {}
        for name, model in (models or {}).items():
            ptype = parse_provider_type(name)
            if ptype and model:
                self._models[ptype] = model

        self._order: List[AIProviderType] = []
        for name in (order if order is not None else [p.value for p in PROVIDER_REGISTRY]):
            ptype = parse_provider_type(name)
            if ptype is None:
                logger.warning(f"Unknown provider '{name}' in provider order, ignored")
            elif ptype not in self._order:
                self._order.append(ptype)

        self._providers: List[BaseAIProvider] = [
            self._create_provider(ptype) for ptype in self._order if self._has_key(ptype)
        ]

    @classmethod
    def from_settings(cls, settings) -> "AIProviderManager":
        return cls(
            api_keys=settings.get_api_keys(),
            order=settings.provider_order,
            models=settings.get_models(),
        )

    def _has_key(self, ptype: AIProviderType) -> bool:
        if ptype in self._api_keys:
            return True
        info = PROVIDER_INFO[ptype]
        logger.warning(f"{info.name} skipped: no API key ({info.env_key})")
        return False

    def _create_provider(self, ptype: AIProviderType) -> BaseAIProvider:
        """Create a provider instance (client is initialized on first call)"""
        info = PROVIDER_INFO[ptype]
        config = AIConfig(
            api_key=self._api_keys[ptype],
            model=self._models.get(ptype) or info.default_model
        )
        return PROVIDER_REGISTRY[ptype](config)

    def providers(self) -> List[BaseAIProvider]:
        """Configured providers in priority order"""
        return list(self._providers)

    @property
    def order(self) -> List[str]:
        return [p.value for p in self._order]

    @staticmethod
    def list_providers() -> List[ProviderInfo]:
        """List all known providers"""
        return list(PROVIDER_INFO.values())

    def get_available_providers(self) -> List[ProviderInfo]:
        """Providers that have an API key configured"""
        return [PROVIDER_INFO[p.provider_type] for p in self._providers]

    async def health_check(self) -> Dict[str, bool]:
        """Probe every configured provider"""
        results = {}
        for provider in self._providers:
            try:
                results[provider.name] = await provider.health_check()
            except Exception as e:
                results[provider.name] = False
                logger.warning(f"Health check failed for {provider.name}: {e}")
        return results


def create_provider_manager(
    api_keys: Optional[Dict[str, str]] = None,
    order: Optional[Iterable[str]] = None,
) -> AIProviderManager:
    """
    Factory function to create a provider manager.

    Args:
        api_keys: Provider name -> API key ("openai", "claude", "gemini", "deepseek")
        order: Priority order; defaults to the configured provider order

    Returns:
        Configured AIProviderManager instance
    """
    if api_keys is None or order is None:
        from config.settings import settings
        api_keys = api_keys if api_keys is not None else settings.get_api_keys()
        order = order if order is not None else settings.provider_order
    return AIProviderManager(api_keys=api_keys, order=order)
