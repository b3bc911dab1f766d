"""
Unit tests for ai_providers (manager, prompt, base translate)
"""
import pytest
from unittest.mock import AsyncMock, patch

from ai_providers.base import (
    AIConfig,
    AIProviderType,
    AIResponse,
    BaseAIProvider,
    build_translation_prompt,
)
from ai_providers.claude_provider import ClaudeProvider
from ai_providers.gemini_provider import GeminiProvider
from ai_providers.manager import (
    AIProviderManager,
    PROVIDER_INFO,
    create_provider_manager,
    parse_provider_type,
)
from ai_providers.openai_provider import OpenAIProvider
from config.settings import Settings


class EchoProvider(BaseAIProvider):
    """Provider whose completion echoes the user message"""

    def __init__(self, config, content=None, error=None):
        super().__init__(config)
        self.content = content
        self.error = error
        self.requests = []

    @property
    def provider_type(self):
        return AIProviderType.OPENAI

    async def initialize(self):
        pass

    async def complete(self, messages, system_prompt=None, **kwargs):
        self.requests.append((messages, system_prompt, kwargs))
        if self.error is not None:
            raise self.error
        content = self.content if self.content is not None else messages[-1].content
        return AIResponse(content=content, model=self.config.model, provider=self.provider_type)


class TestTranslationPrompt:

    def test_names_target_language_and_script(self):
        prompt = build_translation_prompt("ar", "fr")
        assert "French" in prompt
        assert "latin script" in prompt
        assert "Arabic" in prompt

    def test_unknown_source(self):
        prompt = build_translation_prompt(None, "ar")
        assert "detect it" in prompt
        assert "arabic script" in prompt

    def test_string_context_included(self):
        prompt = build_translation_prompt("ar", "fr", context="Chambre civile")
        assert "Context: Chambre civile" in prompt

    def test_non_string_context_ignored(self):
        prompt = build_translation_prompt("ar", "fr", context={"session": 1})
        assert "Context:" not in prompt


class TestBaseProviderTranslate:

    @pytest.mark.asyncio
    async def test_translate_uses_completion(self):
        provider = EchoProvider(AIConfig(api_key="k", model="m"), content="  Les témoins \n")

        text = await provider.translate("الشهود", "ar", "fr", context="dossier 12")

        assert text == "Les témoins"
        messages, system_prompt, _ = provider.requests[0]
        assert messages[0].content == "الشهود"
        assert "dossier 12" in system_prompt

    @pytest.mark.asyncio
    async def test_empty_completion(self):
        provider = EchoProvider(AIConfig(api_key="k", model="m"), content="")
        assert await provider.translate("الشهود", "ar", "fr") == ""

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        provider = EchoProvider(AIConfig(api_key="k", model="m"), error=RuntimeError("429"))
        with pytest.raises(RuntimeError):
            await provider.translate("الشهود", "ar", "fr")

    @pytest.mark.asyncio
    async def test_health_check(self):
        assert await EchoProvider(AIConfig(api_key="k", model="m")).health_check() is True
        broken = EchoProvider(AIConfig(api_key="k", model="m"), error=RuntimeError("down"))
        assert await broken.health_check() is False

    def test_name(self):
        assert EchoProvider(AIConfig(api_key="k", model="m")).name == "openai"


class TestProviderManager:
    """Ordered provider list from keys and configuration."""

    def test_parse_provider_type_aliases(self):
        assert parse_provider_type("Anthropic") == AIProviderType.CLAUDE
        assert parse_provider_type("google") == AIProviderType.GEMINI
        assert parse_provider_type("mistral") is None

    def test_providers_without_key_are_skipped(self):
        manager = AIProviderManager(
            api_keys={"openai": "sk-test", "gemini": "g-test"},
            order=["openai", "claude", "gemini"],
        )
        providers = manager.providers()
        assert [type(p) for p in providers] == [OpenAIProvider, GeminiProvider]
        assert [p.name for p in providers] == ["openai", "gemini"]

    def test_order_is_honored(self):
        manager = AIProviderManager(
            api_keys={"openai": "a", "claude": "b"},
            order=["claude", "openai"],
        )
        assert [p.name for p in manager.providers()] == ["claude", "openai"]
        assert manager.order == ["claude", "openai"]

    def test_unknown_and_duplicate_names_ignored(self):
        manager = AIProviderManager(
            api_keys={"claude": "b"},
            order=["mistral", "claude", "anthropic"],
        )
        assert manager.order == ["claude"]
        assert isinstance(manager.providers()[0], ClaudeProvider)

    def test_default_and_overridden_models(self):
        manager = AIProviderManager(
            api_keys={"openai": "a", "claude": "b"},
            order=["openai", "claude"],
            models={"claude": "claude-3-5-haiku-20241022"},
        )
        openai_provider, claude_provider = manager.providers()
        assert openai_provider.config.model == OpenAIProvider.DEFAULT_MODEL
        assert claude_provider.config.model == "claude-3-5-haiku-20241022"

    def test_no_keys_no_providers(self):
        assert AIProviderManager(api_keys={}).providers() == []

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            openai_api_key="",
            anthropic_api_key="",
            google_api_key="g-test",
            deepseek_api_key="d-test",
            provider_order=["deepseek", "gemini"],
        )
        manager = AIProviderManager.from_settings(settings)
        assert [p.name for p in manager.providers()] == ["deepseek", "gemini"]
        assert [i.env_key for i in manager.get_available_providers()] == [
            "DEEPSEEK_API_KEY",
            "GOOGLE_API_KEY",
        ]

    def test_list_providers(self):
        assert len(AIProviderManager.list_providers()) == len(PROVIDER_INFO)

    def test_create_provider_manager(self):
        manager = create_provider_manager(api_keys={"openai": "a"}, order=["openai"])
        assert [p.name for p in manager.providers()] == ["openai"]

    @pytest.mark.asyncio
    async def test_health_check(self):
        manager = AIProviderManager(api_keys={"openai": "a"}, order=["openai"])
        with patch.object(OpenAIProvider, "health_check", AsyncMock(return_value=True)):
            assert await manager.health_check() == {"openai": True}
