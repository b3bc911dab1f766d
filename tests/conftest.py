"""
Pytest configuration and shared fixtures for Legal Purifier tests.
"""
import asyncio
import sys
import pytest
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings
from core.cache.purity_cache import PurificationCache
from core.purification.context import SubscriberRegistry
from core.purification.models import Priority
from core.purification.orchestrator import Timeouts, TranslationOrchestrator
from core.purification.pipeline import PurificationPipeline


FAST_TIMEOUTS = {
    Priority.INTERACTIVE: Timeouts(call_timeout=0.5, request_deadline=1.0),
    Priority.BATCH: Timeouts(call_timeout=1.0, request_deadline=2.0),
}


class FakeProvider:
    """Stand-in for an AI provider: fixed output, error or delay"""

    def __init__(self, name, output=None, error=None, delay=0.0):
        self.name = name
        self.output = output
        self.error = error
        self.delay = delay
        self.calls = []

    async def translate(self, text, source_lang, target_lang, context=None):
        self.calls.append((text, source_lang, target_lang, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.output


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: multi-component tests")


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances"""
    return FakeProvider


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the developer's .env"""
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        google_api_key="",
        deepseek_api_key="",
        cache_enabled=True,
        cache_ttl_seconds=60,
        interactive_call_timeout=0.5,
        interactive_request_deadline=1.0,
    )


@pytest.fixture
def registry():
    return SubscriberRegistry()


@pytest.fixture
def make_pipeline():
    """Build a pipeline over the given providers with short timeouts"""
    def _make(*providers, cache=True, registry=None, **kwargs):
        return PurificationPipeline(
            orchestrator=TranslationOrchestrator(list(providers), timeouts=FAST_TIMEOUTS),
            cache=PurificationCache(ttl_seconds=60) if cache else None,
            registry=registry,
            **kwargs,
        )
    return _make


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test location."""
    for item in items:
        # Add markers based on test file location
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
