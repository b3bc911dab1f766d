#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest fixtures for integration tests.

Provides:
- scripted_providers: providers returning fixed outputs, no API calls
- api_pipeline: pipeline installed behind the API's get_pipeline dependency
- api_client: TestClient over api.main.app with rate limiting disabled
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def scripted_providers(fake_provider):
    """
    Primary provider that fails with a quota error and a secondary that
    answers with clean French, so every call exercises the fallthrough.
    """
    return [
        fake_provider("openai", error=RuntimeError("insufficient_quota")),
        fake_provider("gemini", output="Les témoins ont été entendus"),
    ]


@pytest.fixture
def api_pipeline(make_pipeline, scripted_providers):
    return make_pipeline(*scripted_providers)


@pytest.fixture
def api_client(api_pipeline):
    """TestClient wired to a pipeline with scripted providers."""
    from fastapi.testclient import TestClient
    from api.main import app
    from api.purification_routes import get_pipeline, limiter, reset_pipeline

    app.dependency_overrides[get_pipeline] = lambda: api_pipeline
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True
        reset_pipeline()
