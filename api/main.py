#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for the Legal Purifier.

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 8000

    # Or run directly
    python -m api.main

API Documentation:
    - OpenAPI docs: http://localhost:8000/docs

Key Endpoints:
    POST /api/v1/purify - Purify one text unit
    POST /api/v1/audit - Re-validate already-emitted fragments
    POST /api/v1/classify - Script profile of a text
    GET /api/v1/health - Providers, rule-set version, counters

Configuration:
    Environment variables (or .env):
    - RATE_LIMIT: purify rate limit (default: "60/minute")
    - OPENAI_API_KEY, ANTHROPIC_API_KEY, GOOGLE_API_KEY, DEEPSEEK_API_KEY
    - PROVIDER_ORDER: JSON list, e.g. ["openai", "gemini"]
"""

from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from config.logging_config import get_logger
from config.settings import settings
from api.purification_routes import router as purification_router, limiter

logger = get_logger(__name__)

app = FastAPI(
    title="Legal Purifier API",
    description="Monolingual, quality-gated Arabic/French legal text",
    version="1.0.0"
)

# Rate limiting (configurable via RATE_LIMIT env var)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(purification_router)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Legal Purifier API Server...")
    logger.info("API Documentation: http://localhost:8000/docs")

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
