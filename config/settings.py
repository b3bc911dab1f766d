#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Dict, List, Optional
from pydantic_settings import BaseSettings

from .constants import (
    PROVIDER_ORDER,
    THRESHOLD_UI_LABEL,
    THRESHOLD_CHAT_MESSAGE,
    THRESHOLD_LEGAL_DOCUMENT,
    INTERACTIVE_CALL_TIMEOUT,
    INTERACTIVE_REQUEST_DEADLINE,
    BATCH_CALL_TIMEOUT,
    BATCH_REQUEST_DEADLINE,
    SANITIZER_MAX_RUN_LENGTH,
    CACHE_TTL_SECONDS,
    CACHE_MAX_ENTRIES,
    AUDIT_INTERVAL_SECONDS,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== API Keys ==========
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_api_key: str = ""
    deepseek_api_key: str = ""

    # ========== Providers ==========
    # Tried in this order; providers without a key are skipped
    provider_order: List[str] = list(PROVIDER_ORDER)
    openai_model: Optional[str] = None
    claude_model: Optional[str] = None
    gemini_model: Optional[str] = None
    deepseek_model: Optional[str] = None

    # Per-call timeout and overall request deadline, by priority
    interactive_call_timeout: float = INTERACTIVE_CALL_TIMEOUT
    interactive_request_deadline: float = INTERACTIVE_REQUEST_DEADLINE
    batch_call_timeout: float = BATCH_CALL_TIMEOUT
    batch_request_deadline: float = BATCH_REQUEST_DEADLINE

    # ========== Quality Gate ==========
    # Purity thresholds (0-100) per content type
    threshold_ui_label: float = THRESHOLD_UI_LABEL
    threshold_chat_message: float = THRESHOLD_CHAT_MESSAGE
    threshold_legal_document: float = THRESHOLD_LEGAL_DOCUMENT

    # Unknown source language is treated as the target when the raw text
    # already scores at least this much in the target script
    passthrough_min_purity: float = 100.0

    # ========== Sanitizer ==========
    sanitizer_max_run_length: int = SANITIZER_MAX_RUN_LENGTH

    # ========== Fallback ==========
    fallback_templates_path: Optional[Path] = None  # JSON; built-in table if unset

    # ========== Cache ==========
    cache_enabled: bool = True
    cache_ttl_seconds: int = CACHE_TTL_SECONDS
    cache_max_entries: int = CACHE_MAX_ENTRIES

    # ========== Output Auditor ==========
    audit_interval_seconds: float = AUDIT_INTERVAL_SECONDS
    audit_content_type: str = "chat_message"

    # ========== API ==========
    rate_limit: str = "60/minute"  # per client IP, purify endpoint
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8000",
    ]

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def get_api_keys(self) -> Dict[str, str]:
        """API keys by provider name, only those that are set"""
        keys = {
            "openai": self.openai_api_key,
            "claude": self.anthropic_api_key,
            "gemini": self.google_api_key,
            "deepseek": self.deepseek_api_key,
        }
        return {name: key for name, key in keys.items() if key}

    def get_models(self) -> Dict[str, str]:
        """Model overrides by provider name"""
        models = {
            "openai": self.openai_model,
            "claude": self.claude_model,
            "gemini": self.gemini_model,
            "deepseek": self.deepseek_model,
        }
        return {name: model for name, model in models.items() if model}

    def get_thresholds(self) -> Dict[str, float]:
        """Purity thresholds keyed by content type value"""
        return {
            "ui_label": self.threshold_ui_label,
            "chat_message": self.threshold_chat_message,
            "legal_document": self.threshold_legal_document,
        }

    def print_config(self):
        """Print configuration summary"""
        print("\n" + "="*70)
        print("CONFIGURATION")
        print("="*70)
        print(f"Providers:       {', '.join(self.provider_order)}")
        print(f"Configured keys: {', '.join(self.get_api_keys()) or 'none'}")
        print(f"Thresholds:      {self.get_thresholds()}")
        print(f"Max run length:  {self.sanitizer_max_run_length}")
        print(f"Cache Enabled:   {self.cache_enabled} (ttl={self.cache_ttl_seconds}s)")
        print(f"Templates:       {self.fallback_templates_path or 'built-in'}")
        print("="*70 + "\n")


# Global settings instance
settings = Settings()
