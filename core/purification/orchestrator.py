#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Translation Orchestrator

Walks the configured providers in priority order, one at a time. Every call
runs under its own timeout (shorter for interactive requests) nested inside
an overall request deadline; once the deadline is spent the in-flight call
is cancelled and the loop ends.

No provider failure ever reaches the caller. Failures are classified
(rate limit, billing, bad key, timeout, empty output, other), counted per
provider and logged; exhausting the providers returns None so the pipeline
continues with the raw text.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from config.constants import (
    INTERACTIVE_CALL_TIMEOUT,
    INTERACTIVE_REQUEST_DEADLINE,
    BATCH_CALL_TIMEOUT,
    BATCH_REQUEST_DEADLINE,
    PURITY_MAX,
)
from config.logging_config import preview
from core.purification.errors import ProviderError
from core.purification.models import (
    PASS_THROUGH_PROVIDER,
    ContentUnit,
    Priority,
    TranslationAttempt,
)
from core.purification.script_classifier import classify

logger = logging.getLogger(__name__)


class ProviderStatus(Enum):
    """Outcome of one provider call"""
    AVAILABLE = "available"
    NO_CREDIT = "no_credit"
    INVALID_KEY = "invalid_key"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"
    ERROR = "error"


# Billing/credit error patterns
BILLING_ERROR_PATTERNS = [
    "credit balance is too low",
    "insufficient_quota",
    "billing",
    "exceeded your current quota",
    "account is not active",
    "payment required",
    "insufficient funds",
]

RATE_LIMIT_PATTERNS = [
    "rate_limit",
    "rate limit",
    "too many requests",
    "resource_exhausted",
    "429",
]

INVALID_KEY_PATTERNS = [
    "invalid api key",
    "invalid_api_key",
    "api_key_invalid",
    "authentication",
    "unauthorized",
    "permission denied",
    "incorrect api key",
]


def classify_provider_error(error: BaseException) -> ProviderStatus:
    """Classify a provider exception from its message"""
    if isinstance(error, asyncio.TimeoutError):
        return ProviderStatus.TIMEOUT
    error_str = str(error).lower()

    if any(p in error_str for p in BILLING_ERROR_PATTERNS):
        return ProviderStatus.NO_CREDIT
    if any(p in error_str for p in RATE_LIMIT_PATTERNS):
        return ProviderStatus.RATE_LIMITED
    if any(p in error_str for p in INVALID_KEY_PATTERNS):
        return ProviderStatus.INVALID_KEY
    return ProviderStatus.ERROR


@dataclass(frozen=True)
class Timeouts:
    """Per-call timeout and overall request deadline, in seconds"""
    call_timeout: float
    request_deadline: float


DEFAULT_TIMEOUTS: Dict[Priority, Timeouts] = {
    Priority.INTERACTIVE: Timeouts(INTERACTIVE_CALL_TIMEOUT, INTERACTIVE_REQUEST_DEADLINE),
    Priority.BATCH: Timeouts(BATCH_CALL_TIMEOUT, BATCH_REQUEST_DEADLINE),
}


def timeouts_from_settings(settings) -> Dict[Priority, Timeouts]:
    return {
        Priority.INTERACTIVE: Timeouts(
            settings.interactive_call_timeout, settings.interactive_request_deadline
        ),
        Priority.BATCH: Timeouts(
            settings.batch_call_timeout, settings.batch_request_deadline
        ),
    }


@dataclass
class ProviderStats:
    """Call counters for one provider"""
    calls: int = 0
    successes: int = 0
    failures: Dict[str, int] = field(default_factory=dict)
    elapsed_seconds: float = 0.0
    last_status: Optional[ProviderStatus] = None

    def record(self, status: ProviderStatus, elapsed: float):
        self.calls += 1
        self.elapsed_seconds += elapsed
        self.last_status = status
        if status == ProviderStatus.AVAILABLE:
            self.successes += 1
        else:
            self.failures[status.value] = self.failures.get(status.value, 0) + 1

    def to_dict(self) -> Dict:
        return {
            "calls": self.calls,
            "successes": self.successes,
            "failures": dict(self.failures),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "last_status": self.last_status.value if self.last_status else None,
        }


def provider_name(provider: Any) -> str:
    name = getattr(provider, "name", None)
    return name if isinstance(name, str) and name else type(provider).__name__


class TranslationOrchestrator:
    """
    Sequential, deadline-bounded provider loop.

    Usage:
        orchestrator = TranslationOrchestrator(manager.providers())
        attempt = await orchestrator.translate(unit)   # TranslationAttempt or None
    """

    def __init__(
        self,
        providers: Sequence[Any],
        timeouts: Optional[Dict[Priority, Timeouts]] = None,
        passthrough_min_purity: float = PURITY_MAX,
    ):
        self.providers: List[Any] = list(providers)
        self.timeouts = dict(DEFAULT_TIMEOUTS)
        self.timeouts.update(timeouts or {})
        self.passthrough_min_purity = passthrough_min_purity
        self._stats: Dict[str, ProviderStats] = {
            provider_name(p): ProviderStats() for p in self.providers
        }

    def pass_through(self, unit: ContentUnit) -> Optional[TranslationAttempt]:
        """
        Trivial accepted attempt when no translation is needed: the declared
        source equals the target, or the source is unknown and the text
        already scores at least `passthrough_min_purity` in the target script.
        """
        profile = classify(unit.raw_text)
        if unit.source_language is not None:
            if unit.source_language != unit.target_language:
                return None
        elif profile.ratio(unit.target_language) < self.passthrough_min_purity:
            return None
        return TranslationAttempt(
            provider=PASS_THROUGH_PROVIDER,
            output_text=unit.raw_text,
            script_profile=profile,
            accepted=True,
        )

    async def translate(
        self, unit: ContentUnit, context: Any = None
    ) -> Optional[TranslationAttempt]:
        """First non-empty provider output, or None when every provider failed"""
        trivial = self.pass_through(unit)
        if trivial is not None:
            return trivial
        return await self.call_providers(unit, context)

    async def call_providers(
        self, unit: ContentUnit, context: Any = None
    ) -> Optional[TranslationAttempt]:
        if not self.providers:
            logger.debug("No providers configured")
            return None

        limits = self.timeouts[Priority(unit.priority)]
        loop = asyncio.get_running_loop()
        deadline = loop.time() + limits.request_deadline
        source = unit.source_language.value if unit.source_language else None
        target = unit.target_language.value

        for provider in self.providers:
            name = provider_name(provider)
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(
                    f"Request deadline ({limits.request_deadline}s) reached before {name}"
                )
                break

            budget = min(limits.call_timeout, remaining)
            started = time.monotonic()
            try:
                text = await asyncio.wait_for(
                    provider.translate(unit.raw_text, source, target, context),
                    timeout=budget,
                )
                if not isinstance(text, str) or not text.strip():
                    raise ProviderError(name, "empty response")
            except ProviderError as e:
                self._record(name, ProviderStatus.EMPTY_RESPONSE, started)
                logger.warning(str(e))
                continue
            except asyncio.TimeoutError:
                self._record(name, ProviderStatus.TIMEOUT, started)
                logger.warning(f"{name} timed out after {budget:.1f}s")
                continue
            except Exception as e:
                status = classify_provider_error(e)
                self._record(name, status, started)
                logger.warning(f"{name} failed ({status.value}): {e}")
                continue

            self._record(name, ProviderStatus.AVAILABLE, started)
            logger.debug(f"{name} -> {preview(text)}")
            return TranslationAttempt(
                provider=name,
                output_text=text,
                script_profile=classify(text),
            )

        logger.info(f"No usable provider output for: {preview(unit.raw_text)}")
        return None

    def _record(self, name: str, status: ProviderStatus, started: float):
        self._stats.setdefault(name, ProviderStats()).record(
            status, time.monotonic() - started
        )

    def stats(self) -> Dict[str, Dict]:
        return {name: s.to_dict() for name, s in self._stats.items()}

    @property
    def provider_names(self) -> List[str]:
        return [provider_name(p) for p in self.providers]
