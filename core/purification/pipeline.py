#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Purification Pipeline

Single entry point turning arbitrary candidate text into a monolingual,
quality-gated PurifiedResult:

    Received -> PassThrough                           (source == target)
    Received -> cache hit                             (earlier accepted result)
    Received -> Translating -> gate -> ProviderAccepted
                            -> Sanitizing -> gate -> Sanitized
                                          -> FallingBack -> Fallback

Every path ends in an accepted result. The only exception raised to callers
is InvalidRequest, for a missing or unknown target language, checked before
any stage runs.
"""

import logging
from typing import Any, Optional

from config.constants import PURITY_MAX
from config.logging_config import preview
from core.cache.purity_cache import PurificationCache, compute_content_hash
from core.language import Language
from core.quality.purity_gate import QualityGate
from core.purification.context import PURIFIED, SessionContext, SubscriberRegistry
from core.purification.errors import InvalidRequest
from core.purification.intent import IntentClassifier
from core.purification.models import (
    ContentType,
    ContentUnit,
    PipelineStats,
    Priority,
    PurifiedResult,
    ResultPath,
)
from core.purification.orchestrator import TranslationOrchestrator, timeouts_from_settings
from core.purification.sanitizer import Sanitizer
from core.purification.script_classifier import purity
from core.purification.templates import FallbackGenerator, FallbackTemplateTable

logger = logging.getLogger(__name__)

_CACHEABLE_PATHS = (ResultPath.PROVIDER_ACCEPTED, ResultPath.SANITIZED)


def _coerce(enum_cls, value, default):
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} '{value}', using {default.value}")
        return default


def build_unit(
    raw_text: Optional[str],
    target_language,
    source_language=None,
    content_type=ContentType.CHAT_MESSAGE,
    priority=Priority.INTERACTIVE,
) -> ContentUnit:
    """Validate caller input into a ContentUnit (raises InvalidRequest)"""
    if target_language is None or (isinstance(target_language, str) and not target_language.strip()):
        raise InvalidRequest("target_language is required")
    target = Language.parse(target_language)
    if target is None:
        raise InvalidRequest(f"Unsupported target_language: {target_language!r}")

    source = Language.parse(source_language)
    if source is None and source_language:
        logger.debug(f"Unknown source_language {source_language!r}, detecting from script")

    return ContentUnit(
        raw_text=raw_text or "",
        target_language=target,
        source_language=source,
        content_type=_coerce(ContentType, content_type, ContentType.CHAT_MESSAGE),
        priority=_coerce(Priority, priority, Priority.INTERACTIVE),
    )


class PurificationPipeline:
    """
    Purify(rawText, sourceLanguage?, targetLanguage, contentType, priority)

    Usage:
        pipeline = PurificationPipeline.from_settings(settings)
        result = await pipeline.purify("الشهود في القضية", "fr", source_language="ar")
        result.text, result.purity_score, result.path
    """

    def __init__(
        self,
        orchestrator: Optional[TranslationOrchestrator] = None,
        gate: Optional[QualityGate] = None,
        sanitizer: Optional[Sanitizer] = None,
        intent_classifier: Optional[IntentClassifier] = None,
        fallback: Optional[FallbackGenerator] = None,
        cache: Optional[PurificationCache] = None,
        registry: Optional[SubscriberRegistry] = None,
    ):
        self.orchestrator = orchestrator or TranslationOrchestrator([])
        self.gate = gate or QualityGate()
        self.sanitizer = sanitizer or Sanitizer()
        self.intent_classifier = intent_classifier or IntentClassifier()
        self.fallback = fallback or FallbackGenerator()
        self.cache = cache
        self.registry = registry
        self._stats = PipelineStats()

        if self.cache is not None and self.cache.ruleset_version != self.sanitizer.version:
            logger.warning(
                f"Cache rule-set version {self.cache.ruleset_version} differs from "
                f"sanitizer {self.sanitizer.version}; using the sanitizer's"
            )
            self.cache.ruleset_version = self.sanitizer.version

    @classmethod
    def from_settings(
        cls,
        settings=None,
        providers=None,
        registry: Optional[SubscriberRegistry] = None,
    ) -> "PurificationPipeline":
        """Wire every stage from configuration"""
        if settings is None:
            from config.settings import settings
        if providers is None:
            from ai_providers.manager import AIProviderManager
            providers = AIProviderManager.from_settings(settings).providers()

        sanitizer = Sanitizer(max_run_length=settings.sanitizer_max_run_length)
        if settings.fallback_templates_path:
            table = FallbackTemplateTable.from_json(settings.fallback_templates_path)
        else:
            table = FallbackTemplateTable.default()

        cache = None
        if settings.cache_enabled:
            cache = PurificationCache(
                ttl_seconds=settings.cache_ttl_seconds,
                ruleset_version=sanitizer.version,
                max_entries=settings.cache_max_entries,
            )

        return cls(
            orchestrator=TranslationOrchestrator(
                providers,
                timeouts=timeouts_from_settings(settings),
                passthrough_min_purity=settings.passthrough_min_purity,
            ),
            gate=QualityGate.from_settings(settings),
            sanitizer=sanitizer,
            fallback=FallbackGenerator(table),
            cache=cache,
            registry=registry,
        )

    async def purify(
        self,
        raw_text: Optional[str],
        target_language,
        source_language=None,
        content_type=ContentType.CHAT_MESSAGE,
        priority=Priority.INTERACTIVE,
        context: Any = None,
        session: Optional[SessionContext] = None,
    ) -> PurifiedResult:
        unit = build_unit(raw_text, target_language, source_language, content_type, priority)
        return await self.purify_unit(unit, context=context, session=session)

    async def purify_unit(
        self,
        unit: ContentUnit,
        context: Any = None,
        session: Optional[SessionContext] = None,
    ) -> PurifiedResult:
        if context is None and session is not None:
            context = session.caller_context

        cache_hit = False
        try:
            result, cache_hit = await self._run_stages(unit, context)
        except Exception as e:
            # Stages are expected not to raise; the fallback below always succeeds
            logger.exception(f"Purification stage failed, using fallback: {e}")
            result = None

        if result is None:
            result = self._fallback(unit)

        self._stats.record(result.path, cache_hit=cache_hit)
        self._notify(result, session)
        return result

    async def _run_stages(self, unit: ContentUnit, context: Any):
        target = unit.target_language

        # Vacuous purity: nothing to translate or clean
        if not unit.raw_text.strip():
            return PurifiedResult(unit.raw_text, PURITY_MAX, ResultPath.PASS_THROUGH), False

        trivial = self.orchestrator.pass_through(unit)
        if trivial is not None:
            if unit.source_language is not None:
                return PurifiedResult(unit.raw_text, PURITY_MAX, ResultPath.PASS_THROUGH), False
            decision = self.gate.evaluate(unit.raw_text, target, unit.content_type)
            if decision.accepted:
                return PurifiedResult(unit.raw_text, decision.purity, ResultPath.PASS_THROUGH), False

        content_hash = compute_content_hash(unit.raw_text, unit.source_language, target)
        cached = self._cache_lookup(content_hash, unit)
        if cached is not None:
            return cached, True

        attempt = await self.orchestrator.call_providers(unit, context)
        candidate = attempt.output_text if attempt is not None else unit.raw_text

        if attempt is not None:
            decision = self.gate.evaluate(candidate, target, unit.content_type)
            if decision.accepted:
                result = PurifiedResult(candidate, decision.purity, ResultPath.PROVIDER_ACCEPTED)
                self._cache_store(content_hash, unit, result)
                return result, False
            logger.info(f"{attempt.provider} output rejected: {'; '.join(decision.reasons)}")

        sanitized = self.sanitizer.sanitize(candidate, target)
        decision = self.gate.evaluate(sanitized.text, target, unit.content_type)
        if decision.accepted:
            result = PurifiedResult(sanitized.text, decision.purity, ResultPath.SANITIZED)
            self._cache_store(content_hash, unit, result)
            return result, False

        logger.info(
            f"Sanitized candidate rejected ({'; '.join(decision.reasons)}, "
            f"{sanitized.refused} refused rewrite(s))"
        )
        return None, False

    def _fallback(self, unit: ContentUnit) -> PurifiedResult:
        intent = self.intent_classifier.classify(unit.raw_text)
        text = self.fallback.generate(intent, unit.target_language)
        logger.info(
            f"Fallback '{intent.value}' ({unit.target_language.value}) for: {preview(unit.raw_text)}"
        )
        return PurifiedResult(text, purity(text, unit.target_language), ResultPath.FALLBACK)

    def _cache_lookup(self, content_hash: str, unit: ContentUnit) -> Optional[PurifiedResult]:
        if self.cache is None:
            return None
        entry = self.cache.lookup(content_hash, unit.target_language)
        if entry is None:
            return None
        # An entry accepted under a looser content type is not good enough here
        # The stored score is rounded, so the text itself is re-scored
        if not self.gate.accept(entry.purified_text, unit.target_language, unit.content_type):
            logger.debug(f"Cache entry below {unit.content_type.value} threshold, ignored")
            return None
        try:
            path = ResultPath(entry.path)
        except ValueError:
            return None
        if path not in _CACHEABLE_PATHS:
            return None
        return PurifiedResult(entry.purified_text, entry.purity_score, path)

    def _cache_store(self, content_hash: str, unit: ContentUnit, result: PurifiedResult):
        if self.cache is None or result.path not in _CACHEABLE_PATHS:
            return
        self.cache.store(self.cache.make_entry(
            content_hash,
            unit.target_language,
            result.text,
            result.purity_score,
            result.path.value,
        ))

    def _notify(self, result: PurifiedResult, session: Optional[SessionContext]):
        registries = [self.registry]
        if session is not None and session.registry is not self.registry:
            registries.append(session.registry)
        for registry in registries:
            if registry is not None:
                registry.notify(PURIFIED, result)

    def stats(self) -> dict:
        data = {"pipeline": self._stats.to_dict(), "providers": self.orchestrator.stats()}
        if self.cache is not None:
            data["cache"] = self.cache.stats().to_dict()
        return data
