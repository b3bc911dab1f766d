#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Output Auditor

Backstop sweep over text the host has already emitted. For each fragment:

    classify -> (below threshold) sanitize -> (still below) fallback

and the fragment is replaced only when the replacement scores higher.
Every replacement clears the threshold, so a second pass over the same store
changes nothing.

The store may be mutated by the host while a pass runs. Before writing, the
fragment is re-read; if it changed since the read, the write is skipped and
the next pass picks it up.
"""

import asyncio
import logging
from typing import Any, Callable, MutableMapping, Optional, Tuple, Union

from config.constants import AUDIT_INTERVAL_SECONDS
from core.language import Language
from core.quality.purity_gate import QualityGate
from core.purification.context import FRAGMENT_FIXED, SubscriberRegistry
from core.purification.intent import IntentClassifier
from core.purification.models import AuditReport, ContentType
from core.purification.sanitizer import Sanitizer
from core.purification.script_classifier import purity_ratio
from core.purification.templates import FallbackGenerator

logger = logging.getLogger(__name__)

TextStore = MutableMapping[Any, str]


class OutputAuditor:
    """Idempotent classify/sanitize/fallback sweep over a text store"""

    def __init__(
        self,
        gate: Optional[QualityGate] = None,
        sanitizer: Optional[Sanitizer] = None,
        intent_classifier: Optional[IntentClassifier] = None,
        fallback: Optional[FallbackGenerator] = None,
        registry: Optional[SubscriberRegistry] = None,
        default_content_type: ContentType = ContentType.CHAT_MESSAGE,
    ):
        self.gate = gate or QualityGate()
        self.sanitizer = sanitizer or Sanitizer()
        self.intent_classifier = intent_classifier or IntentClassifier()
        self.fallback = fallback or FallbackGenerator()
        self.registry = registry
        self.default_content_type = ContentType(default_content_type)

    @classmethod
    def from_pipeline(cls, pipeline, default_content_type=ContentType.CHAT_MESSAGE) -> "OutputAuditor":
        """Share the pipeline's gate, sanitizer and templates"""
        return cls(
            gate=pipeline.gate,
            sanitizer=pipeline.sanitizer,
            intent_classifier=pipeline.intent_classifier,
            fallback=pipeline.fallback,
            registry=pipeline.registry,
            default_content_type=default_content_type,
        )

    def repair(
        self, text: str, target_language: Language, content_type: ContentType
    ) -> Optional[Tuple[str, float]]:
        """Replacement for one fragment, or None when it is already good enough"""
        score = purity_ratio(text, target_language)
        if score >= self.gate.threshold(content_type):
            return None

        sanitized = self.sanitizer.sanitize(text, target_language)
        decision = self.gate.evaluate(sanitized.text, target_language, content_type)
        if decision.accepted:
            replacement = sanitized.text
        else:
            intent = self.intent_classifier.classify(text)
            replacement = self.fallback.generate(intent, target_language)
        new_score = purity_ratio(replacement, target_language)

        if new_score <= score:
            return None
        return replacement, new_score

    def audit_and_fix(
        self,
        store: TextStore,
        target_language: Language,
        content_type: Optional[ContentType] = None,
    ) -> AuditReport:
        target_language = Language(target_language)
        content_type = ContentType(content_type) if content_type else self.default_content_type
        report = AuditReport()

        for key in list(store.keys()):
            try:
                original = store[key]
            except KeyError:
                continue  # removed by the host mid-pass
            if not isinstance(original, str):
                continue
            report.scanned += 1

            repaired = self.repair(original, target_language, content_type)
            if repaired is None:
                continue
            replacement, new_score = repaired

            if store.get(key) != original:
                report.skipped_concurrent += 1
                logger.debug(f"Fragment {key!r} changed during audit, left for next pass")
                continue

            store[key] = replacement
            report.changed += 1
            report.changed_keys.append(key)
            if self.registry is not None:
                self.registry.notify(FRAGMENT_FIXED, (key, original, replacement))

        if report.changed or report.skipped_concurrent:
            logger.info(
                f"Audit ({target_language.value}, {content_type.value}): "
                f"{report.changed}/{report.scanned} fragments fixed, "
                f"{report.skipped_concurrent} skipped (concurrent change)"
            )
        return report


StoreSource = Union[TextStore, Callable[[], TextStore]]


class AuditScheduler:
    """
    Runs OutputAuditor periodically as a background task.

    Usage:
        scheduler = AuditScheduler(auditor, store, Language.ARABIC, interval=60)
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        auditor: OutputAuditor,
        store: StoreSource,
        target_language: Language,
        interval: float = AUDIT_INTERVAL_SECONDS,
        content_type: Optional[ContentType] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.auditor = auditor
        self._store = store
        self.target_language = Language(target_language)
        self.interval = interval
        self.content_type = content_type
        self.passes = 0
        self.last_report: Optional[AuditReport] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _resolve_store(self) -> TextStore:
        if callable(self._store) and not isinstance(self._store, MutableMapping):
            return self._store()
        return self._store

    async def run_once(self) -> AuditReport:
        """One pass in a worker thread so foreground requests never block"""
        report = await asyncio.to_thread(
            self.auditor.audit_and_fix,
            self._resolve_store(),
            self.target_language,
            self.content_type,
        )
        self.passes += 1
        self.last_report = report
        return report

    async def _loop(self):
        logger.info(f"Audit scheduler started (every {self.interval}s)")
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Audit pass failed: {type(e).__name__}: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self.is_running:
            return self._task
        self._task = asyncio.create_task(self._loop())
        self._task.add_done_callback(self._handle_task_exception)
        return self._task

    async def stop(self):
        """Cancel the background task and wait for it to finish"""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Audit scheduler stopped")

    @staticmethod
    def _handle_task_exception(task: asyncio.Task):
        if task.cancelled():
            return
        exception = task.exception()
        if exception:
            logger.error(f"Audit scheduler crashed: {type(exception).__name__}: {exception}")
