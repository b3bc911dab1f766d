"""
Unit tests for core/purification/auditor.py
"""
import asyncio
import pytest
from unittest.mock import MagicMock

from core.language import Language
from core.purification.auditor import AuditScheduler, OutputAuditor
from core.purification.context import FRAGMENT_FIXED
from core.purification.models import AuditReport, ContentType, IntentCategory
from core.purification.script_classifier import purity
from core.purification.templates import DEFAULT_TEMPLATES


class RacingStore(dict):
    """Store the host rewrites between the auditor's read and its write"""

    def __init__(self, *args, racing_key=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.racing_key = racing_key

    def get(self, key, default=None):
        if key == self.racing_key:
            self[key] = "تعديل من المضيف"
            self.racing_key = None
        return super().get(key, default)


@pytest.fixture
def auditor(registry):
    return OutputAuditor(registry=registry)


@pytest.fixture
def store():
    return {
        "title": "لوحة التحكم",
        "badge": "محاميProتحليل",
        "leak": "Les témoins ont été entendus par le tribunal",
        "empty": "",
    }


class TestAuditAndFix:

    def test_repairs_below_threshold_fragments(self, auditor, store):
        report = auditor.audit_and_fix(store, Language.ARABIC)

        assert report.scanned == 4
        assert report.changed == 2
        assert set(report.changed_keys) == {"badge", "leak"}
        assert store["title"] == "لوحة التحكم"
        assert store["badge"] == "محامي تحليل"
        assert store["empty"] == ""

    def test_long_leak_replaced_by_fallback(self, auditor, store):
        auditor.audit_and_fix(store, Language.ARABIC)
        assert store["leak"] == DEFAULT_TEMPLATES[IntentCategory.WITNESSES][Language.ARABIC]

    def test_every_fragment_meets_threshold_afterwards(self, auditor, store):
        auditor.audit_and_fix(store, Language.ARABIC, ContentType.UI_LABEL)
        for text in store.values():
            assert purity(text, Language.ARABIC) == 100.0

    def test_second_pass_changes_nothing(self, auditor, store):
        auditor.audit_and_fix(store, Language.ARABIC)
        snapshot = dict(store)

        report = auditor.audit_and_fix(store, Language.ARABIC)

        assert report.changed == 0
        assert store == snapshot

    def test_concurrent_change_is_not_overwritten(self, auditor):
        store = RacingStore({"badge": "محاميProتحليل"}, racing_key="badge")

        report = auditor.audit_and_fix(store, Language.ARABIC)

        assert report.changed == 0
        assert report.skipped_concurrent == 1
        assert store["badge"] == "تعديل من المضيف"

    def test_non_string_values_skipped(self, auditor):
        store = {"count": 3, "label": "Bonjour"}
        report = auditor.audit_and_fix(store, Language.FRENCH)
        assert report.scanned == 1
        assert store["count"] == 3

    def test_notifies_fixed_fragments(self, auditor, registry, store):
        fixed = []
        registry.subscribe(FRAGMENT_FIXED, fixed.append)

        auditor.audit_and_fix(store, Language.ARABIC)

        assert ("badge", "محاميProتحليل", "محامي تحليل") in fixed

    def test_content_type_threshold(self, auditor):
        text = "Les témoins ont été entendus par le juge ش"
        store = {"a": text}
        report = auditor.audit_and_fix(store, Language.FRENCH, ContentType.LEGAL_DOCUMENT)
        assert report.changed == 0
        report = auditor.audit_and_fix(store, Language.FRENCH, ContentType.UI_LABEL)
        assert report.changed == 1
        assert store["a"] == "Les témoins ont été entendus par le juge"

    def test_fragment_just_below_threshold_is_repaired(self, auditor):
        # 94.9975% French; the 100-letter run is too long to sanitize
        store = {"a": "x" * 1899 + "ش" * 100}
        report = auditor.audit_and_fix(store, Language.FRENCH, ContentType.CHAT_MESSAGE)
        assert report.changed == 1
        assert store["a"] == DEFAULT_TEMPLATES[IntentCategory.GENERAL][Language.FRENCH]

    def test_repair_returns_none_for_pure_text(self, auditor):
        assert auditor.repair("Bonjour", Language.FRENCH, ContentType.UI_LABEL) is None


class TestAuditScheduler:
    """Background re-validation loop."""

    def test_interval_must_be_positive(self, auditor):
        with pytest.raises(ValueError):
            AuditScheduler(auditor, {}, Language.ARABIC, interval=0)

    @pytest.mark.asyncio
    async def test_run_once(self, auditor, store):
        scheduler = AuditScheduler(auditor, store, Language.ARABIC, interval=60)
        report = await scheduler.run_once()
        assert report.changed == 2
        assert scheduler.passes == 1
        assert scheduler.last_report is report

    @pytest.mark.asyncio
    async def test_store_provider_callable(self, auditor, store):
        scheduler = AuditScheduler(auditor, lambda: store, Language.ARABIC, interval=60)
        await scheduler.run_once()
        assert store["badge"] == "محامي تحليل"

    @pytest.mark.asyncio
    async def test_start_and_stop(self, auditor, store):
        scheduler = AuditScheduler(auditor, store, Language.ARABIC, interval=0.01)

        task = scheduler.start()
        assert scheduler.start() is task
        await asyncio.sleep(0.1)
        await scheduler.stop()

        assert not scheduler.is_running
        assert scheduler.passes >= 2
        assert store["badge"] == "محامي تحليل"

    @pytest.mark.asyncio
    async def test_failing_pass_does_not_stop_the_loop(self):
        calls = []

        def flaky(store, target_language, content_type):
            calls.append(target_language)
            if len(calls) == 1:
                raise RuntimeError("store offline")
            return AuditReport(scanned=1)

        auditor = MagicMock()
        auditor.audit_and_fix.side_effect = flaky
        scheduler = AuditScheduler(auditor, {}, Language.FRENCH, interval=0.01)

        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()

        assert auditor.audit_and_fix.call_count >= 2
        assert scheduler.passes >= 1
