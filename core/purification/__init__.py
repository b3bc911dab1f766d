"""
Content Purification

Turns candidate text plus a target language into a monolingual,
quality-gated result with a fallback that cannot fail.

Components:
  - script_classifier: per-script character counts and purity
  - intent: topic classification used to pick a fallback template
  - templates: curated, pre-verified fallback text
  - sanitizer: bounded, versioned rewrite rules
  - orchestrator: sequential provider calls under timeouts
  - pipeline: the Purify entry point
  - auditor: idempotent sweep over already-emitted text
  - context: per-session state and subscribers

The pipeline and auditor sit on top of core.quality and are imported from
their modules (core.purification.pipeline, core.purification.auditor).
"""

from core.purification.errors import (
    PurifierError,
    InvalidRequest,
    TemplateTableError,
    ProviderError,
)
from core.purification.models import (
    ContentType,
    ContentUnit,
    IntentCategory,
    Priority,
    PurifiedResult,
    ResultPath,
    TranslationAttempt,
    AuditReport,
)
from core.purification.script_classifier import (
    ScriptProfile,
    classify,
    purity,
    contamination_runs,
)
from core.purification.intent import IntentClassifier, classify_intent
from core.purification.templates import FallbackTemplateTable, FallbackGenerator
from core.purification.sanitizer import (
    Sanitizer,
    SanitizerRule,
    SanitizerRuleSet,
    SanitizeResult,
    RuleKind,
)
from core.purification.context import SubscriberRegistry, SessionContext, open_session
from core.purification.orchestrator import TranslationOrchestrator, ProviderStatus, Timeouts

__all__ = [
    'PurifierError',
    'InvalidRequest',
    'TemplateTableError',
    'ProviderError',
    'ContentType',
    'ContentUnit',
    'IntentCategory',
    'Priority',
    'PurifiedResult',
    'ResultPath',
    'TranslationAttempt',
    'AuditReport',
    'ScriptProfile',
    'classify',
    'purity',
    'contamination_runs',
    'IntentClassifier',
    'classify_intent',
    'FallbackTemplateTable',
    'FallbackGenerator',
    'Sanitizer',
    'SanitizerRule',
    'SanitizerRuleSet',
    'SanitizeResult',
    'RuleKind',
    'SubscriberRegistry',
    'SessionContext',
    'open_session',
    'TranslationOrchestrator',
    'ProviderStatus',
    'Timeouts',
]
