"""
Data model of the purification pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from core.language import Language
from core.purification.script_classifier import ScriptProfile


class ContentType(str, Enum):
    """Kind of text being purified; drives the purity threshold"""
    CHAT_MESSAGE = "chat_message"
    LEGAL_DOCUMENT = "legal_document"
    UI_LABEL = "ui_label"


class Priority(str, Enum):
    """Request priority; drives provider timeouts"""
    INTERACTIVE = "interactive"
    BATCH = "batch"


class ResultPath(str, Enum):
    """Which stage produced the returned text"""
    PASS_THROUGH = "pass_through"
    PROVIDER_ACCEPTED = "provider_accepted"
    SANITIZED = "sanitized"
    FALLBACK = "fallback"


class IntentCategory(str, Enum):
    """Legal-topic buckets used to pick a fallback template (rule order)"""
    WITNESSES = "witnesses"
    KAFALA = "kafala"
    HIBA = "hiba"
    MORABAHA = "morabaha"
    FAMILY_LAW = "family_law"
    CRIMINAL_LAW = "criminal_law"
    COMMERCIAL_LAW = "commercial_law"
    ADMINISTRATIVE_LAW = "administrative_law"
    PROCEDURAL_LAW = "procedural_law"
    CIVIL_LAW = "civil_law"
    MARKET = "market"
    LAWYER = "lawyer"
    SEARCH = "search"
    FILE = "file"
    DASHBOARD = "dashboard"
    GENERAL = "general"


@dataclass(frozen=True)
class ContentUnit:
    """Immutable input to a purification request"""
    raw_text: str
    target_language: Language
    source_language: Optional[Language] = None  # None = unknown
    content_type: ContentType = ContentType.CHAT_MESSAGE
    priority: Priority = Priority.INTERACTIVE


PASS_THROUGH_PROVIDER = "pass_through"


@dataclass(frozen=True)
class TranslationAttempt:
    """Output of one provider (or the trivial pass-through attempt)"""
    provider: str
    output_text: str
    script_profile: ScriptProfile
    accepted: bool = False

    @property
    def is_pass_through(self) -> bool:
        return self.provider == PASS_THROUGH_PROVIDER


@dataclass(frozen=True)
class PurifiedResult:
    """The only object returned to callers"""
    text: str
    purity_score: float
    path: ResultPath

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "purity_score": self.purity_score,
            "path": self.path.value,
        }


@dataclass
class PipelineStats:
    """Counters across requests; informational only"""
    requests: int = 0
    cache_hits: int = 0
    paths: Dict[str, int] = field(default_factory=dict)

    def record(self, path: ResultPath, cache_hit: bool = False):
        self.requests += 1
        if cache_hit:
            self.cache_hits += 1
        self.paths[path.value] = self.paths.get(path.value, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "cache_hits": self.cache_hits,
            "paths": dict(self.paths),
        }


@dataclass
class AuditReport:
    """Outcome of one Output Auditor sweep"""
    scanned: int = 0
    changed: int = 0
    skipped_concurrent: int = 0
    changed_keys: List[Any] = field(default_factory=list)
