"""
Purity Gate

Accepts or rejects candidate text against a per-content-type purity
threshold. Short, highly visible text (UI labels) is held to a stricter
threshold than long-form documents, which may quote article numbers or
foreign names.

Pure function of (text, language, content type) given the thresholds.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from config.constants import (
    THRESHOLD_UI_LABEL,
    THRESHOLD_CHAT_MESSAGE,
    THRESHOLD_LEGAL_DOCUMENT,
)
from core.language import Language
from core.purification.models import ContentType
from core.purification.script_classifier import ScriptProfile, classify

logger = logging.getLogger(__name__)


DEFAULT_THRESHOLDS: Dict[ContentType, float] = {
    ContentType.UI_LABEL: THRESHOLD_UI_LABEL,
    ContentType.CHAT_MESSAGE: THRESHOLD_CHAT_MESSAGE,
    ContentType.LEGAL_DOCUMENT: THRESHOLD_LEGAL_DOCUMENT,
}


@dataclass
class GateDecision:
    """Quality gate verdict for one candidate"""
    accepted: bool
    purity: float
    threshold: float
    profile: Optional[ScriptProfile] = None
    reasons: List[str] = field(default_factory=list)

    def __repr__(self) -> str:
        status = "✓ PASS" if self.accepted else "✗ FAIL"
        return f"GateDecision({status}, purity={self.purity:.2f}, threshold={self.threshold:.2f})"


class QualityGate:
    """
    Purity threshold check per content type.

    Usage:
        gate = QualityGate()
        gate.accept("Bonjour", Language.FRENCH, ContentType.UI_LABEL)   # True
    """

    def __init__(self, thresholds: Optional[Mapping] = None):
        merged = dict(DEFAULT_THRESHOLDS)
        for key, value in (thresholds or {}).items():
            merged[ContentType(key)] = float(value)
        for content_type, value in merged.items():
            if not 0.0 <= value <= 100.0:
                raise ValueError(
                    f"Threshold for {content_type.value} must be within 0-100, got {value}"
                )
        self._thresholds = merged

    @classmethod
    def from_settings(cls, settings) -> "QualityGate":
        return cls(settings.get_thresholds())

    @property
    def thresholds(self) -> Dict[ContentType, float]:
        return dict(self._thresholds)

    def threshold(self, content_type: ContentType) -> float:
        return self._thresholds[ContentType(content_type)]

    def evaluate(
        self,
        candidate_text: str,
        target_language: Language,
        content_type: ContentType,
    ) -> GateDecision:
        threshold = self.threshold(content_type)
        if not candidate_text or not candidate_text.strip():
            return GateDecision(False, 0.0, threshold, reasons=["empty candidate"])

        profile = classify(candidate_text)
        score = profile.purity(target_language)
        # Compare the exact ratio; 94.9975 must not pass a 95 threshold
        accepted = profile.ratio(target_language) >= threshold
        decision = GateDecision(accepted, score, threshold, profile)
        if not decision.accepted:
            decision.reasons.append(
                f"purity {score:.2f} below {threshold:.2f} for {ContentType(content_type).value}"
            )
        return decision

    def accept(
        self,
        candidate_text: str,
        target_language: Language,
        content_type: ContentType,
    ) -> bool:
        """True when the candidate is non-empty and pure enough"""
        return self.evaluate(candidate_text, target_language, content_type).accepted
