#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Intent Classifier

Maps free text to one IntentCategory, used only to choose a fallback
template. It runs on the worst-case input (already script-mixed), so
rules carry keywords in both scripts and matching ignores which script a
keyword was found in.

Normalization: diacritics stripped (Latin accents and Arabic harakat),
tatweel removed, case-folded, whitespace collapsed. Rules are evaluated
in declaration order; the first rule with a matching keyword wins, and
no match yields GENERAL.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from core.language import ScriptFamily
from core.purification.models import IntentCategory
from core.purification.script_classifier import classify

_WHITESPACE = re.compile(r"\s+")
_TATWEEL = "ـ"
_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "`": "'"})


def normalize_text(text: str) -> str:
    """Strip diacritics, case-fold and collapse whitespace"""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text).translate(_APOSTROPHES)
    stripped = "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) and ch != _TATWEEL
    )
    return _WHITESPACE.sub(" ", stripped.casefold()).strip()


@dataclass(frozen=True)
class IntentRule:
    """Keyword set mapped to a category"""
    category: IntentCategory
    keywords: Tuple[str, ...]


# Declaration order is the tie-break: more specific topics first
DEFAULT_INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule(IntentCategory.WITNESSES, (
        "شهود", "شاهد", "témoin", "témoignage",
    )),
    IntentRule(IntentCategory.KAFALA, (
        "كفالة", "kafala", "cafala",
    )),
    IntentRule(IntentCategory.HIBA, (
        "هبة", "hiba", "donation",
    )),
    IntentRule(IntentCategory.MORABAHA, (
        "مرابحة", "morabaha", "mourabaha",
    )),
    IntentRule(IntentCategory.FAMILY_LAW, (
        "زواج", "طلاق", "نفقة", "حضانة", "ميراث", "وصية",
        "mariage", "divorce", "pension alimentaire", "garde", "succession", "testament",
    )),
    IntentRule(IntentCategory.CRIMINAL_LAW, (
        "جريمة", "جنحة", "مخالفة", "عقوبة", "متهم", "ضحية", "محاكمة",
        "crime", "délit", "contravention", "peine", "accusé", "victime", "procès",
    )),
    IntentRule(IntentCategory.COMMERCIAL_LAW, (
        "شركة", "تاجر", "إفلاس", "سجل تجاري", "عمل تجاري", "منافسة",
        "société", "commerçant", "faillite", "registre de commerce", "acte de commerce", "concurrence",
    )),
    IntentRule(IntentCategory.ADMINISTRATIVE_LAW, (
        "قرار إداري", "مجلس الدولة", "خدمة عمومية",
        "décision administrative", "conseil d'état", "service public",
    )),
    IntentRule(IntentCategory.PROCEDURAL_LAW, (
        "دعوى", "استئناف", "نقض", "تنفيذ", "إجراءات",
        "jugement", "appel", "cassation", "exécution", "procédure",
    )),
    IntentRule(IntentCategory.CIVIL_LAW, (
        "عقد", "التزام", "مسؤولية", "ضرر", "تعويض", "ملكية",
        "contrat", "obligation", "responsabilité", "dommage", "indemnisation", "propriété",
    )),
    IntentRule(IntentCategory.MARKET, (
        "السوق", "marché",
    )),
    IntentRule(IntentCategory.LAWYER, (
        "محامي", "avocat",
    )),
    IntentRule(IntentCategory.SEARCH, (
        "بحث", "recherche",
    )),
    IntentRule(IntentCategory.FILE, (
        "ملف", "dossier",
    )),
    IntentRule(IntentCategory.DASHBOARD, (
        "لوحة", "tableau de bord",
    )),
)


def _keyword_pattern(keyword: str) -> Pattern:
    """
    Compile one normalized keyword.

    Arabic keywords match anywhere (clitics such as al- and wa- attach to
    the word); other keywords must start at a word boundary so "action"
    does not fire inside "transaction".
    """
    normalized = normalize_text(keyword)
    escaped = re.escape(normalized)
    if classify(normalized).dominant_script == ScriptFamily.ARABIC:
        return re.compile(escaped)
    return re.compile(r"(?<!\w)" + escaped)


class IntentClassifier:
    """Ordered keyword rules -> IntentCategory"""

    def __init__(self, rules: Optional[Sequence[IntentRule]] = None):
        self.rules: Tuple[IntentRule, ...] = tuple(rules if rules is not None else DEFAULT_INTENT_RULES)
        self._compiled: List[Tuple[IntentCategory, List[Pattern]]] = [
            (rule.category, [_keyword_pattern(k) for k in rule.keywords if k.strip()])
            for rule in self.rules
        ]

    def classify(self, text: str) -> IntentCategory:
        normalized = normalize_text(text)
        if not normalized:
            return IntentCategory.GENERAL
        for category, patterns in self._compiled:
            if any(p.search(normalized) for p in patterns):
                return category
        return IntentCategory.GENERAL

    def matching_categories(self, text: str) -> List[IntentCategory]:
        """All categories with at least one keyword hit, in rule order"""
        normalized = normalize_text(text)
        return [
            category for category, patterns in self._compiled
            if any(p.search(normalized) for p in patterns)
        ]


def classify_intent(text: str, rules: Optional[Iterable[IntentRule]] = None) -> IntentCategory:
    """Classify with the default rule table (or the given rules)"""
    return IntentClassifier(list(rules) if rules is not None else None).classify(text)
