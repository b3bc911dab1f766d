#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Script Classifier

Measures, for a text, how many of its meaningful characters belong to each
script family. Purity for a language is the share of alphabetic characters
written in that language's script family:

    purity(lang) = family(lang) / (family(lang) + every other family)

Digits, punctuation, whitespace and symbols are neutral and excluded from
both sides. A text without alphabetic characters is vacuously pure (100)
for every language.

Pure functions only: no I/O, no randomness, no shared mutable state.
"""

import bisect
import unicodedata
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from config.constants import PURITY_MAX, PURITY_DECIMALS
from core.language import Language, ScriptFamily, SCRIPT_RANGES, script_of


# Flattened, sorted (start, end, family) table for bisect lookups
_RANGE_TABLE: List[Tuple[int, int, ScriptFamily]] = sorted(
    (start, end, family)
    for family, ranges in SCRIPT_RANGES.items()
    for start, end in ranges
)
_RANGE_STARTS = [start for start, _, _ in _RANGE_TABLE]


def _family_in_ranges(codepoint: int) -> Optional[ScriptFamily]:
    idx = bisect.bisect_right(_RANGE_STARTS, codepoint) - 1
    if idx < 0:
        return None
    start, end, family = _RANGE_TABLE[idx]
    if start <= codepoint <= end:
        return family
    return None


@lru_cache(maxsize=8192)
def family_of(char: str) -> Optional[ScriptFamily]:
    """
    Script family of a single character, or None when it is neutral.

    Letters outside every declared range count as ScriptFamily.OTHER.
    Combining marks count for the family whose range holds them and are
    neutral elsewhere.
    """
    category = unicodedata.category(char)
    if category[0] == "L":
        return _family_in_ranges(ord(char)) or ScriptFamily.OTHER
    if category[0] == "M":
        return _family_in_ranges(ord(char))
    return None


@dataclass(frozen=True)
class ScriptProfile:
    """Character counts of a text by script family"""
    script_counts: Dict[ScriptFamily, int] = field(default_factory=dict)
    neutral_count: int = 0

    @property
    def alphabetic_count(self) -> int:
        return sum(self.script_counts.values())

    @property
    def dominant_script(self) -> Optional[ScriptFamily]:
        """Family with the most characters; None for non-alphabetic text"""
        best = None
        best_count = 0
        # Iterating the enum keeps ties deterministic (declaration order)
        for family in ScriptFamily:
            count = self.script_counts.get(family, 0)
            if count > best_count:
                best, best_count = family, count
        return best

    def count(self, family: ScriptFamily) -> int:
        return self.script_counts.get(family, 0)

    def ratio(self, language: Language) -> float:
        """Unrounded purity; every threshold comparison uses this"""
        total = self.alphabetic_count
        if total == 0:
            return PURITY_MAX
        return self.count(script_of(language)) * 100.0 / total

    def purity(self, language: Language) -> float:
        """Percentage (0-100) of alphabetic characters in the language's script, rounded for reporting"""
        return round(self.ratio(language), PURITY_DECIMALS)

    def foreign_count(self, language: Language) -> int:
        return self.alphabetic_count - self.count(script_of(language))

    def to_dict(self) -> Dict:
        return {
            "script_counts": {f.value: c for f, c in self.script_counts.items()},
            "neutral_count": self.neutral_count,
            "dominant_script": self.dominant_script.value if self.dominant_script else None,
        }


def classify(text: str) -> ScriptProfile:
    """Count the characters of a text by script family"""
    counts: Dict[ScriptFamily, int] = {}
    neutral = 0
    for char in text or "":
        family = family_of(char)
        if family is None:
            neutral += 1
        else:
            counts[family] = counts.get(family, 0) + 1
    return ScriptProfile(script_counts=counts, neutral_count=neutral)


def purity(text: str, language: Language) -> float:
    """Shortcut for classify(text).purity(language)"""
    return classify(text).purity(language)


def purity_ratio(text: str, language: Language) -> float:
    """Shortcut for classify(text).ratio(language)"""
    return classify(text).ratio(language)


@dataclass(frozen=True)
class ContaminationRun:
    """
    Span of text written in a script other than the target's.

    The span starts and ends on a foreign letter; neutral characters
    between foreign letters (spaces, digits, punctuation) stay inside it,
    so a foreign sentence is one long run rather than many short words.
    """
    start: int
    end: int  # exclusive
    foreign_letters: int


def contamination_runs(text: str, language: Language) -> List[ContaminationRun]:
    """Contamination runs of a text relative to the target language"""
    target = script_of(language)
    runs: List[ContaminationRun] = []
    run_start = None
    run_end = 0
    letters = 0

    for i, char in enumerate(text or ""):
        family = family_of(char)
        if family is None:
            continue
        if family == target:
            if run_start is not None:
                runs.append(ContaminationRun(run_start, run_end, letters))
                run_start = None
            continue
        if run_start is None:
            run_start = i
            letters = 0
        letters += 1
        run_end = i + 1

    if run_start is not None:
        runs.append(ContaminationRun(run_start, run_end, letters))
    return runs
