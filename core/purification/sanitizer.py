#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Sanitizer - versioned, bounded rewrite rules

Removes short foreign-script contamination from otherwise pure text:
two pure fragments glued together around a stray tag ("محاميProتحليل"),
an injected word ("الشهود Defined في المادة"), a Cyrillic splinter
("ال процедة").

Rule kinds, applied in this order:
  1. literal      known contamination strings, longest first; literals of
                  equal length keep their declaration order
  2. pattern      regular expressions, declaration order
  3. foreign_run  every remaining contamination run

Bounded scope: a rewrite whose match touches a contamination run with more
than `max_run_length` foreign letters is refused, so long foreign passages
stay in place and the post-sanitize score reports them honestly. A removed
span becomes a single space only when it sat between two words; next to
whitespace, punctuation or the text edge it is dropped. Pure text is never
rewritten: the final pass only collapses repeated separators and trims.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Pattern, Tuple

from config.constants import SANITIZER_MAX_RUN_LENGTH, SANITIZER_RULESET_VERSION
from core.language import Language
from core.purification.script_classifier import (
    ContaminationRun,
    ScriptProfile,
    classify,
    contamination_runs,
)

logger = logging.getLogger(__name__)


class RuleKind(str, Enum):
    LITERAL = "literal"
    PATTERN = "pattern"
    FOREIGN_RUN = "foreign_run"


@dataclass(frozen=True)
class SanitizerRule:
    """One deterministic rewrite rule"""
    name: str
    kind: RuleKind
    pattern: str = ""
    replacement: str = " "
    languages: FrozenSet[Language] = frozenset()  # empty = every target language
    description: str = ""

    def applies_to(self, language: Language) -> bool:
        return not self.languages or language in self.languages

    def compile(self) -> Optional[Pattern]:
        if self.kind == RuleKind.LITERAL:
            return re.compile(re.escape(self.pattern), re.IGNORECASE)
        if self.kind == RuleKind.PATTERN:
            return re.compile(self.pattern)
        return None


@dataclass(frozen=True)
class SanitizerRuleSet:
    """Versioned rule table"""
    version: str
    rules: Tuple[SanitizerRule, ...]

    def ordered(self, language: Language) -> List[SanitizerRule]:
        """Rules for a target language in application order"""
        active = [r for r in self.rules if r.applies_to(language)]
        # sorted() is stable: equal lengths stay in declaration order
        literals = sorted(
            (r for r in active if r.kind == RuleKind.LITERAL),
            key=lambda r: -len(r.pattern),
        )
        patterns = [r for r in active if r.kind == RuleKind.PATTERN]
        runs = [r for r in active if r.kind == RuleKind.FOREIGN_RUN]
        return literals + patterns + runs


DEFAULT_RULES = SanitizerRuleSet(
    version=SANITIZER_RULESET_VERSION,
    rules=(
        # UI artifacts reported in generated chat output
        SanitizerRule("ui_auto_translate", RuleKind.LITERAL, "AUTO-TRANSLATE",
                      languages=frozenset({Language.ARABIC}),
                      description="Toolbar label glued into generated text"),
        SanitizerRule("ui_defined", RuleKind.LITERAL, "Defined",
                      languages=frozenset({Language.ARABIC})),
        # Half-Cyrillic word produced by a transliterating provider
        SanitizerRule("cyrillic_procedure", RuleKind.LITERAL, "процедة",
                      languages=frozenset({Language.ARABIC})),
        SanitizerRule("ui_pro_badge", RuleKind.PATTERN, r"(?<=[؀-ۿ])Pro(?=[؀-ۿ])",
                      languages=frozenset({Language.ARABIC}),
                      description="'Pro' badge between two Arabic fragments"),
        SanitizerRule("ui_version_tag", RuleKind.PATTERN, r"(?<![0-9A-Za-z])[Vv]\d+(?![0-9A-Za-z])",
                      languages=frozenset({Language.ARABIC}),
                      description="Version tag such as V2"),
        # Serialization leftovers
        SanitizerRule("js_object", RuleKind.LITERAL, "[object Object]"),
        SanitizerRule("js_undefined", RuleKind.PATTERN, r"\b(?:undefined|NaN)\b",
                      languages=frozenset({Language.ARABIC})),
        # Anything else short and foreign
        SanitizerRule("short_foreign_run", RuleKind.FOREIGN_RUN,
                      description="Remove contamination runs up to the length limit"),
    ),
)


@dataclass(frozen=True)
class SanitizeResult:
    text: str
    profile: ScriptProfile
    applied_rules: Tuple[str, ...] = ()
    refused: int = 0

    def purity(self, language: Language) -> float:
        return self.profile.purity(language)


_REPEATED_SPACE = re.compile(r"[ \t]{2,}")
_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_MANY_NEWLINES = re.compile(r"\n{3,}")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated separators to one and trim"""
    text = _REPEATED_SPACE.sub(" ", text)
    text = _TRAILING_SPACE.sub("\n", text)
    text = _MANY_NEWLINES.sub("\n\n", text)
    return text.strip()


def _needs_separator(text: str, start: int, end: int) -> bool:
    """True when the span text[start:end] sits directly between two words"""
    if start == 0 or end >= len(text):
        return False
    before, after = text[start - 1], text[end]
    if before.isspace() or after.isspace():
        return False
    if unicodedata.category(before) == "Ps":
        return False
    after_category = unicodedata.category(after)
    return not (after_category[0] == "P" and after_category != "Ps")


def _separator(expanded: str, text: str, start: int, end: int) -> str:
    if expanded != " ":
        return expanded
    return " " if _needs_separator(text, start, end) else ""


class Sanitizer:
    """
    Applies a SanitizerRuleSet to candidate text.

    Usage:
        sanitizer = Sanitizer(max_run_length=12)
        result = sanitizer.sanitize("الشهود Defined في المادة", Language.ARABIC)
        result.text     # "الشهود في المادة"
    """

    def __init__(
        self,
        rules: Optional[SanitizerRuleSet] = None,
        max_run_length: int = SANITIZER_MAX_RUN_LENGTH,
    ):
        if max_run_length < 0:
            raise ValueError("max_run_length must be >= 0")
        self.rules = rules or DEFAULT_RULES
        self.max_run_length = max_run_length
        self._compiled = {rule.name: rule.compile() for rule in self.rules.rules}

    @property
    def version(self) -> str:
        return self.rules.version

    def _touches_long_run(self, start: int, end: int, runs: Iterable[ContaminationRun]) -> bool:
        for run in runs:
            if run.start < end and start < run.end and run.foreign_letters > self.max_run_length:
                return True
        return False

    def _apply_regex(
        self, text: str, rule: SanitizerRule, pattern: Pattern, language: Language
    ) -> Tuple[str, int, int]:
        runs = contamination_runs(text, language)
        pieces: List[str] = []
        last = 0
        fired = refused = 0
        for match in pattern.finditer(text):
            if match.start() == match.end():
                continue
            if self._touches_long_run(match.start(), match.end(), runs):
                refused += 1
                continue
            pieces.append(text[last:match.start()])
            pieces.append(_separator(
                match.expand(rule.replacement), text, match.start(), match.end()
            ))
            last = match.end()
            fired += 1
        if not fired:
            return text, 0, refused
        pieces.append(text[last:])
        return "".join(pieces), fired, refused

    def _apply_foreign_runs(self, text: str, rule: SanitizerRule, language: Language) -> Tuple[str, int, int]:
        pieces: List[str] = []
        last = 0
        fired = refused = 0
        for run in contamination_runs(text, language):
            if run.foreign_letters > self.max_run_length:
                refused += 1
                continue
            pieces.append(text[last:run.start])
            pieces.append(_separator(rule.replacement, text, run.start, run.end))
            last = run.end
            fired += 1
        if not fired:
            return text, 0, refused
        pieces.append(text[last:])
        return "".join(pieces), fired, refused

    def sanitize(self, text: str, target_language: Language) -> SanitizeResult:
        """Rewrite short contamination, normalize whitespace, re-classify"""
        current = text or ""
        applied: List[str] = []
        refused_total = 0

        for rule in self.rules.ordered(target_language):
            if rule.kind == RuleKind.FOREIGN_RUN:
                current, fired, refused = self._apply_foreign_runs(current, rule, target_language)
            else:
                current, fired, refused = self._apply_regex(
                    current, rule, self._compiled[rule.name], target_language
                )
            refused_total += refused
            if fired:
                applied.append(rule.name)
                logger.debug(f"Sanitizer rule '{rule.name}' fired {fired}x")

        current = normalize_whitespace(current)
        if refused_total:
            logger.debug(
                f"Sanitizer refused {refused_total} rewrite(s) over runs "
                f"longer than {self.max_run_length}"
            )
        return SanitizeResult(
            text=current,
            profile=classify(current),
            applied_rules=tuple(applied),
            refused=refused_total,
        )
