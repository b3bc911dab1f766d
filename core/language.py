#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Language Support - Supported languages and their script families

Every supported language declares the script family its text is written
in. Script families are defined by fixed Unicode range tables, so adding a
language means adding one LANGUAGES entry (and its fallback templates).
"""

from typing import Optional, Dict, Tuple
from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    """Supported language codes"""
    ARABIC = "ar"
    FRENCH = "fr"

    @classmethod
    def parse(cls, value) -> Optional["Language"]:
        """
        Parse a language code ("ar", "AR", "fr-FR", Language.FRENCH).

        Returns None for empty or unknown codes; callers decide whether
        that is an error.
        """
        if value is None:
            return None
        if isinstance(value, Language):
            return value
        code = str(value).strip().lower().replace("_", "-")
        if not code:
            return None
        code = code.split("-", 1)[0]
        for lang in cls:
            if lang.value == code:
                return lang
        return None


class ScriptFamily(str, Enum):
    """Alphabetic script families tracked by the script classifier"""
    ARABIC = "arabic"
    LATIN = "latin"
    CYRILLIC = "cyrillic"
    GREEK = "greek"
    HEBREW = "hebrew"
    OTHER = "other"  # alphabetic, but outside every declared range


# Unicode ranges per family (inclusive)
SCRIPT_RANGES: Dict[ScriptFamily, Tuple[Tuple[int, int], ...]] = {
    ScriptFamily.ARABIC: (
        (0x0600, 0x06FF),  # Arabic
        (0x0750, 0x077F),  # Arabic Supplement
        (0x08A0, 0x08FF),  # Arabic Extended-A
        (0xFB50, 0xFDFF),  # Arabic Presentation Forms-A
        (0xFE70, 0xFEFF),  # Arabic Presentation Forms-B
    ),
    ScriptFamily.LATIN: (
        (0x0041, 0x005A),  # A-Z
        (0x0061, 0x007A),  # a-z
        (0x00C0, 0x024F),  # Latin-1 Supplement letters, Extended-A/B
        (0x0300, 0x036F),  # Combining diacritical marks (decomposed accents)
        (0x1E00, 0x1EFF),  # Latin Extended Additional
        (0xFB00, 0xFB06),  # Latin ligatures
    ),
    ScriptFamily.CYRILLIC: (
        (0x0400, 0x052F),
        (0x1C80, 0x1C8F),
        (0x2DE0, 0x2DFF),
        (0xA640, 0xA69F),
    ),
    ScriptFamily.GREEK: (
        (0x0370, 0x03FF),
        (0x1F00, 0x1FFF),
    ),
    ScriptFamily.HEBREW: (
        (0x0590, 0x05FF),
        (0xFB1D, 0xFB4F),
    ),
}


@dataclass(frozen=True)
class LanguageInfo:
    """Language information and characteristics"""
    code: Language
    name: str
    native_name: str
    script: ScriptFamily
    direction: str = "ltr"  # ltr (left-to-right) or rtl (right-to-left)


# Language database
LANGUAGES: Dict[Language, LanguageInfo] = {
    Language.ARABIC: LanguageInfo(
        code=Language.ARABIC,
        name="Arabic",
        native_name="العربية",
        script=ScriptFamily.ARABIC,
        direction="rtl",
    ),
    Language.FRENCH: LanguageInfo(
        code=Language.FRENCH,
        name="French",
        native_name="Français",
        script=ScriptFamily.LATIN,
        direction="ltr",
    ),
}

SUPPORTED_LANGUAGES: Tuple[Language, ...] = tuple(LANGUAGES.keys())


def script_of(language: Language) -> ScriptFamily:
    """Script family a language is written in"""
    return LANGUAGES[language].script


def get_language_info(language: Language) -> LanguageInfo:
    """Get language info, raising KeyError for unsupported languages"""
    return LANGUAGES[language]
