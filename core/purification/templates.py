#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Fallback Templates

Static, author-curated text per (IntentCategory, Language). The table is
validated once, when it is loaded:

- every template is non-empty and 100% pure in its keyed language
- GENERAL exists for every supported language

so generate() never has to check anything at request time and always
returns the stored text verbatim.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from config.constants import PURITY_MAX
from core.language import Language, SUPPORTED_LANGUAGES
from core.purification.errors import TemplateTableError
from core.purification.models import IntentCategory
from core.purification.script_classifier import purity_ratio

logger = logging.getLogger(__name__)

TemplateKey = Tuple[IntentCategory, Language]


DEFAULT_TEMPLATES: Dict[IntentCategory, Dict[Language, str]] = {
    IntentCategory.WITNESSES: {
        Language.ARABIC: "الشهود في النظام القضائي الجزائري هم الأشخاص الذين يشاركون في الإجراءات القانونية ويمكنهم تقديم الشهادة حول الأحداث التي شاهدوها.",
        Language.FRENCH: "Les témoins dans le système judiciaire algérien sont des personnes qui participent aux procédures légales et peuvent fournir des témoignages sur les événements observés.",
    },
    IntentCategory.KAFALA: {
        Language.ARABIC: "الكفالة في القانون الجزائري هي نظام قانوني يهدف إلى حماية الأطفال والأشخاص غير القادرين على رعاية أنفسهم.",
        Language.FRENCH: "La kafala dans le droit algérien est un système juridique visant à protéger les enfants et les personnes incapables de prendre soin d'elles-mêmes.",
    },
    IntentCategory.HIBA: {
        Language.ARABIC: "الهبة في القانون الجزائري هي عقد يقوم بموجبه شخص بنقل ملكية مال أو حق إلى شخص آخر دون مقابل.",
        Language.FRENCH: "La hiba dans le droit algérien est un contrat par lequel une personne transfère la propriété d'un bien à une autre personne sans contrepartie.",
    },
    IntentCategory.MORABAHA: {
        Language.ARABIC: "المرابحة في النظام المصرفي الإسلامي الجزائري هي عقد بيع يقوم فيه المصرف بشراء سلعة معينة ثم بيعها للعميل.",
        Language.FRENCH: "La morabaha dans le système bancaire islamique algérien est un contrat de vente où la banque achète un bien puis le vend au client.",
    },
    IntentCategory.FAMILY_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام قانون الأسرة الجزائري والتشريعات ذات الصلة بالأحوال الشخصية.",
        Language.FRENCH: "Ce contenu concerne les dispositions du Code de la famille algérien et les textes relatifs au statut personnel.",
    },
    IntentCategory.CRIMINAL_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام قانون العقوبات الجزائري وقانون الإجراءات الجزائية.",
        Language.FRENCH: "Ce contenu concerne les dispositions du Code pénal algérien et du Code de procédure pénale.",
    },
    IntentCategory.COMMERCIAL_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام القانون التجاري الجزائري والتنظيمات المكملة له.",
        Language.FRENCH: "Ce contenu concerne les dispositions du Code de commerce algérien et les règlements complémentaires.",
    },
    IntentCategory.ADMINISTRATIVE_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام القانون الإداري الجزائري والمبادئ العامة للإدارة العمومية.",
        Language.FRENCH: "Ce contenu concerne les dispositions du droit administratif algérien et les principes généraux de l'administration publique.",
    },
    IntentCategory.PROCEDURAL_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام قانون الإجراءات المدنية والإدارية والضمانات الإجرائية.",
        Language.FRENCH: "Ce contenu concerne les dispositions du Code de procédure civile et administrative et les garanties procédurales.",
    },
    IntentCategory.CIVIL_LAW: {
        Language.ARABIC: "يتعلق هذا المحتوى بأحكام القانون المدني الجزائري والالتزامات التعاقدية.",
        Language.FRENCH: "Ce contenu concerne les dispositions du Code civil algérien et les obligations contractuelles.",
    },
    IntentCategory.MARKET: {
        Language.ARABIC: "السوق في الاقتصاد الجزائري يشير إلى المكان أو النظام الذي يتم فيه تبادل السلع والخدمات بين البائعين والمشترين.",
        Language.FRENCH: "Le marché dans l'économie algérienne désigne le lieu ou le système où les biens et services sont échangés entre vendeurs et acheteurs.",
    },
    IntentCategory.LAWYER: {
        Language.ARABIC: "منصة المحامي الجزائري توفر أدوات شاملة لإدارة المكاتب القانونية والقضايا والعملاء بطريقة منظمة وفعالة.",
        Language.FRENCH: "La plateforme juridique algérienne offre des outils complets pour la gestion des cabinets d'avocats, des affaires et des clients de manière organisée.",
    },
    IntentCategory.SEARCH: {
        Language.ARABIC: "البحث القانوني يتيح الوصول إلى قاعدة بيانات شاملة من القوانين والأحكام القضائية والاجتهادات القانونية الجزائرية.",
        Language.FRENCH: "La recherche juridique permet l'accès à une base de données complète des lois, jurisprudences et précédents juridiques algériens.",
    },
    IntentCategory.FILE: {
        Language.ARABIC: "إدارة الملفات القانونية تساعد في تنظيم وحفظ الوثائق والمستندات القانونية بطريقة آمنة ومنظمة.",
        Language.FRENCH: "La gestion des dossiers juridiques aide à organiser et conserver les documents et pièces légales de manière sécurisée et structurée.",
    },
    IntentCategory.DASHBOARD: {
        Language.ARABIC: "لوحة التحكم توفر نظرة شاملة على جميع الأنشطة القانونية والقضايا والمهام اليومية للمحامي.",
        Language.FRENCH: "Le tableau de bord offre une vue d'ensemble complète de toutes les activités juridiques, affaires et tâches quotidiennes de l'avocat.",
    },
    IntentCategory.GENERAL: {
        Language.ARABIC: "منصة قانونية شاملة للمحامين والمهنيين القانونيين في الجزائر توفر جميع الأدوات اللازمة لممارسة المهنة بكفاءة.",
        Language.FRENCH: "Plateforme juridique complète pour les avocats et professionnels du droit en Algérie, offrant tous les outils nécessaires à la pratique efficace du métier.",
    },
}


class FallbackTemplateTable:
    """Read-only (IntentCategory, Language) -> text table, validated on load"""

    def __init__(
        self,
        templates: Mapping[IntentCategory, Mapping[Language, str]],
        languages: Iterable[Language] = SUPPORTED_LANGUAGES,
    ):
        table: Dict[TemplateKey, str] = {}
        for category, by_language in templates.items():
            for language, text in by_language.items():
                table[(IntentCategory(category), Language(language))] = text
        self._languages = tuple(languages)
        self._validate(table)
        self._table = table

    def _validate(self, table: Dict[TemplateKey, str]) -> None:
        for (category, language), text in table.items():
            if not text or not text.strip():
                raise TemplateTableError(
                    f"Empty fallback template for ({category.value}, {language.value})"
                )
            score = purity_ratio(text, language)
            if score < PURITY_MAX:
                raise TemplateTableError(
                    f"Fallback template ({category.value}, {language.value}) "
                    f"is only {score:.2f}% pure"
                )
        missing = [
            lang.value for lang in self._languages
            if (IntentCategory.GENERAL, lang) not in table
        ]
        if missing:
            raise TemplateTableError(
                f"Missing general fallback template for: {', '.join(missing)}"
            )

    @property
    def languages(self) -> Tuple[Language, ...]:
        return self._languages

    def get(self, category: IntentCategory, language: Language) -> Optional[str]:
        return self._table.get((category, language))

    def __contains__(self, key: TemplateKey) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    @classmethod
    def default(cls) -> "FallbackTemplateTable":
        return cls(DEFAULT_TEMPLATES)

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, str]]) -> "FallbackTemplateTable":
        """Build from {"<category>": {"<lang>": "<text>"}}"""
        templates: Dict[IntentCategory, Dict[Language, str]] = {}
        for category_name, by_language in data.items():
            try:
                category = IntentCategory(category_name)
            except ValueError:
                raise TemplateTableError(f"Unknown intent category: {category_name}")
            templates[category] = {}
            for code, text in by_language.items():
                language = Language.parse(code)
                if language is None:
                    raise TemplateTableError(f"Unknown language code: {code}")
                templates[category][language] = text
        return cls(templates)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FallbackTemplateTable":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise TemplateTableError(f"Cannot load fallback templates from {path}: {e}")
        table = cls.from_dict(data)
        logger.info(f"Loaded {len(table)} fallback templates from {path}")
        return table


class FallbackGenerator:
    """Looks up the template for an intent, falling back to GENERAL"""

    def __init__(self, table: Optional[FallbackTemplateTable] = None):
        self.table = table or FallbackTemplateTable.default()

    def generate(self, intent: IntentCategory, target_language: Language) -> str:
        text = self.table.get(intent, target_language)
        if text is None:
            text = self.table.get(IntentCategory.GENERAL, target_language)
        if text is None:
            # Only reachable for a language the table was not loaded for
            raise TemplateTableError(
                f"No fallback template for language {Language(target_language).value}"
            )
        return text
