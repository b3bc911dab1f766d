"""
Unit tests for core/purification/sanitizer.py
"""
import pytest

from core.language import Language
from core.purification.sanitizer import (
    DEFAULT_RULES,
    RuleKind,
    Sanitizer,
    SanitizerRule,
    SanitizerRuleSet,
    normalize_whitespace,
)
from core.purification.script_classifier import classify


@pytest.fixture
def sanitizer():
    return Sanitizer()


class TestKnownContamination:
    """Literal and pattern rules against reported artifacts."""

    def test_injected_ui_word(self, sanitizer):
        result = sanitizer.sanitize("الشهود Defined في المادة", Language.ARABIC)
        assert result.text == "الشهود في المادة"
        assert result.applied_rules == ("ui_defined",)
        assert result.purity(Language.ARABIC) == 100.0

    def test_badge_between_arabic_fragments(self, sanitizer):
        result = sanitizer.sanitize("محاميProتحليل", Language.ARABIC)
        assert result.text == "محامي تحليل"
        assert result.applied_rules == ("ui_pro_badge",)

    def test_cyrillic_splinter(self, sanitizer):
        result = sanitizer.sanitize("الإجراءات процедة القانونية", Language.ARABIC)
        assert result.text == "الإجراءات القانونية"
        assert "cyrillic_procedure" in result.applied_rules

    def test_version_tag(self, sanitizer):
        result = sanitizer.sanitize("المنصة V2 الجديدة", Language.ARABIC)
        assert result.text == "المنصة الجديدة"
        assert result.applied_rules == ("ui_version_tag",)

    def test_serialization_leftover_in_french(self, sanitizer):
        result = sanitizer.sanitize("Le document [object Object] est prêt", Language.FRENCH)
        assert result.text == "Le document est prêt"
        assert result.applied_rules == ("js_object",)

    def test_literal_match_ignores_case(self, sanitizer):
        result = sanitizer.sanitize("الشهود defined في", Language.ARABIC)
        assert result.text == "الشهود في"


class TestForeignRuns:
    """Generic removal of short contamination runs."""

    def test_glued_arabic_fragment_in_french(self, sanitizer):
        result = sanitizer.sanitize("Les témoinsالشهود sont là", Language.FRENCH)
        assert result.text == "Les témoins sont là"
        assert result.applied_rules == ("short_foreign_run",)
        assert result.refused == 0

    def test_long_foreign_passage_is_refused(self, sanitizer):
        text = "الشهود\u200cفي المادة"
        result = sanitizer.sanitize(text, Language.ARABIC)
        assert result.text == text
        assert result.refused >= 1
        assert result.applied_rules == ()
        assert result.purity(Language.ARABIC) < 100.0

    def test_max_run_length_is_configurable(self):
        strict = Sanitizer(max_run_length=3)
        result = strict.sanitize("الشهود Defined في", Language.ARABIC)
        assert result.text == "الشهود Defined في"
        assert result.refused == 2

    def test_negative_max_run_length_rejected(self):
        with pytest.raises(ValueError):
            Sanitizer(max_run_length=-1)

    def test_fully_foreign_short_text_becomes_empty(self, sanitizer):
        assert sanitizer.sanitize("شهود", Language.FRENCH).text == ""


class TestSanitizeResult:

    def test_profile_matches_output(self, sanitizer):
        result = sanitizer.sanitize("الشهود Defined في المادة", Language.ARABIC)
        assert result.profile == classify(result.text)

    def test_idempotent(self, sanitizer):
        once = sanitizer.sanitize("محاميProتحليل V2", Language.ARABIC)
        twice = sanitizer.sanitize(once.text, Language.ARABIC)
        assert twice.text == once.text
        assert twice.applied_rules == ()

    def test_empty_input(self, sanitizer):
        result = sanitizer.sanitize("", Language.ARABIC)
        assert result.text == ""
        assert result.applied_rules == ()


class TestRuleSet:

    def test_application_order(self):
        names = [r.name for r in DEFAULT_RULES.ordered(Language.ARABIC)]
        assert names == [
            "js_object",
            "ui_auto_translate",
            "ui_defined",
            "cyrillic_procedure",
            "ui_pro_badge",
            "ui_version_tag",
            "js_undefined",
            "short_foreign_run",
        ]

    def test_equal_length_literals_keep_declaration_order(self):
        rules = SanitizerRuleSet(
            version="test-1",
            rules=(
                SanitizerRule("second_z", RuleKind.LITERAL, "bbb"),
                SanitizerRule("first_a", RuleKind.LITERAL, "aaa"),
                SanitizerRule("longest", RuleKind.LITERAL, "cccc"),
            ),
        )
        assert [r.name for r in rules.ordered(Language.ARABIC)] == [
            "longest",
            "second_z",
            "first_a",
        ]

    def test_language_scoped_rules(self):
        names = [r.name for r in DEFAULT_RULES.ordered(Language.FRENCH)]
        assert names == ["js_object", "short_foreign_run"]

    def test_custom_rule_set(self):
        rules = SanitizerRuleSet(
            version="test-1",
            rules=(SanitizerRule("drop_marker", RuleKind.LITERAL, "XX"),),
        )
        sanitizer = Sanitizer(rules)
        assert sanitizer.version == "test-1"
        assert sanitizer.sanitize("الشهود XX", Language.ARABIC).text == "الشهود"


class TestPureTextIsPreserved:
    """Only contamination is rewritten; pure text keeps its punctuation and spacing."""

    def test_french_typography_untouched(self, sanitizer):
        text = "Articles 5 - 7 : les témoins ?"
        result = sanitizer.sanitize(text, Language.FRENCH)
        assert result.text == text
        assert result.applied_rules == ()

    def test_removal_keeps_surrounding_punctuation(self, sanitizer):
        result = sanitizer.sanitize(
            "Les témoins (articles 5 - 7) : voirالشهود ici.", Language.FRENCH
        )
        assert result.text == "Les témoins (articles 5 - 7) : voir ici."

    def test_removal_before_punctuation_leaves_no_space(self, sanitizer):
        result = sanitizer.sanitize("Les témoinsالشهود, ici", Language.FRENCH)
        assert result.text == "Les témoins, ici"

    def test_joiners_in_arabic_untouched(self, sanitizer):
        text = "الشهود\u200cفي المادة"
        assert sanitizer.sanitize(text, Language.ARABIC).text == text


class TestNormalizeWhitespace:

    def test_collapses_spaces_and_blank_lines(self):
        assert normalize_whitespace("الشهود   في\n\n\n\nالمادة") == "الشهود في\n\nالمادة"

    def test_spacing_before_punctuation_kept(self):
        assert normalize_whitespace("Bonjour : ami ?") == "Bonjour : ami ?"
        assert normalize_whitespace("الشهود ، هنا") == "الشهود ، هنا"

    def test_trailing_spaces_before_newline_removed(self):
        assert normalize_whitespace("texte  \nsuite") == "texte\nsuite"

    def test_trims(self):
        assert normalize_whitespace("  \t texte \n") == "texte"
