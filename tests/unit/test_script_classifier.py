"""
Unit tests for core/purification/script_classifier.py
"""
import pytest

from core.language import Language, ScriptFamily
from core.purification.script_classifier import (
    ContaminationRun,
    classify,
    contamination_runs,
    family_of,
    purity,
    purity_ratio,
)


class TestFamilyOf:
    """Per-character script family."""

    def test_latin_letters(self):
        assert family_of("a") == ScriptFamily.LATIN
        assert family_of("É") == ScriptFamily.LATIN

    def test_arabic_letter(self):
        assert family_of("ش") == ScriptFamily.ARABIC

    def test_cyrillic_letter(self):
        assert family_of("д") == ScriptFamily.CYRILLIC

    def test_neutral_characters(self):
        for char in " 7.,;!?()-\n٣،؟":
            assert family_of(char) is None, repr(char)

    def test_unlisted_letter_is_other(self):
        assert family_of("中") == ScriptFamily.OTHER

    def test_combining_accent_counts_as_latin(self):
        assert family_of("\u0301") == ScriptFamily.LATIN


class TestClassify:
    """ScriptProfile counts and purity."""

    def test_pure_french(self):
        profile = classify("Bonjour")
        assert profile.count(ScriptFamily.LATIN) == 7
        assert profile.purity(Language.FRENCH) == 100.0
        assert profile.purity(Language.ARABIC) == 0.0

    def test_pure_arabic_with_harakat(self):
        assert purity("مُحَمَّد", Language.ARABIC) == 100.0

    def test_neutral_only_text_is_vacuously_pure(self):
        profile = classify("123 ، ! ٤٥")
        assert profile.alphabetic_count == 0
        assert profile.dominant_script is None
        assert profile.purity(Language.FRENCH) == 100.0
        assert profile.purity(Language.ARABIC) == 100.0

    def test_empty_text(self):
        assert classify("").alphabetic_count == 0
        assert purity("", Language.ARABIC) == 100.0

    def test_mixed_half_and_half(self):
        assert purity("abc دهو", Language.FRENCH) == 50.0
        assert purity("abc دهو", Language.ARABIC) == 50.0

    def test_digits_do_not_dilute_purity(self):
        assert purity("Article 12 du code", Language.FRENCH) == 100.0

    def test_other_script_lowers_purity(self):
        assert purity("ab中", Language.FRENCH) == pytest.approx(66.67)

    def test_score_is_rounded_to_two_decimals(self):
        score = purity("Les témoins ont été entendus par le juge ش", Language.FRENCH)
        assert score == 97.06

    def test_ratio_is_exact(self):
        # 1899 Latin and 100 Arabic letters: 94.9975%
        text = "x" * 1899 + "ش" * 100
        assert purity_ratio(text, Language.FRENCH) == pytest.approx(94.9975)
        assert purity(text, Language.FRENCH) == 95.0
        assert classify(text).ratio(Language.FRENCH) < 95.0

    def test_decomposed_accent_stays_latin(self):
        profile = classify("e\u0301te\u0301")
        assert profile.count(ScriptFamily.LATIN) == 5
        assert profile.purity(Language.FRENCH) == 100.0

    def test_dominant_script(self):
        assert classify("Les témoins ش").dominant_script == ScriptFamily.LATIN
        assert classify("процедура").dominant_script == ScriptFamily.CYRILLIC

    def test_dominant_script_tie_is_deterministic(self):
        assert classify("ab دو").dominant_script == ScriptFamily.ARABIC

    def test_classify_is_deterministic(self):
        text = "الشهود Defined في المادة 12"
        assert classify(text) == classify(text)

    def test_foreign_count(self):
        assert classify("الشهود Pro").foreign_count(Language.ARABIC) == 3

    def test_to_dict(self):
        data = classify("ab 1").to_dict()
        assert data["script_counts"] == {"latin": 2}
        assert data["neutral_count"] == 2
        assert data["dominant_script"] == "latin"


class TestContaminationRuns:
    """Spans written in a script other than the target's."""

    def test_no_runs_in_pure_text(self):
        assert contamination_runs("Les témoins sont là", Language.FRENCH) == []

    def test_single_embedded_word(self):
        runs = contamination_runs("Les témoins الشهود ici", Language.FRENCH)
        assert runs == [ContaminationRun(start=12, end=18, foreign_letters=6)]

    def test_neutrals_between_foreign_letters_stay_in_run(self):
        runs = contamination_runs("abc شهود 12 شاهد xyz", Language.FRENCH)
        assert len(runs) == 1
        assert runs[0].start == 4
        assert runs[0].end == 16
        assert runs[0].foreign_letters == 8

    def test_runs_split_by_target_letters(self):
        runs = contamination_runs("الشهود Defined في V2", Language.ARABIC)
        assert [r.foreign_letters for r in runs] == [7, 1]

    def test_run_at_end_of_text(self):
        runs = contamination_runs("محاميPro", Language.ARABIC)
        assert runs == [ContaminationRun(start=5, end=8, foreign_letters=3)]
