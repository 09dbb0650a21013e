"""Tests for locale-specific speech-recognition corrections."""

import pytest

from pantryparse.normalize.corrections import apply_corrections, pre_clean
from pantryparse.schemas import Locale


class TestPreClean:
    """Tests for whitespace and punctuation cleanup."""

    def test_full_width_punctuation(self):
        """Test full-width punctuation is mapped to ASCII."""
        assert pre_clean("牛奶，鸡蛋。") == "牛奶,鸡蛋."

    def test_whitespace_collapsed(self):
        """Test runs of whitespace collapse and ends are trimmed."""
        assert pre_clean("  two   apples \n") == "two apples"

    def test_empty(self):
        """Test empty and None inputs."""
        assert pre_clean("") == ""
        assert pre_clean(None) == ""


class TestEnglishCorrections:
    """Tests for English corrections."""

    def test_lowercases(self):
        """Test English text is lowercased."""
        assert apply_corrections("Three APPLES", Locale.EN) == "three apples"

    def test_to_before_unit(self):
        """Test 'to' in front of a unit is heard as 'two'."""
        assert apply_corrections("I bought to pounds of beef") == "i bought two pounds of beef"
        assert apply_corrections("too bottles of milk") == "two bottles of milk"

    def test_to_elsewhere_kept(self):
        """Test 'to' is kept when no unit follows."""
        assert apply_corrections("went to the store") == "went to the store"

    def test_for_before_unit(self):
        """Test 'for' in front of a unit is heard as 'four'."""
        assert apply_corrections("for cans of tuna") == "four cans of tuna"

    def test_won(self):
        """Test 'won' is heard as 'one'."""
        assert apply_corrections("won apple") == "one apple"

    def test_liter_mishearings(self):
        """Test common liter mis-hearings."""
        assert apply_corrections("2 litters of water") == "2 liters of water"
        assert apply_corrections("a leader of milk") == "a liter of milk"

    def test_milliliters(self):
        """Test milliliters is shortened to ml."""
        assert apply_corrections("500 milliliters of milk") == "500 ml of milk"

    def test_kilo_grams(self):
        """Test a split 'kilo grams' is joined."""
        assert apply_corrections("3 kilo grams of rice") == "3 kilograms of rice"

    def test_spelling_fixes(self):
        """Test literal spelling corrections."""
        assert apply_corrections("Yoghurt and brocoli") == "yogurt and broccoli"


@pytest.mark.zh
class TestChineseCorrections:
    """Tests for Simplified Chinese corrections."""

    def test_literal_table(self):
        """Test literal replacements."""
        assert apply_corrections("三斤亮牛肉", Locale.ZH_HANS) == "三斤两牛肉"
        assert apply_corrections("流氓两斤", Locale.ZH_HANS) == "牛肉两斤"
        assert apply_corrections("一瓶渴乐", Locale.ZH_HANS) == "一瓶可乐"

    def test_unit_homophone_after_numeral(self):
        """Test single-character homophones become units after a numeral."""
        assert apply_corrections("两近牛肉", Locale.ZH_HANS) == "两斤牛肉"
        assert apply_corrections("三良", Locale.ZH_HANS) == "三两"
        assert apply_corrections("5客盐", Locale.ZH_HANS) == "5克盐"

    def test_unit_homophone_without_numeral_kept(self):
        """Test homophones away from numerals are left alone."""
        assert apply_corrections("金色的苹果", Locale.ZH_HANS) == "金色的苹果"

    def test_protected_words(self):
        """Test protected food and time words survive."""
        assert apply_corrections("今天买了金针菇", Locale.ZH_HANS) == "今天买了金针菇"
        assert apply_corrections("两颗生菜", Locale.ZH_HANS) == "两颗生菜"
        assert apply_corrections("一斤五花肉", Locale.ZH_HANS) == "一斤五花肉"

    def test_correction_target_containing_key(self):
        """Test a key that is a prefix of its own target is not applied twice."""
        assert apply_corrections("五花两斤", Locale.ZH_HANS) == "五花肉两斤"

    def test_corrected_words_stay_protected(self):
        """Test words produced by the literal table are not turned into units."""
        assert apply_corrections("两声菜", Locale.ZH_HANS) == "两生菜"
        assert apply_corrections("3声菜", Locale.ZH_HANS) == "3生菜"
        assert apply_corrections("一瓶声抽", Locale.ZH_HANS) == "一瓶生抽"
        assert apply_corrections("两声蚝", Locale.ZH_HANS) == "两生蚝"

    def test_container_milk(self):
        """Test a bare milk after a container becomes a dairy name."""
        assert apply_corrections("两瓶奶", Locale.ZH_HANS) == "两瓶牛奶"
        assert apply_corrections("一罐奶", Locale.ZH_HANS) == "一罐酸奶"

    def test_container_milk_keeps_dairy_names(self):
        """Test complete dairy names after a container are not split."""
        assert apply_corrections("两瓶奶粉", Locale.ZH_HANS) == "两瓶奶粉"
        assert apply_corrections("两盒酸奶", Locale.ZH_HANS) == "两盒酸奶"

    def test_standalone_milk(self):
        """Test a lone 奶 becomes 牛奶."""
        assert apply_corrections("奶", Locale.ZH_HANS) == "牛奶"

    def test_locale_string_accepted(self):
        """Test loose locale spellings select Chinese."""
        assert apply_corrections("两近牛肉", "zh_CN") == "两斤牛肉"


class TestIdempotence:
    """Applying corrections twice equals applying them once."""

    @pytest.mark.parametrize(
        "text,locale",
        [
            ("I bought to pounds of beef", Locale.EN),
            ("won leader of milk and brocoli", Locale.EN),
            ("500 milliliters, too bottles", Locale.EN),
            ("五花两斤", Locale.ZH_HANS),
            ("三金半流氓", Locale.ZH_HANS),
            ("两瓶奶，一罐奶", Locale.ZH_HANS),
            ("今天买了金针菇和生菜", Locale.ZH_HANS),
            ("两近两良", Locale.ZH_HANS),
            ("两声菜", Locale.ZH_HANS),
        ],
    )
    def test_idempotent(self, text, locale):
        """Test corrections are idempotent."""
        once = apply_corrections(text, locale)
        assert apply_corrections(once, locale) == once

    def test_empty_input(self):
        """Test empty input gives an empty string."""
        assert apply_corrections("") == ""
        assert apply_corrections(None, Locale.ZH_HANS) == ""
