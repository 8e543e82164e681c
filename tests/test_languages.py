"""
Tests for language code normalization and direction.
"""

import pytest

from lingobatch.i18n.languages import (
    Language,
    SUPPORTED_LANGUAGES,
    get_language_by_code,
    get_language_name,
    is_rtl,
    normalize_language_code,
    text_direction,
)


class TestNormalizeLanguageCode:
    @pytest.mark.parametrize("tag, expected", [
        ("hi", "hi"),
        ("hi-IN", "hi"),
        ("HI_in", "hi"),
        ("en-US", "en"),
        ("pt-BR", "pt"),
        ("zh", "zh-CN"),
        ("zh-TW", "zh-CN"),
        ("zh-Hant-HK", "zh-CN"),
        ("iw", "he"),
        ("Hindi", "hi"),
        ("  ta  ", "ta"),
    ])
    def test_known_tags(self, tag, expected):
        assert normalize_language_code(tag) == expected

    def test_unknown_passes_through_as_lowercase_base(self):
        assert normalize_language_code("XX-yy") == "xx"
        assert normalize_language_code("sw") == "sw"

    def test_empty_means_english(self):
        assert normalize_language_code("") == "en"
        assert normalize_language_code(None) == "en"

    def test_enum_members(self):
        assert normalize_language_code(Language.TA) == "ta"
        assert normalize_language_code(Language.ZH) == "zh-CN"

    def test_idempotent_for_every_supported_language(self):
        for lang in SUPPORTED_LANGUAGES:
            assert normalize_language_code(lang.value) == lang.value


class TestDirection:
    @pytest.mark.parametrize("code", ["ar", "he", "fa", "ur", "ar-EG", "UR_pk", "iw"])
    def test_rtl(self, code):
        assert is_rtl(code)
        assert text_direction(code) == "rtl"

    @pytest.mark.parametrize("code", ["en", "hi", "zh-TW", "xx", None])
    def test_ltr(self, code):
        assert not is_rtl(code)
        assert text_direction(code) == "ltr"


class TestLookup:
    def test_language_name(self):
        assert get_language_name("hi-IN") == "Hindi"
        assert get_language_name("zh") == "Chinese (Simplified)"
        assert get_language_name("xx") == "xx"

    def test_language_by_code(self):
        assert get_language_by_code("bn-BD") is Language.BN
        assert get_language_by_code("xx") is None
