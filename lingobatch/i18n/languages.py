"""
Supported languages and utilities.

Focused on Indian languages plus major world languages.
RTL languages (Arabic, Hebrew, Persian, Urdu) are flagged for UI layout.
"""

from enum import Enum


class Language(str, Enum):
    """Supported languages, as canonical provider codes."""

    # === Default ===
    EN = "en"      # English

    # === Indian languages (warm-up priority) ===
    HI = "hi"      # Hindi
    BN = "bn"      # Bengali
    MR = "mr"      # Marathi
    TE = "te"      # Telugu
    TA = "ta"      # Tamil
    GU = "gu"      # Gujarati
    KN = "kn"      # Kannada
    ML = "ml"      # Malayalam
    PA = "pa"      # Punjabi
    OR = "or"      # Odia
    AS = "as"      # Assamese

    # === World languages ===
    ES = "es"      # Spanish
    FR = "fr"      # French
    DE = "de"      # German
    IT = "it"      # Italian
    PT = "pt"      # Portuguese
    RU = "ru"      # Russian
    JA = "ja"      # Japanese
    KO = "ko"      # Korean
    ZH = "zh-CN"   # Chinese (Simplified)

    # === RTL ===
    AR = "ar"      # Arabic
    HE = "he"      # Hebrew
    FA = "fa"      # Persian
    UR = "ur"      # Urdu


# Human-readable names
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    # Indian
    "hi": "Hindi",
    "bn": "Bengali",
    "mr": "Marathi",
    "te": "Telugu",
    "ta": "Tamil",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    "or": "Odia",
    "as": "Assamese",
    # World
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh-CN": "Chinese (Simplified)",
    # RTL
    "ar": "Arabic",
    "he": "Hebrew",
    "fa": "Persian",
    "ur": "Urdu",
}


# Base subtag → provider code. Anything not listed passes through as its base subtag.
PROVIDER_CODES: dict[str, str] = {
    **{lang.value: lang.value for lang in Language if lang is not Language.ZH},
    "zh": "zh-CN",
    # Legacy ISO codes
    "iw": "he",
    # Common names
    "english": "en",
    "hindi": "hi",
    "bengali": "bn",
    "bangla": "bn",
    "marathi": "mr",
    "telugu": "te",
    "tamil": "ta",
    "gujarati": "gu",
    "kannada": "kn",
    "malayalam": "ml",
    "punjabi": "pa",
    "odia": "or",
    "oriya": "or",
    "assamese": "as",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "russian": "ru",
    "japanese": "ja",
    "korean": "ko",
    "chinese": "zh-CN",
    "arabic": "ar",
    "hebrew": "he",
    "persian": "fa",
    "farsi": "fa",
    "urdu": "ur",
}


DEFAULT_LANGUAGE = "en"


# =============================================================================
# Priority Lists
# =============================================================================


# Languages to pre-warm cache for (highest traffic expected)
WARM_UP_LANGUAGES: list[Language] = [
    Language.HI,
    Language.BN,
    Language.MR,
    Language.TE,
    Language.TA,
    Language.GU,
    Language.KN,
    Language.ML,
    Language.PA,
]


# RTL languages (need special UI handling)
RTL_LANGUAGES: frozenset[str] = frozenset({"ar", "he", "fa", "ur"})


# All supported (for API)
SUPPORTED_LANGUAGES = list(Language)


# LTR only (for simpler UI implementations)
LTR_LANGUAGES = [lang for lang in Language if lang.value not in RTL_LANGUAGES]


# =============================================================================
# Utilities
# =============================================================================


def normalize_language_code(code: str | None) -> str:
    """
    Normalize a locale tag to the provider's canonical code.

    Region and script suffixes are dropped ("en-US", "pt_BR", "zh-Hant")
    before the lowercase base subtag is looked up. Empty input means English.

        >>> normalize_language_code("hi-IN")
        'hi'
        >>> normalize_language_code("ZH-tw")
        'zh-CN'
        >>> normalize_language_code("xx-YY")
        'xx'
    """
    if code is None:
        return DEFAULT_LANGUAGE
    code = str(code.value if isinstance(code, Language) else code).strip()
    if not code:
        return DEFAULT_LANGUAGE

    base = code.replace("_", "-").split("-")[0].lower()
    return PROVIDER_CODES.get(base, base)


def is_rtl(code: str | None) -> bool:
    """Check if language is right-to-left."""
    return normalize_language_code(code) in RTL_LANGUAGES


def text_direction(code: str | None) -> str:
    """HTML `dir` value for a language."""
    return "rtl" if is_rtl(code) else "ltr"


def get_language_name(code: str) -> str:
    """Get human-readable language name."""
    return LANGUAGE_NAMES.get(normalize_language_code(code), code)


def get_language_by_code(code: str) -> Language | None:
    """Get Language enum by code."""
    code = normalize_language_code(code)
    try:
        return Language(code)
    except ValueError:
        return None
