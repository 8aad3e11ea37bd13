"""Language utility functions for mapping between language codes, names and provider codes"""
from typing import Dict, Optional, Tuple

# code -> English name
SUPPORTED_LANGUAGES: Dict[str, str] = {
    "th": "Thai",
    "zh": "Chinese (Traditional)",
    "en": "English",
}

# Codes understood by the Google Translate relay
RELAY_CODES: Dict[str, str] = {
    "th": "th",
    "zh": "zh-TW",
    "en": "en",
}

# FLORES-200 codes used by NLLB models
NLLB_CODES: Dict[str, str] = {
    "th": "tha_Thai",
    "zh": "zho_Hant",
    "en": "eng_Latn",
}


def normalize_language_code(language_code: Optional[str]) -> Optional[str]:
    """
    Reduce a language tag to one of the supported base codes.

    Args:
        language_code: Tag such as "zh-TW", "zh_Hant", "TH"

    Returns:
        Supported code ("th", "zh", "en"), or None if not supported
    """
    if not language_code:
        return None
    base = language_code.strip().lower().replace("_", "-").split("-")[0]
    return base if base in SUPPORTED_LANGUAGES else None


def get_language_name(language_code: str) -> Optional[str]:
    """
    Convert a language code to its English name.

    Args:
        language_code: Language code (e.g., "th", "zh-TW")

    Returns:
        Full language name (e.g., "Thai"), or None if not supported
    """
    code = normalize_language_code(language_code)
    return SUPPORTED_LANGUAGES[code] if code else None


def resolve_direction(source: Optional[str], target: Optional[str]) -> Tuple[str, str]:
    """
    Resolve the (source, target) pair for a request.

    Thai is the default source. The default target is Traditional Chinese,
    or Thai when translating from Chinese.
    """
    source_code = normalize_language_code(source) or "th"
    target_code = normalize_language_code(target)
    if not target_code or target_code == source_code:
        target_code = "th" if source_code == "zh" else "zh"
    return source_code, target_code


def get_relay_code(language_code: str) -> str:
    """Language code for the Google Translate relay"""
    code = normalize_language_code(language_code)
    return RELAY_CODES.get(code, language_code)


def get_nllb_code(language_code: str) -> str:
    """FLORES-200 code for NLLB translation models"""
    code = normalize_language_code(language_code)
    return NLLB_CODES.get(code, language_code)
