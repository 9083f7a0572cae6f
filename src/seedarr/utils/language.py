"""Language code conversion utilities.

Release naming works on ISO 639-1 (2-letter) codes. MediaInfo usually
reports 2-letter codes, sometimes with a region ("fr-CA"); Radarr reports
language names ("French"); some muxers write ISO 639-2 codes ("fre", "fra").
"""

from typing import Optional

# ISO 639-2 (bibliographic and terminologic) to ISO 639-1
ISO_639_2_TO_639_1 = {
    "eng": "en",
    "spa": "es",
    "fre": "fr",
    "fra": "fr",
    "ger": "de",
    "deu": "de",
    "ita": "it",
    "por": "pt",
    "rus": "ru",
    "jpn": "ja",
    "kor": "ko",
    "chi": "zh",
    "zho": "zh",
    "ara": "ar",
    "hin": "hi",
    "dut": "nl",
    "nld": "nl",
    "pol": "pl",
    "tur": "tr",
    "swe": "sv",
    "dan": "da",
    "nor": "no",
    "fin": "fi",
    "cze": "cs",
    "ces": "cs",
    "hun": "hu",
    "rum": "ro",
    "ron": "ro",
    "tha": "th",
    "vie": "vi",
    "ind": "id",
    "heb": "he",
    "gre": "el",
    "ell": "el",
    "ukr": "uk",
    "cat": "ca",
    "slo": "sk",
    "slk": "sk",
    "hrv": "hr",
    "srp": "sr",
    "bul": "bg",
    "per": "fa",
    "fas": "fa",
}

# Language name to ISO 639-1; Radarr v4 provides names like "French"
LANGUAGE_NAME_TO_639_1 = {
    "english": "en",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "russian": "ru",
    "japanese": "ja",
    "korean": "ko",
    "chinese": "zh",
    "arabic": "ar",
    "hindi": "hi",
    "dutch": "nl",
    "flemish": "nl",
    "polish": "pl",
    "turkish": "tr",
    "swedish": "sv",
    "danish": "da",
    "norwegian": "no",
    "finnish": "fi",
    "czech": "cs",
    "hungarian": "hu",
    "romanian": "ro",
    "thai": "th",
    "vietnamese": "vi",
    "indonesian": "id",
    "hebrew": "he",
    "greek": "el",
    "ukrainian": "uk",
    "catalan": "ca",
    "slovak": "sk",
    "croatian": "hr",
    "serbian": "sr",
    "bulgarian": "bg",
    "persian": "fa",
}

UNDETERMINED = {"", "und", "unknown", "zxx", "mis", "mul"}


def normalize_language_code(value: Optional[str]) -> Optional[str]:
    """Normalize a language code or name to ISO 639-1.

    Args:
        value: Language code ("fr", "fr-CA", "fre") or name ("French")

    Returns:
        2-letter lowercase code, the lowercased input if it is not
        recognised, or None for empty/undetermined languages
    """
    if not value:
        return None

    code = value.strip().lower()
    if code in UNDETERMINED:
        return None

    if code in LANGUAGE_NAME_TO_639_1:
        return LANGUAGE_NAME_TO_639_1[code]

    # Drop region suffixes: fr-CA, pt_BR
    for sep in ("-", "_"):
        if sep in code:
            code = code.split(sep, 1)[0]

    if len(code) == 3:
        return ISO_639_2_TO_639_1.get(code, code)

    return code


def is_english(value: Optional[str]) -> bool:
    """Return True if the code or name denotes English."""
    return normalize_language_code(value) == "en"
