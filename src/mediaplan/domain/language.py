"""Language tag normalization.

Stream language tags are compared as ISO 639-2/B codes (the form used by
Matroska and ffmpeg). Probed tags arrive as 639-1, 639-2/B, 639-2/T or
occasionally as an English language name.
"""

import logging

from mediaplan.domain.models import UNDETERMINED_LANGUAGE as UNDETERMINED

logger = logging.getLogger(__name__)

# ISO 639-1 to ISO 639-2/B for the languages commonly found on discs
_ISO_639_1_TO_639_2B: dict[str, str] = {
    "ar": "ara",  # Arabic
    "bg": "bul",  # Bulgarian
    "ca": "cat",  # Catalan
    "cs": "cze",  # Czech
    "da": "dan",  # Danish
    "de": "ger",  # German
    "el": "gre",  # Greek
    "en": "eng",  # English
    "es": "spa",  # Spanish
    "et": "est",  # Estonian
    "fa": "per",  # Persian
    "fi": "fin",  # Finnish
    "fr": "fre",  # French
    "he": "heb",  # Hebrew
    "hi": "hin",  # Hindi
    "hr": "hrv",  # Croatian
    "hu": "hun",  # Hungarian
    "id": "ind",  # Indonesian
    "is": "ice",  # Icelandic
    "it": "ita",  # Italian
    "ja": "jpn",  # Japanese
    "ko": "kor",  # Korean
    "lt": "lit",  # Lithuanian
    "lv": "lav",  # Latvian
    "ms": "may",  # Malay
    "nl": "dut",  # Dutch
    "no": "nor",  # Norwegian
    "pl": "pol",  # Polish
    "pt": "por",  # Portuguese
    "ro": "rum",  # Romanian
    "ru": "rus",  # Russian
    "sk": "slo",  # Slovak
    "sl": "slv",  # Slovenian
    "sr": "srp",  # Serbian
    "sv": "swe",  # Swedish
    "ta": "tam",  # Tamil
    "te": "tel",  # Telugu
    "th": "tha",  # Thai
    "tr": "tur",  # Turkish
    "uk": "ukr",  # Ukrainian
    "vi": "vie",  # Vietnamese
    "zh": "chi",  # Chinese
}

# ISO 639-2/T codes that differ from their bibliographic form
_ISO_639_2T_TO_639_2B: dict[str, str] = {
    "ces": "cze",
    "deu": "ger",
    "ell": "gre",
    "fas": "per",
    "fra": "fre",
    "isl": "ice",
    "msa": "may",
    "nld": "dut",
    "ron": "rum",
    "slk": "slo",
    "zho": "chi",
}

_SPECIAL_CODES = frozenset({UNDETERMINED, "mis", "mul", "zxx"})

_NAME_TO_639_2B: dict[str, str] = {
    "english": "eng",
    "french": "fre",
    "german": "ger",
    "italian": "ita",
    "japanese": "jpn",
    "korean": "kor",
    "chinese": "chi",
    "spanish": "spa",
    "portuguese": "por",
    "russian": "rus",
}


def normalize_language(code: str | None) -> str:
    """Normalize a language tag to ISO 639-2/B.

    Args:
        code: Tag as reported by the probe, or None.

    Returns:
        The 639-2/B code, or "und" for missing or unrecognized tags.

    Examples:
        >>> normalize_language("de")
        'ger'
        >>> normalize_language("deu")
        'ger'
        >>> normalize_language(None)
        'und'
    """
    if not code:
        return UNDETERMINED

    code = code.lower().strip()
    if code in _SPECIAL_CODES:
        return code
    if len(code) == 2:
        converted = _ISO_639_1_TO_639_2B.get(code)
    elif len(code) == 3 and code.isalpha():
        converted = _ISO_639_2T_TO_639_2B.get(code, code)
    else:
        converted = _NAME_TO_639_2B.get(code)

    if converted is None:
        logger.debug("Unrecognized language tag '%s', using '%s'", code, UNDETERMINED)
        return UNDETERMINED
    return converted
