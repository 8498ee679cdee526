"""
Language display names used in translation prompts
"""

LANGUAGE_NAMES = {
    'ar': 'Arabic',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'cs': 'Czech',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'fa': 'Persian',
    'fi': 'Finnish',
    'fr': 'French',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'id': 'Indonesian',
    'it': 'Italian',
    'ja': 'Japanese',
    'ko': 'Korean',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'ms': 'Malay',
    'nb': 'Norwegian Bokmål',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'ro': 'Romanian',
    'ru': 'Russian',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'sr': 'Serbian',
    'sv': 'Swedish',
    'th': 'Thai',
    'tr': 'Turkish',
    'uk': 'Ukrainian',
    'vi': 'Vietnamese',
    'zh': 'Chinese',
}

REGION_NAMES = {
    'BR': 'Brazil',
    'CN': 'China',
    'GB': 'United Kingdom',
    'HANS': 'Simplified',
    'HANT': 'Traditional',
    'HK': 'Hong Kong',
    'MX': 'Mexico',
    'PT': 'Portugal',
    'TW': 'Taiwan',
    'US': 'United States',
}


def language_display_name(code: str) -> str:
    """
    Get an English display name for a language code

    Args:
        code: Language code such as 'fr', 'pt-BR' or 'zh_Hant'

    Returns:
        Display name like 'Portuguese (Brazil)', or the code itself if unknown
    """
    if not code:
        return code

    parts = code.replace('_', '-').split('-')
    base = LANGUAGE_NAMES.get(parts[0].lower())
    if base is None:
        return code

    if len(parts) == 1:
        return base

    region = REGION_NAMES.get(parts[1].upper(), parts[1])
    return f"{base} ({region})"
