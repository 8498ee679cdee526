"""
Input validation utilities
"""

import re
from typing import List, Tuple

MODE_FULL = 'full'
MODE_MISSING = 'missing'
TRANSLATION_MODES = (MODE_FULL, MODE_MISSING)


class InputValidator:
    """Validation of run parameters"""

    @staticmethod
    def validate_mode(mode: str) -> Tuple[bool, str]:
        """Validate translation mode"""
        if mode not in TRANSLATION_MODES:
            return False, f"Invalid translation mode '{mode}'. Must be one of: {', '.join(TRANSLATION_MODES)}"

        return True, ""

    @staticmethod
    def validate_batch_size(batch_size: int) -> Tuple[bool, str]:
        """Validate batch size (0 selects one request per item)"""
        if not isinstance(batch_size, int) or isinstance(batch_size, bool):
            return False, "Batch size must be an integer"

        if batch_size < 0:
            return False, "Batch size cannot be negative"

        return True, ""

    @staticmethod
    def validate_language_code(lang: str) -> Tuple[bool, str]:
        """Validate language code such as 'en', 'pt-BR' or 'zh_Hans'"""
        if not lang or not lang.strip():
            return False, "Language code cannot be empty"

        if not re.match(r'^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$', lang.strip()):
            return False, f"Invalid language code: {lang}"

        return True, ""

    @staticmethod
    def validate_api_keys(keys: List[str]) -> Tuple[bool, str]:
        """Validate the translation service key pool"""
        if not keys:
            return False, "At least one OpenAI API key is required"

        if any(not key or not key.strip() for key in keys):
            return False, "OpenAI API keys cannot be empty"

        return True, ""
