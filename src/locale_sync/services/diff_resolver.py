"""
Per-key translation decisions
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from locale_sync.utils.validators import MODE_FULL, MODE_MISSING

SKIP = 'skip'
TRANSLATE = 'translate'
OVERRIDE = 'override'

RETRANSLATE_MARKER = '!'


@dataclass(frozen=True)
class Decision:
    """What to do with one source key"""
    action: str
    value: Optional[str] = None


SKIP_DECISION = Decision(SKIP)
TRANSLATE_DECISION = Decision(TRANSLATE)


def find_missing_keys(source_items: Mapping[str, str], target_items: Mapping[str, str]) -> frozenset:
    """Source keys that have no entry in the target"""
    return frozenset(key for key in source_items if key not in target_items)


def is_marked_for_retranslation(value: str) -> bool:
    """True if a target value carries the leading '!' redo marker"""
    return value.startswith(RETRANSLATE_MARKER)


def needs_translation(
    key: str,
    source_value: str,
    target_items: Mapping[str, str],
    missing_keys: frozenset,
    override_items: Optional[Mapping[str, str]],
    mode: str
) -> Decision:
    """
    Decide whether a source key must be translated

    Rules, first match wins:
      1. empty source value -> skip
      2. key absent from the target -> translate
      3. key present in the override map -> override with its value
      4. full mode: translate if the target value is empty or marked with '!'
         missing mode: translate only keys that were missing before the run

    Args:
        key: Source key
        source_value: Source text for the key
        target_items: Current target mapping
        missing_keys: Keys missing from the target when the run started
        override_items: Authoritative values, or None
        mode: 'full' or 'missing'
    """
    if not source_value:
        return SKIP_DECISION

    if key not in target_items:
        return TRANSLATE_DECISION

    if override_items is not None and key in override_items:
        return Decision(OVERRIDE, override_items[key])

    if mode == MODE_FULL:
        current = target_items[key]
        if not current or is_marked_for_retranslation(current):
            return TRANSLATE_DECISION
        return SKIP_DECISION

    if mode == MODE_MISSING:
        return TRANSLATE_DECISION if key in missing_keys else SKIP_DECISION

    raise ValueError(f"Unknown translation mode: {mode}")
