"""
Locale document model
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from locale_sync.models.language import language_display_name
from locale_sync.utils.errors import DocumentIOError

logger = logging.getLogger(__name__)

KEY_SEPARATOR = '/'


def decode_string_array(value: str) -> Optional[List[str]]:
    """
    Decode a value stored as a JSON array of strings

    Returns:
        The list of strings, or None when the value is a plain string
    """
    if not (value.startswith('[') and value.endswith(']')):
        return None
    try:
        decoded = json.loads(value)
    except ValueError:
        return None
    if not isinstance(decoded, list) or not all(isinstance(item, str) for item in decoded):
        return None
    return decoded


def encode_string_array(values: List[str]) -> str:
    """Encode a list of strings in the storage form of array values"""
    return json.dumps(values, ensure_ascii=False)


def _flatten(node: Dict[str, Any], prefix: str, items: Dict[str, str], scalars: set):
    for key, value in node.items():
        path = f"{prefix}{KEY_SEPARATOR}{key}" if prefix else key
        if path in items:
            raise ValueError(f"key '{path}' is defined more than once")
        if isinstance(value, dict):
            _flatten(value, path, items, scalars)
        elif isinstance(value, str):
            items[path] = value
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            items[path] = encode_string_array(value)
        else:
            # Numbers, booleans, null and mixed arrays keep their JSON text
            items[path] = json.dumps(value, ensure_ascii=False)
            scalars.add(path)


def _unflatten(items: Dict[str, str], scalars: set) -> Dict[str, Any]:
    tree: Dict[str, Any] = {}
    for path in sorted(items):
        value = items[path]
        if path in scalars:
            try:
                leaf: Any = json.loads(value)
            except ValueError:
                leaf = value
        else:
            array = decode_string_array(value)
            leaf = array if array is not None else value

        parts = path.split(KEY_SEPARATOR)
        node = tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = leaf
    return tree


def _find_key_collision(items: Dict[str, str]) -> Optional[str]:
    """A key that is also the parent path of another key, if any"""
    for path in items:
        parts = path.split(KEY_SEPARATOR)
        for end in range(1, len(parts)):
            parent = KEY_SEPARATOR.join(parts[:end])
            if parent in items:
                return parent
    return None


@dataclass
class LocaleDocument:
    """Flattened key -> value content of one locale file"""
    path: str
    code: str
    language: str = ''
    items: Dict[str, str] = field(default_factory=dict)
    scalar_keys: set = field(default_factory=set, repr=False)

    def __post_init__(self):
        if not self.language:
            self.language = language_display_name(self.code)

    @classmethod
    def empty(cls, path: str, code: str, language: str = '') -> 'LocaleDocument':
        """Document for a locale file that does not exist yet"""
        return cls(path=path, code=code, language=language)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], path: str = '', code: str = '', language: str = '') -> 'LocaleDocument':
        """
        Create a document from a nested JSON-like mapping

        Raises:
            DocumentIOError: two entries flatten onto the same key, or a value
                key is also the parent of another key (e.g. "a" and "a/b")
        """
        items: Dict[str, str] = {}
        scalars: set = set()
        try:
            _flatten(data, '', items, scalars)
        except ValueError as e:
            raise DocumentIOError(f"error flattening {path or 'document'}: {e}", path) from e

        collision = _find_key_collision(items)
        if collision is not None:
            raise DocumentIOError(
                f"error flattening {path or 'document'}: key '{collision}' is both a value and a parent of other keys",
                path
            )
        return cls(path=path, code=code, language=language, items=items, scalar_keys=scalars)

    @classmethod
    def parse_file(cls, path: str, code: str = '', language: str = '') -> 'LocaleDocument':
        """
        Parse a locale file

        Args:
            path: Path to a JSON object file
            code: Language code of the document
            language: Display name; derived from the code when omitted

        Raises:
            DocumentIOError: file missing, unreadable or not a JSON object
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise DocumentIOError(f"error parsing file {path}: {e}", path) from e

        if not isinstance(data, dict):
            raise DocumentIOError(f"error parsing file {path}: top level is not a JSON object", path)

        return cls.from_mapping(data, path=path, code=code, language=language)

    def to_dict(self) -> Dict[str, Any]:
        """Nested mapping with array values restored"""
        return _unflatten(self.items, self.scalar_keys)

    def to_json(self) -> str:
        """Serialize with sorted keys and two-space indentation"""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2, sort_keys=True) + '\n'

    def save(self, path: Optional[str] = None):
        """
        Write the document to its path (or to an explicit one)

        Raises:
            DocumentIOError: the file could not be written
        """
        target_path = path or self.path
        try:
            directory = os.path.dirname(target_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(target_path, 'w', encoding='utf-8') as f:
                f.write(self.to_json())
        except OSError as e:
            raise DocumentIOError(f"error writing file {target_path}: {e}", target_path) from e
        logger.debug(f"Saved {len(self.items)} entries to {target_path}")

    def set(self, key: str, value: str):
        """Store a translated string value"""
        self.items[key] = value
        self.scalar_keys.discard(key)

    def copy_value(self, key: str, other: 'LocaleDocument'):
        """Copy a value from another document, keeping its JSON type"""
        self.items[key] = other.items[key]
        if key in other.scalar_keys:
            self.scalar_keys.add(key)
        else:
            self.scalar_keys.discard(key)

    def is_text(self, key: str) -> bool:
        """True for string and string-array values, which are translatable"""
        return key in self.items and key not in self.scalar_keys

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, key: str) -> bool:
        return key in self.items
