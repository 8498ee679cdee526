"""
Pytest configuration and fixtures
"""

import json
import pytest
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import MagicMock

from locale_sync.config.settings import TranslatorSettings, SyncSettings, Settings
from locale_sync.services.translation_service import TranslationService
from locale_sync.utils.errors import TranslationExhausted
from locale_sync.utils.file_utils import FileManager


class FakeTranslator:
    """Deterministic translator: prefixes every text"""

    def __init__(
        self,
        prefix: str = "T:",
        fail_on: Optional[set] = None,
        empty_on: Optional[set] = None,
        fail_batches: Optional[set] = None
    ):
        self.prefix = prefix
        self.fail_on = fail_on or set()
        self.empty_on = empty_on or set()
        self.fail_batches = fail_batches or set()
        self.calls: List[tuple] = []
        self.batch_calls: List[List[str]] = []

    def _translate_one(self, text: str) -> str:
        if text in self.empty_on:
            return ""
        return f"{self.prefix}{text}"

    async def translate(self, text: str, language: str) -> str:
        self.calls.append((text, language))
        if text in self.fail_on:
            raise TranslationExhausted(f"failed to translate after 3 attempts: {text}")
        return self._translate_one(text)

    async def batch_translate(self, texts: List[str], language: str) -> List[str]:
        self.batch_calls.append(list(texts))
        if len(self.batch_calls) in self.fail_batches or any(t in self.fail_on for t in texts):
            raise TranslationExhausted("failed to batch translate after 3 attempts")
        return [self._translate_one(t) for t in texts]

    @property
    def total_calls(self) -> int:
        return len(self.calls) + len(self.batch_calls)


def make_completion(content: Optional[str]) -> MagicMock:
    """Build an object shaped like a chat completion response"""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def write_locale(path: Path, data: Dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def fake_translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def translator_settings() -> TranslatorSettings:
    """Translator settings without backoff delays"""
    return TranslatorSettings(
        api_keys=["test_key_1", "test_key_2"],
        base_url="https://api.openai.com/v1",
        backoff_base=0.0
    )


@pytest.fixture
def test_settings(translator_settings: TranslatorSettings, tmp_path: Path) -> Settings:
    return Settings(
        translator=translator_settings,
        sync=SyncSettings(
            root_dir=str(tmp_path / "locales"),
            source_lang="en",
            failed_keys_dir=str(tmp_path / "reports"),
            log_dir=None
        )
    )


@pytest.fixture
def translation_service(translator_settings: TranslatorSettings) -> TranslationService:
    return TranslationService(translator_settings)


@pytest.fixture
def file_manager(tmp_path: Path) -> FileManager:
    return FileManager(str(tmp_path / "reports"))


@pytest.fixture
def locale_root(tmp_path: Path) -> Path:
    """
    Locale tree:
      en/common.json, en/errors.json   (source)
      fr/common.json                   (partially translated)
      de/                              (empty)
    """
    root = tmp_path / "locales"
    write_locale(root / "en" / "common.json", {
        "greeting": "Hello",
        "farewell": "Goodbye",
        "nested": {"welcome": "Welcome", "thanks": "Thank you"},
        "array": ["one", "two"],
        "blank": ""
    })
    write_locale(root / "en" / "errors.json", {"not_found": "Not found"})
    write_locale(root / "fr" / "common.json", {"greeting": "Bonjour"})
    (root / "de").mkdir(parents=True)
    (root / "en" / "README.txt").write_text("not a locale file", encoding="utf-8")
    return root


@pytest.fixture
def translator_factory():
    """FakeTranslator class, for tests that need custom failure sets"""
    return FakeTranslator


@pytest.fixture
def completion_factory():
    return make_completion


@pytest.fixture
def locale_writer():
    return write_locale
