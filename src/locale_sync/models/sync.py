"""
Synchronization records and results
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FilePair:
    """One (language, file type) synchronization unit"""
    source_file: str
    target_file: str
    source_lang: str
    target_lang: str
    file_type: str

    @property
    def target_exists(self) -> bool:
        return os.path.exists(self.target_file)

    def load(self):
        """Load the (source, target) documents of this pair"""
        from locale_sync.services.directory_service import load_pair
        return load_pair(self)


@dataclass
class FailureRecord:
    """A key whose translation did not succeed"""
    key: str
    source_text: str
    target_lang: str
    cause: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'source_text': self.source_text,
            'target_lang': self.target_lang,
            'cause': self.cause
        }


@dataclass
class SyncResult:
    """Outcome of synchronizing one target document"""
    path: str
    total: int = 0
    translated: int = 0
    overridden: int = 0
    copied: int = 0
    failures: List[FailureRecord] = field(default_factory=list)
    failed_keys_file: Optional[str] = None

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def failed_keys(self) -> List[str]:
        return [failure.key for failure in self.failures]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'total': self.total,
            'translated': self.translated,
            'failed': self.failed,
            'overridden': self.overridden,
            'copied': self.copied,
            'failed_keys_file': self.failed_keys_file
        }


@dataclass
class RunSummary:
    """Aggregated outcome of one run over many file pairs"""
    total_files: int = 0
    results: List[SyncResult] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def completed_files(self) -> int:
        return len(self.results)

    @property
    def total_keys(self) -> int:
        return sum(result.total for result in self.results)

    @property
    def translated_keys(self) -> int:
        return sum(result.translated for result in self.results)

    @property
    def failed_keys(self) -> int:
        return sum(result.failed for result in self.results)

    def add_result(self, result: SyncResult):
        self.results.append(result)

    def add_error(self, path: str, error: Exception):
        self.errors[path] = str(error)
