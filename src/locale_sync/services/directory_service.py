"""
Locale directory scanning and file pairing
"""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from locale_sync.models.document import LocaleDocument
from locale_sync.models.sync import FilePair
from locale_sync.utils.errors import DirectoryScanError, DocumentIOError, SourceLoadError

logger = logging.getLogger(__name__)


@dataclass
class DirectoryStructure:
    """Languages and file types found under a locale root"""
    root_dir: str
    source_lang: str
    languages: List[str] = field(default_factory=list)
    file_types: List[str] = field(default_factory=list)
    language_dirs: Dict[str, str] = field(default_factory=dict)
    files_by_type: Dict[str, List[str]] = field(default_factory=dict)
    language_files: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def source_dir(self) -> str:
        return self.language_dirs[self.source_lang]

    def _pair(self, lang: str, file_type: str) -> FilePair:
        return FilePair(
            source_file=os.path.join(self.source_dir, file_type),
            target_file=os.path.join(self.language_dirs[lang], file_type),
            source_lang=self.source_lang,
            target_lang=lang,
            file_type=file_type
        )

    def get_pairs(self) -> List[FilePair]:
        """
        Pairs of source and target files to process

        A pair is produced for every target language and every file type of
        the source directory, whether or not the target file exists yet.
        """
        pairs = []
        for lang in self.languages:
            if lang == self.source_lang:
                continue
            for file_type in self.file_types:
                pair = self._pair(lang, file_type)
                if not os.path.exists(pair.source_file):
                    logger.debug(f"Source file {pair.source_file} disappeared, skipping")
                    continue
                pairs.append(pair)
        return pairs

    def find_missing_pairs(self) -> List[FilePair]:
        """Pairs whose target file does not exist"""
        return [pair for pair in self.get_pairs() if not pair.target_exists]

    def target_pairs(self, target_langs: Optional[Iterable[str]] = None) -> List[FilePair]:
        """Pairs restricted to the given languages (all languages when empty)"""
        allowed = set(target_langs or [])
        pairs = self.get_pairs()
        if not allowed:
            return pairs
        return [pair for pair in pairs if pair.target_lang in allowed]


def _matches(name: str, include: Iterable[str], exclude: Iterable[str]) -> bool:
    if not any(fnmatch.fnmatch(name, pattern) for pattern in include):
        return False
    return not any(fnmatch.fnmatch(name, pattern) for pattern in exclude)


def _json_files(directory: str) -> List[str]:
    return sorted(
        entry.name for entry in os.scandir(directory)
        if entry.is_file() and entry.name.endswith('.json')
    )


def scan_directory(
    root_dir: str,
    source_lang: str,
    include_files: Optional[List[str]] = None,
    exclude_files: Optional[List[str]] = None
) -> DirectoryStructure:
    """
    Scan a locale root laid out as root/<language>/<file type>.json

    Args:
        root_dir: Directory holding one subdirectory per language
        source_lang: Name of the source language subdirectory
        include_files: Glob patterns a file type must match (default '*.json')
        exclude_files: Glob patterns that remove a file type

    Returns:
        DirectoryStructure describing languages and file types

    Raises:
        DirectoryScanError: root or source language directory not found
    """
    if not os.path.isdir(root_dir):
        raise DirectoryScanError(f"directory {root_dir} does not exist")

    include = include_files or ['*.json']
    exclude = exclude_files or []

    ds = DirectoryStructure(root_dir=root_dir, source_lang=source_lang)

    try:
        for entry in sorted(os.scandir(root_dir), key=lambda e: e.name):
            if entry.is_dir():
                ds.languages.append(entry.name)
                ds.language_dirs[entry.name] = os.path.join(root_dir, entry.name)
                ds.language_files[entry.name] = []

        if source_lang not in ds.language_dirs:
            raise DirectoryScanError(f"source language directory '{source_lang}' not found")

        for name in _json_files(ds.source_dir):
            if _matches(name, include, exclude):
                ds.file_types.append(name)
                ds.files_by_type[name] = []

        for lang, lang_dir in ds.language_dirs.items():
            for name in _json_files(lang_dir):
                file_path = os.path.join(lang_dir, name)
                ds.language_files[lang].append(file_path)
                if name in ds.files_by_type:
                    ds.files_by_type[name].append(file_path)
    except OSError as e:
        raise DirectoryScanError(f"error scanning {root_dir}: {e}") from e

    logger.info(f"Found {len(ds.languages)} languages and {len(ds.file_types)} file types in {root_dir}")
    return ds


def language_code_from_path(file_path: str) -> str:
    """Language code of a flat-layout file: 'locales/pt-BR.json' -> 'pt-BR'"""
    return os.path.splitext(os.path.basename(file_path))[0]


def scan_flat_directory(directory: str, source_file: str) -> List[FilePair]:
    """
    Pair a source file with its sibling locale files in a flat directory

    Every `<code>.json` file in `directory` other than the source becomes a
    target. Non-JSON files and files that cannot be parsed are skipped with
    a warning.

    Raises:
        DirectoryScanError: the directory cannot be listed
    """
    if not os.path.isdir(directory):
        raise DirectoryScanError(f"directory {directory} does not exist")

    source_name = os.path.basename(source_file).lower()
    source_lang = language_code_from_path(source_file)

    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        raise DirectoryScanError(f"error scanning {directory}: {e}") from e

    pairs = []
    for entry in entries:
        if not entry.is_file() or entry.name.lower() == source_name:
            continue

        if os.path.splitext(entry.name)[1].lower() != '.json':
            logger.warning(f"File {entry.name} is not a JSON file, skipping")
            continue

        target_lang = language_code_from_path(entry.name)
        try:
            LocaleDocument.parse_file(entry.path, code=target_lang)
        except DocumentIOError as e:
            logger.warning(f"Parse file failed: {e}, skipping")
            continue

        pairs.append(FilePair(
            source_file=source_file,
            target_file=os.path.join(directory, entry.name),
            source_lang=source_lang,
            target_lang=target_lang,
            file_type=entry.name
        ))

    logger.info(f"Found {len(pairs)} target files in {directory}")
    return pairs


def ensure_target_directories(pairs: Iterable[FilePair]) -> List[str]:
    """
    Create missing parent directories of target files

    Returns:
        Directories that were created
    """
    created = []
    for pair in pairs:
        target_dir = os.path.dirname(pair.target_file)
        if target_dir and not os.path.isdir(target_dir):
            logger.info(f"Creating directory: {target_dir}")
            os.makedirs(target_dir, exist_ok=True)
            created.append(target_dir)
    return created


def load_pair(pair: FilePair) -> Tuple[LocaleDocument, LocaleDocument]:
    """
    Load the source and target documents of a pair

    A target file that does not exist yields an empty document bound to the
    target path and language, so it can be written after synchronization.

    Raises:
        SourceLoadError: the source file cannot be parsed
        DocumentIOError: the target file exists but cannot be parsed
    """
    try:
        source = LocaleDocument.parse_file(pair.source_file, code=pair.source_lang)
    except DocumentIOError as e:
        raise SourceLoadError(f"error parsing source file {pair.source_file}: {e}", pair.source_file) from e

    if not os.path.exists(pair.target_file):
        target = LocaleDocument.empty(pair.target_file, pair.target_lang)
    else:
        target = LocaleDocument.parse_file(pair.target_file, code=pair.target_lang)

    return source, target
