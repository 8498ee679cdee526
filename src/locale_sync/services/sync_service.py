"""
Synchronization of target locale documents from a source document
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from locale_sync.models.document import LocaleDocument, decode_string_array, encode_string_array
from locale_sync.models.sync import FailureRecord, FilePair, RunSummary, SyncResult
from locale_sync.services.diff_resolver import OVERRIDE, TRANSLATE, find_missing_keys, needs_translation
from locale_sync.services.directory_service import load_pair
from locale_sync.utils.errors import DocumentIOError, SourceLoadError, TranslationExhausted
from locale_sync.utils.file_utils import FileManager
from locale_sync.utils.logging_setup import TRANSLATION_ERRORS_LOGGER
from locale_sync.utils.progress import ProgressCallback
from locale_sync.utils.validators import MODE_MISSING, InputValidator

logger = logging.getLogger(__name__)
error_logger = logging.getLogger(TRANSLATION_ERRORS_LOGGER)

EMPTY_TRANSLATION = "Empty translation received"


def _blank(text: str) -> bool:
    return not text or not text.strip()


class SyncStrategy:
    """
    Shared synchronization flow

    Subclasses decide how selected keys reach the translator by implementing
    `_submit` (called once per selected key) and `_drain` (called once after
    the last key).
    """

    def __init__(
        self,
        translator,
        file_manager: Optional[FileManager] = None,
        progress: Optional[ProgressCallback] = None
    ):
        self.translator = translator
        self.file_manager = file_manager or FileManager()
        self.progress = progress

    async def synchronize(
        self,
        source: LocaleDocument,
        target: LocaleDocument,
        override: Optional[LocaleDocument] = None,
        mode: str = MODE_MISSING
    ) -> SyncResult:
        """
        Bring `target` up to date with `source` and write it to its path

        Args:
            source: Source language document
            target: Target document, updated in place
            override: Authoritative values that replace translation
            mode: 'full' or 'missing'

        Returns:
            SyncResult with counts and failure records

        Raises:
            DocumentIOError: the target could not be written
        """
        ok, message = InputValidator.validate_mode(mode)
        if not ok:
            raise ValueError(message)

        missing_keys = find_missing_keys(source.items, target.items)
        if missing_keys:
            logger.info(f"Found {len(missing_keys)} missing keys for {target.path}")

        override_items = override.items if override is not None else None
        result = SyncResult(path=target.path, total=len(source.items))

        processed = 0
        for key, value in list(source.items.items()):
            if not source.is_text(key):
                # Numbers, booleans and null are copied as-is, never translated
                if key not in target.items:
                    target.copy_value(key, source)
                    result.copied += 1
                processed += 1
                self._report(target.path, processed, result)
                continue

            decision = needs_translation(key, value, target.items, missing_keys, override_items, mode)
            if decision.action == OVERRIDE:
                target.set(key, decision.value)
                result.overridden += 1
            elif decision.action == TRANSLATE:
                await self._submit(key, value, target, result)

            processed += 1
            self._report(target.path, processed, result)

        await self._drain(target, result)
        self._persist(target, result)
        return result

    async def _submit(self, key: str, value: str, target: LocaleDocument, result: SyncResult):
        raise NotImplementedError

    async def _drain(self, target: LocaleDocument, result: SyncResult):
        pass

    def _report(self, path: str, processed: int, result: SyncResult):
        if self.progress is not None:
            self.progress(path, processed, result.total, result.translated)

    def _record_failure(self, result: SyncResult, key: str, source_text: str, target_lang: str, cause):
        failure = FailureRecord(key=key, source_text=source_text, target_lang=target_lang, cause=str(cause))
        result.failures.append(failure)
        logger.warning(f"Failed to translate key {key}: {failure.cause}")
        error_logger.error(
            f"Key: {key}\nSource: {source_text}\nTarget Language: {target_lang}\nError: {failure.cause}\n---"
        )

    def _persist(self, target: LocaleDocument, result: SyncResult):
        """Write the target even when some keys failed"""
        target.save()
        if result.has_failures:
            logger.warning(
                f"Failed to translate {result.failed} keys in {target.path}. "
                "You may want to run the command again or translate these manually."
            )
            result.failed_keys_file = self.file_manager.write_failed_keys(target.path, result.failed_keys)
        logger.info(
            f"{target.path}: {result.total} keys (Translated: {result.translated}, "
            f"Overridden: {result.overridden}, Failed: {result.failed})"
        )


class SingleItemStrategy(SyncStrategy):
    """One translation request per value (per element for array values)"""

    async def _submit(self, key: str, value: str, target: LocaleDocument, result: SyncResult):
        language = target.language
        elements = decode_string_array(value)

        if elements is None:
            try:
                translated = await self.translator.translate(value, language)
            except TranslationExhausted as e:
                self._record_failure(result, key, value, language, e)
                return
            if _blank(translated):
                self._record_failure(result, key, value, language, EMPTY_TRANSLATION)
                return
            target.set(key, translated)
            result.translated += 1
            return

        translated_elements = []
        for element in elements:
            try:
                translated = await self.translator.translate(element, language)
            except TranslationExhausted as e:
                self._record_failure(result, key, element, language, e)
                return
            if _blank(translated):
                self._record_failure(result, key, element, language, EMPTY_TRANSLATION)
                return
            translated_elements.append(translated)

        target.set(key, encode_string_array(translated_elements))
        result.translated += 1


@dataclass
class _PendingEntry:
    key: str
    value: str
    elements: List[str]
    is_array: bool


class BatchStrategy(SyncStrategy):
    """
    Groups selected values into batches of up to `batch_size` texts

    Array values contribute one text per element and are kept whole inside a
    single batch, so a batch only exceeds `batch_size` when one array alone
    is longer than that.
    """

    def __init__(self, translator, batch_size: int, **kwargs):
        if batch_size <= 0:
            raise ValueError("Batch size must be positive for batch translation")
        super().__init__(translator, **kwargs)
        self.batch_size = batch_size
        self._pending: List[_PendingEntry] = []

    @property
    def pending_texts(self) -> int:
        return sum(len(entry.elements) for entry in self._pending)

    async def synchronize(self, source, target, override=None, mode=MODE_MISSING) -> SyncResult:
        self._pending = []
        return await super().synchronize(source, target, override, mode)

    async def _submit(self, key: str, value: str, target: LocaleDocument, result: SyncResult):
        elements = decode_string_array(value)
        entry = _PendingEntry(
            key=key,
            value=value,
            elements=elements if elements is not None else [value],
            is_array=elements is not None
        )

        if self._pending and self.pending_texts + len(entry.elements) > self.batch_size:
            await self._flush(target, result)

        self._pending.append(entry)
        if self.pending_texts >= self.batch_size:
            await self._flush(target, result)

    async def _drain(self, target: LocaleDocument, result: SyncResult):
        if self._pending:
            await self._flush(target, result)

    async def _flush(self, target: LocaleDocument, result: SyncResult):
        entries, self._pending = self._pending, []
        if not entries:
            return

        language = target.language
        texts = [text for entry in entries for text in entry.elements]

        try:
            translations = await self.translator.batch_translate(texts, language)
        except TranslationExhausted as e:
            logger.error(f"Error translating batch of {len(texts)} texts: {e}")
            for entry in entries:
                self._record_failure(result, entry.key, entry.value, language, e)
            return

        offset = 0
        for entry in entries:
            chunk = translations[offset:offset + len(entry.elements)]
            offset += len(entry.elements)

            if len(chunk) != len(entry.elements) or any(_blank(text) for text in chunk):
                self._record_failure(result, entry.key, entry.value, language, EMPTY_TRANSLATION)
                continue

            chunk = [text.strip() for text in chunk]
            target.set(entry.key, encode_string_array(chunk) if entry.is_array else chunk[0])
            result.translated += 1


def create_strategy(
    translator,
    batch_size: int = 0,
    file_manager: Optional[FileManager] = None,
    progress: Optional[ProgressCallback] = None
) -> SyncStrategy:
    """
    Pick the strategy for a batch size: 0 -> one request per value, >0 -> batches

    Raises:
        ValueError: negative batch size
    """
    ok, message = InputValidator.validate_batch_size(batch_size)
    if not ok:
        raise ValueError(message)

    if batch_size == 0:
        return SingleItemStrategy(translator, file_manager=file_manager, progress=progress)
    return BatchStrategy(translator, batch_size, file_manager=file_manager, progress=progress)


class SyncService:
    """Runs a strategy over file pairs, one document at a time"""

    def __init__(
        self,
        strategy: SyncStrategy,
        mode: str = MODE_MISSING,
        override: Optional[LocaleDocument] = None,
        on_result: Optional[Callable[[SyncResult], None]] = None
    ):
        self.strategy = strategy
        self.mode = mode
        self.override = override
        self.on_result = on_result

    async def sync_pair(self, pair: FilePair) -> SyncResult:
        """Load, synchronize and write one pair"""
        logger.info(f"Processing: {pair.source_file} -> {pair.target_file}")
        source, target = load_pair(pair)
        return await self.strategy.synchronize(source, target, self.override, self.mode)

    async def run(self, pairs: List[FilePair]) -> RunSummary:
        """
        Synchronize every pair in order

        A target that cannot be read or written is recorded in the summary and
        skipped; a source that cannot be loaded stops the run.

        Raises:
            SourceLoadError: a source document could not be loaded
        """
        summary = RunSummary(total_files=len(pairs))

        for pair in pairs:
            try:
                result = await self.sync_pair(pair)
            except SourceLoadError:
                raise
            except DocumentIOError as e:
                logger.error(f"Error processing pair {pair.target_file}: {e}")
                summary.add_error(pair.target_file, e)
                continue

            summary.add_result(result)
            if self.on_result is not None:
                self.on_result(result)

        return summary
