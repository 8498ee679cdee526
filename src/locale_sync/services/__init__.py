"""
Services for locale-sync
"""

from .directory_service import (
    DirectoryStructure, scan_directory, scan_flat_directory, load_pair, ensure_target_directories
)
from .diff_resolver import Decision, needs_translation, find_missing_keys, is_marked_for_retranslation
from .translation_service import TranslationService, parse_batch_response
from .sync_service import SyncStrategy, SingleItemStrategy, BatchStrategy, SyncService, create_strategy
from .status_service import collect_status, render_status_report

__all__ = [
    'DirectoryStructure', 'scan_directory', 'scan_flat_directory', 'load_pair', 'ensure_target_directories',
    'Decision', 'needs_translation', 'find_missing_keys', 'is_marked_for_retranslation',
    'TranslationService', 'parse_batch_response',
    'SyncStrategy', 'SingleItemStrategy', 'BatchStrategy', 'SyncService', 'create_strategy',
    'collect_status', 'render_status_report'
]
