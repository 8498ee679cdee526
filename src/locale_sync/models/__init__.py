"""
Data models for locale synchronization
"""

from .document import LocaleDocument, decode_string_array, encode_string_array
from .language import language_display_name
from .sync import FilePair, FailureRecord, SyncResult, RunSummary

__all__ = [
    'LocaleDocument', 'decode_string_array', 'encode_string_array', 'language_display_name',
    'FilePair', 'FailureRecord', 'SyncResult', 'RunSummary'
]
