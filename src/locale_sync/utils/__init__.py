"""
Utility modules for locale-sync
"""

from .validators import InputValidator
from .file_utils import FileManager
from .retry import classify_error, backoff_delay
from .progress import ConsoleProgress

__all__ = ['InputValidator', 'FileManager', 'classify_error', 'backoff_delay', 'ConsoleProgress']
