"""
File management utilities
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

FAILED_KEYS_PREFIX = 'failed_keys_'


class FileManager:
    """File helpers for sidecar reports and target directories"""

    def __init__(self, output_dir: Optional[str] = None):
        self.output_dir = output_dir or os.getcwd()

    def failed_keys_path(self, target_path: str) -> str:
        """Sidecar path for a target file: failed_keys_<basename>.txt"""
        filename = f"{FAILED_KEYS_PREFIX}{os.path.basename(target_path)}.txt"
        return os.path.join(self.output_dir, filename)

    def write_failed_keys(self, target_path: str, keys: Iterable[str]) -> str:
        """
        Write one failed key per line next to the configured output directory

        Returns:
            Path of the written sidecar file
        """
        file_path = self.failed_keys_path(target_path)
        self.ensure_directory(os.path.dirname(file_path))
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(keys))
        logger.info(f"Full list of failed keys saved to {file_path}")
        return file_path

    def read_failed_keys(self, target_path: str) -> List[str]:
        """Read back a sidecar file; empty list when there is none"""
        file_path = self.failed_keys_path(target_path)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return [line for line in f.read().splitlines() if line]
        except FileNotFoundError:
            return []

    def ensure_directory(self, directory: str):
        """Ensure directory exists"""
        if directory:
            os.makedirs(directory, exist_ok=True)

    def write_text(self, file_path: str, content: str):
        """Write a UTF-8 text file, creating parent directories"""
        self.ensure_directory(os.path.dirname(file_path))
        Path(file_path).write_text(content, encoding='utf-8')
