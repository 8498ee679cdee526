"""
Logging configuration
"""

import logging
import os
from datetime import datetime
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
TRANSLATION_ERRORS_LOGGER = 'locale_sync.translation_errors'


def translation_error_log_path(log_dir: str, today: Optional[datetime] = None) -> str:
    """Dated error log path: <log_dir>/translation_errors_YYYY-MM-DD.log"""
    today = today or datetime.now()
    return os.path.join(log_dir, f"translation_errors_{today.strftime('%Y-%m-%d')}.log")


def setup_logging(level: str = 'INFO', log_dir: Optional[str] = 'translation_logs') -> logging.Logger:
    """
    Configure console logging and the dated translation error log

    Args:
        level: Root log level name
        log_dir: Directory for the translation error log; None disables it

    Returns:
        The translation errors logger
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )

    error_logger = logging.getLogger(TRANSLATION_ERRORS_LOGGER)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = translation_error_log_path(log_dir)
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_path)
            for h in error_logger.handlers
        ):
            handler = logging.FileHandler(log_path, encoding='utf-8')
            handler.setFormatter(logging.Formatter('%(asctime)s %(message)s'))
            error_logger.addHandler(handler)
    return error_logger
