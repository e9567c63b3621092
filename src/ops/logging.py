"""
Logging setup and the process-wide warnings channel.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import List

_global_warnings: List[str] = []
_global_warnings_lock = threading.Lock()


def setup_logging(log_path: str, log_level: str) -> None:
    log_dir = os.path.dirname(log_path)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_path),
            logging.StreamHandler(),
        ],
    )


def add_global_warning(message: str) -> None:
    """
    Record a non-fatal warning and emit it as a WARNING log record.

    Append-only and safe to call from any thread. Repeated messages are
    recorded once.
    """
    with _global_warnings_lock:
        if message not in _global_warnings:
            _global_warnings.append(message)
    logging.warning(message)


def get_global_warnings() -> List[str]:
    """Return a copy of all warnings recorded so far."""
    with _global_warnings_lock:
        return list(_global_warnings)
