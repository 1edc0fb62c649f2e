"""
Long-lived services: privilege broker and log retrieval.

Both are constructed once at start-up and passed explicitly to the
components that need them.
"""

from .logs import (
    PRIORITIES,
    SYSTEM_FILTERS,
    USER_FILTERS,
    LogService,
    build_journal_args,
    classify_journal_output,
)
from .privilege import CANCELLATION_PHRASES, PrivilegeBroker, is_cancellation

__all__ = [
    "CANCELLATION_PHRASES",
    "LogService",
    "PRIORITIES",
    "PrivilegeBroker",
    "SYSTEM_FILTERS",
    "USER_FILTERS",
    "build_journal_args",
    "classify_journal_output",
    "is_cancellation",
]
