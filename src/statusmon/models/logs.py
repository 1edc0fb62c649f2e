"""
Log retrieval data models.
"""

from dataclasses import dataclass
from enum import Enum


class LogScope(Enum):
    SYSTEM = "system"
    USER = "user"


class LogOutcome(Enum):
    """Classification of one journal run; EMPTY means nothing was retrieved yet."""
    OK = "ok"
    PERMISSION_DENIED = "permission_denied"
    CANCELLED = "cancelled"
    EMPTY = "empty"
    ERROR = "error"


class RetrievalState(Enum):
    """States of one log retrieval; every request ends back in IDLE."""
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    PERMISSION_DENIED = "permission_denied"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class LogQuery:
    """
    Parameters of a journal query, mutated in place by the requesting panel.

    filter_id indexes the per-scope filter table, priority_id the priority
    table (0 means no priority filter).
    """

    filter_id: int = 0
    priority_id: int = 0
    max_lines: int = 200


@dataclass(frozen=True)
class LogResult:
    text: str
    outcome: LogOutcome


@dataclass(frozen=True)
class LogsData:
    """The pair of texts published to log subscribers."""

    system_logs: str
    user_logs: str
