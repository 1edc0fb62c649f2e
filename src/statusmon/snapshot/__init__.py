"""
Host/environment snapshot: fastfetch inventory normalized into display rows.
"""

from .normalizer import (
    HANDLERS,
    NormalizationState,
    normalize,
    normalize_entry,
    parse_fastfetch_json,
)
from .resolver import HostSnapshotResolver

__all__ = [
    "HANDLERS",
    "HostSnapshotResolver",
    "NormalizationState",
    "normalize",
    "normalize_entry",
    "parse_fastfetch_json",
]
