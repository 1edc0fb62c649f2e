"""
Loaded kernel module table parser.
"""

import logging
from typing import Iterable, List

from ..models.records import ModuleRecord
from ..validation import ParseMismatchError

logger = logging.getLogger(__name__)

DEFAULT_TOP_MODULES = 10


def parse_lsmod_row(line: str) -> ModuleRecord:
    """
    Parse one `lsmod` row: name, size, use count and an optional used-by list.

    Raises:
        ParseMismatchError: If the row has fewer than three fields or a
            non-numeric size or use count
    """
    fields = line.split()
    if len(fields) < 3:
        raise ParseMismatchError(f"Expected at least 3 fields, got {len(fields)}", line=line)
    try:
        size_bytes = int(fields[1])
        use_count = int(fields[2])
    except ValueError as e:
        raise ParseMismatchError(f"Non-numeric module size or use count: {e}", line=line) from e

    used_by = tuple(name for name in fields[3].split(",") if name) if len(fields) > 3 else ()
    return ModuleRecord(name=fields[0], size_bytes=size_bytes, use_count=use_count, used_by=used_by)


def parse_lsmod(text: str) -> List[ModuleRecord]:
    """Parse the module table, skipping the header and malformed rows."""
    modules: List[ModuleRecord] = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        try:
            modules.append(parse_lsmod_row(line))
        except ParseMismatchError as e:
            logger.debug(f"Skipping lsmod row {e.line!r}: {e}")
    return modules


def rank_modules(modules: Iterable[ModuleRecord], top: int = DEFAULT_TOP_MODULES) -> List[ModuleRecord]:
    """Modules sorted by use count, highest first, truncated to `top`.

    The sort is stable, so modules with equal use counts keep table order.
    """
    return sorted(modules, key=lambda module: module.use_count, reverse=True)[:top]


def describe_module(module: ModuleRecord) -> str:
    """One-line summary shown under the module name."""
    used_by = ",".join(module.used_by) if module.used_by else "-"
    return f"Size: {module.size_bytes} bytes | Used by: {used_by}"
