"""
Display formatting helpers shared by the resolvers.
"""

from typing import Optional, Union

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

Number = Union[int, float]


def format_bytes(num_bytes: Number) -> str:
    """Render a byte count as a base-1024 size with two decimals.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.50 KB'
    """
    if num_bytes == 0:
        return "0 B"
    value = float(num_bytes)
    unit_index = 0
    while abs(value) >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {_SIZE_UNITS[unit_index]}"


def format_uptime(milliseconds: Number) -> str:
    """Render an uptime in milliseconds as 'd days, h hours, m mins'.

    Zero components are omitted; an uptime under one minute is '0 mins'.
    """
    total_seconds = int(milliseconds // 1000)
    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes = remainder // 60

    parts = []
    if days > 0:
        parts.append(f"{days} days")
    if hours > 0:
        parts.append(f"{hours} hours")
    if minutes > 0:
        parts.append(f"{minutes} mins")
    return ", ".join(parts) if parts else "0 mins"


def usage_percentage(used: Optional[Number], total: Optional[Number]) -> Optional[str]:
    """Return used*100/total to one decimal, or None when total is 0 or missing."""
    if used is None or not total:
        return None
    return f"{used * 100 / total:.1f}"


def format_usage(used: Number, total: Number) -> str:
    """Render 'used / total (pct%)', dropping the percentage when it is undefined."""
    text = f"{format_bytes(used)} / {format_bytes(total)}"
    percentage = usage_percentage(used, total)
    if percentage is not None:
        text += f" ({percentage}%)"
    return text


def capitalize_words(text: str) -> str:
    """Upper-case the first letter of every space-separated word, lower-case the rest."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))
