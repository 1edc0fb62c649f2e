"""
nvidia-smi query helpers.

Every reading is one `--query-gpu=<field>` call; the helpers here build the
arguments and turn the single-line CSV answers into display strings.
"""

from typing import List, Optional

STATIC_FIELDS = ("name", "driver_version", "memory.total")

# Fields queried without units so the value can be parsed or suffixed.
UNITLESS_FIELDS = frozenset({"utilization.gpu", "temperature.gpu"})


def query_args(field: str) -> List[str]:
    """Arguments for one nvidia-smi query of `field`."""
    fmt = "csv,noheader,nounits" if field in UNITLESS_FIELDS else "csv,noheader"
    return [f"--query-gpu={field}", f"--format={fmt}"]


def first_value(stdout: str) -> Optional[str]:
    """The first non-blank line of a query answer (first GPU), stripped."""
    for line in stdout.splitlines():
        if line.strip():
            return line.strip()
    return None


def parse_utilization(stdout: str) -> Optional[float]:
    """Utilization in percent, or None when the answer is not a number."""
    value = first_value(stdout)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def format_utilization(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.1f}%"


def format_temperature(stdout: str) -> str:
    value = first_value(stdout)
    return f"{value}°C" if value else "N/A"
