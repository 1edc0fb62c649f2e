"""
PCI enumeration and kernel module metadata parsers.

The device parser scans `lspci -k` text: a top-level device line whose class
and description text contains one of the category keywords starts a device
block, and the following lines are searched for the driver bound to it.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..models.records import DeviceCategory, DeviceRecord

logger = logging.getLogger(__name__)

DRIVER_MARKER = "Kernel driver in use:"
UNKNOWN_DRIVER = "Unknown"
DEFAULT_LOOKAHEAD = 4

CATEGORY_KEYWORDS: Dict[DeviceCategory, Tuple[str, ...]] = {
    DeviceCategory.GRAPHICS: ("VGA", "3D", "Display"),
    DeviceCategory.NETWORK: ("Network", "Ethernet", "Wireless"),
    DeviceCategory.STORAGE: ("SATA", "RAID", "NVMe", "IDE", "SCSI", "Mass storage"),
    DeviceCategory.AUDIO: ("Audio", "Sound", "Multimedia"),
    DeviceCategory.USB: ("USB",),
}

VersionLookup = Callable[[str], Optional[str]]


def _no_version(driver: str) -> Optional[str]:
    return None


def _device_text(line: str) -> Optional[str]:
    """Text after the slot address of a top-level device line, else None."""
    if not line or line[0].isspace():
        return None
    parts = line.split(None, 1)
    return parts[1] if len(parts) == 2 else None


def device_description(line: str) -> str:
    """Everything after the second ':' of an lspci device line."""
    return ":".join(line.split(":")[2:]).strip()


def find_driver(lines: List[str], start: int, lookahead: int = DEFAULT_LOOKAHEAD) -> Optional[str]:
    """
    Return the driver named within `lookahead` lines after lines[start].

    Args:
        lines: All lines of the lspci output
        start: Index of the device line
        lookahead: Number of following lines to inspect

    Returns:
        The driver name, or None when no marker is inside the window
    """
    for line in lines[start + 1:start + 1 + lookahead]:
        if DRIVER_MARKER in line:
            return line.split(DRIVER_MARKER, 1)[1].strip()
    return None


def parse_pci_devices(
    text: str,
    category: DeviceCategory,
    version_lookup: VersionLookup = _no_version,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> List[DeviceRecord]:
    """
    Extract the devices of one category from `lspci -k` output.

    Args:
        text: Raw lspci -k output
        category: Category whose keyword set selects device lines
        version_lookup: Best-effort driver version lookup, only called for
            devices with a bound driver
        lookahead: Lines searched after each device line for the driver

    Returns:
        One DeviceRecord per matching device line, in input order
    """
    keywords = CATEGORY_KEYWORDS[category]
    lines = text.splitlines()
    devices: List[DeviceRecord] = []

    for index, line in enumerate(lines):
        device_text = _device_text(line)
        if device_text is None or not any(keyword in device_text for keyword in keywords):
            continue

        driver = find_driver(lines, index, lookahead)
        version = version_lookup(driver) if driver else None
        devices.append(
            DeviceRecord(
                driver_name=driver or UNKNOWN_DRIVER,
                device_description=device_description(line),
                version=version,
                category=category,
            )
        )
    return devices


def parse_modinfo_version(text: str) -> Optional[str]:
    """Return the value of the `version:` field of modinfo output, if any."""
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip() == "version":
            value = value.strip()
            return value or None
    return None


def find_display_controller(text: str) -> Optional[str]:
    """
    Description of the first VGA/3D/Display controller in plain `lspci` output.

    Used as the GPU name when nvidia-smi is not installed.
    """
    for line in text.splitlines():
        lowered = line.lower()
        if "vga" in lowered or "3d" in lowered or "display" in lowered:
            return device_description(line)
    return None
