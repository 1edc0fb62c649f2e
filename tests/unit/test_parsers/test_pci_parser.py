"""
Unit tests for the lspci -k and modinfo parsers.
"""

from unittest.mock import Mock

import pytest

from statusmon.models.records import DeviceCategory
from statusmon.parsers.pci import (
    UNKNOWN_DRIVER,
    device_description,
    find_display_controller,
    find_driver,
    parse_modinfo_version,
    parse_pci_devices,
)

LSPCI_K = """\
00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620 (rev 07)
\tSubsystem: Lenovo UHD Graphics 620
\tKernel driver in use: i915
\tKernel modules: i915
00:14.0 USB controller: Intel Corporation Sunrise Point-LP USB 3.0 xHCI Controller (rev 21)
\tSubsystem: Lenovo Sunrise Point-LP USB 3.0 xHCI Controller
\tKernel driver in use: xhci_hcd
00:1f.3 Audio device: Intel Corporation Sunrise Point-LP HD Audio (rev 21)
\tSubsystem: Lenovo Sunrise Point-LP HD Audio
\tKernel driver in use: snd_hda_intel
\tKernel modules: snd_hda_intel, snd_soc_skl
02:00.0 Network controller: Intel Corporation Wireless 8265 / 8275 (rev 78)
\tSubsystem: Intel Corporation Dual Band Wireless-AC 8265
\tKernel driver in use: iwlwifi
03:00.0 Non-Volatile memory controller: Samsung Electronics Co Ltd NVMe SSD Controller SM981/PM981/PM983
\tSubsystem: Samsung Electronics Co Ltd SSD 970 EVO Plus
\tKernel driver in use: nvme
"""

MODINFO = """\
filename:       /lib/modules/6.5.0/kernel/drivers/net/wireless/intel/iwlwifi/iwlwifi.ko
license:        GPL
srcversion:     9A8F0E2C1D2B
version:        2.0.1
depends:        cfg80211
"""


@pytest.mark.unit
class TestParsePciDevices:
    """Test cases for category extraction from lspci -k."""

    def test_graphics(self):
        devices = parse_pci_devices(LSPCI_K, DeviceCategory.GRAPHICS)

        assert len(devices) == 1
        assert devices[0].driver_name == "i915"
        assert devices[0].device_description == "Intel Corporation UHD Graphics 620 (rev 07)"
        assert devices[0].category is DeviceCategory.GRAPHICS
        assert devices[0].version is None

    @pytest.mark.parametrize(
        "category,driver",
        [
            (DeviceCategory.USB, "xhci_hcd"),
            (DeviceCategory.AUDIO, "snd_hda_intel"),
            (DeviceCategory.NETWORK, "iwlwifi"),
            (DeviceCategory.STORAGE, "nvme"),
        ],
    )
    def test_each_category_finds_its_device(self, category, driver):
        devices = parse_pci_devices(LSPCI_K, category)

        assert [device.driver_name for device in devices] == [driver]

    def test_indented_lines_never_start_a_device(self):
        text = "00:02.0 Host bridge: Intel Corporation Device\n\tSubsystem: Lenovo USB thing\n"

        assert parse_pci_devices(text, DeviceCategory.USB) == []

    def test_missing_driver_is_unknown(self):
        text = (
            "00:1f.3 Audio device: Intel Corporation HD Audio\n"
            "\tSubsystem: Lenovo HD Audio\n"
        )
        lookup = Mock(return_value="1.0")

        devices = parse_pci_devices(text, DeviceCategory.AUDIO, version_lookup=lookup)

        assert devices[0].driver_name == UNKNOWN_DRIVER
        assert devices[0].version is None
        lookup.assert_not_called()

    def test_driver_outside_lookahead_window(self):
        text = (
            "00:1f.3 Audio device: Intel Corporation HD Audio\n"
            "\tSubsystem: Lenovo HD Audio\n"
            "\tFlags: bus master\n"
            "\tMemory at f1000000\n"
            "\tCapabilities: <access denied>\n"
            "\tKernel driver in use: snd_hda_intel\n"
        )

        assert parse_pci_devices(text, DeviceCategory.AUDIO)[0].driver_name == UNKNOWN_DRIVER
        assert parse_pci_devices(text, DeviceCategory.AUDIO, lookahead=5)[0].driver_name == "snd_hda_intel"

    def test_version_lookup_per_driver(self):
        lookup = Mock(side_effect=lambda driver: "2.0.1" if driver == "iwlwifi" else None)

        devices = parse_pci_devices(LSPCI_K, DeviceCategory.NETWORK, version_lookup=lookup)

        assert devices[0].version == "2.0.1"
        lookup.assert_called_once_with("iwlwifi")

    def test_empty_text(self):
        assert parse_pci_devices("", DeviceCategory.GRAPHICS) == []

    def test_same_input_same_output(self):
        assert parse_pci_devices(LSPCI_K, DeviceCategory.STORAGE) == parse_pci_devices(
            LSPCI_K, DeviceCategory.STORAGE
        )


@pytest.mark.unit
class TestPciHelpers:
    """Test cases for the line helpers."""

    def test_device_description_after_second_colon(self):
        line = "03:00.0 Non-Volatile memory controller: Samsung NVMe SSD Controller SM981/PM981"

        assert device_description(line) == "Samsung NVMe SSD Controller SM981/PM981"

    def test_find_driver(self):
        lines = LSPCI_K.splitlines()

        assert find_driver(lines, 0) == "i915"
        assert find_driver(lines, 0, lookahead=1) is None

    def test_modinfo_version(self):
        assert parse_modinfo_version(MODINFO) == "2.0.1"

    def test_modinfo_srcversion_is_not_a_version(self):
        assert parse_modinfo_version("srcversion:     9A8F0E2C1D2B\n") is None

    def test_find_display_controller(self):
        text = (
            "00:00.0 Host bridge: Intel Corporation Xeon E3-1200 v6\n"
            "01:00.0 3D controller: NVIDIA Corporation GP107M [GeForce MX350] (rev a1)\n"
        )

        assert find_display_controller(text) == "NVIDIA Corporation GP107M [GeForce MX350] (rev a1)"
        assert find_display_controller("00:00.0 Host bridge: Intel\n") is None
