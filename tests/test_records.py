"""
Contract tests for building records from WMI result objects
"""

from types import SimpleNamespace

import pytest

from hwfingerprint.digest import hash_record
from hwfingerprint.errors import EncodingError
from hwfingerprint.records import (
    Win32_DiskDrive,
    Win32_OperatingSystem,
    record_from_object,
    record_from_wmic_values,
)
from hwfingerprint.windows import WmiPlatformInfo, build_wql


def test_numeric_properties_normalize_to_int() -> None:
    """
    uint64 values arriving as strings hash the same as ints
    """
    from_com = record_from_object(
        Win32_DiskDrive,
        SimpleNamespace(Caption="Disk ", DeviceID="PHYSICALDRIVE0", Model="Disk", Partitions=2, Size="107372805120"),
    )
    native = Win32_DiskDrive(Caption="Disk", DeviceID="PHYSICALDRIVE0", Model="Disk", Partitions=2, Size=107372805120)

    assert from_com == native
    assert hash_record(from_com) == hash_record(native)


def test_missing_properties_take_defaults() -> None:
    record = record_from_object(Win32_OperatingSystem, SimpleNamespace(Version="10.0.26100"))

    assert record == Win32_OperatingSystem(Caption="", OperatingSystemSKU=None, Version="10.0.26100")


def test_build_wql_selects_record_fields() -> None:
    assert build_wql(Win32_OperatingSystem) == (
        "SELECT Caption, OperatingSystemSKU, Version FROM Win32_OperatingSystem"
    )


class _OsQuery:
    def __init__(self, record):
        self.record = record

    def query_first(self, record_type):
        return self.record


def test_platform_info_reads_operating_system_record() -> None:
    """
    Name, version, SKU and nano-server detection come from Win32_OperatingSystem
    """
    info = WmiPlatformInfo(
        _OsQuery(
            Win32_OperatingSystem(
                Caption="Microsoft Windows Server 2025 Datacenter",
                OperatingSystemSKU=143,
                Version="10.0.26100",
            )
        )
    )

    assert info.get_platform_name() == "Microsoft Windows Server 2025 Datacenter"
    assert info.get_platform_version() == "10.0.26100"
    assert info.get_platform_sku() == "143"
    assert info.is_nano_server() is True


def test_wmic_values_keep_first_instance_only() -> None:
    """
    Blank-line separated instances stop at the first repeated property
    """
    output = (
        b"\r\r\n\r\r\nCaption=Disk 0\r\r\nDeviceID=\\\\.\\PHYSICALDRIVE0\r\r\nModel=Disk\r\r\n"
        b"Partitions=1\r\r\nSize=\r\r\n\r\r\n\r\r\nCaption=Disk 1\r\r\nDeviceID=\\\\.\\PHYSICALDRIVE1\r\r\n"
    )

    record = record_from_wmic_values(Win32_DiskDrive, output)

    assert record == Win32_DiskDrive(
        Caption="Disk 0", DeviceID="\\\\.\\PHYSICALDRIVE0", Model="Disk", Partitions=1, Size=None
    )


def test_wmic_values_decode_utf16_output() -> None:
    """
    Output redirected as UTF-16 (with BOM) parses like ANSI output
    """
    text = "\ufeff\r\nCaption=Microsoft Windows Server 2019 Datacenter\r\nVersion=10.0.17763\r\n"
    output = text.encode("utf-16-le")

    record = record_from_wmic_values(Win32_OperatingSystem, output)

    assert record.Caption == "Microsoft Windows Server 2019 Datacenter"
    assert record.Version == "10.0.17763"
    assert record.OperatingSystemSKU is None


@pytest.mark.parametrize(
    "output",
    [
        b"",
        b"\r\r\n\r\r\n",
        b"Node - HOST1\r\r\nERROR:\r\r\nDescription = Invalid query\r\r\n",
        b"Caption=Disk\r\r\nPartitions=two\r\r\n",
    ],
)
def test_wmic_values_reject_unusable_output(output) -> None:
    with pytest.raises(EncodingError):
        record_from_wmic_values(Win32_DiskDrive, output)
