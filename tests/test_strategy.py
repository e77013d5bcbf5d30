"""
Contract tests for access strategy selection
"""

import json

import pytest

from fakes import WIN2019, WIN2025, FakePlatformInfo
from hwfingerprint.errors import VersionDetectionError
from hwfingerprint.strategy import AccessStrategy, compare_versions, select_strategy


def test_compare_versions_is_numeric_not_lexicographic() -> None:
    """
    Components compare as integers; missing components count as zero
    """
    assert compare_versions("10.0.26100", "10.0.9200") == 1
    assert compare_versions("6.3.9600", "10.0.14393") == -1
    assert compare_versions("10.0", "10.0.0") == 0
    assert compare_versions("10.0.26100", "10.0.26100") == 0


def test_compare_versions_rejects_garbage() -> None:
    """
    Non-numeric components are a detection failure
    """
    with pytest.raises(VersionDetectionError):
        compare_versions("not-a-version", "10.0.26100")


@pytest.mark.parametrize("version", [WIN2025, "10.0.26200", "11.0.0"])
def test_threshold_and_later_select_structured_query(version: str) -> None:
    """
    Windows Server 2025 or later uses WQL
    """
    assert select_strategy(FakePlatformInfo(version)) is AccessStrategy.STRUCTURED_QUERY


@pytest.mark.parametrize("version", [WIN2019, "10.0.17763", "6.3.9600"])
def test_earlier_versions_select_command_output(version: str) -> None:
    """
    Anything before Windows Server 2025 uses WMIC
    """
    assert select_strategy(FakePlatformInfo(version)) is AccessStrategy.COMMAND_OUTPUT


def test_detection_error_falls_back_to_command_output(capsys) -> None:
    """
    Version lookup failure -> WMIC with a warning event
    """
    info = FakePlatformInfo(error=RuntimeError("Win32_OperatingSystem unavailable"))

    assert select_strategy(info) is AccessStrategy.COMMAND_OUTPUT

    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert events[-1]["event_type"] == "version_detection_failed"
    assert events[-1]["level"] == "warning"
    assert events[-1]["fallback"] == "command-output"


def test_unparseable_version_falls_back_to_command_output() -> None:
    """
    A garbage version string is treated like a detection failure
    """
    assert select_strategy(FakePlatformInfo("N/A")) is AccessStrategy.COMMAND_OUTPUT


def test_interface_override_skips_detection() -> None:
    """
    Forced interface never consults platform info
    """
    info = FakePlatformInfo(WIN2019)

    assert select_strategy(info, interface="wql") is AccessStrategy.STRUCTURED_QUERY
    assert select_strategy(FakePlatformInfo(WIN2025), interface="wmic") is AccessStrategy.COMMAND_OUTPUT
    assert info.calls == 0
