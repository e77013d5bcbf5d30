"""
hwfingerprint.strategy

Strategy selector: WMIC command output vs WQL structured query

Rules:
- platform version >= threshold -> structured-query (WQL)
- otherwise -> command-output (WMIC)
- version detection/parse failure -> command-output + warning
- decided once per fingerprint computation
"""

from __future__ import annotations

import enum
from typing import Protocol

from hwfingerprint.errors import VersionDetectionError
from hwfingerprint.logging import EventLog
from hwfingerprint.settings import STRUCTURED_QUERY_MIN_VERSION


class AccessStrategy(enum.Enum):
    COMMAND_OUTPUT = "command-output"
    STRUCTURED_QUERY = "structured-query"


# Settings.interface values -> strategy
INTERFACE_OVERRIDES = {
    "wmic": AccessStrategy.COMMAND_OUTPUT,
    "wql": AccessStrategy.STRUCTURED_QUERY,
}


class PlatformInfo(Protocol):
    def get_platform_version(self) -> str: ...


def _parse_version(version: str) -> list[int]:
    parts = version.strip().split(".")
    try:
        return [int(part) for part in parts]
    except ValueError as e:
        raise VersionDetectionError(f"invalid version string: {version!r}") from e


def compare_versions(left: str, right: str) -> int:
    """
    Dotted numeric comparison -> -1 / 0 / 1

    "10.0.26100" > "10.0.9200" (component-wise, not lexicographic);
    missing trailing components count as 0.
    """
    a = _parse_version(left)
    b = _parse_version(right)

    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))

    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def strategy_for_version(version: str, *, threshold: str = STRUCTURED_QUERY_MIN_VERSION) -> AccessStrategy:
    """
    Map a platform version to a strategy (raises VersionDetectionError on bad input)
    """
    if compare_versions(version, threshold) >= 0:
        return AccessStrategy.STRUCTURED_QUERY
    return AccessStrategy.COMMAND_OUTPUT


def select_strategy(
    platform_info: PlatformInfo,
    *,
    threshold: str = STRUCTURED_QUERY_MIN_VERSION,
    interface: str = "auto",
    log: EventLog | None = None,
) -> AccessStrategy:
    """
    Pick the access strategy for this computation

    Never raises: any detection problem fails open to COMMAND_OUTPUT.
    """
    log = log if log is not None else EventLog()
    if interface in INTERFACE_OVERRIDES:
        strategy = INTERFACE_OVERRIDES[interface]
        log.emit(
            "interface_selected",
            level="debug",
            strategy=strategy.value,
            source="override",
        )
        return strategy

    try:
        version = platform_info.get_platform_version()
        strategy = strategy_for_version(version, threshold=threshold)
    except Exception as e:
        log.emit(
            "version_detection_failed",
            level="warning",
            fallback=AccessStrategy.COMMAND_OUTPUT.value,
            error_type=type(e).__name__,
            message=str(e),
        )
        return AccessStrategy.COMMAND_OUTPUT

    log.emit(
        "interface_selected",
        level="debug",
        strategy=strategy.value,
        source="platform_version",
        platform_version=version,
        threshold=threshold,
    )
    return strategy
