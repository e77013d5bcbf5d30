"""
hwfingerprint.settings

Runtime configuration

Precedence (lowest -> highest):
1) constants below
2) HWFP_* environment variables
3) CLI options (applied by hwfingerprint.main via dataclasses.replace)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

WMI_SERVICE_NAME = "Winmgmt"

SERVICE_RETRIES = 5
SERVICE_RETRY_INTERVAL_S = 15.0

# Windows Server 2025; WMIC is deprecated from this release on
STRUCTURED_QUERY_MIN_VERSION = "10.0.26100"

VALID_INTERFACES = {"auto", "wmic", "wql"}
VALID_LOG_LEVELS = ("debug", "info", "warning", "error")

ENV_PREFIX = "HWFP_"


def default_wmic_path(environ: Mapping[str, str]) -> Path:
    windir = environ.get("WINDIR") or environ.get("SystemRoot") or r"C:\Windows"
    return Path(windir) / "System32" / "wbem" / "wmic.exe"


@dataclass(frozen=True)
class Settings:
    """
    Engine configuration.

    interface:
    - "auto": pick by platform version
    - "wmic" / "wql": force a backend, skips version detection
    """

    service_name: str = WMI_SERVICE_NAME
    service_retries: int = SERVICE_RETRIES
    service_retry_interval_s: float = SERVICE_RETRY_INTERVAL_S
    structured_query_min_version: str = STRUCTURED_QUERY_MIN_VERSION
    wmic_path: Path = Path(r"C:\Windows") / "System32" / "wbem" / "wmic.exe"
    interface: str = "auto"
    log_level: str = "info"

    def __post_init__(self) -> None:
        if self.service_retries < 1:
            raise ValueError("service_retries must be >= 1")
        if self.service_retry_interval_s < 0:
            raise ValueError("service_retry_interval_s must be >= 0")
        if self.interface not in VALID_INTERFACES:
            raise ValueError(f"interface must be one of: {sorted(VALID_INTERFACES)}")
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {list(VALID_LOG_LEVELS)}")


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from defaults + HWFP_* environment overrides

    Raises ValueError on malformed values (caller decides how to surface)
    """
    if environ is None:
        environ = os.environ

    kwargs: dict = {"wmic_path": default_wmic_path(environ)}

    service_name = _env(environ, "SERVICE_NAME")
    if service_name:
        kwargs["service_name"] = service_name

    retries = _env(environ, "SERVICE_RETRIES")
    if retries:
        kwargs["service_retries"] = int(retries)

    interval = _env(environ, "SERVICE_RETRY_INTERVAL_S")
    if interval:
        kwargs["service_retry_interval_s"] = float(interval)

    min_version = _env(environ, "STRUCTURED_QUERY_MIN_VERSION")
    if min_version:
        kwargs["structured_query_min_version"] = min_version

    wmic_path = _env(environ, "WMIC_PATH")
    if wmic_path:
        kwargs["wmic_path"] = Path(wmic_path)

    interface = _env(environ, "INTERFACE")
    if interface:
        kwargs["interface"] = interface.lower()

    log_level = _env(environ, "LOG_LEVEL")
    if log_level:
        kwargs["log_level"] = log_level.lower()

    return Settings(**kwargs)
