"""
hwfingerprint.windows

Windows collaborators used by the CLI

- WindowsServiceManager: Winmgmt state via psutil.win_service_get
- WmiQuery: WQL "first record" queries via the WMI package
- SubprocessCommandRunner: wmic.exe execution
- WmiPlatformInfo: Win32_OperatingSystem name/version/SKU

Windows-only modules (wmi, psutil.win_service_get) are touched on first use,
so importing this module is safe anywhere.
"""

from __future__ import annotations

import dataclasses
import subprocess
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

import psutil

from hwfingerprint.errors import FingerprintError, VersionDetectionError
from hwfingerprint.records import Win32_OperatingSystem, record_from_object, wmi_class_name

R = TypeVar("R")

COMMAND_TIMEOUT_S = 60

# PRODUCT_DATACENTER_NANO_SERVER / PRODUCT_STANDARD_NANO_SERVER
NANO_SERVER_SKUS = {"143", "144"}


class PsutilServiceHandle:
    def __init__(self, service: Any) -> None:
        self._service = service

    def query_status(self) -> str:
        # "running", "stopped", "start_pending", ...
        return self._service.status()


class WindowsServiceManager:
    def connect(self) -> "WindowsServiceManager":
        if not hasattr(psutil, "win_service_get"):
            raise FingerprintError("Windows service manager is not available on this platform")
        return self

    def open_service(self, name: str) -> PsutilServiceHandle:
        return PsutilServiceHandle(psutil.win_service_get(name))


class SubprocessCommandRunner:
    def __init__(self, *, timeout_s: float = COMMAND_TIMEOUT_S) -> None:
        self.timeout_s = timeout_s

    def run(self, path: Path, *args: str) -> bytes:
        """
        Run path with args, return raw stdout

        Raises CalledProcessError / TimeoutExpired / OSError
        """
        completed = subprocess.run(
            [str(path), *args],
            capture_output=True,
            check=True,
            timeout=self.timeout_s,
        )
        return completed.stdout


def build_wql(record_type: type) -> str:
    fields = ", ".join(field.name for field in dataclasses.fields(record_type))
    return f"SELECT {fields} FROM {wmi_class_name(record_type)}"


class WmiQuery:
    """
    WQL queries against root\\cimv2, connection opened lazily and reused
    """

    def __init__(self, namespace: str = "root\\cimv2") -> None:
        self.namespace = namespace
        self._connection: Optional[Any] = None

    def _connect(self) -> Any:
        if self._connection is None:
            import wmi

            self._connection = wmi.WMI(namespace=self.namespace)
        return self._connection

    def query_first(self, record_type: Type[R]) -> Optional[R]:
        rows = self._connect().query(build_wql(record_type))
        if not rows:
            return None
        return record_from_object(record_type, rows[0])


class WmiPlatformInfo:
    def __init__(self, query: WmiQuery) -> None:
        self.query = query

    def _details(self) -> Win32_OperatingSystem:
        try:
            details = self.query.query_first(Win32_OperatingSystem)
        except Exception as e:
            raise VersionDetectionError(f"failed to fetch OS details from WMI: {e}") from e
        if details is None:
            raise VersionDetectionError("Win32_OperatingSystem returned no records")
        return details

    def get_platform_version(self) -> str:
        version = self._details().Version
        if not version:
            raise VersionDetectionError("Win32_OperatingSystem.Version is empty")
        return version

    def get_platform_name(self) -> str:
        return self._details().Caption

    def get_platform_sku(self) -> str:
        sku = self._details().OperatingSystemSKU
        return "" if sku is None else str(sku)

    def is_nano_server(self) -> bool:
        return self.get_platform_sku() in NANO_SERVER_SKUS
