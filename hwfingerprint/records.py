"""
hwfingerprint.records

Typed WMI records (one per hardware category, plus OS details)

Field names match the WMI property names so records can be filled straight
from a WQL result and serialized in a fixed order. Field declaration order
is part of the hash contract: reordering fields changes every digest.
"""

from __future__ import annotations

import codecs
import dataclasses
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Optional, Type, TypeVar

from hwfingerprint.errors import EncodingError

R = TypeVar("R")


@dataclass(frozen=True)
class Win32_ComputerSystemProduct:
    UUID: str = ""


@dataclass(frozen=True)
class Win32_Processor:
    Caption: str = ""
    DeviceID: str = ""
    Manufacturer: str = ""
    MaxClockSpeed: Optional[int] = None
    Name: str = ""
    SocketDesignation: str = ""


@dataclass(frozen=True)
class Win32_PhysicalMemory:
    Capacity: Optional[int] = None
    DeviceLocator: str = ""
    MemoryType: Optional[int] = None
    Name: str = ""
    Tag: str = ""
    TotalWidth: Optional[int] = None


@dataclass(frozen=True)
class Win32_BIOS:
    Manufacturer: str = ""
    Name: str = ""
    SerialNumber: str = ""
    SMBIOSBIOSVersion: str = ""
    Version: str = ""


@dataclass(frozen=True)
class Win32_ComputerSystem:
    DNSHostName: str = ""
    Domain: str = ""
    Manufacturer: str = ""
    Model: str = ""
    Name: str = ""
    PrimaryOwnerName: str = ""
    TotalPhysicalMemory: Optional[int] = None


@dataclass(frozen=True)
class Win32_DiskDrive:
    Caption: str = ""
    DeviceID: str = ""
    Model: str = ""
    Partitions: Optional[int] = None
    Size: Optional[int] = None


@dataclass(frozen=True)
class Win32_OperatingSystem:
    Caption: str = ""
    OperatingSystemSKU: Optional[int] = None
    Version: str = ""


def wmi_class_name(record_type: type) -> str:
    return record_type.__name__


def _coerce(value: Any, annotation: str) -> Any:
    if value is None:
        return None if "int" in annotation else ""
    if "int" in annotation:
        # wmic prints an unset numeric property as "Name="
        if isinstance(value, str) and not value.strip():
            return None
        # uint64 properties (Capacity, Size, ...) arrive as strings over COM
        return int(value)
    return str(value).strip()


def record_from_object(record_type: Type[R], source: Any) -> R:
    """
    Build a record from any object exposing WMI properties as attributes

    Missing properties take the field default; numeric properties are
    normalized to int so COM string/int differences do not change hashes.
    """
    values: dict[str, Any] = {}
    for field in dataclasses.fields(record_type):
        raw = getattr(source, field.name, None)
        values[field.name] = _coerce(raw, str(field.type))
    return record_type(**values)


def _decode_command_output(output: bytes) -> str:
    if output.startswith(codecs.BOM_UTF16_LE) or output.startswith(codecs.BOM_UTF16_BE):
        return output.decode("utf-16")
    return output.decode("utf-8-sig")


def record_from_wmic_values(record_type: Type[R], output: bytes) -> R:
    """
    Parse `wmic <alias> get <fields> /value` output into a record

    wmic ends lines with "\\r\\r\\n" and pads instances with blank lines.
    Only the first instance is kept, matching a WQL query that takes the
    first row. Property names outside the record are ignored.
    """
    names = {field.name for field in dataclasses.fields(record_type)}
    try:
        text = _decode_command_output(output)
    except UnicodeDecodeError as exc:
        raise EncodingError(f"undecodable wmic output: {exc}") from exc

    values: dict[str, str] = {}
    for line in text.replace("\r", "\n").split("\n"):
        line = line.strip()
        if not line:
            continue
        name, sep, value = line.partition("=")
        if not sep:
            raise EncodingError(f"unexpected wmic output line: {line[:80]!r}")
        if name not in names:
            continue
        if name in values:
            break
        values[name] = value

    if not values:
        raise EncodingError(f"no {wmi_class_name(record_type)} properties in wmic output")
    try:
        return record_from_object(record_type, SimpleNamespace(**values))
    except ValueError as exc:
        raise EncodingError(f"invalid {wmi_class_name(record_type)} property value: {exc}") from exc
