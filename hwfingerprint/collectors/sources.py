"""
hwfingerprint.collectors.sources

Attribute sources: where raw hardware data for a category comes from

- CommandOutputSource: `wmic ... /value` text parsed into a typed record
- StructuredQuerySource: WQL query returning a typed record

Both expose one method per hardware category and hash the record through
hwfingerprint.digest.encode_record, so a category's hash depends only on
the hardware facts, not on the backend.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol, Type

from hwfingerprint.digest import encode_record, hash_bytes
from hwfingerprint.errors import CategoryQueryError, EncodingError
from hwfingerprint.model import BIOS_KEY, DISK_KEY, MEMORY_KEY, PROCESSOR_KEY, SYSTEM_KEY, UUID_KEY
from hwfingerprint.records import (
    Win32_BIOS,
    Win32_ComputerSystem,
    Win32_ComputerSystemProduct,
    Win32_DiskDrive,
    Win32_PhysicalMemory,
    Win32_Processor,
    record_from_wmic_values,
)
from hwfingerprint.strategy import AccessStrategy


class CommandRunner(Protocol):
    def run(self, path: Path, *args: str) -> bytes: ...


class StructuredQuery(Protocol):
    def query_first(self, record_type: type) -> Any: ...


@dataclass(frozen=True)
class CategoryDescriptor:
    """
    Static category definition, consulted by both backends
    - key: fingerprint map key
    - wmic_args: arguments for wmic.exe
    - record_type: WQL record shape
    """

    key: str
    wmic_args: tuple[str, ...]
    record_type: Type[Any]


def _category(key: str, alias: str, record_type: Type[Any]) -> CategoryDescriptor:
    # `wmic <alias> get <fields> /value` prints one "Name=value" line per property
    fields = ",".join(field.name for field in dataclasses.fields(record_type))
    return CategoryDescriptor(key, (alias, "get", fields, "/value"), record_type)


UUID = _category(UUID_KEY, "csproduct", Win32_ComputerSystemProduct)
PROCESSOR = _category(PROCESSOR_KEY, "cpu", Win32_Processor)
MEMORY = _category(MEMORY_KEY, "memorychip", Win32_PhysicalMemory)
BIOS = _category(BIOS_KEY, "bios", Win32_BIOS)
SYSTEM = _category(SYSTEM_KEY, "computersystem", Win32_ComputerSystem)
DISK = _category(DISK_KEY, "diskdrive", Win32_DiskDrive)

# Collection order
CATEGORIES: tuple[CategoryDescriptor, ...] = (UUID, PROCESSOR, MEMORY, BIOS, SYSTEM, DISK)


class AttributeSource:
    """
    Per-category query interface; subclasses implement collect()
    """

    strategy: AccessStrategy

    def collect(self, descriptor: CategoryDescriptor) -> str:
        raise NotImplementedError

    def uuid(self) -> str:
        return self.collect(UUID)

    def processor(self) -> str:
        return self.collect(PROCESSOR)

    def memory(self) -> str:
        return self.collect(MEMORY)

    def bios(self) -> str:
        return self.collect(BIOS)

    def system(self) -> str:
        return self.collect(SYSTEM)

    def disk(self) -> str:
        return self.collect(DISK)


class CommandOutputSource(AttributeSource):
    strategy = AccessStrategy.COMMAND_OUTPUT

    def __init__(self, runner: CommandRunner, wmic_path: Path) -> None:
        self.runner = runner
        self.wmic_path = wmic_path

    def collect(self, descriptor: CategoryDescriptor) -> str:
        try:
            output = self.runner.run(self.wmic_path, *descriptor.wmic_args)
        except Exception as e:
            raise CategoryQueryError(
                f"wmic {' '.join(descriptor.wmic_args)} failed: {e}",
                category=descriptor.key,
                backend=self.strategy.value,
            ) from e

        try:
            record = record_from_wmic_values(descriptor.record_type, output)
        except EncodingError as e:
            raise EncodingError(str(e), category=descriptor.key, backend=self.strategy.value) from e
        return hash_record_for(descriptor, record, self.strategy)


class StructuredQuerySource(AttributeSource):
    strategy = AccessStrategy.STRUCTURED_QUERY

    def __init__(self, query: StructuredQuery) -> None:
        self.query = query

    def fetch(self, descriptor: CategoryDescriptor) -> Any:
        """
        First WMI record for the category (raises CategoryQueryError)
        """
        class_name = descriptor.record_type.__name__
        try:
            record: Optional[Any] = self.query.query_first(descriptor.record_type)
        except Exception as e:
            raise CategoryQueryError(
                f"WQL query for {class_name} failed: {e}",
                category=descriptor.key,
                backend=self.strategy.value,
            ) from e

        if record is None:
            raise CategoryQueryError(
                f"WQL query for {class_name} returned no records",
                category=descriptor.key,
                backend=self.strategy.value,
            )
        return record

    def collect(self, descriptor: CategoryDescriptor) -> str:
        record = self.fetch(descriptor)
        return hash_record_for(descriptor, record, self.strategy)


def hash_record_for(descriptor: CategoryDescriptor, record: Any, strategy: AccessStrategy) -> str:
    """
    Canonical digest shared by both backends
    """
    try:
        encoded = encode_record(record)
    except EncodingError as e:
        raise EncodingError(str(e), category=descriptor.key, backend=strategy.value) from e
    return hash_bytes(encoded)


def build_source(
    strategy: AccessStrategy,
    *,
    runner: CommandRunner,
    query: StructuredQuery,
    wmic_path: Path,
) -> AttributeSource:
    if strategy is AccessStrategy.STRUCTURED_QUERY:
        return StructuredQuerySource(query)
    return CommandOutputSource(runner, wmic_path)
