"""
hwfingerprint.model

Fingerprint map vocabulary + deterministic serialization primitives.

Design goals:
- Fixed key set: every key always present, "" when unavailable
- Deterministic JSON (sorted keys, compact separators)
"""

from __future__ import annotations

import json
from typing import Mapping

# Hashed hardware categories
UUID_KEY = "uuid"
PROCESSOR_KEY = "processor-hash"
MEMORY_KEY = "memory-hash"
BIOS_KEY = "bios-hash"
SYSTEM_KEY = "system-hash"
DISK_KEY = "disk-info"

# Raw host identity facts
HOSTNAME_KEY = "hostname-info"
IP_ADDRESS_KEY = "ip-address"
MAC_ADDRESS_KEY = "macaddr-info"

HARDWARE_KEYS = (UUID_KEY, PROCESSOR_KEY, MEMORY_KEY, BIOS_KEY, SYSTEM_KEY, DISK_KEY)
HOST_KEYS = (HOSTNAME_KEY, IP_ADDRESS_KEY, MAC_ADDRESS_KEY)

FINGERPRINT_KEYS = frozenset(HARDWARE_KEYS + HOST_KEYS)


def empty_fingerprint() -> dict[str, str]:
    """
    Fully shaped map with every value empty
    """
    return {key: "" for key in HARDWARE_KEYS + HOST_KEYS}


def validate_fingerprint(fingerprint: Mapping[str, str]) -> None:
    """
    Validate map shape + value types

    Raises ValueError on invalid
    """
    keys = set(fingerprint.keys())
    missing = FINGERPRINT_KEYS - keys
    extra = keys - FINGERPRINT_KEYS
    if missing:
        raise ValueError(f"fingerprint missing keys: {sorted(missing)}")
    if extra:
        raise ValueError(f"fingerprint has unknown keys: {sorted(extra)}")

    for key, value in fingerprint.items():
        if not isinstance(value, str):
            raise ValueError(f"fingerprint[{key!r}] must be a string")


def fingerprint_to_json(fingerprint: Mapping[str, str], *, pretty: bool = False) -> str:
    """
    Serialize a fingerprint map

    Rules:
    - sort_keys=True ensures stable key order
    - compact separators unless pretty (operator use)
    """
    validate_fingerprint(fingerprint)

    if pretty:
        return json.dumps(dict(fingerprint), sort_keys=True, indent=2, ensure_ascii=False)

    return json.dumps(
        dict(fingerprint),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
