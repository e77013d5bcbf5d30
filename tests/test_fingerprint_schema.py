"""
Contract tests for fingerprint map stability.

These guard the key vocabulary consumed by drift detection.
"""

import json

import pytest

from hwfingerprint.model import FINGERPRINT_KEYS, empty_fingerprint, fingerprint_to_json


def test_fingerprint_keys_exist() -> None:
    """
    The nine keys are fixed
    """
    assert FINGERPRINT_KEYS == {
        "uuid",
        "processor-hash",
        "memory-hash",
        "bios-hash",
        "system-hash",
        "hostname-info",
        "ip-address",
        "macaddr-info",
        "disk-info",
    }
    assert set(empty_fingerprint()) == FINGERPRINT_KEYS


def test_fingerprint_json_is_sorted_and_compact() -> None:
    """
    Serialization is deterministic
    """
    fingerprint = empty_fingerprint()
    fingerprint["hostname-info"] = "host1"

    text = fingerprint_to_json(fingerprint)

    assert " " not in text
    assert list(json.loads(text)) == sorted(FINGERPRINT_KEYS)


def test_fingerprint_json_rejects_misshaped_maps() -> None:
    """
    Missing or unknown keys never serialize
    """
    partial = empty_fingerprint()
    del partial["uuid"]
    with pytest.raises(ValueError, match="missing"):
        fingerprint_to_json(partial)

    extra = empty_fingerprint()
    extra["os-version"] = "10.0"
    with pytest.raises(ValueError, match="unknown"):
        fingerprint_to_json(extra)
