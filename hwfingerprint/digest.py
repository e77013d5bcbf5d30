"""
hwfingerprint.digest

Canonicalizer & hasher

Both access strategies end here:
- WMIC: `/value` stdout -> record_from_wmic_values -> encode_record -> hash_bytes
- WQL:  record -> encode_record -> hash_bytes

Record encoding rules:
- one "Name=value\\r\\n" line per dataclass field, declaration order
- None renders as empty, everything else via str()
- UTF-8
Same field values always give the same bytes, whichever backend read them.
"""

from __future__ import annotations

import base64
import dataclasses
import hashlib
from typing import Any

from hwfingerprint.errors import EncodingError

LINE_END = "\r\n"


def hash_bytes(data: bytes) -> str:
    """
    MD5 over data, base64 (standard alphabet, padded)
    """
    digest = hashlib.md5(data).digest()
    return base64.b64encode(digest).decode("ascii")


def encode_record(record: Any) -> bytes:
    """
    Deterministic, order-preserving serialization of a record dataclass

    Raises EncodingError for anything that is not a dataclass instance
    """
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise EncodingError(f"cannot encode {type(record).__name__}: not a record")

    lines: list[str] = []
    for field in dataclasses.fields(record):
        value = getattr(record, field.name)
        rendered = "" if value is None else str(value)
        lines.append(f"{field.name}={rendered}{LINE_END}")

    try:
        return "".join(lines).encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"cannot encode {type(record).__name__}: {e}") from e


def hash_record(record: Any) -> str:
    return hash_bytes(encode_record(record))
