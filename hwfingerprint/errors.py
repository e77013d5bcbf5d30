"""
hwfingerprint.errors

Error taxonomy

Fatal:
- ServiceUnavailableError: WMI never reached Running (or could not be opened)

Non-fatal (collapsed to "" at the map boundary):
- VersionDetectionError: fall back to WMIC
- CategoryQueryError / EncodingError: one category missing
- HostIdentityError: one host key missing
"""

from __future__ import annotations


class FingerprintError(Exception):
    """Base class for fingerprint engine errors."""


class ServiceUnavailableError(FingerprintError):
    pass


class VersionDetectionError(FingerprintError):
    pass


class CategoryQueryError(FingerprintError):
    """
    A single hardware category could not be queried

    category/backend are attached so log lines can be diagnosed without
    the surrounding call stack.
    """

    def __init__(self, message: str, *, category: str = "", backend: str = "") -> None:
        super().__init__(message)
        self.category = category
        self.backend = backend


class EncodingError(CategoryQueryError):
    pass


class HostIdentityError(FingerprintError):
    pass
