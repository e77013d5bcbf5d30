"""hwfingerprint.collectors package exports."""

from hwfingerprint.collectors.base import CategoryOutcome, run_category
from hwfingerprint.collectors.host import HostIdentity, LocalHostIdentity
from hwfingerprint.collectors.sources import (
    CATEGORIES,
    AttributeSource,
    CategoryDescriptor,
    CommandOutputSource,
    StructuredQuerySource,
    build_source,
)

__all__ = [
    "CATEGORIES",
    "AttributeSource",
    "CategoryDescriptor",
    "CategoryOutcome",
    "CommandOutputSource",
    "HostIdentity",
    "LocalHostIdentity",
    "StructuredQuerySource",
    "build_source",
    "run_category",
]
