"""
hwfingerprint.collectors.base

Light result wrapper -> one failing category never aborts the others
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CategoryOutcome:
    """
    Normalized per-category result
    - ok: false=failure, error details in error fields
    - value: encoded digest (or raw host string) if ok=true
    - backend: access strategy that produced it ("" for host facts)
    """

    name: str
    ok: bool
    value: Optional[str] = None
    backend: str = ""
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def as_map_value(self) -> str:
        """
        Collapse to the public map value ("" on failure)
        """
        if not self.ok or self.value is None:
            return ""
        return self.value


def run_category(name: str, fn: Callable[..., Any], *args: Any, backend: str = "", **kwargs: Any) -> CategoryOutcome:
    """
    Run category query & capture failure as data
    """
    try:
        v = fn(*args, **kwargs)
        return CategoryOutcome(name=name, ok=True, value=v, backend=backend)
    except Exception as e:
        return CategoryOutcome(
            name=name,
            ok=False,
            value=None,
            backend=backend,
            error_type=type(e).__name__,
            error_message=str(e),
        )
