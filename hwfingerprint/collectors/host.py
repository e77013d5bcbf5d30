"""
hwfingerprint.collectors.host

Host identity facts folded into the fingerprint unhashed

- hostname: socket.gethostname()
- primary IP: first IPv4 on an up, non-loopback interface (sorted by name)
- MAC address: link address of that same interface, "aa:bb:cc:dd:ee:ff"

Design goals:
- No network calls
- Each fact fails independently (HostIdentityError)
"""

from __future__ import annotations

import socket
from typing import Any, Callable, Mapping, Optional, Protocol

import psutil

from hwfingerprint.errors import HostIdentityError


class HostIdentity(Protocol):
    def hostname(self) -> str: ...

    def primary_ip(self) -> str: ...

    def mac_address(self) -> str: ...


def normalize_mac(value: str) -> str:
    """
    Normalize "AA-BB-CC-DD-EE-FF" / "aa:bb:..." to lowercase colon form
    """
    cleaned = value.strip().replace("-", ":").lower()
    parts = cleaned.split(":")
    if len(parts) != 6 or not all(len(part) == 2 for part in parts):
        raise HostIdentityError(f"unrecognized MAC address: {value!r}")
    try:
        for part in parts:
            int(part, 16)
    except ValueError as e:
        raise HostIdentityError(f"unrecognized MAC address: {value!r}") from e
    return cleaned


class LocalHostIdentity:
    """
    Host identity from the local network stack

    net_if_addrs / net_if_stats default to psutil; pass fakes in tests.
    """

    def __init__(
        self,
        *,
        net_if_addrs: Callable[[], Mapping[str, list[Any]]] = psutil.net_if_addrs,
        net_if_stats: Callable[[], Mapping[str, Any]] = psutil.net_if_stats,
        gethostname: Callable[[], str] = socket.gethostname,
    ) -> None:
        self._net_if_addrs = net_if_addrs
        self._net_if_stats = net_if_stats
        self._gethostname = gethostname

    def hostname(self) -> str:
        name = self._gethostname().strip()
        if not name:
            raise HostIdentityError("hostname is empty")
        return name

    def _primary_interface(self) -> tuple[str, str]:
        addrs = self._net_if_addrs()
        stats = self._net_if_stats()

        for name in sorted(addrs):
            stat = stats.get(name)
            if stat is not None and not stat.isup:
                continue
            for addr in addrs[name]:
                if addr.family != socket.AF_INET:
                    continue
                if addr.address.startswith("127.") or addr.address.startswith("169.254."):
                    continue
                return name, addr.address

        raise HostIdentityError("no up, non-loopback IPv4 interface found")

    def primary_ip(self) -> str:
        _, address = self._primary_interface()
        return address

    def mac_address(self) -> str:
        name, _ = self._primary_interface()
        link: Optional[str] = None
        for addr in self._net_if_addrs().get(name, []):
            if addr.family == psutil.AF_LINK:
                link = addr.address
                break

        if not link:
            raise HostIdentityError(f"interface {name!r} has no link address")
        return normalize_mac(link)
