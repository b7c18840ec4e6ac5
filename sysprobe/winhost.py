"""Host information collected from the running system."""

from __future__ import annotations

import socket
import sys
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import Optional, TypeVar

import psutil

from sysprobe import netinfo, winos
from sysprobe.hostmodel import Host, HostInfo, HostMemoryInfo
from sysprobe.netinfo import FQDNLookupError
from sysprobe.procmodel import CPUTimes, UnimplementedError

_T = TypeVar("_T")

_TCPIP_PARAMETERS = r"SYSTEM\CurrentControlSet\Services\Tcpip\Parameters"
_COLLECTION_ERRORS = (OSError, ValueError, TypeError, LookupError)


class HostCollectionError(Exception):
    """Raised when some host facts could not be collected.

    ``errors`` holds every failure; ``host`` holds the partial result.
    """

    def __init__(self, errors: Iterable[BaseException], host: Optional["WindowsHost"] = None) -> None:
        self.errors = list(errors)
        self.host = host
        count = len(self.errors)
        prefix = "1 error" if count == 1 else f"{count} errors"
        super().__init__(f"{prefix}: " + "; ".join(str(err) for err in self.errors))


def _windows_fqdn() -> str:
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, _TCPIP_PARAMETERS) as key:
            hostname, _kind = winreg.QueryValueEx(key, "Hostname")
            try:
                domain, _kind = winreg.QueryValueEx(key, "Domain")
            except FileNotFoundError:
                domain = ""
    except OSError as err:
        raise FQDNLookupError(f"could not get windows FQDN: {err}") from err
    return f"{hostname}.{domain}" if domain else str(hostname)


def _seconds(value: float) -> timedelta:
    return timedelta(seconds=value)


class WindowsHost(Host):
    """The host this process runs on."""

    def __init__(self, info: HostInfo) -> None:
        self._info = info

    def info(self) -> HostInfo:
        """Return the host facts gathered when the host was created."""
        return self._info

    def cpu_time(self) -> CPUTimes:
        """Return host-wide CPU times."""
        times = psutil.cpu_times()
        return CPUTimes(
            user=_seconds(times.user),
            system=_seconds(times.system),
            idle=_seconds(times.idle),
            iowait=_seconds(getattr(times, "iowait", 0.0)),
            irq=_seconds(getattr(times, "irq", getattr(times, "interrupt", 0.0))),
            nice=_seconds(getattr(times, "nice", 0.0)),
            soft_irq=_seconds(getattr(times, "softirq", 0.0)),
            steal=_seconds(getattr(times, "steal", 0.0)),
        )

    def memory(self) -> HostMemoryInfo:
        """Return physical and paging-file memory statistics."""
        physical = psutil.virtual_memory()
        paging = psutil.swap_memory()
        return HostMemoryInfo(
            total=physical.total,
            used=physical.total - physical.available,
            free=physical.available,
            available=physical.available,
            virtual_total=paging.total,
            virtual_used=paging.total - paging.free,
            virtual_free=paging.free,
        )

    def fqdn(self) -> str:
        """Return the lowercased fully-qualified domain name of the host."""
        name = _windows_fqdn() if sys.platform == "win32" else netinfo.fqdn()
        return name.removesuffix(".").lower()


def _read(errors: list[BaseException], reader: Callable[[], _T]) -> Optional[_T]:
    try:
        return reader()
    except UnimplementedError:
        return None
    except _COLLECTION_ERRORS as err:
        errors.append(err)
        return None


def new_host() -> WindowsHost:
    """Collect host facts.

    Facts not available on this platform are left empty. Raises
    HostCollectionError, carrying the partial host, when any reader fails.
    """
    info = HostInfo()
    errors: list[BaseException] = []

    arch = _read(errors, winos.architecture)
    if arch is not None:
        info.architecture = arch

    booted = _read(errors, winos.boot_time)
    if booted is not None:
        info.boot_time = booted

    hostname = _read(errors, socket.gethostname)
    if hostname is not None:
        info.hostname = hostname.lower()

    addresses = _read(errors, netinfo.network)
    if addresses is not None:
        info.ips, info.macs = addresses

    kernel = _read(errors, winos.kernel_version)
    if kernel is not None:
        info.kernel_version = kernel

    os_info = _read(errors, winos.operating_system)
    if os_info is not None:
        info.os = os_info

    now = datetime.now().astimezone()
    info.timezone = now.tzname() or ""
    offset = now.utcoffset()
    info.timezone_offset_sec = int(offset.total_seconds()) if offset is not None else 0

    unique_id = _read(errors, winos.machine_id)
    if unique_id is not None:
        info.unique_id = unique_id

    host = WindowsHost(info)
    if errors:
        raise HostCollectionError(errors, host)
    return host