"""Entry points for querying the host, its processes and the runtime."""

from __future__ import annotations

import os
import platform
import sys

from sysprobe import winhost, winprocess
from sysprobe.procmodel import RuntimeInfo, UnimplementedError

_SUPPORTED_PLATFORMS = ("win32", "linux", "darwin", "aix")

_OS_NAMES = {"win32": "windows", "cygwin": "windows", "darwin": "darwin"}

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def _os_name() -> str:
    name = sys.platform
    if name in _OS_NAMES:
        return _OS_NAMES[name]
    for prefix in ("linux", "aix", "freebsd", "openbsd", "netbsd", "sunos"):
        if name.startswith(prefix):
            return prefix
    return name


def _max_procs() -> int:
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count() or 1


def _require_provider() -> None:
    if not sys.platform.startswith(_SUPPORTED_PLATFORMS):
        raise UnimplementedError()


def runtime_info() -> RuntimeInfo:
    """Return information about the interpreter runtime."""
    machine = platform.machine().lower()
    return RuntimeInfo(
        os=_os_name(),
        arch=_ARCH_NAMES.get(machine, machine),
        max_procs=_max_procs(),
        version=platform.python_version(),
    )


def host() -> winhost.WindowsHost:
    """Return the host this process runs on.

    Raises UnimplementedError on unsupported platforms and HostCollectionError,
    carrying the partial host, when some facts could not be collected.
    """
    _require_provider()
    return winhost.new_host()


def process(pid: int) -> winprocess.WindowsProcess:
    """Return the process with the given PID."""
    _require_provider()
    return winprocess.process(pid)


def processes() -> list[winprocess.WindowsProcess]:
    """Return every process that can be opened."""
    _require_provider()
    return winprocess.processes()


def self_process() -> winprocess.WindowsProcess:
    """Return the current process."""
    _require_provider()
    return winprocess.self_process()