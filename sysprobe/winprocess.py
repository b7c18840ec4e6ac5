"""Process information collected from the running system."""

from __future__ import annotations

import contextlib
import errno
import ntpath
import os
import sys
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from typing import TypeVar

import psutil

from sysprobe.procmodel import (
    CPUTimes,
    MemoryInfo,
    Process,
    ProcessInfo,
    UnimplementedError,
    UserInfo,
)

_T = TypeVar("_T")

# The Idle and System processes can never be opened by user-level code.
_UNOPENABLE_PIDS = frozenset({0, 4})


@contextlib.contextmanager
def _process_errors(pid: int) -> Iterator[None]:
    try:
        yield
    except psutil.NoSuchProcess as err:
        raise ProcessLookupError(errno.ESRCH, f"process {pid} not found") from err
    except psutil.AccessDenied as err:
        raise PermissionError(errno.EACCES, f"access to process {pid} denied") from err


def _optional(reader: Callable[[], _T], default: _T) -> _T:
    try:
        return reader()
    except (psutil.Error, OSError):
        return default


def _base_name(path: str) -> str:
    stripped = path.rstrip("\\/")
    if not stripped:
        return "\\" if path else "."
    return ntpath.basename(stripped)


class WindowsProcess(Process):
    """A running process, identified by its PID."""

    def __init__(self, pid: int) -> None:
        self._pid = pid
        with _process_errors(pid):
            proc = psutil.Process(pid)
            created = proc.create_time()
        self._proc = proc

        exe = _optional(proc.exe, "")
        cwd = _optional(proc.cwd, "").rstrip("\\")
        self._info = ProcessInfo(
            name=_base_name(exe),
            pid=pid,
            ppid=_optional(proc.ppid, 0),
            cwd=cwd,
            exe=exe,
            args=list(_optional(proc.cmdline, [])),
            start_time=datetime.fromtimestamp(created).astimezone(),
        )

    def pid(self) -> int:
        """Return the process identifier."""
        return self._pid

    def info(self) -> ProcessInfo:
        """Return the facts gathered when the process was opened."""
        return self._info

    def parent(self) -> "WindowsProcess":
        """Return the parent process."""
        return WindowsProcess(self.info().ppid)

    def memory(self) -> MemoryInfo:
        """Return the working set and private (or virtual) size in bytes."""
        with _process_errors(self._pid):
            counters = self._proc.memory_info()
        private = getattr(counters, "private", None)
        virtual = private if private is not None else counters.vms
        return MemoryInfo(resident=counters.rss, virtual=virtual)

    def user(self) -> UserInfo:
        """Return the user and group identifiers of the process."""
        if not hasattr(self._proc, "uids"):
            raise UnimplementedError("process user lookup is not available on this platform")
        with _process_errors(self._pid):
            uids = self._proc.uids()
            gids = self._proc.gids()
        return UserInfo(
            uid=str(uids.real),
            euid=str(uids.effective),
            suid=str(uids.saved),
            gid=str(gids.real),
            egid=str(gids.effective),
            sgid=str(gids.saved),
        )

    def cpu_time(self) -> CPUTimes:
        """Return user and kernel CPU time spent by the process."""
        with _process_errors(self._pid):
            times = self._proc.cpu_times()
        return CPUTimes(user=timedelta(seconds=times.user), system=timedelta(seconds=times.system))

    def open_handle_count(self) -> int:
        """Return the number of open handles of the process."""
        with _process_errors(self._pid):
            if hasattr(self._proc, "num_handles"):
                return self._proc.num_handles()
            return self._proc.num_fds()


def process(pid: int) -> WindowsProcess:
    """Return the process with the given PID."""
    return WindowsProcess(pid)


def processes() -> list[WindowsProcess]:
    """Return every process that can be opened.

    Processes that cannot be opened are left out; if none can be, the last
    failure is raised.
    """
    found: list[WindowsProcess] = []
    last_error: Exception | None = None
    for pid in psutil.pids():
        if sys.platform == "win32" and pid in _UNOPENABLE_PIDS:
            continue
        try:
            found.append(WindowsProcess(pid))
        except (OSError, ValueError) as err:
            last_error = err
    if not found and last_error is not None:
        raise last_error
    return found


def self_process() -> WindowsProcess:
    """Return the current process."""
    return WindowsProcess(os.getpid())