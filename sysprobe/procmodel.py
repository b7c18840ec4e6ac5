"""Process-level data model: CPU times, memory, users and the Process interface."""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional


class UnimplementedError(NotImplementedError):
    """Raised when a feature is not available on the current platform."""

    def __init__(self, message: str = "unimplemented") -> None:
        super().__init__(message)


def _key(name: str, *, omitempty: bool = False) -> dict:
    return {"json": name, "omitempty": omitempty}


@dataclass
class RuntimeInfo:
    """Information about the interpreter runtime."""

    os: str = field(default="", metadata=_key("os"))
    arch: str = field(default="", metadata=_key("arch"))
    max_procs: int = field(default=0, metadata=_key("max_procs"))
    version: str = field(default="", metadata=_key("version"))


@dataclass
class CPUTimes:
    """CPU timing statistics for a host or a process."""

    user: timedelta = field(default_factory=timedelta, metadata=_key("user"))
    system: timedelta = field(default_factory=timedelta, metadata=_key("system"))
    idle: timedelta = field(
        default_factory=timedelta, metadata=_key("idle", omitempty=True)
    )
    iowait: timedelta = field(
        default_factory=timedelta, metadata=_key("iowait", omitempty=True)
    )
    irq: timedelta = field(
        default_factory=timedelta, metadata=_key("irq", omitempty=True)
    )
    nice: timedelta = field(
        default_factory=timedelta, metadata=_key("nice", omitempty=True)
    )
    soft_irq: timedelta = field(
        default_factory=timedelta, metadata=_key("soft_irq", omitempty=True)
    )
    steal: timedelta = field(
        default_factory=timedelta, metadata=_key("steal", omitempty=True)
    )

    def total(self) -> timedelta:
        """Return the sum of all CPU time counters."""
        return sum(
            (
                self.user,
                self.system,
                self.idle,
                self.iowait,
                self.irq,
                self.nice,
                self.soft_irq,
                self.steal,
            ),
            timedelta(),
        )


@dataclass
class ProcessInfo:
    """Basic facts about a process."""

    name: str = field(default="", metadata=_key("name"))
    pid: int = field(default=0, metadata=_key("pid"))
    ppid: int = field(default=0, metadata=_key("ppid"))
    cwd: str = field(default="", metadata=_key("cwd"))
    exe: str = field(default="", metadata=_key("exe"))
    args: list[str] = field(default_factory=list, metadata=_key("args"))
    start_time: Optional[datetime] = field(default=None, metadata=_key("start_time"))


@dataclass
class UserInfo:
    """User and group identifiers of a process (real, effective, saved)."""

    uid: str = field(default="", metadata=_key("uid"))
    euid: str = field(default="", metadata=_key("euid"))
    suid: str = field(default="", metadata=_key("suid"))
    gid: str = field(default="", metadata=_key("gid"))
    egid: str = field(default="", metadata=_key("egid"))
    sgid: str = field(default="", metadata=_key("sgid"))


@dataclass
class MemoryInfo:
    """Memory usage of a process, in bytes."""

    resident: int = field(default=0, metadata=_key("resident_bytes"))
    virtual: int = field(default=0, metadata=_key("virtual_bytes"))
    metrics: dict[str, int] = field(
        default_factory=dict, metadata=_key("raw", omitempty=True)
    )


@dataclass
class SeccompInfo:
    """Seccomp state of a process."""

    mode: str = field(default="", metadata=_key("mode"))
    no_new_privs: Optional[bool] = field(
        default=None, metadata=_key("no_new_privs", omitempty=True)
    )


@dataclass
class CapabilityInfo:
    """Capability sets of a process."""

    inheritable: list[str] = field(default_factory=list, metadata=_key("inheritable"))
    permitted: list[str] = field(default_factory=list, metadata=_key("permitted"))
    effective: list[str] = field(default_factory=list, metadata=_key("effective"))
    bounding: list[str] = field(default_factory=list, metadata=_key("bounding"))
    ambient: list[str] = field(default_factory=list, metadata=_key("ambient"))


class Process(abc.ABC):
    """A running process whose details can be queried."""

    @abc.abstractmethod
    def info(self) -> ProcessInfo:
        """Return basic process information."""

    @abc.abstractmethod
    def memory(self) -> MemoryInfo:
        """Return memory usage of the process."""

    @abc.abstractmethod
    def user(self) -> UserInfo:
        """Return the user and group identity of the process."""

    @abc.abstractmethod
    def parent(self) -> "Process":
        """Return the parent process."""

    @abc.abstractmethod
    def cpu_time(self) -> CPUTimes:
        """Return CPU time spent by the process."""

    @abc.abstractmethod
    def pid(self) -> int:
        """Return the process identifier."""


def _duration_ns(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * 1_000_000_000 + value.microseconds * 1000


def _convert(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return as_dict(value)
    if isinstance(value, timedelta):
        return _duration_ns(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    return not value


def as_dict(obj: Any) -> dict[str, Any]:
    """Return a JSON-ready mapping of a model dataclass.

    Keys follow the documented field names; optional fields are left out
    when empty, durations become nanoseconds and timestamps ISO 8601 strings.
    """
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"expected a dataclass instance, got {type(obj).__name__}")
    result: dict[str, Any] = {}
    for f in dataclasses.fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("omitempty") and _is_empty(value):
            continue
        result[f.metadata.get("json", f.name)] = _convert(value)
    return result