import os
import platform
import socket
import sys
import time
from datetime import timedelta

import pytest

from sysprobe import system
from sysprobe.procmodel import UnimplementedError


def test_runtime_info():
    info = system.runtime_info()
    assert info.version == platform.python_version()
    assert info.max_procs >= 1
    assert info.os in {"linux", "windows", "darwin", "aix", "freebsd", "openbsd", "netbsd", "sunos"}


def test_self():
    me = system.self_process()
    assert me.pid() == os.getpid()
    info = me.info()
    assert info.pid == os.getpid()
    assert os.path.samefile(info.exe, sys.executable)
    assert len(info.args) >= 1


def test_self_memory_and_cpu():
    me = system.self_process()
    assert me.memory().resident > 0
    deadline = time.monotonic() + 10
    total = me.cpu_time().total()
    while total == timedelta(0) and time.monotonic() < deadline:
        sum(i * i for i in range(100_000))
        total = me.cpu_time().total()
    assert total > timedelta(0)


def test_process_by_pid():
    assert system.process(os.getpid()).info().ppid == os.getppid()


def test_processes_contains_self():
    assert os.getpid() in {p.pid() for p in system.processes()}


def test_host():
    h = system.host()
    assert h.info().hostname == socket.gethostname().lower()
    mem = h.memory()
    assert mem.total >= mem.available
    assert h.cpu_time().total() > timedelta(0)


@pytest.mark.parametrize(
    "call",
    [
        system.host,
        system.processes,
        system.self_process,
        lambda: system.process(os.getpid()),
    ],
)
def test_unsupported_platform_raises(monkeypatch, call):
    monkeypatch.setattr(sys, "platform", "plan9")
    with pytest.raises(UnimplementedError):
        call()