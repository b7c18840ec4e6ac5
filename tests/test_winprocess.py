import os
import subprocess
import sys
import time
from datetime import datetime, timedelta

import pytest

from sysprobe.procmodel import Process
from sysprobe.winprocess import WindowsProcess, process, processes, self_process

_CHILD_CODE = "import sys, time; print('ready', flush=True); time.sleep(60)"
_MISSING_PID = 2**22 + 1


@pytest.fixture
def child(tmp_path):
    proc = subprocess.Popen(
        [sys.executable, "-c", _CHILD_CODE],
        cwd=str(tmp_path),
        stdout=subprocess.PIPE,
        text=True,
    )
    try:
        assert proc.stdout.readline().strip() == "ready"
        yield proc, tmp_path
    finally:
        proc.kill()
        proc.wait()


def test_self_process_identity():
    me = self_process()
    assert isinstance(me, Process)
    assert me.pid() == os.getpid()
    assert me.info().pid == os.getpid()
    assert me.info().ppid == os.getppid()


def test_self_process_start_time_is_in_the_past():
    assert self_process().info().start_time <= datetime.now().astimezone()


def test_self_process_exe():
    info = self_process().info()
    assert os.path.samefile(info.exe, sys.executable)
    assert info.name == os.path.basename(info.exe)


def test_parent_is_parent_process():
    assert self_process().parent().pid() == os.getppid()


def test_memory_resident_nonzero():
    assert self_process().memory().resident > 0


def test_cpu_time_becomes_nonzero():
    me = self_process()
    deadline = time.monotonic() + 10
    total = me.cpu_time().total()
    while total == timedelta(0) and time.monotonic() < deadline:
        sum(i * i for i in range(100_000))
        total = me.cpu_time().total()
    assert total > timedelta(0)


def test_open_handle_count_positive():
    assert self_process().open_handle_count() > 0


def test_missing_process_raises():
    with pytest.raises(ProcessLookupError):
        WindowsProcess(_MISSING_PID)


def test_process_function_matches_pid():
    assert process(os.getpid()).info().pid == os.getpid()


def test_processes_contains_self():
    pids = [p.pid() for p in processes()]
    assert os.getpid() in pids
    assert len(pids) == len(set(pids))


def test_child_process_info(child):
    proc, cwd = child
    info = WindowsProcess(proc.pid).info()
    assert info.args == [sys.executable, "-c", _CHILD_CODE]
    assert info.ppid == os.getpid()
    assert os.path.samefile(info.cwd, cwd)


def test_child_parent_is_self(child):
    proc, _cwd = child
    assert WindowsProcess(proc.pid).parent().pid() == os.getpid()