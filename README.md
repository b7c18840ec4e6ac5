# sysprobe

`sysprobe` gathers information about the machine it runs on and about the
processes running there: hostname and fully-qualified domain name, IP and MAC
addresses, OS name and version, boot time, memory, CPU times, and per-process
details such as executable, arguments, working directory, owner and memory use.

Collection is built on `psutil` and runs on Windows, Linux, macOS and AIX.
Some host facts come from the Windows registry or Windows version data (OS
name and version, kernel version, machine ID); on other platforms they are
left empty. On any other platform the entry points in `sysprobe.system`
raise `sysprobe.procmodel.UnimplementedError`.

## Installation

```
pip install sysprobe
```

To run the test suite:

```
pip install "sysprobe[test]"
pytest
```

## Usage

```python
from sysprobe import system
from sysprobe.procmodel import UnimplementedError, as_dict
from sysprobe.winhost import HostCollectionError

print(as_dict(system.runtime_info()))   # os, arch, max_procs, Python version

try:
    host = system.host()
except HostCollectionError as exc:
    host = exc.host                      # partial result
    print("some facts failed:", exc.errors)

info = host.info()
print(info.hostname, info.os.name if info.os else None)
print(host.memory().total)
print(host.cpu_time().total())
print(info.uptime())

me = system.self_process()
print(me.pid(), me.info().exe, me.info().args)
print(me.memory().resident)
print(me.cpu_time().total())
print(me.open_handle_count())

for proc in system.processes():
    print(proc.pid(), proc.info().name)
```

`system.processes()` returns every process that could be opened; if none
could, the last failure is raised. A process that does not exist raises
`ProcessLookupError`, one that cannot be accessed `PermissionError`.

`WindowsProcess.user()` returns real, effective and saved user and group IDs
where the platform reports them; on Windows it raises `UnimplementedError`.
`open_handle_count()` counts handles on Windows and file descriptors elsewhere.

`sysprobe.winhost.new_host()` collects as much as it can. Facts that are not
available on the platform are left empty; when a reader fails, it raises
`HostCollectionError`, whose `host` holds what did succeed and whose `errors`
lists the failures.

`as_dict()` turns any of the model dataclasses into a JSON-ready mapping:
durations become nanoseconds, timestamps ISO 8601 strings, and optional
fields are left out when empty.

### Network identity

```python
from sysprobe.netinfo import fqdn, lookup_fqdn, network, FQDNLookupError

ips, macs = network()        # addresses in CIDR notation, MAC addresses
try:
    print(fqdn())
except FQDNLookupError as exc:
    print("no FQDN:", exc)
```

`lookup_fqdn(hostname)` first tries the canonical name and then a reverse
lookup of each of the host's addresses. The result is lower-cased and has no
trailing dot; it is an empty string when nothing was found and no lookup
failed.

### Windows OS details

`sysprobe.winos.operating_system()` reads the running Windows version from the
registry. `read_os_info(values)` builds the same `OSInfo` from a plain mapping
of registry value names (`ProductName`, `CurrentMajorVersionNumber`,
`CurrentMinorVersionNumber`, `CurrentVersion`, `CurrentBuild`, `UBR`), and
`fix_windows11_naming()` renames "Windows 10" to "Windows 11" for version
10.0.22000 and later.

### Windows device paths

`sysprobe.windevice.DeviceMapper` converts NT device paths into drive paths.
Mapped network shares map to their drive letter; unmapped shares under
`\Device\Mup` become UNC paths; anything else raises `DeviceNotFoundError`.
The mapper takes a provider; `MappingDeviceProvider` is built from a plain
drive-to-device dictionary:

```python
from sysprobe.windevice import DeviceMapper, MappingDeviceProvider

mapper = DeviceMapper(MappingDeviceProvider({"C": r"\Device\Harddisk0Volume2"}))
print(mapper.device_path_to_drive_path(r"\Device\Harddisk0Volume2\Windows\notepad.exe"))
# C:\Windows\notepad.exe
```

## What it does not do

- There is no command-line tool; the package is used as a library.
- The data model has classes for load averages, virtual-memory statistics
  and network counters (`LoadAverageInfo`, `VMStatInfo`,
  `NetworkCountersInfo`), and for seccomp and capability sets, but nothing in
  the package collects them. Process environments are not collected either.