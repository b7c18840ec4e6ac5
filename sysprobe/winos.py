"""Operating system, architecture, boot time, kernel and machine identity facts."""

from __future__ import annotations

import os
import platform
import re
import sys
from collections.abc import Mapping
from datetime import datetime

import psutil

from sysprobe.hostmodel import OSInfo
from sysprobe.procmodel import UnimplementedError

_CURRENT_VERSION_PATH = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"
_CRYPTOGRAPHY_PATH = r"SOFTWARE\Microsoft\Cryptography"
_OS_VALUE_NAMES = (
    "ProductName",
    "CurrentMajorVersionNumber",
    "CurrentMinorVersionNumber",
    "CurrentVersion",
    "CurrentBuild",
    "UBR",
)
_WINDOWS11_FIRST_BUILD = 22000

_ARCHITECTURES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "x86_64": "x86_64",
    "x86": "x86",
    "arm64": "arm64",
    "arm": "arm",
    "ia64": "ia64",
}

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int | None:
    if _INT_RE.fullmatch(text):
        return int(text)
    return None


def _value_error_message(path: str, name: str, reason: str) -> str:
    return f"failed to get value of HKLM\\{path}\\{name}: {reason}"


def _string(values: Mapping[str, object], name: str, path: str = _CURRENT_VERSION_PATH) -> str:
    if name not in values:
        raise FileNotFoundError(_value_error_message(path, name, "value does not exist"))
    value = values[name]
    if not isinstance(value, str):
        raise TypeError(_value_error_message(path, name, "unexpected value type"))
    return value


def _integer(values: Mapping[str, object], name: str) -> int:
    if name not in values:
        raise FileNotFoundError(
            _value_error_message(_CURRENT_VERSION_PATH, name, "value does not exist")
        )
    value = values[name]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            _value_error_message(_CURRENT_VERSION_PATH, name, "unexpected value type")
        )
    return value


def fix_windows11_naming(current_build: str, os_info: OSInfo) -> None:
    """Rename "Windows 10" to "Windows 11" in ``os_info.name`` for 10.0.22000 and later.

    The product name stored by the system was never updated for Windows 11.
    """
    build_number = _atoi(current_build)
    if build_number is None:
        return
    if (
        os_info.major > 10
        or (os_info.major == 10 and os_info.minor > 0)
        or (os_info.major == 10 and os_info.minor == 0 and build_number >= _WINDOWS11_FIRST_BUILD)
    ):
        os_info.name = os_info.name.replace("Windows 10", "Windows 11", 1)


def read_os_info(values: Mapping[str, object]) -> OSInfo:
    """Build OS information from the values of the CurrentVersion registry key.

    Raises FileNotFoundError for a missing required value and TypeError for
    a value of the wrong type.
    """
    os_info = OSInfo(type="windows", family="windows", platform="windows")
    os_info.name = _string(values, "ProductName")

    try:
        major = _integer(values, "CurrentMajorVersionNumber")
        minor = _integer(values, "CurrentMinorVersionNumber")
    except (FileNotFoundError, TypeError):
        os_info.version = _string(values, "CurrentVersion")
        parts = os_info.version.split(".", 2)
        os_info.major = _atoi(parts[0]) or 0
        if len(parts) > 1:
            os_info.minor = _atoi(parts[1]) or 0
    else:
        os_info.major = major
        os_info.minor = minor
        os_info.version = f"{major}.{minor}"

    current_build = _string(values, "CurrentBuild")
    update_build_revision = _integer(values, "UBR") if "UBR" in values else 0
    os_info.build = f"{current_build}.{update_build_revision}"

    fix_windows11_naming(current_build, os_info)
    return os_info


def _read_registry_values(path: str, names: tuple[str, ...]) -> dict[str, object]:
    if sys.platform != "win32":
        raise UnimplementedError()
    import winreg

    try:
        key = winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE,
            path,
            0,
            winreg.KEY_READ | winreg.KEY_WOW64_64KEY,
        )
    except OSError as err:
        raise OSError(f"failed to open HKLM\\{path}: {err}") from err

    values: dict[str, object] = {}
    with key:
        for name in names:
            try:
                value, _kind = winreg.QueryValueEx(key, name)
            except FileNotFoundError:
                continue
            values[name] = value
    return values


def operating_system() -> OSInfo:
    """Return information about the running Windows version."""
    return read_os_info(_read_registry_values(_CURRENT_VERSION_PATH, _OS_VALUE_NAMES))


def architecture() -> str:
    """Return the native hardware architecture, such as ``x86_64`` or ``arm64``."""
    if sys.platform == "win32":
        raw = os.environ.get("PROCESSOR_ARCHITEW6432") or os.environ.get(
            "PROCESSOR_ARCHITECTURE", ""
        )
    else:
        raw = platform.machine()
    if not raw:
        raise UnimplementedError("architecture is unknown")
    lowered = raw.lower()
    return _ARCHITECTURES.get(lowered, lowered)


def boot_time() -> datetime:
    """Return the host boot time rounded to the nearest second, in local time."""
    return datetime.fromtimestamp(round(psutil.boot_time())).astimezone()


def kernel_version() -> str:
    """Return the Windows kernel version as ``major.minor.build``."""
    if sys.platform != "win32":
        raise UnimplementedError()
    version = sys.getwindowsversion()
    return f"{version.major}.{version.minor}.{version.build}"


def machine_id() -> str:
    """Return the machine GUID stored by the system."""
    values = _read_registry_values(_CRYPTOGRAPHY_PATH, ("MachineGuid",))
    return _string(values, "MachineGuid", _CRYPTOGRAPHY_PATH)