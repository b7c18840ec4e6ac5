"""Translation of kernel device paths into drive-letter paths."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

DEVICE_MUP = "\\device\\mup"
"""Device used for unmounted network file systems."""

LANMAN_REDIRECTOR = "lanmanredirector"
"""Marker that appears in the device name of mounted network file systems."""

_DRIVE_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_MIN_BUFFER = 64
_MAX_BUFFER = 1024


class NoDeviceError(ValueError):
    """Raised when a string is not a device path."""

    def __init__(self, message: str = "not a device path") -> None:
        super().__init__(message)


class DeviceNotFoundError(LookupError):
    """Raised when a path points to a device not mapped to any drive."""

    def __init__(self, message: str = "logical device not found") -> None:
        super().__init__(message)


class InsufficientBufferError(OSError):
    """Raised when a device name does not fit into the requested buffer size."""

    def __init__(self, message: str = "the data area passed to a system call is too small") -> None:
        super().__init__(message)


class _DeviceProvider(Protocol):
    def logical_drives(self) -> int: ...

    def query_dos_device(self, drive: str, size: int) -> str: ...


class MappingDeviceProvider:
    """A device provider backed by a mapping of drive letters to device names."""

    def __init__(self, devices: Mapping[str, str]) -> None:
        normalised: dict[str, str] = {}
        for drive, device in devices.items():
            letter = drive.upper()
            if len(letter) != 1 or letter not in _DRIVE_LETTERS:
                raise ValueError(f"invalid drive letter: {drive!r}")
            normalised[letter] = device
        self._devices = normalised

    def logical_drives(self) -> int:
        """Return a bit mask of the available drives, bit 0 being drive A."""
        mask = 0
        for letter in self._devices:
            mask |= 1 << (ord(letter) - ord("A"))
        return mask

    def query_dos_device(self, drive: str, size: int) -> str:
        """Return the device name of ``drive`` if it fits into ``size`` characters."""
        letter = drive.upper()
        if len(letter) != 1 or letter not in _DRIVE_LETTERS:
            raise ValueError("not a drive")
        try:
            device = self._devices[letter]
        except KeyError:
            raise DeviceNotFoundError(f"drive {letter} not found") from None
        # Room is needed for the two terminating null characters.
        if len(device) + 2 > size:
            raise InsufficientBufferError()
        return device


def fix_network_drive_path(device: str) -> str:
    """Turn the device name of a mapped network drive into its path form.

    ``\\device\\vboxminirdr\\;z:\\vboxsvr\\share`` becomes
    ``\\device\\vboxminirdr\\vboxsvr\\share``; other names are returned unchanged.
    """
    semicolon = device.find(";")
    colon = device.find(":")
    if semicolon == -1 or colon != semicolon + 2:
        return device
    path_start = device.find("\\", colon + 1)
    if path_start == -1:
        return device
    dev = device[:semicolon]
    if dev.endswith("\\"):
        dev = dev[:-1]
    return dev + device[path_start:]


class DeviceMapper:
    """Maps kernel device paths to paths on lettered drives."""

    def __init__(self, provider: _DeviceProvider) -> None:
        self._provider = provider

    def _device(self, letter: str) -> str:
        size = _MIN_BUFFER
        while size <= _MAX_BUFFER:
            try:
                return self._provider.query_dos_device(letter, size)
            except InsufficientBufferError:
                size *= 2
        raise InsufficientBufferError()

    def _drive_letters(self) -> list[str]:
        mask = self._provider.logical_drives()
        return [letter for bit, letter in enumerate(_DRIVE_LETTERS) if mask & (1 << bit)]

    def device_path_to_drive_path(self, path: str) -> str:
        """Return the drive path for the device path ``path``.

        Unmapped network shares become UNC paths. Raises DeviceNotFoundError
        when no drive holds the device.
        """
        path_lower = path.lower()
        is_mup = path_lower.startswith(DEVICE_MUP)

        for letter in self._drive_letters():
            try:
                dev = self._device(letter)
            except (OSError, LookupError, ValueError):
                continue

            dev = fix_network_drive_path(dev.lower())
            found = path_lower.startswith(dev)

            if not found and is_mup and LANMAN_REDIRECTOR in dev:
                dev = dev.replace(LANMAN_REDIRECTOR, "mup", 1)
                found = path_lower.startswith(dev)

            if found:
                offset = len(dev)
                if offset < len(path) and path[offset] == "\\":
                    offset += 1
                return f"{letter}:\\" + path[offset:]

        if is_mup:
            return "\\" + path[len(DEVICE_MUP):]
        raise DeviceNotFoundError()