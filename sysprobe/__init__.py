"""Host and process information: OS, memory, CPU times, network identity, processes and device paths."""

__version__ = "0.1.0"
__all__ = [
    "hostmodel",
    "netinfo",
    "procmodel",
    "system",
    "windevice",
    "winhost",
    "winos",
    "winprocess",
]