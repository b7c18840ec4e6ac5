"""Host name resolution and network interface enumeration."""

from __future__ import annotations

import ipaddress
import socket

import psutil


class FQDNLookupError(OSError):
    """Raised when the fully-qualified domain name cannot be determined."""


def fqdn() -> str:
    """Return the lowercased fully-qualified domain name of this host.

    The OS hostname is resolved first through its canonical name, then
    through reverse lookups of its addresses.
    """
    try:
        hostname = socket.gethostname()
    except OSError as err:
        raise FQDNLookupError(f"could not get hostname to look for FQDN: {err}") from err
    return lookup_fqdn(hostname)


def _describe(hostname: str, err: OSError) -> str:
    reason = err.strerror or str(err)
    return f"lookup {hostname}: {reason}"


def _clean(name: str) -> str:
    return name.removesuffix(".").lower()


def lookup_fqdn(hostname: str) -> str:
    """Resolve ``hostname`` to a lowercased FQDN.

    Returns an empty string when no name was found but no lookup failed;
    raises FQDNLookupError when the lookups fail.
    """
    errs: str | None = None

    cname = ""
    try:
        results = socket.getaddrinfo(hostname, None, flags=socket.AI_CANONNAME)
        if results:
            cname = results[0][3] or ""
    except OSError as err:
        errs = (
            "could not get FQDN, all methods failed: failed looking up CNAME: "
            + _describe(hostname, err)
        )
    if cname:
        return _clean(cname)

    ips: list[str] = []
    try:
        ips = list(dict.fromkeys(info[4][0] for info in socket.getaddrinfo(hostname, None)))
    except OSError as err:
        prefix = errs if errs is not None else "could not get FQDN, all methods failed"
        errs = f"{prefix}: failed looking up IP: {_describe(hostname, err)}"

    for ip in ips:
        try:
            name = socket.gethostbyaddr(ip)[0]
        except OSError:
            continue
        if name:
            return _clean(name)

    if errs is not None:
        raise FQDNLookupError(errs)
    return ""


def _prefix_length(address: ipaddress._BaseAddress, netmask: str | None) -> int:
    if not netmask:
        return address.max_prefixlen
    try:
        mask = ipaddress.ip_address(netmask.split("%", 1)[0])
    except ValueError:
        return address.max_prefixlen
    return bin(int(mask)).count("1")


def _format_mac(raw: str) -> str:
    mac = raw.replace("-", ":").lower()
    if not mac or all(part in ("", "0", "00") for part in mac.split(":")):
        return ""
    return mac


def network() -> tuple[list[str], list[str]]:
    """Return the interface addresses (CIDR notation) and MAC addresses."""
    ips: list[str] = []
    macs: list[str] = []
    for addrs in psutil.net_if_addrs().values():
        mac = ""
        for addr in addrs:
            if addr.family in (socket.AF_INET, socket.AF_INET6):
                try:
                    ip = ipaddress.ip_address(addr.address.split("%", 1)[0])
                except ValueError:
                    continue
                ips.append(f"{ip}/{_prefix_length(ip, addr.netmask)}")
            elif addr.family == psutil.AF_LINK and not mac:
                mac = _format_mac(addr.address or "")
        if mac:
            macs.append(mac)
    return ips, macs