import re
import socket
from collections import namedtuple

import psutil
import pytest

from sysprobe import netinfo
from sysprobe.netinfo import FQDNLookupError, fqdn, lookup_fqdn, network


def make_resolver(canon, forward, reverse):
    """Build fake getaddrinfo/gethostbyaddr from lookup tables."""

    def getaddrinfo(host, port, family=0, type=0, proto=0, flags=0):
        key = host.lower()
        if key not in forward:
            raise socket.gaierror(socket.EAI_NONAME, "no such host")
        name = canon.get(key, "") if flags & socket.AI_CANONNAME else ""
        return [
            (socket.AF_INET, socket.SOCK_STREAM, 6, name, (ip, 0))
            for ip in forward[key]
        ]

    def gethostbyaddr(ip):
        if ip not in reverse:
            raise socket.herror(1, "Unknown host")
        return (reverse[ip], [], [ip])

    return getaddrinfo, gethostbyaddr


@pytest.fixture
def resolver(monkeypatch):
    def install(canon=None, forward=None, reverse=None):
        gai, gba = make_resolver(canon or {}, forward or {}, reverse or {})
        monkeypatch.setattr(socket, "getaddrinfo", gai)
        monkeypatch.setattr(socket, "gethostbyaddr", gba)

    return install


def error_regex(hostname):
    return (
        "could not get FQDN, all methods failed: "
        f"failed looking up CNAME: lookup {hostname}.*: "
        f"failed looking up IP: lookup {hostname}.*"
    )


@pytest.mark.parametrize(
    "hostname, expected",
    [("elastic.co", "elastic.co"), ("eLaSTic.co", "elastic.co")],
)
def test_lookup_fqdn_real_hostnames(resolver, hostname, expected):
    resolver(canon={"elastic.co": "elastic.co."}, forward={"elastic.co": ["192.0.2.1"]})
    assert lookup_fqdn(hostname) == expected


@pytest.mark.parametrize("hostname", ["foo.bar.elastic.co", "foobarbaz"])
def test_lookup_fqdn_nonexistent_hostnames(resolver, hostname):
    resolver(canon={"elastic.co": "elastic.co."}, forward={"elastic.co": ["192.0.2.1"]})
    with pytest.raises(FQDNLookupError) as excinfo:
        lookup_fqdn(hostname)
    assert re.search(error_regex(hostname), str(excinfo.value))


def test_lookup_fqdn_falls_back_to_reverse_lookup(resolver):
    resolver(
        forward={"box": ["192.0.2.5", "192.0.2.6"]},
        reverse={"192.0.2.6": "Box.Example.COM."},
    )
    assert lookup_fqdn("box") == "box.example.com"


def test_lookup_fqdn_uses_first_successful_reverse_lookup(resolver):
    resolver(
        forward={"box": ["192.0.2.5", "192.0.2.6"]},
        reverse={"192.0.2.5": "first.example.com", "192.0.2.6": "second.example.com"},
    )
    assert lookup_fqdn("box") == "first.example.com"


def test_lookup_fqdn_empty_when_nothing_resolves_without_error(resolver):
    resolver(forward={"box": ["192.0.2.5"]})
    assert lookup_fqdn("box") == ""


def test_fqdn_uses_os_hostname(resolver, monkeypatch):
    resolver(canon={"elastic.co": "ELASTIC.CO."}, forward={"elastic.co": ["192.0.2.1"]})
    monkeypatch.setattr(socket, "gethostname", lambda: "elastic.co")
    assert fqdn() == "elastic.co"


def test_fqdn_hostname_failure(monkeypatch):
    def broken():
        raise OSError("boom")

    monkeypatch.setattr(socket, "gethostname", broken)
    with pytest.raises(FQDNLookupError, match="could not get hostname to look for FQDN"):
        fqdn()


Addr = namedtuple("Addr", "family address netmask broadcast ptp")


def test_network_formats_addresses_and_macs(monkeypatch):
    interfaces = {
        "lo": [
            Addr(socket.AF_INET, "127.0.0.1", "255.0.0.0", None, None),
            Addr(psutil.AF_LINK, "00:00:00:00:00:00", None, None, None),
        ],
        "eth0": [
            Addr(socket.AF_INET, "192.168.1.10", "255.255.255.0", None, None),
            Addr(socket.AF_INET6, "fe80::1%eth0", "ffff:ffff:ffff:ffff::", None, None),
            Addr(psutil.AF_LINK, "AA-BB-CC-00-11-22", None, None, None),
        ],
    }
    monkeypatch.setattr(netinfo.psutil, "net_if_addrs", lambda: interfaces)
    ips, macs = network()
    assert ips == ["127.0.0.1/8", "192.168.1.10/24", "fe80::1/64"]
    assert macs == ["aa:bb:cc:00:11:22"]


def test_network_missing_netmask_uses_full_prefix(monkeypatch):
    interfaces = {"tun0": [Addr(socket.AF_INET, "10.0.0.1", None, None, None)]}
    monkeypatch.setattr(netinfo.psutil, "net_if_addrs", lambda: interfaces)
    assert network() == (["10.0.0.1/32"], [])


def test_network_propagates_errors(monkeypatch):
    def broken():
        raise OSError("interfaces unavailable")

    monkeypatch.setattr(netinfo.psutil, "net_if_addrs", broken)
    with pytest.raises(OSError, match="interfaces unavailable"):
        network()