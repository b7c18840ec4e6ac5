"""Host-level data model: host facts, OS details, memory, counters and the Host interface."""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from sysprobe.procmodel import CPUTimes


def _key(name: str, *, omitempty: bool = False, netstat: str | None = None) -> dict:
    meta = {"json": name, "omitempty": omitempty}
    if netstat is not None:
        meta["netstat"] = netstat
    return meta


@dataclass
class OSInfo:
    """Operating system details."""

    type: str = field(default="", metadata=_key("type"))
    family: str = field(default="", metadata=_key("family"))
    platform: str = field(default="", metadata=_key("platform"))
    name: str = field(default="", metadata=_key("name"))
    version: str = field(default="", metadata=_key("version"))
    major: int = field(default=0, metadata=_key("major"))
    minor: int = field(default=0, metadata=_key("minor"))
    patch: int = field(default=0, metadata=_key("patch"))
    build: str = field(default="", metadata=_key("build", omitempty=True))
    codename: str = field(default="", metadata=_key("codename", omitempty=True))


@dataclass
class HostInfo:
    """Basic facts about the host."""

    architecture: str = field(default="", metadata=_key("architecture"))
    boot_time: Optional[datetime] = field(default=None, metadata=_key("boot_time"))
    containerized: Optional[bool] = field(
        default=None, metadata=_key("containerized", omitempty=True)
    )
    hostname: str = field(default="", metadata=_key("name"))
    ips: list[str] = field(default_factory=list, metadata=_key("ip", omitempty=True))
    kernel_version: str = field(default="", metadata=_key("kernel_version"))
    macs: list[str] = field(default_factory=list, metadata=_key("mac"))
    os: Optional[OSInfo] = field(default=None, metadata=_key("os"))
    timezone: str = field(default="", metadata=_key("timezone"))
    timezone_offset_sec: int = field(default=0, metadata=_key("timezone_offset_sec"))
    unique_id: str = field(default="", metadata=_key("id", omitempty=True))

    def uptime(self) -> timedelta:
        """Return the time elapsed since the host booted."""
        if self.boot_time is None:
            raise ValueError("boot time is unknown")
        return datetime.now(self.boot_time.tzinfo) - self.boot_time


@dataclass
class LoadAverageInfo:
    """System load averages."""

    one: float = field(default=0.0, metadata=_key("one_min"))
    five: float = field(default=0.0, metadata=_key("five_min"))
    fifteen: float = field(default=0.0, metadata=_key("fifteen_min"))


@dataclass
class HostMemoryInfo:
    """Host memory statistics, in bytes."""

    total: int = field(default=0, metadata=_key("total_bytes"))
    used: int = field(default=0, metadata=_key("used_bytes"))
    available: int = field(default=0, metadata=_key("available_bytes"))
    free: int = field(default=0, metadata=_key("free_bytes"))
    virtual_total: int = field(default=0, metadata=_key("virtual_total_bytes"))
    virtual_used: int = field(default=0, metadata=_key("virtual_used_bytes"))
    virtual_free: int = field(default=0, metadata=_key("virtual_free_bytes"))
    metrics: dict[str, int] = field(
        default_factory=dict, metadata=_key("raw", omitempty=True)
    )


@dataclass
class SNMP:
    """Counters from the SNMP network statistics table."""

    ip: dict[str, int] = field(default_factory=dict, metadata=_key("ip", netstat="Ip"))
    icmp: dict[str, int] = field(
        default_factory=dict, metadata=_key("icmp", netstat="Icmp")
    )
    icmp_msg: dict[str, int] = field(
        default_factory=dict, metadata=_key("icmp_msg", netstat="IcmpMsg")
    )
    tcp: dict[str, int] = field(default_factory=dict, metadata=_key("tcp", netstat="Tcp"))
    udp: dict[str, int] = field(default_factory=dict, metadata=_key("udp", netstat="Udp"))
    udp_lite: dict[str, int] = field(
        default_factory=dict, metadata=_key("udp_lite", netstat="UdpLite")
    )


@dataclass
class Netstat:
    """Extended TCP and IP counters."""

    tcp_ext: dict[str, int] = field(
        default_factory=dict, metadata=_key("tcp_ext", netstat="TcpExt")
    )
    ip_ext: dict[str, int] = field(
        default_factory=dict, metadata=_key("ip_ext", netstat="IpExt")
    )


@dataclass
class NetworkCountersInfo:
    """All available network counters."""

    snmp: SNMP = field(default_factory=SNMP, metadata=_key("snmp"))
    netstat: Netstat = field(default_factory=Netstat, metadata=_key("netstat"))


_VMSTAT_FIELDS = (
    "nr_free_pages", "nr_alloc_batch", "nr_inactive_anon", "nr_active_anon",
    "nr_inactive_file", "nr_active_file", "nr_unevictable", "nr_mlock",
    "nr_anon_pages", "nr_mapped", "nr_file_pages", "nr_dirty", "nr_writeback",
    "nr_slab_reclaimable", "nr_slab_unreclaimable", "nr_page_table_pages",
    "nr_kernel_stack", "nr_unstable", "nr_bounce", "nr_vmscan_write",
    "nr_vmscan_immediate_reclaim", "nr_writeback_temp", "nr_isolated_anon",
    "nr_isolated_file", "nr_shmem", "nr_dirtied", "nr_written", "nr_pages_scanned",
    "numa_hit", "numa_miss", "numa_foreign", "numa_interleave", "numa_local",
    "numa_other", "workingset_refault", "workingset_activate",
    "workingset_nodereclaim", "nr_anon_transparent_hugepages", "nr_free_cma",
    "nr_dirty_threshold", "nr_dirty_background_threshold", "pgpgin", "pgpgout",
    "pswpin", "pswpout", "pgalloc_dma", "pgalloc_dma32", "pgalloc_normal",
    "pgalloc_high", "pgalloc_movable", "pgfree", "pgactivate", "pgdeactivate",
    "pgfault", "pgmajfault", "pgrefill_dma", "pgrefill_dma32", "pgrefill_normal",
    "pgrefill_high", "pgrefill_movable", "pgsteal_kswapd_dma",
    "pgsteal_kswapd_dma32", "pgsteal_kswapd_normal", "pgsteal_kswapd_high",
    "pgsteal_kswapd_movable", "pgsteal_direct_dma", "pgsteal_direct_dma32",
    "pgsteal_direct_normal", "pgsteal_direct_high", "pgsteal_direct_movable",
    "pgscan_kswapd_dma", "pgscan_kswapd_dma32", "pgscan_kswapd_normal",
    "pgscan_kswapd_high", "pgscan_kswapd_movable", "pgscan_direct_dma",
    "pgscan_direct_dma32", "pgscan_direct_normal", "pgscan_direct_high",
    "pgscan_direct_movable", "pgscan_direct_throttle", "zone_reclaim_failed",
    "pginodesteal", "slabs_scanned", "kswapd_inodesteal",
    "kswapd_low_wmark_hit_quickly", "kswapd_high_wmark_hit_quickly", "pageoutrun",
    "allocstall", "pgrotated", "drop_pagecache", "drop_slab", "numa_pte_updates",
    "numa_huge_pte_updates", "numa_hint_faults", "numa_hint_faults_local",
    "numa_pages_migrated", "pgmigrate_success", "pgmigrate_fail",
    "compact_migrate_scanned", "compact_free_scanned", "compact_isolated",
    "compact_stall", "compact_fail", "compact_success", "htlb_buddy_alloc_success",
    "htlb_buddy_alloc_fail", "unevictable_pgs_culled", "unevictable_pgs_scanned",
    "unevictable_pgs_rescued", "unevictable_pgs_mlocked",
    "unevictable_pgs_munlocked", "unevictable_pgs_cleared",
    "unevictable_pgs_stranded", "thp_fault_alloc", "thp_fault_fallback",
    "thp_collapse_alloc", "thp_collapse_alloc_failed", "thp_split",
    "thp_zero_page_alloc", "thp_zero_page_alloc_failed", "balloon_inflate",
    "balloon_deflate", "balloon_migrate", "nr_tlb_remote_flush",
    "nr_tlb_remote_flush_received", "nr_tlb_local_flush_all",
    "nr_tlb_local_flush_one", "vmacache_find_calls", "vmacache_find_hits",
    "vmacache_full_flushes",
    # Not documented in proc(5) as of 4.15.
    "nr_zone_inactive_anon", "nr_zone_active_anon", "nr_zone_inactive_file",
    "nr_zone_active_file", "nr_zone_unevictable", "nr_zone_write_pending",
    "nr_zspages", "nr_shmem_hugepages", "nr_shmem_pmdmapped", "allocstall_dma",
    "allocstall_dma32", "allocstall_normal", "allocstall_movable", "pgskip_dma",
    "pgskip_dma32", "pgskip_normal", "pgskip_movable", "pglazyfree", "pglazyfreed",
    "pgrefill", "pgsteal_kswapd", "pgsteal_direct", "pgscan_kswapd", "pgscan_direct",
    "oom_kill", "compact_daemon_wake", "compact_daemon_migrate_scanned",
    "compact_daemon_free_scanned", "thp_file_alloc", "thp_file_mapped",
    "thp_split_page", "thp_split_page_failed", "thp_deferred_split_page",
    "thp_split_pmd", "thp_split_pud", "thp_swpout", "thp_swpout_fallback",
    "swap_ra", "swap_ra_hit",
)

VMStatInfo = dataclasses.make_dataclass(
    "VMStatInfo",
    [(name, int, field(default=0, metadata=_key(name))) for name in _VMSTAT_FIELDS],
)
VMStatInfo.__module__ = __name__
VMStatInfo.__doc__ = (
    "Virtual memory statistics; counters absent on the running kernel stay zero."
)


class Host(abc.ABC):
    """The host this process runs on."""

    @abc.abstractmethod
    def info(self) -> HostInfo:
        """Return basic host information."""

    @abc.abstractmethod
    def cpu_time(self) -> CPUTimes:
        """Return host-wide CPU times."""

    @abc.abstractmethod
    def memory(self) -> HostMemoryInfo:
        """Return host memory statistics."""

    @abc.abstractmethod
    def fqdn(self) -> str:
        """Return the lowercased fully-qualified domain name of the host."""