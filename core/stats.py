"""
Typed statistics payloads produced by the service clients, and the
formatters widgets use to show them.

Encoded discriminator-first like the metric selections:
{"type": "jellyfin", "jellyfin": {...}}.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class ProxmoxStats(BaseModel):
    cpu_usage_percent: float = Field(default=0, alias="cpuUsagePercent")
    memory_used_bytes: int = Field(default=0, alias="memoryUsedBytes")
    memory_total_bytes: int = Field(default=0, alias="memoryTotalBytes")
    total_cts: int = Field(default=0, alias="totalCTs")
    total_vms: int = Field(default=0, alias="totalVMs")
    running_count: int = Field(default=0, alias="runningCount")
    stopped_count: int = Field(default=0, alias="stoppedCount")
    net_up_bps: float = Field(default=0, alias="netUpBps")
    net_down_bps: float = Field(default=0, alias="netDownBps")

    model_config = {"populate_by_name": True}


class JellyfinStats(BaseModel):
    tv_shows: int = Field(alias="tvShows")
    movies: int
    users: int = 0

    model_config = {"populate_by_name": True}


class QBittorrentStats(BaseModel):
    seeding: int
    downloading: int
    upload_speed_bytes_per_sec: float = Field(alias="uploadSpeedBytesPerSec")
    download_speed_bytes_per_sec: float = Field(alias="downloadSpeedBytesPerSec")

    model_config = {"populate_by_name": True}


class PiHoleStats(BaseModel):
    status: Optional[str] = None
    domains_being_blocked: int = Field(alias="domainsBeingBlocked")
    dns_queries_today: int = Field(alias="dnsQueriesToday")
    ads_blocked_today: int = Field(alias="adsBlockedToday")
    ads_percentage_today: float = Field(alias="adsPercentageToday")
    unique_clients: int = Field(alias="uniqueClients")
    queries_forwarded: int = Field(alias="queriesForwarded")
    queries_cached: int = Field(alias="queriesCached")
    gravity_last_updated_relative: Optional[str] = Field(default=None, alias="gravityLastUpdatedRelative")
    gravity_last_updated_absolute: Optional[int] = Field(default=None, alias="gravityLastUpdatedAbsolute")

    model_config = {"populate_by_name": True}


class ProxmoxPayload(BaseModel):
    type: Literal["proxmox"] = "proxmox"
    proxmox: ProxmoxStats


class JellyfinPayload(BaseModel):
    type: Literal["jellyfin"] = "jellyfin"
    jellyfin: JellyfinStats


class QBittorrentPayload(BaseModel):
    type: Literal["qbittorrent"] = "qbittorrent"
    qbittorrent: QBittorrentStats


class PiHolePayload(BaseModel):
    type: Literal["pihole"] = "pihole"
    pihole: PiHoleStats


ServiceStatsPayload = Annotated[
    Union[ProxmoxPayload, JellyfinPayload, QBittorrentPayload, PiHolePayload],
    Field(discriminator="type"),
]


# ── Formatting ───────────────────────────────────────

_BINARY_UNITS = ["bytes", "KB", "MB", "GB", "TB", "PB"]


def format_percent(value: float) -> str:
    return f"{value:.0f}%"


def format_bytes(num_bytes: int) -> str:
    """Binary (1024-based) byte count, e.g. ``1.5 GB``."""
    if abs(num_bytes) < 1024:
        return "1 byte" if num_bytes == 1 else f"{num_bytes} bytes"
    value = float(num_bytes)
    unit = _BINARY_UNITS[0]
    for unit in _BINARY_UNITS[1:]:
        value /= 1024
        if abs(value) < 1024:
            break
    if unit == "KB":
        return f"{value:.0f} {unit}"
    return f"{value:.1f} {unit}"


def format_rate(bytes_per_sec: float) -> str:
    return format_bytes(int(bytes_per_sec)) + "/s"
