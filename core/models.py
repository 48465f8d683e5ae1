"""
Data models for home layouts, widgets and the services they are bound to.
"""

import uuid
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

# Grid width is fixed: column anchors are always 0 or 1.
GRID_COLUMNS = 2


# ── Widget size ──────────────────────────────────────

class WidgetSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    WIDE = "wide"
    LARGE = "large"
    TALL = "tall"
    EXTRA_WIDE = "extraWide"
    AUTO = "auto"  # resolved before packing, 1x1 until then

    @property
    def column_span(self) -> int:
        return _SPANS[self][0]

    @property
    def row_span(self) -> int:
        return _SPANS[self][1]


# (column_span, row_span)
_SPANS = {
    WidgetSize.SMALL: (1, 1),
    WidgetSize.MEDIUM: (1, 2),
    WidgetSize.WIDE: (2, 1),
    WidgetSize.LARGE: (2, 2),
    WidgetSize.TALL: (1, 3),
    WidgetSize.EXTRA_WIDE: (2, 3),
    WidgetSize.AUTO: (1, 1),
}


# ── Services ─────────────────────────────────────────

class ServiceKind(str, Enum):
    PROXMOX = "proxmox"
    JELLYFIN = "jellyfin"
    QBITTORRENT = "qbittorrent"
    PIHOLE = "pihole"

    @property
    def display_name(self) -> str:
        return {
            ServiceKind.PROXMOX: "Proxmox",
            ServiceKind.JELLYFIN: "Jellyfin",
            ServiceKind.QBITTORRENT: "qBittorrent",
            ServiceKind.PIHOLE: "Pi-hole",
        }[self]


class ServiceDescriptor(BaseModel):
    """A service a widget can be bound to (owned by the service registry)."""
    id: str
    kind: ServiceKind
    home: str = Field(default="Default Home", description="Home the service belongs to")
    display_name: str = ""
    base_url: str = ""


# ── Metrics by service kind ──────────────────────────

class ProxmoxMetric(str, Enum):
    CPU_PERCENT = "cpuPercent"
    MEMORY_USED_BYTES = "memoryUsedBytes"
    MEMORY_PERCENT = "memoryPercent"
    TOTAL_CTS = "totalCTs"
    TOTAL_VMS = "totalVMs"
    RUNNING_COUNT = "runningCount"
    STOPPED_COUNT = "stoppedCount"
    NET_UP_BPS = "netUpBps"
    NET_DOWN_BPS = "netDownBps"


class JellyfinMetric(str, Enum):
    TV_SHOWS_COUNT = "tvShowsCount"
    MOVIES_COUNT = "moviesCount"
    USER_COUNT = "userCount"


class QBittorrentMetric(str, Enum):
    SEEDING_COUNT = "seedingCount"
    DOWNLOADING_COUNT = "downloadingCount"
    UPLOAD_SPEED = "uploadSpeedBytesPerSec"
    DOWNLOAD_SPEED = "downloadSpeedBytesPerSec"


class PiHoleMetric(str, Enum):
    DNS_QUERIES_TODAY = "dnsQueriesToday"
    ADS_BLOCKED_TODAY = "adsBlockedToday"
    ADS_PERCENTAGE_TODAY = "adsPercentageToday"
    UNIQUE_CLIENTS = "uniqueClients"
    QUERIES_FORWARDED = "queriesForwarded"
    QUERIES_CACHED = "queriesCached"
    DOMAINS_BEING_BLOCKED = "domainsBeingBlocked"
    GRAVITY_LAST_UPDATED = "gravityLastUpdatedRelative"
    BLOCKING_STATUS = "blockingStatus"


# ── Metric selection (tagged union) ──────────────────
#
# Encoded discriminator-first: {"type": "pihole", "pihole": [...]}.
# Duplicates are not rejected here.

class ProxmoxMetrics(BaseModel):
    type: Literal["proxmox"] = "proxmox"
    proxmox: List[ProxmoxMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.PROXMOX

    @property
    def metrics(self) -> List[ProxmoxMetric]:
        return self.proxmox


class JellyfinMetrics(BaseModel):
    type: Literal["jellyfin"] = "jellyfin"
    jellyfin: List[JellyfinMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.JELLYFIN

    @property
    def metrics(self) -> List[JellyfinMetric]:
        return self.jellyfin


class QBittorrentMetrics(BaseModel):
    type: Literal["qbittorrent"] = "qbittorrent"
    qbittorrent: List[QBittorrentMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.QBITTORRENT

    @property
    def metrics(self) -> List[QBittorrentMetric]:
        return self.qbittorrent


class PiHoleMetrics(BaseModel):
    type: Literal["pihole"] = "pihole"
    pihole: List[PiHoleMetric] = Field(default_factory=list)

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind.PIHOLE

    @property
    def metrics(self) -> List[PiHoleMetric]:
        return self.pihole


MetricsSelection = Annotated[
    Union[ProxmoxMetrics, JellyfinMetrics, QBittorrentMetrics, PiHoleMetrics],
    Field(discriminator="type"),
]


# ── Widget & layout ──────────────────────────────────

class HomeWidget(BaseModel):
    """A single widget on a home grid, anchored at its top-left cell."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    service_id: str = Field(description="Link to ServiceDescriptor (lookup only)")
    size: WidgetSize = WidgetSize.SMALL
    row: int = Field(default=0, description="Top-left row anchor")
    column: int = Field(default=0, description="Top-left column anchor (0 or 1)")
    title_override: Optional[str] = None
    metrics: MetricsSelection
    refresh_interval_override: Optional[float] = Field(default=None, description="Seconds")

    @model_validator(mode="after")
    def clamp_anchor(self) -> "HomeWidget":
        self.row = max(0, self.row)
        self.column = _column_for(self.size, self.column)
        return self

    @property
    def row_span(self) -> int:
        return self.size.row_span

    @property
    def column_span(self) -> int:
        return self.size.column_span

    def with_normalized_column(self) -> "HomeWidget":
        """Copy with the column forced consistent with the column span."""
        return self.model_copy(update={"column": _column_for(self.size, self.column)})


def _column_for(size: WidgetSize, column: int) -> int:
    if size.column_span > 1:
        return 0
    return max(0, min(GRID_COLUMNS - 1, column))


class HomeLayout(BaseModel):
    """The ordered widget list of one home."""
    home_name: str
    widgets: List[HomeWidget] = Field(default_factory=list)

    @model_validator(mode="after")
    def normalize_columns(self) -> "HomeLayout":
        self.widgets = [w.with_normalized_column() for w in self.widgets]
        return self

    def find_index(self, widget_id: str) -> Optional[int]:
        for i, w in enumerate(self.widgets):
            if w.id == widget_id:
                return i
        return None

    def with_widgets(self, widgets: List[HomeWidget]) -> "HomeLayout":
        return HomeLayout(home_name=self.home_name, widgets=widgets)
