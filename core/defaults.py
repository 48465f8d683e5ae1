"""
Default widgets and generated layouts for a home.
"""

import logging
from typing import Iterable

from core.models import (
    HomeLayout,
    HomeWidget,
    JellyfinMetric,
    JellyfinMetrics,
    PiHoleMetric,
    PiHoleMetrics,
    ProxmoxMetric,
    ProxmoxMetrics,
    QBittorrentMetric,
    QBittorrentMetrics,
    ServiceDescriptor,
    ServiceKind,
    WidgetSize,
)
from core.packers import arrange_sequential, arrange_smart

logger = logging.getLogger(__name__)

_OPTIMAL_SIZE = {
    ServiceKind.PROXMOX: WidgetSize.EXTRA_WIDE,
    ServiceKind.PIHOLE: WidgetSize.LARGE,
    ServiceKind.JELLYFIN: WidgetSize.MEDIUM,
    ServiceKind.QBITTORRENT: WidgetSize.WIDE,
}


def optimal_size_for_kind(kind: ServiceKind) -> WidgetSize:
    return _OPTIMAL_SIZE[kind]


def default_metrics(kind: ServiceKind, size: WidgetSize = WidgetSize.SMALL):
    """Default metric selection for a kind; only ``large`` gets the long lists."""
    if kind == ServiceKind.PROXMOX:
        if size == WidgetSize.LARGE:
            return ProxmoxMetrics(proxmox=[
                ProxmoxMetric.CPU_PERCENT,
                ProxmoxMetric.MEMORY_PERCENT,
                ProxmoxMetric.RUNNING_COUNT,
                ProxmoxMetric.NET_UP_BPS,
                ProxmoxMetric.NET_DOWN_BPS,
            ])
        return ProxmoxMetrics(proxmox=[ProxmoxMetric.CPU_PERCENT, ProxmoxMetric.MEMORY_USED_BYTES])

    if kind == ServiceKind.JELLYFIN:
        return JellyfinMetrics(jellyfin=[
            JellyfinMetric.TV_SHOWS_COUNT,
            JellyfinMetric.MOVIES_COUNT,
            JellyfinMetric.USER_COUNT,
        ])

    if kind == ServiceKind.QBITTORRENT:
        return QBittorrentMetrics(qbittorrent=[
            QBittorrentMetric.SEEDING_COUNT,
            QBittorrentMetric.DOWNLOADING_COUNT,
        ])

    if kind == ServiceKind.PIHOLE:
        if size == WidgetSize.LARGE:
            return PiHoleMetrics(pihole=[
                PiHoleMetric.DNS_QUERIES_TODAY,
                PiHoleMetric.ADS_BLOCKED_TODAY,
                PiHoleMetric.ADS_PERCENTAGE_TODAY,
                PiHoleMetric.UNIQUE_CLIENTS,
                PiHoleMetric.QUERIES_FORWARDED,
                PiHoleMetric.QUERIES_CACHED,
                PiHoleMetric.BLOCKING_STATUS,
            ])
        return PiHoleMetrics(pihole=[
            PiHoleMetric.BLOCKING_STATUS,
            PiHoleMetric.ADS_BLOCKED_TODAY,
            PiHoleMetric.ADS_PERCENTAGE_TODAY,
        ])

    raise ValueError(f"unknown service kind: {kind}")


def default_widget(service: ServiceDescriptor) -> HomeWidget:
    return HomeWidget(
        service_id=service.id,
        size=WidgetSize.SMALL,
        metrics=default_metrics(service.kind, WidgetSize.SMALL),
    )


def generate_layout(home_name: str, services: Iterable[ServiceDescriptor]) -> HomeLayout:
    """Small default widget per service of the home, packed sequentially."""
    widgets = [default_widget(s) for s in services if s.home == home_name]
    logger.info(f"[{home_name}] 生成默认布局: {len(widgets)} 个组件")
    return arrange_sequential(HomeLayout(home_name=home_name, widgets=widgets))


def generate_auto_layout(home_name: str, services: Iterable[ServiceDescriptor]) -> HomeLayout:
    """
    ``auto`` widget per service of the home, with the default metrics of the
    kind's optimal size, packed by the smart packer.
    """
    widgets = [
        HomeWidget(
            service_id=s.id,
            size=WidgetSize.AUTO,
            metrics=default_metrics(s.kind, optimal_size_for_kind(s.kind)),
        )
        for s in services
        if s.home == home_name
    ]
    logger.info(f"[{home_name}] 生成自动布局: {len(widgets)} 个组件")
    return arrange_smart(HomeLayout(home_name=home_name, widgets=widgets))
