"""
Widget sizing: how much content a metric selection produces and which size
classes can hold it.

There are two unrelated computations here and they are kept apart on purpose:

* the capacity estimator (``estimate_content_lines`` / ``max_lines_for_size``)
  backs validation and ``minimum_size_for_content``;
* ``determine_optimal_size_for_widget`` resolves ``auto`` widgets before
  packing using per-kind rules.

A widget resolved by the second path is not guaranteed to pass
``validate_widget_size`` for the same selection. Persisted layouts and the
generated defaults depend on both behaving as they do.
"""

import math
from typing import Optional

from core.models import (
    HomeWidget,
    JellyfinMetrics,
    PiHoleMetric,
    PiHoleMetrics,
    ProxmoxMetric,
    ProxmoxMetrics,
    QBittorrentMetric,
    QBittorrentMetrics,
    ServiceKind,
    WidgetSize,
)

# Scan order for minimum_size_for_content; not sorted by area.
ORDERED_SIZES = [
    WidgetSize.SMALL,
    WidgetSize.MEDIUM,
    WidgetSize.WIDE,
    WidgetSize.LARGE,
    WidgetSize.TALL,
    WidgetSize.EXTRA_WIDE,
]

_MAX_LINES = {
    WidgetSize.SMALL: 4,
    WidgetSize.MEDIUM: 7,
    WidgetSize.WIDE: 4,
    WidgetSize.LARGE: 9,
    WidgetSize.TALL: 12,
    WidgetSize.EXTRA_WIDE: 15,
    WidgetSize.AUTO: math.inf,
}

_PROXMOX_DETAILED = {
    ProxmoxMetric.MEMORY_USED_BYTES,
    ProxmoxMetric.NET_UP_BPS,
    ProxmoxMetric.NET_DOWN_BPS,
}
_PIHOLE_DETAILED = {
    PiHoleMetric.GRAVITY_LAST_UPDATED,
    PiHoleMetric.DOMAINS_BEING_BLOCKED,
}
_QBITTORRENT_SPEED = {
    QBittorrentMetric.UPLOAD_SPEED,
    QBittorrentMetric.DOWNLOAD_SPEED,
}


# ── Capacity estimator ───────────────────────────────

def estimate_content_lines(metrics, kind: Optional[ServiceKind] = None) -> int:
    """One header line plus one line per selected metric, for every kind."""
    return 1 + len(metrics.metrics)


def max_lines_for_size(size: WidgetSize) -> float:
    return _MAX_LINES[size]


def _tolerance_lines(size: WidgetSize) -> int:
    return 1 if size == WidgetSize.SMALL else 2


def validate_widget_size(
    size: WidgetSize,
    metrics,
    kind: Optional[ServiceKind] = None,
    tolerance: bool = True,
) -> bool:
    """Whether ``size`` can show ``metrics``, optionally allowing a small overflow."""
    lines = estimate_content_lines(metrics, kind)
    max_lines = max_lines_for_size(size)
    if tolerance:
        return lines <= max_lines + _tolerance_lines(size)
    return lines <= max_lines


def minimum_size_for_content(
    metrics,
    kind: Optional[ServiceKind] = None,
    strict: bool = False,
) -> WidgetSize:
    """
    First size in ``ORDERED_SIZES`` whose threshold holds the content.

    ``strict`` uses the exact capacity, otherwise the tolerant one. Content
    larger than every threshold degrades to ``extraWide``.
    """
    lines = estimate_content_lines(metrics, kind)
    for size in ORDERED_SIZES:
        threshold = max_lines_for_size(size)
        if not strict:
            threshold += _tolerance_lines(size)
        if threshold >= lines:
            return size
    return WidgetSize.EXTRA_WIDE


# ── Heuristic resolver ───────────────────────────────

def determine_optimal_size_for_widget(widget: HomeWidget) -> WidgetSize:
    """Concrete size for an ``auto`` widget, from its metric selection alone."""
    selection = widget.metrics
    count = len(selection.metrics)
    selected = set(selection.metrics)

    if isinstance(selection, ProxmoxMetrics):
        detailed = bool(selected & _PROXMOX_DETAILED)
        if count > 5:
            return WidgetSize.EXTRA_WIDE
        if count > 3 or detailed:
            return WidgetSize.LARGE
        if count > 1:
            return WidgetSize.MEDIUM
        return WidgetSize.SMALL

    if isinstance(selection, PiHoleMetrics):
        detailed = bool(selected & _PIHOLE_DETAILED)
        if count > 5:
            return WidgetSize.LARGE
        if count > 3 or detailed:
            return WidgetSize.MEDIUM
        return WidgetSize.SMALL

    if isinstance(selection, JellyfinMetrics):
        return WidgetSize.MEDIUM if count >= 3 else WidgetSize.SMALL

    if isinstance(selection, QBittorrentMetrics):
        has_speed = bool(selected & _QBITTORRENT_SPEED)
        if count > 2 and has_speed:
            return WidgetSize.WIDE
        if has_speed:
            return WidgetSize.MEDIUM
        return WidgetSize.SMALL

    raise TypeError(f"unknown metrics selection: {type(selection).__name__}")


def resolve_size(widget: HomeWidget) -> HomeWidget:
    """Copy of ``widget`` with ``auto`` replaced by a concrete size."""
    if widget.size != WidgetSize.AUTO:
        return widget
    return widget.model_copy(update={"size": determine_optimal_size_for_widget(widget)})
