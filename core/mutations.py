"""
Layout mutations. Each operation takes a HomeLayout and returns a new one;
every mutation ends by re-packing the grid so anchors are always consistent.

Unknown widget ids are silently ignored. Callers that need to know whether
anything changed compare the layouts before and after.
"""

import logging
from typing import Iterable, List

from core.defaults import default_metrics, optimal_size_for_kind
from core.models import HomeLayout, HomeWidget, ServiceDescriptor
from core.packers import arrange_sequential, arrange_smart

logger = logging.getLogger(__name__)


def normalize(layout: HomeLayout) -> HomeLayout:
    """Fix column/span consistency, clamp rows, then pack sequentially."""
    widgets = [
        w.with_normalized_column().model_copy(update={"row": max(0, w.row)})
        for w in layout.widgets
    ]
    return arrange_sequential(layout.with_widgets(widgets))


def add_widget(layout: HomeLayout, widget: HomeWidget) -> HomeLayout:
    return normalize(layout.with_widgets(layout.widgets + [widget]))


def remove_widget(layout: HomeLayout, widget_id: str) -> HomeLayout:
    widgets = [w for w in layout.widgets if w.id != widget_id]
    if len(widgets) == len(layout.widgets):
        logger.debug(f"[{layout.home_name}] remove: widget {widget_id} not found")
    return normalize(layout.with_widgets(widgets))


def update_widget(layout: HomeLayout, widget: HomeWidget) -> HomeLayout:
    idx = layout.find_index(widget.id)
    if idx is None:
        logger.debug(f"[{layout.home_name}] update: widget {widget.id} not found")
        return layout
    widgets = list(layout.widgets)
    widgets[idx] = widget
    return normalize(layout.with_widgets(widgets))


def move_widget(layout: HomeLayout, widget_id: str, target_index: int) -> HomeLayout:
    """Move a widget to ``target_index`` (clamped into range) in the list order."""
    current = layout.find_index(widget_id)
    if current is None:
        logger.debug(f"[{layout.home_name}] move: widget {widget_id} not found")
        return layout
    clamped = max(0, min(target_index, max(0, len(layout.widgets) - 1)))
    if clamped == current:
        return layout

    widgets: List[HomeWidget] = list(layout.widgets)
    item = widgets.pop(current)
    widgets.insert(clamped, item)
    return normalize(layout.with_widgets(widgets))


def apply_auto_layout(layout: HomeLayout, services: Iterable[ServiceDescriptor]) -> HomeLayout:
    """
    Re-size every widget whose service is known to the kind's optimal size
    (with that size's default metrics), add a widget for every service of
    this home that has none, and pack with the smart packer.
    """
    services = list(services)
    by_id = {s.id: s for s in services}

    widgets: List[HomeWidget] = []
    for w in layout.widgets:
        service = by_id.get(w.service_id)
        if service is not None:
            size = optimal_size_for_kind(service.kind)
            w = w.model_copy(update={"size": size, "metrics": default_metrics(service.kind, size)})
        widgets.append(w)

    existing = {w.service_id for w in widgets}
    added = 0
    for s in services:
        if s.home != layout.home_name or s.id in existing:
            continue
        size = optimal_size_for_kind(s.kind)
        widgets.append(HomeWidget(service_id=s.id, size=size, metrics=default_metrics(s.kind, size)))
        existing.add(s.id)
        added += 1

    logger.info(f"[{layout.home_name}] auto layout: {len(widgets)} widgets ({added} added)")
    return arrange_smart(layout.with_widgets(widgets))


def visible_widgets(layout: HomeLayout, services: Iterable[ServiceDescriptor]) -> HomeLayout:
    """Drop widgets whose service no longer exists. Positions are kept."""
    known = {s.id for s in services}
    return layout.with_widgets([w for w in layout.widgets if w.service_id in known])
