import pytest
from fastapi.testclient import TestClient

from core.config_loader import AppConfig, StorageConfig
from core.layout_store import LayoutStore
from core.models import (
    HomeLayout,
    HomeWidget,
    JellyfinMetric,
    JellyfinMetrics,
    ServiceDescriptor,
    ServiceKind,
    WidgetSize,
)
from core.service_registry import ServiceRegistry


def make_widget(size=WidgetSize.SMALL, widget_id=None, service_id="svc", metrics=None, **kwargs) -> HomeWidget:
    if metrics is None:
        metrics = JellyfinMetrics(jellyfin=[JellyfinMetric.MOVIES_COUNT])
    if widget_id is not None:
        kwargs["id"] = widget_id
    return HomeWidget(service_id=service_id, size=size, metrics=metrics, **kwargs)


def make_layout(*sizes, home_name="H") -> HomeLayout:
    widgets = [make_widget(size, widget_id=f"w{i}") for i, size in enumerate(sizes)]
    return HomeLayout(home_name=home_name, widgets=widgets)


def anchors(layout: HomeLayout):
    return [(w.row, w.column) for w in layout.widgets]


def occupied_cells(widget: HomeWidget):
    return {
        (widget.row + r, widget.column + c)
        for r in range(widget.row_span)
        for c in range(widget.column_span)
    }


@pytest.fixture
def services():
    return [
        ServiceDescriptor(id="pve", kind=ServiceKind.PROXMOX, home="H", display_name="pve01"),
        ServiceDescriptor(id="media", kind=ServiceKind.JELLYFIN, home="H"),
        ServiceDescriptor(id="torrent", kind=ServiceKind.QBITTORRENT, home="H"),
        ServiceDescriptor(id="dns", kind=ServiceKind.PIHOLE, home="Cabin"),
    ]


@pytest.fixture
def store(tmp_path):
    s = LayoutStore(tmp_path / "layouts.json")
    yield s
    s.close()


@pytest.fixture
def registry(tmp_path):
    return ServiceRegistry(tmp_path)


@pytest.fixture
def client(tmp_path, monkeypatch):
    from main import create_app

    monkeypatch.delenv("HOME_BOARD_DATA_DIR", raising=False)
    config = AppConfig(storage=StorageConfig(data_dir=str(tmp_path)))
    app = create_app(config)
    with TestClient(app) as c:
        yield c
