import json

from core.layout_store import LayoutStore
from core.models import HomeLayout, ServiceDescriptor, ServiceKind, WidgetSize
from core.service_registry import ServiceRegistry

from conftest import anchors, make_layout, make_widget


# ── LayoutStore ──────────────────────────────────────

def test_unknown_home_is_empty(store):
    layout = store.layout("Nowhere")
    assert layout == HomeLayout(home_name="Nowhere")
    assert store.homes() == []


def test_set_layout_persists_across_instances(tmp_path):
    path = tmp_path / "layouts.json"
    first = LayoutStore(path)
    saved = first.set_layout(make_layout(WidgetSize.SMALL, WidgetSize.WIDE))
    first.close()

    second = LayoutStore(path)
    try:
        assert second.layout("H") == saved
        assert second.homes() == ["H"]
    finally:
        second.close()


def test_set_layout_upserts_by_home(store):
    store.set_layout(make_layout(WidgetSize.SMALL))
    store.set_layout(make_layout(WidgetSize.SMALL, WidgetSize.SMALL))
    assert store.homes() == ["H"]
    assert len(store.layout("H").widgets) == 2


def test_store_mutations_repack_and_persist(store):
    store.add_widget(make_widget(WidgetSize.SMALL, widget_id="a"), "H")
    store.add_widget(make_widget(WidgetSize.LARGE, widget_id="b"), "H")
    store.add_widget(make_widget(WidgetSize.SMALL, widget_id="c"), "H")
    assert anchors(store.layout("H")) == [(0, 0), (1, 0), (3, 0)]

    store.move_widget("c", 0, "H")
    assert [w.id for w in store.layout("H").widgets] == ["c", "a", "b"]

    store.update_widget(make_widget(WidgetSize.MEDIUM, widget_id="b"), "H")
    assert store.layout("H").widgets[2].size == WidgetSize.MEDIUM

    store.remove_widget("a", "H")
    store.remove_widget("missing", "H")
    assert [w.id for w in store.layout("H").widgets] == ["c", "b"]


def test_store_normalize(store):
    store.set_layout(make_layout(WidgetSize.SMALL, WidgetSize.SMALL, WidgetSize.SMALL))
    assert anchors(store.normalize("H")) == [(0, 0), (0, 1), (1, 0)]


def test_store_apply_auto_layout(store, services):
    layout = store.apply_auto_layout("H", services)
    assert {w.service_id for w in layout.widgets} == {"pve", "media", "torrent"}
    assert store.layout("H") == layout


def test_remove_all_resets_one_home(store):
    store.set_layout(make_layout(WidgetSize.SMALL, home_name="A"))
    store.set_layout(make_layout(WidgetSize.SMALL, home_name="B"))
    store.remove_all("A")
    assert store.layout("A").widgets == []
    assert len(store.layout("B").widgets) == 1


def test_remove_all_homes(store):
    store.set_layout(make_layout(WidgetSize.SMALL, home_name="A"))
    store.set_layout(make_layout(WidgetSize.SMALL, home_name="B"))
    store.remove_all_homes()
    assert store.homes() == []


def test_invalid_stored_layout_falls_back_to_empty(store):
    store.table.insert({"home_name": "Broken", "layout": {"home_name": "Broken", "widgets": "nope"}})
    assert store.layout("Broken") == HomeLayout(home_name="Broken")


# ── ServiceRegistry ──────────────────────────────────

def test_registry_save_and_replace(registry):
    registry.save_service(ServiceDescriptor(id="pve", kind=ServiceKind.PROXMOX, home="H"))
    registry.save_service(ServiceDescriptor(id="dns", kind=ServiceKind.PIHOLE, home="Cabin"))
    registry.save_service(ServiceDescriptor(id="pve", kind=ServiceKind.PROXMOX, home="Cabin"))

    assert [s.id for s in registry.load_services()] == ["pve", "dns"]
    assert registry.get_service("pve").home == "Cabin"
    assert [s.id for s in registry.services_for_home("Cabin")] == ["pve", "dns"]
    assert registry.get_service("missing") is None


def test_registry_delete(registry):
    registry.save_service(ServiceDescriptor(id="pve", kind=ServiceKind.PROXMOX))
    assert registry.delete_service("pve") is True
    assert registry.delete_service("pve") is False
    assert registry.load_services() == []


def test_registry_stores_kind_by_value(registry):
    registry.save_service(ServiceDescriptor(id="t", kind=ServiceKind.QBITTORRENT))
    with open(registry.services_file, encoding="utf-8") as f:
        assert json.load(f)[0]["kind"] == "qbittorrent"


def test_registry_corrupt_file_reads_as_empty(tmp_path):
    (tmp_path / "services.json").write_text("{not json", encoding="utf-8")
    assert ServiceRegistry(tmp_path).load_services() == []
