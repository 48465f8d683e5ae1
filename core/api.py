"""
FastAPI 路由：暴露布局与服务的 REST API 供展现层调用。
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from core import mutations, sizing
from core.defaults import generate_auto_layout, generate_layout
from core.models import HomeLayout, HomeWidget, MetricsSelection, ServiceDescriptor, WidgetSize
from core.packers import PackerKind, arrange

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# 这些全局引用会在 main.py 中注入
_config = None
_layout_store = None
_service_registry = None


def init_api(config, layout_store, service_registry):
    """注入全局依赖（由 main.py 调用）。"""
    global _config, _layout_store, _service_registry
    _config = config
    _layout_store = layout_store
    _service_registry = service_registry


# ── Homes ─────────────────────────────────────────────

@router.get("/homes")
async def list_homes() -> list[str]:
    """列出所有已保存布局的 home，以及服务中出现过的 home。"""
    homes = list(_layout_store.homes())
    for s in _service_registry.load_services():
        if s.home not in homes:
            homes.append(s.home)
    return homes


@router.delete("/homes")
async def delete_all_homes() -> dict:
    """删除所有 home 的布局。"""
    _layout_store.remove_all_homes()
    return {"message": "All layouts removed"}


# ── Layout ────────────────────────────────────────────

@router.get("/homes/{home_name}/layout")
async def get_layout(home_name: str, visible: bool = False) -> HomeLayout:
    """获取布局；visible=true 时过滤掉服务已不存在的组件。"""
    layout = _layout_store.layout(home_name)
    if visible:
        layout = mutations.visible_widgets(layout, _service_registry.load_services())
    return layout


@router.put("/homes/{home_name}/layout")
async def put_layout(home_name: str, layout: HomeLayout) -> HomeLayout:
    """整体替换布局（不重新排列）。"""
    if layout.home_name != home_name:
        raise HTTPException(400, "Home name mismatch")
    return _layout_store.set_layout(layout)


@router.delete("/homes/{home_name}/layout")
async def clear_layout(home_name: str) -> HomeLayout:
    return _layout_store.remove_all(home_name)


@router.post("/homes/{home_name}/normalize")
async def normalize_layout(home_name: str) -> HomeLayout:
    return _layout_store.normalize(home_name)


@router.post("/homes/{home_name}/auto-layout")
async def auto_layout(home_name: str) -> HomeLayout:
    """按服务类型重新计算尺寸并补齐缺失的组件，然后智能排列。"""
    return _layout_store.apply_auto_layout(home_name, _service_registry.load_services())


@router.post("/homes/{home_name}/generate")
async def regenerate_layout(home_name: str, auto: bool = False) -> HomeLayout:
    """丢弃现有布局，按默认规则重新生成。"""
    services = _service_registry.load_services()
    if auto:
        layout = generate_auto_layout(home_name, services)
    else:
        layout = generate_layout(home_name, services)
    return _layout_store.set_layout(layout)


@router.post("/homes/{home_name}/arrange")
async def arrange_layout(home_name: str, packer: Optional[PackerKind] = None) -> HomeLayout:
    """使用指定的排列策略（默认取配置中的 default_packer）。"""
    if packer is None:
        packer = _config.layout.default_packer
    layout = arrange(_layout_store.layout(home_name), packer)
    logger.info(f"[{home_name}] 已使用 {packer.value} 排列")
    return _layout_store.set_layout(layout)


# ── Widgets ───────────────────────────────────────────

@router.post("/homes/{home_name}/widgets")
async def add_widget(home_name: str, widget: HomeWidget) -> HomeLayout:
    return _layout_store.add_widget(widget, home_name)


@router.put("/homes/{home_name}/widgets/{widget_id}")
async def update_widget(home_name: str, widget_id: str, widget: HomeWidget) -> HomeLayout:
    """更新组件；组件不存在时布局保持不变。"""
    if widget.id != widget_id:
        raise HTTPException(400, "ID mismatch")
    return _layout_store.update_widget(widget, home_name)


@router.delete("/homes/{home_name}/widgets/{widget_id}")
async def delete_widget(home_name: str, widget_id: str) -> HomeLayout:
    return _layout_store.remove_widget(widget_id, home_name)


@router.post("/homes/{home_name}/widgets/{widget_id}/move")
async def move_widget(home_name: str, widget_id: str, index: int) -> HomeLayout:
    """移动组件到指定顺序位置，越界的 index 会被截断。"""
    return _layout_store.move_widget(widget_id, index, home_name)


# ── Services ──────────────────────────────────────────

@router.get("/services")
async def list_services(home: Optional[str] = None) -> list[ServiceDescriptor]:
    if home is not None:
        return _service_registry.services_for_home(home)
    return _service_registry.load_services()


@router.post("/services")
async def create_service(service: ServiceDescriptor) -> ServiceDescriptor:
    return _service_registry.save_service(service)


@router.put("/services/{service_id}")
async def update_service(service_id: str, service: ServiceDescriptor) -> ServiceDescriptor:
    if service.id != service_id:
        raise HTTPException(400, "ID mismatch")
    return _service_registry.save_service(service)


@router.delete("/services/{service_id}")
async def delete_service(service_id: str) -> dict:
    if _service_registry.delete_service(service_id):
        return {"message": f"Service {service_id} deleted"}
    raise HTTPException(404, f"Service {service_id} not found")


# ── Sizing ────────────────────────────────────────────

class SizingCheck(BaseModel):
    size: WidgetSize
    metrics: MetricsSelection
    tolerance: bool = True


@router.post("/sizing/check")
async def check_sizing(check: SizingCheck) -> dict[str, Any]:
    """
    对一个指标选择同时给出两种尺寸计算的结果。
    两者互相独立，结果可能不一致。
    """
    kind = check.metrics.kind
    probe = HomeWidget(service_id="", size=WidgetSize.AUTO, metrics=check.metrics)
    max_lines = sizing.max_lines_for_size(check.size)
    return {
        "kind": kind.value,
        "estimated_lines": sizing.estimate_content_lines(check.metrics, kind),
        "max_lines": None if check.size == WidgetSize.AUTO else max_lines,
        "valid": sizing.validate_widget_size(check.size, check.metrics, kind, tolerance=check.tolerance),
        "minimum_size": sizing.minimum_size_for_content(check.metrics, kind, strict=False).value,
        "minimum_size_strict": sizing.minimum_size_for_content(check.metrics, kind, strict=True).value,
        "heuristic_size": sizing.determine_optimal_size_for_widget(probe).value,
    }
