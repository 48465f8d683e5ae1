"""
布局存储：基于 TinyDB 的 HomeLayout 持久化层。
每个 home 一条记录（按 home_name upsert），变更操作统一走 core.mutations。
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError
from tinydb import Query, TinyDB

from core import mutations
from core.models import HomeLayout, HomeWidget, ServiceDescriptor

logger = logging.getLogger(__name__)

_DATA_DIR = Path(os.getenv("HOME_BOARD_ROOT", ".")) / "data"


class LayoutStore:
    """home_name -> HomeLayout 的持久化映射。"""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = _DATA_DIR / "layouts.json"
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = TinyDB(str(db_path), indent=2, ensure_ascii=False)
        self.table = self.db.table("layouts")
        logger.info(f"布局数据库已打开: {db_path} ({len(self.table)} 个 home)")

    # ── 查询 ──────────────────────────────────────────

    def layout(self, home_name: str) -> HomeLayout:
        """获取指定 home 的布局；不存在时返回空布局。"""
        Home = Query()
        results = self.table.search(Home.home_name == home_name)
        if not results:
            return HomeLayout(home_name=home_name)
        try:
            return HomeLayout.model_validate(results[0]["layout"])
        except (KeyError, ValidationError) as e:
            logger.error(f"[{home_name}] 布局数据无效，使用空布局: {e}")
            return HomeLayout(home_name=home_name)

    def homes(self) -> List[str]:
        return [doc["home_name"] for doc in self.table.all()]

    # ── 写入 ──────────────────────────────────────────

    def set_layout(self, layout: HomeLayout) -> HomeLayout:
        """更新或插入布局（按 home_name 去重）。"""
        record = {
            "home_name": layout.home_name,
            "layout": layout.model_dump(mode="json"),
            "updated_at": time.time(),
        }
        Home = Query()
        self.table.upsert(record, Home.home_name == layout.home_name)
        logger.debug(f"[{layout.home_name}] 布局已保存 ({len(layout.widgets)} 个组件)")
        return layout

    def add_widget(self, widget: HomeWidget, home_name: str) -> HomeLayout:
        return self.set_layout(mutations.add_widget(self.layout(home_name), widget))

    def update_widget(self, widget: HomeWidget, home_name: str) -> HomeLayout:
        return self.set_layout(mutations.update_widget(self.layout(home_name), widget))

    def remove_widget(self, widget_id: str, home_name: str) -> HomeLayout:
        return self.set_layout(mutations.remove_widget(self.layout(home_name), widget_id))

    def move_widget(self, widget_id: str, target_index: int, home_name: str) -> HomeLayout:
        return self.set_layout(mutations.move_widget(self.layout(home_name), widget_id, target_index))

    def normalize(self, home_name: str) -> HomeLayout:
        return self.set_layout(mutations.normalize(self.layout(home_name)))

    def apply_auto_layout(self, home_name: str, services: Iterable[ServiceDescriptor]) -> HomeLayout:
        return self.set_layout(mutations.apply_auto_layout(self.layout(home_name), services))

    # ── 管理 ──────────────────────────────────────────

    def remove_all(self, home_name: str) -> HomeLayout:
        """清空指定 home 的所有组件。"""
        logger.info(f"[{home_name}] 清空布局")
        return self.set_layout(HomeLayout(home_name=home_name))

    def remove_all_homes(self):
        """删除所有 home 的布局。"""
        self.table.truncate()
        logger.info("所有布局已删除")

    def close(self):
        """关闭数据库。"""
        self.db.close()
