"""
Home Board 主入口：启动 FastAPI 后端服务。
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import api
from core.config_loader import AppConfig, load_config
from core.layout_store import LayoutStore
from core.service_registry import ServiceRegistry

# 日志配置
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan 事件处理：启动时和关闭时的逻辑。"""

    layout_store = app.state.layout_store
    service_registry = app.state.service_registry

    homes = layout_store.homes()
    services = service_registry.load_services()
    logger.info(f"已加载 {len(homes)} 个 home 布局, {len(services)} 个服务")

    yield  # 应用运行中

    # 关闭时：关闭数据库连接
    logger.info("正在关闭...")
    layout_store.close()


def create_app(config: AppConfig | None = None) -> FastAPI:
    """创建并配置 FastAPI 应用。"""
    if config is None:
        logger.info("正在加载配置...")
        config = load_config()
    logging.getLogger().setLevel(config.log_level.upper())

    app = FastAPI(
        title="Home Board API",
        description="API for home dashboard widget layouts",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS 中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── 初始化核心组件 ────────────────────────────────────────
    data_dir = config.data_dir

    # 布局持久化
    layout_store = LayoutStore(data_dir / "layouts.json")

    # 服务注册表 (JSON-based storage)
    service_registry = ServiceRegistry(data_dir)

    # 注入依赖到 API 模块
    api.init_api(
        config=config,
        layout_store=layout_store,
        service_registry=service_registry,
    )

    # 注册 API 路由
    app.include_router(api.router)

    # 将组件存到 app.state，供 lifespan 访问
    app.state.config = config
    app.state.layout_store = layout_store
    app.state.service_registry = service_registry

    return app


def main():
    """主入口。"""
    config = load_config()
    port = int(sys.argv[1]) if len(sys.argv) > 1 else config.server.port

    logger.info(f"🚀 启动 Home Board 后端 (port={port})...")

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
