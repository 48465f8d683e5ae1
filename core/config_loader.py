"""
配置加载器：将 YAML 配置文件解析为 Pydantic 模型。
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from core.packers import PackerKind

logger = logging.getLogger(__name__)


# ── 配置模型 ──────────────────────────────────────────

class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8400
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )


class StorageConfig(BaseModel):
    data_dir: str = "data"  # layouts.json / services.json


class LayoutConfig(BaseModel):
    # Packer used by the "arrange" endpoint when none is requested.
    # Mutations always re-pack sequentially.
    default_packer: PackerKind = PackerKind.SEQUENTIAL


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    log_level: str = "INFO"

    @property
    def data_dir(self) -> Path:
        override = os.getenv("HOME_BOARD_DATA_DIR")
        if override:
            return Path(override)
        return Path(self.storage.data_dir)


# ── Loading ──────────────────────────────────────────

_CONFIG_SEARCH_PATHS = [
    "config/config.yaml",
    "config.yaml",
]


def find_config_file() -> Optional[Path]:
    """Find the config file under $HOME_BOARD_ROOT (default: cwd)."""
    base = Path(os.getenv("HOME_BOARD_ROOT", "."))
    for p in _CONFIG_SEARCH_PATHS:
        path = base / p
        if path.is_file():
            return path
    return None


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """
    Load and validate the configuration file.
    A missing or unreadable file yields the defaults.
    """
    if path is None:
        path = find_config_file()
    if path is None:
        logger.info("未找到配置文件，使用默认配置")
        return AppConfig()

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"读取配置文件失败 {path}: {e}")
        return AppConfig()

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        logger.error(f"配置文件无效 {path}: {e}")
        return AppConfig()
