from pathlib import Path

from core.config_loader import AppConfig, load_config
from core.packers import PackerKind


def test_missing_config_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME_BOARD_ROOT", str(tmp_path))
    config = load_config()
    assert config == AppConfig()
    assert config.server.port == 8400
    assert config.layout.default_packer == PackerKind.SEQUENTIAL


def test_config_dir_is_searched_first(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.yaml").write_text(
        "server:\n  port: 9000\nlayout:\n  default_packer: smart\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text("server:\n  port: 1\n", encoding="utf-8")
    monkeypatch.setenv("HOME_BOARD_ROOT", str(tmp_path))

    config = load_config()
    assert config.server.port == 9000
    assert config.layout.default_packer == PackerKind.SMART


def test_invalid_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("layout:\n  default_packer: diagonal\n", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_unparsable_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("server: [unclosed\n", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_data_dir_env_override(monkeypatch):
    config = AppConfig.model_validate({"storage": {"data_dir": "/srv/board"}})
    monkeypatch.delenv("HOME_BOARD_DATA_DIR", raising=False)
    assert config.data_dir == Path("/srv/board")
    monkeypatch.setenv("HOME_BOARD_DATA_DIR", "/tmp/other")
    assert config.data_dir == Path("/tmp/other")
