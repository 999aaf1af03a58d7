import json

import pytest
from pydantic import ValidationError

from idkit.core.config import (
    LogLevel,
    Settings,
    load_config_from_file,
    load_settings,
    locate_config_file,
)
from idkit.core.exceptions import ConfigError, InvalidNodeIDError
from idkit.utils.id_generator import SnowflakeGenerator


def test_default_settings():
    settings = Settings()
    assert settings.node_id == 0
    assert settings.snowflake.node_bits == 10
    assert settings.snowflake.step_bits == 12
    assert settings.log.level == LogLevel.INFO


def test_settings_from_env(monkeypatch):
    """测试从环境变量加载嵌套配置"""
    monkeypatch.setenv("IDKIT_NODE_ID", "12")
    monkeypatch.setenv("IDKIT_SNOWFLAKE__STEP_BITS", "10")
    monkeypatch.setenv("IDKIT_LOG__LEVEL", "DEBUG")

    settings = Settings()
    assert settings.node_id == 12
    assert settings.snowflake.step_bits == 10
    assert settings.snowflake.node_bits == 10
    assert settings.log.level == LogLevel.DEBUG


def test_load_yaml_file(tmp_path):
    path = tmp_path / "idkit.yaml"
    path.write_text(
        "node_id: 7\n"
        "snowflake:\n"
        "  node_bits: 8\n"
        "  epoch: '2024-01-01T00:00:00Z'\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path=str(path))
    assert settings.node_id == 7
    assert settings.snowflake.node_bits == 8
    assert settings.snowflake.epoch == 1704067200000


def test_load_json_and_toml_files(tmp_path):
    json_path = tmp_path / "settings.json"
    json_path.write_text(json.dumps({"node_id": 3}), encoding="utf-8")
    assert load_settings(config_path=str(json_path)).node_id == 3

    toml_path = tmp_path / "settings.toml"
    toml_path.write_text("node_id = 4\n[snowflake]\nstep_bits = 8\n", encoding="utf-8")
    settings = load_settings(config_path=str(toml_path))
    assert settings.node_id == 4
    assert settings.snowflake.step_bits == 8


def test_config_file_overrides_env(tmp_path, monkeypatch):
    """测试配置文件优先级高于环境变量"""
    monkeypatch.setenv("IDKIT_NODE_ID", "1")
    monkeypatch.setenv("IDKIT_SNOWFLAKE__NODE_BITS", "6")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"node_id": 2}), encoding="utf-8")

    settings = load_settings(config_path=str(path))
    assert settings.node_id == 2
    assert settings.snowflake.node_bits == 6


def test_config_file_discovered_in_cwd(tmp_path):
    """测试在当前工作目录自动查找配置文件"""
    (tmp_path / "config.json").write_text(json.dumps({"node_id": 5}), encoding="utf-8")

    assert locate_config_file("config.json") == tmp_path / "config.json"
    assert load_settings().node_id == 5


def test_yaml_preferred_over_json(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"node_id": 5}), encoding="utf-8")
    (tmp_path / "config.yaml").write_text("node_id: 6\n", encoding="utf-8")

    assert load_config_from_file() == {"node_id": 6}


def test_env_file(tmp_path):
    env_path = tmp_path / "custom.env"
    env_path.write_text("IDKIT_NODE_ID=9\n", encoding="utf-8")

    assert load_settings(env_file=str(env_path)).node_id == 9


def test_malformed_file_is_ignored(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config_from_file(str(path)) == {}
    assert load_settings(config_path=str(path)).node_id == 0


def test_unsupported_or_missing_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[idkit]\n", encoding="utf-8")

    with pytest.raises(ConfigError) as exc_info:
        load_config_from_file(str(path))
    assert exc_info.value.code == "CONFIG_ERROR"

    with pytest.raises(ConfigError):
        load_config_from_file(str(tmp_path / "missing.yaml"))


def test_invalid_layout_in_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("snowflake:\n  node_bits: 40\n  step_bits: 30\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_settings(config_path=str(path))


def test_create_generator():
    """测试按设置创建生成器"""
    settings = Settings(node_id=31, snowflake={"node_bits": 5})
    generator = settings.create_generator()

    assert isinstance(generator, SnowflakeGenerator)
    assert generator.node_id == 31
    assert generator.generate().node() == 31

    with pytest.raises(InvalidNodeIDError):
        Settings(node_id=32, snowflake={"node_bits": 5}).create_generator()


@pytest.mark.parametrize(
    "file_name, content",
    [
        ("config.yaml", "just a string\n"),
        ("config.yaml", "- 1\n- 2\n"),
        ("config.json", "[1, 2]"),
    ],
)
def test_non_mapping_file_is_ignored(tmp_path, file_name, content):
    """测试顶层不是键值映射的配置文件按空配置处理"""
    path = tmp_path / file_name
    path.write_text(content, encoding="utf-8")

    assert load_config_from_file(str(path)) == {}
    assert load_settings(config_path=str(path)).node_id == 0
