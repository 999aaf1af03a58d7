import json

import pytest
from click.testing import CliRunner

from idkit import __version__
from idkit.cli.main import main
from idkit.utils.id_generator import SnowflakeGenerator, SnowflakeID


@pytest.fixture
def runner(monkeypatch, restore_logger):
    # 只保留错误日志，避免混入命令输出
    monkeypatch.setenv("IDKIT_LOG__LEVEL", "ERROR")
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate(runner):
    """测试生成多个ID"""
    result = runner.invoke(main, ["generate", "--node", "3", "--count", "5"])
    assert result.exit_code == 0, result.output

    ids = [SnowflakeID.parse(line) for line in result.output.split()]
    assert len(ids) == 5
    assert all(uid.node() == 3 for uid in ids)
    assert all(a < b for a, b in zip(ids, ids[1:]))


def test_generate_base36(runner):
    result = runner.invoke(main, ["generate", "-c", "2", "-f", "base36"])
    assert result.exit_code == 0, result.output

    lines = result.output.split()
    assert len(lines) == 2
    assert SnowflakeID.parse(lines[0], base=36).node() == 0


def test_generate_uses_config_file(runner, tmp_path):
    path = tmp_path / "idkit.yaml"
    path.write_text("node_id: 9\nsnowflake:\n  node_bits: 4\n", encoding="utf-8")

    result = runner.invoke(main, ["generate", "--config", str(path)])
    assert result.exit_code == 0, result.output

    uid = SnowflakeID.parse(result.output.strip())
    assert (uid >> 12) & 0xF == 9

    # 节点ID超出4位布局的范围
    result = runner.invoke(main, ["generate", "--config", str(path), "--node", "20"])
    assert result.exit_code == 2
    assert "0到15" in result.output


def test_generate_rejects_invalid_node(runner):
    result = runner.invoke(main, ["generate", "--node", "5000"])
    assert result.exit_code == 2
    assert "--node" in result.output


def test_inspect_json(runner):
    """测试以JSON格式解析ID"""
    uid = SnowflakeGenerator(5).generate()

    result = runner.invoke(main, ["inspect", str(uid), "--json"])
    assert result.exit_code == 0, result.output

    info = json.loads(result.output)
    assert info["id"] == uid
    assert info["node"] == 5
    assert info["sequence"] == uid.step()
    assert info["time"] == uid.time()
    assert info["base36"] == uid.base36()
    assert info["md5"] == uid.md5()
    assert info["datetime"].endswith("+00:00")


def test_inspect_base36(runner):
    uid = SnowflakeID.compose(1704067200000, 12, 34)

    result = runner.invoke(main, ["inspect", uid.base36(), "--base", "36"])
    assert result.exit_code == 0, result.output
    assert "node      12" in result.output
    assert "sequence  34" in result.output
    assert "2024-01-01T00:00:00.000+00:00" in result.output


def test_inspect_rejects_bad_value(runner):
    result = runner.invoke(main, ["inspect", "12xyz"])
    assert result.exit_code == 2


def test_show_config(runner, tmp_path):
    path = tmp_path / "idkit.json"
    path.write_text(json.dumps({"node_id": 4, "log": {"level": "ERROR"}}), encoding="utf-8")

    result = runner.invoke(main, ["config", "--config", str(path)])
    assert result.exit_code == 0, result.output

    settings = json.loads(result.output)
    assert settings["node_id"] == 4
    assert settings["snowflake"]["epoch"] == 1288834974657


def test_missing_config_file(runner, tmp_path):
    result = runner.invoke(main, ["config", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "加载配置失败" in result.output


def test_config_file_with_scalar_content(runner, tmp_path):
    path = tmp_path / "scalar.yaml"
    path.write_text("just a string\n", encoding="utf-8")

    result = runner.invoke(main, ["config", "--config", str(path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["node_id"] == 0
