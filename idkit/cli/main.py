"""
命令行工具主入口模块

提供生成和解析Snowflake ID的命令行工具。
"""

from typing import Optional

import click
from pydantic import ValidationError

from idkit import __version__
from idkit.core.config import Settings, load_settings
from idkit.core.exceptions import IDKitError
from idkit.core.logging import setup_logging
from idkit.utils.id_generator import SnowflakeID
from idkit.utils.time import format_datetime, json_dumps

FORMATS = {
    "dec": SnowflakeID.string,
    "base2": SnowflakeID.base2,
    "base36": SnowflakeID.base36,
    "base64": SnowflakeID.base64,
    "md5": SnowflakeID.md5,
}

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="配置文件路径（YAML/JSON/TOML），默认按优先级自动查找",
)


def _load(config_path: Optional[str]) -> Settings:
    try:
        settings = load_settings(Settings, config_path=config_path)
    except (IDKitError, ValidationError) as e:
        raise click.ClickException(f"加载配置失败: {e}") from e
    setup_logging(settings.log)
    return settings


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Snowflake ID 命令行工具"""
    pass


@main.command()
@click.option("--node", "-n", type=int, default=None, help="节点ID，覆盖配置中的node_id")
@click.option("--count", "-c", type=click.IntRange(min=1), default=1, help="生成数量")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(list(FORMATS)),
    default="dec",
    help="输出格式",
)
@config_option
def generate(
    node: Optional[int], count: int, fmt: str, config_path: Optional[str]
) -> None:
    """
    生成ID，每行一个
    """
    settings = _load(config_path)
    if node is not None:
        settings = settings.model_copy(update={"node_id": node})

    try:
        generator = settings.create_generator()
    except IDKitError as e:
        raise click.BadParameter(e.message, param_hint="--node") from e

    render = FORMATS[fmt]
    for _ in range(count):
        click.echo(render(generator.generate()))


@main.command()
@click.argument("value")
@click.option(
    "--base", "-b", type=click.Choice(["10", "2", "36"]), default="10", help="输入进制"
)
@click.option("--json", "as_json", is_flag=True, help="以JSON格式输出")
@config_option
def inspect(value: str, base: str, as_json: bool, config_path: Optional[str]) -> None:
    """
    解析ID，输出时间戳、节点ID、序列号及各种编码

    VALUE: 要解析的ID
    """
    settings = _load(config_path)
    try:
        uid = SnowflakeID.parse(value, int(base), settings.snowflake)
    except ValueError as e:
        raise click.BadParameter(
            f"无法按{base}进制解析: {value}", param_hint="VALUE"
        ) from e

    info = {
        "id": int(uid),
        "time": uid.time(),
        "datetime": uid.to_datetime(),
        "node": uid.node(),
        "sequence": uid.step(),
        "base2": uid.base2(),
        "base36": uid.base36(),
        "base64": uid.base64(),
        "md5": uid.md5(),
    }

    if as_json:
        click.echo(json_dumps(info, indent=2))
        return

    for key, item in info.items():
        if key == "datetime":
            item = format_datetime(item)
        click.echo(f"{key:<9} {item}")


@main.command("config")
@config_option
def show_config(config_path: Optional[str]) -> None:
    """
    输出当前生效的配置
    """
    settings = _load(config_path)
    click.echo(settings.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
