import os
import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """隔离IDKIT_开头的环境变量和工作目录，避免读取到本机的配置"""
    for key in list(os.environ):
        if key.upper().startswith("IDKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    before = set(os.environ)

    yield

    # load_dotenv 直接写入 os.environ，测试结束后清理
    for key in set(os.environ) - before:
        if key.upper().startswith("IDKIT_"):
            os.environ.pop(key, None)


@pytest.fixture
def restore_logger():
    """测试结束后恢复loguru的默认输出"""
    yield
    logger.remove()
    logger.add(sys.stderr)
