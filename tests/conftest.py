# tests/conftest.py
from __future__ import annotations

import pytest
from loguru import logger

from toolbox import DateUtil
from toolbox.config import TimeConfig
from toolbox.config.time_config import TIMEZONE_ENV


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture(autouse=True)
def pinned_local_zone(monkeypatch):
    """
    所有测试默认本地时区固定为 Asia/Shanghai，与宿主机无关。
    """
    monkeypatch.delenv(TIMEZONE_ENV, raising=False)
    DateUtil.configure(TimeConfig(local_timezone="Asia/Shanghai"))
    yield
    DateUtil._settings = None
