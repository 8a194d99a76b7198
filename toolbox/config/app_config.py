#!filepath: toolbox/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from toolbox.utils.logger import logs
from .log_config import LogConfig
from .time_config import TIMEZONE_ENV, TimeConfig


def project_root() -> str:
    """
    返回项目根目录（基于当前文件位置推导）:
    toolbox/config/app_config.py → toolbox/config → toolbox → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


def default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "base.yml")


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用包内 toolbox/config/base.yml
        - 环境变量 TOOLBOX_TIMEZONE 覆盖 time.local_timezone
        """
        load_dotenv(os.path.join(project_root(), ".env"))

        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        tz_override = os.getenv(TIMEZONE_ENV)
        if tz_override:
            raw.setdefault("time", {})
            raw["time"] = {**(raw["time"] or {}), "local_timezone": tz_override}

        logs.debug(f"[AppConfig] loaded {path}")
        return cls(**raw)
