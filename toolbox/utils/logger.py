#!filepath: toolbox/utils/logger.py
import os
from typing import Optional

from loguru import logger

# 库默认静默，由应用通过 init_logging() 打开
logger.disable("toolbox")


class Logging:
    """
    toolbox 日志模块
    ---------------------------------------
    - 默认不输出（loguru 中 "toolbox" 被 disable）
    - configure() 后启用，并可按日期切割写入 log_dir
    - 只添加/移除自己的 sink，不影响宿主应用的 loguru 配置
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level
        self._sink_id: Optional[int] = None

    def configure(self) -> None:
        """
        启用 toolbox 日志；log_dir 不为空时追加文件 sink（重复调用会替换旧 sink）
        """
        if self._sink_id is not None:
            logger.remove(self._sink_id)
            self._sink_id = None

        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            self._sink_id = logger.add(
                sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
                rotation=self.rotation,
                retention=self.retention,
                level=self.level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
                filter="toolbox",
                enqueue=True,
            )

        logger.enable("toolbox")
        logger.info("-----------toolbox logger initialized-----------")

    # ----------- 日志方法 -----------
    def debug(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).warning(msg, *args, **kwargs)


# 默认全局 logs（init_logging 原地重新配置）
logs = Logging()


def init_logging(cfg) -> Logging:
    """按 LogConfig 重新配置全局 logs 并启用输出"""
    logs.log_dir = cfg.dir
    logs.rotation = cfg.rotation
    logs.retention = cfg.retention
    logs.level = cfg.level
    logs.configure()
    return logs
