from .app_config import AppConfig
from .log_config import LogConfig
from .time_config import TimeConfig

__all__ = ["AppConfig", "LogConfig", "TimeConfig"]
