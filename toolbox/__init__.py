#!filepath: toolbox/__init__.py

from .utils.logger import Logging, logs, init_logging
from .config.app_config import AppConfig
from .utils.date_util import DateUtil
from .utils.errors import (
    DateUtilError,
    InvalidDateError,
    InvalidPatternError,
    InvalidTimezoneError,
    ParseError,
)

# alias 简化调用
date_util = DateUtil

__all__ = [
    "logs", "Logging", "init_logging",
    "AppConfig",
    "DateUtil", "date_util",
    "DateUtilError", "InvalidDateError", "InvalidPatternError",
    "InvalidTimezoneError", "ParseError",
]
