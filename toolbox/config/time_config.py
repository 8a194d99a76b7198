#!filepath: toolbox/config/time_config.py
import os
from typing import Optional

from pydantic import BaseModel, Field

TIMEZONE_ENV = "TOOLBOX_TIMEZONE"


class TimeConfig(BaseModel):
    """
    local_timezone : None 表示系统时区；也可以是 IANA 名称或 "+08:00" 这类偏移
    epoch_offset   : to_epoch_millis 使用的固定偏移，None 表示跟随 local_timezone
    """
    local_timezone: Optional[str] = Field(default_factory=lambda: os.getenv(TIMEZONE_ENV) or None)
    epoch_offset: Optional[str] = "+08:00"
