# toolbox/utils/zones.py
"""
时区解析
---------------------------------------
- IANA 名称          "Asia/Shanghai"  -> ZoneInfo
- 固定偏移            "+08:00" / "UTC+8" / "GMT-5:30" -> timezone
- 系统时区            None / "local"   -> tzlocal
---------------------------------------
ZoneSettings 是 DateUtil 的注入配置，不可变，可跨线程共享。
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tzlocal

from toolbox.config.time_config import TimeConfig
from toolbox.utils.errors import InvalidTimezoneError
from toolbox.utils.logger import logs

TzLike = Union[tzinfo, str, None]

UTC = timezone.utc

_OFFSET_PATTERN = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_UTC_NAMES = {"utc", "gmt", "z"}


def system_timezone() -> tzinfo:
    """
    返回系统本地时区（进程级配置，只读）。
    TZ 环境变量、/etc/localtime 软链接或直接拷贝的文件都由 tzlocal 解析；
    无法解析时 tzlocal 的异常直接抛给调用方。
    """
    zone = tzlocal.get_localzone()
    logs.debug(f"[zones] system timezone = {zone}")
    return zone


def parse_offset(spec: str) -> Optional[timezone]:
    """'+08:00' / 'UTC+8' / 'GMT-0530' -> timezone；不是偏移格式时返回 None。"""
    match = _OFFSET_PATTERN.match(spec.strip())
    if not match:
        return None

    sign = -1 if match.group("sign") == "-" else 1
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes") or 0)
    if hours > 18 or minutes >= 60 or (hours == 18 and minutes):
        raise InvalidTimezoneError(f"Offset out of range: {spec}")

    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def resolve_timezone(spec: TzLike) -> tzinfo:
    """Resolve a tzinfo, a zone name, an offset string or None into a tzinfo."""
    if isinstance(spec, tzinfo):
        return spec

    if spec is None:
        return system_timezone()

    if not isinstance(spec, str):
        raise TypeError(f"不支持的时区类型: {type(spec)}")

    name = spec.strip()
    if not name:
        raise InvalidTimezoneError("Empty timezone name")

    if name.lower() == "local":
        return system_timezone()

    if name.lower() in _UTC_NAMES:
        return UTC

    offset = parse_offset(name)
    if offset is not None:
        return offset

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown timezone: {spec}") from e


@dataclass(frozen=True)
class ZoneSettings:
    """
    local        : "本地"操作使用的时区
    epoch_offset : to_epoch_millis 使用的固定偏移；None 表示跟随 local
    """
    local: tzinfo
    epoch_offset: Optional[tzinfo] = None

    @classmethod
    def from_config(cls, cfg: TimeConfig) -> "ZoneSettings":
        local = resolve_timezone(cfg.local_timezone)
        epoch_offset = (
            resolve_timezone(cfg.epoch_offset) if cfg.epoch_offset is not None else None
        )
        logs.debug(f"[zones] local={local} epoch_offset={epoch_offset}")
        return cls(local=local, epoch_offset=epoch_offset)

    @property
    def epoch_zone(self) -> tzinfo:
        return self.epoch_offset if self.epoch_offset is not None else self.local
