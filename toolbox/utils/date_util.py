#!filepath: toolbox/utils/date_util.py
from __future__ import annotations

from datetime import datetime, time, timedelta, tzinfo
from typing import Callable, Optional, Union

from toolbox.config.time_config import TimeConfig
from toolbox.utils.errors import InvalidDateError
from toolbox.utils.logger import logs
from toolbox.utils.pattern import compile_pattern
from toolbox.utils.zones import UTC, TzLike, ZoneSettings, resolve_timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


class DateUtil:
    """
    日期相关工具类
    ---------------------------------------
    三种时间表示：
        epoch millis    int，1970-01-01T00:00:00Z 起的毫秒数
        wall clock      带时区的 datetime（本地时区）
        calendar fields naive datetime，不带时区，由调用的方法决定按本地还是 UTC 解释
    ---------------------------------------
    所有方法无状态；"本地时区"默认取 settings().local，可通过 tz= 按次覆盖。
    """

    FORMAT_CONT_TO_SECOND = "yyyyMMddHHmmss"
    FORMAT_MINUTE = "yyyyMMddHHmm"
    FORMAT_HOUR = "yyyyMMddHH"
    FORMAT_DATE = "yyyyMMdd"
    FORMAT_MONTH = "yyyyMM"
    FORMAT_YEAR_TO_SECOND = "yyyy-MM-dd HH:mm:ss"
    FORMAT_YEAR = "yyyy"
    FORMAT_MM_DD = "MM-dd"

    _settings: Optional[ZoneSettings] = None

    # ================================================================
    # settings
    # ================================================================
    @classmethod
    def configure(cls, cfg: Union[TimeConfig, ZoneSettings, None]) -> ZoneSettings:
        """
        安装时区配置（应用启动时调用一次）。
        传 None 则恢复默认：下次使用时按 TimeConfig() 重新解析。
        """
        if cfg is None:
            cls._settings = None
            return cls.settings()

        settings = cfg if isinstance(cfg, ZoneSettings) else ZoneSettings.from_config(cfg)
        cls._settings = settings
        logs.info(f"[DateUtil] configured local={settings.local} epoch_offset={settings.epoch_offset}")
        return settings

    @classmethod
    def settings(cls) -> ZoneSettings:
        if cls._settings is None:
            cls._settings = ZoneSettings.from_config(TimeConfig())
        return cls._settings

    @classmethod
    def local_zone(cls, tz: TzLike = None) -> tzinfo:
        return cls.settings().local if tz is None else resolve_timezone(tz)

    # ================================================================
    # 参数检查
    # ================================================================
    @staticmethod
    def _require_aware(value: datetime) -> datetime:
        if not isinstance(value, datetime):
            raise TypeError(f"不支持的时间类型: {type(value)}")
        if value.tzinfo is None or value.utcoffset() is None:
            raise TypeError(f"需要带时区的 datetime: {value!r}")
        return value

    @staticmethod
    def _require_naive(value: datetime) -> datetime:
        if not isinstance(value, datetime):
            raise TypeError(f"不支持的时间类型: {type(value)}")
        if value.tzinfo is not None:
            raise TypeError(f"需要不带时区的 datetime: {value!r}")
        return value

    @staticmethod
    def _is_aware(value: datetime) -> bool:
        if not isinstance(value, datetime):
            raise TypeError(f"不支持的时间类型: {type(value)}")
        return value.tzinfo is not None

    @staticmethod
    def _localize(fields: datetime, zone: tzinfo) -> datetime:
        """
        naive -> aware。
        夏令时跳过的时刻向后平移一个间隔；重复的时刻按 fold 选择（fold=0 取较早者）。
        """
        try:
            return fields.replace(tzinfo=zone).astimezone(UTC).astimezone(zone)
        except OverflowError as e:
            raise InvalidDateError(f"{fields!r} is out of range in {zone}") from e

    # ================================================================
    # 时区转换
    # ================================================================
    @classmethod
    def to_local_datetime(cls, wall_clock: datetime, tz: TzLike = None) -> datetime:
        """wall clock -> 本地时区的 calendar fields（保留 fold）"""
        cls._require_aware(wall_clock)
        zone = cls.local_zone(tz)
        try:
            return wall_clock.astimezone(zone).replace(tzinfo=None)
        except OverflowError as e:
            raise InvalidDateError(f"{wall_clock!r} is out of range in {zone}") from e

    @classmethod
    def from_local_datetime(cls, local_datetime: datetime, tz: TzLike = None) -> datetime:
        """本地时区的 calendar fields -> wall clock"""
        cls._require_naive(local_datetime)
        return cls._localize(local_datetime, cls.local_zone(tz))

    @classmethod
    def from_epoch_millis(cls, millis: int, tz: TzLike = None) -> datetime:
        """毫秒级时间戳 -> 本地时区的 calendar fields"""
        if isinstance(millis, bool) or not isinstance(millis, int):
            raise TypeError(f"毫秒时间戳必须是 int: {type(millis)}")

        zone = cls.local_zone(tz)
        try:
            instant = _EPOCH + timedelta(milliseconds=millis)
            return instant.astimezone(zone).replace(tzinfo=None)
        except OverflowError as e:
            raise InvalidDateError(f"Timestamp {millis} ms is out of range") from e

    @classmethod
    def to_epoch_millis(cls, local_datetime: datetime) -> int:
        """
        calendar fields -> 毫秒级时间戳。
        按 settings().epoch_offset 解释（默认固定 +08:00，而非本地时区）；
        epoch_offset 配置为 None 时跟随本地时区。
        """
        cls._require_naive(local_datetime)
        aware = cls._localize(local_datetime, cls.settings().epoch_zone)
        return (aware - _EPOCH) // _ONE_MS

    @classmethod
    def wall_clock_to_epoch_millis(cls, wall_clock: datetime) -> int:
        cls._require_aware(wall_clock)
        return (wall_clock - _EPOCH) // _ONE_MS

    @classmethod
    def local_to_utc(cls, local_datetime: datetime, tz: TzLike = None) -> datetime:
        """本地时区的 calendar fields -> UTC 的 calendar fields"""
        cls._require_naive(local_datetime)
        aware = cls._localize(local_datetime, cls.local_zone(tz))
        try:
            return aware.astimezone(UTC).replace(tzinfo=None)
        except OverflowError as e:
            raise InvalidDateError(f"{local_datetime!r} is out of range in UTC") from e

    @classmethod
    def utc_to_local(cls, utc_datetime: datetime, tz: TzLike = None) -> datetime:
        """UTC 的 calendar fields -> 本地时区的 calendar fields"""
        cls._require_naive(utc_datetime)
        zone = cls.local_zone(tz)
        try:
            return utc_datetime.replace(tzinfo=UTC).astimezone(zone).replace(tzinfo=None)
        except OverflowError as e:
            raise InvalidDateError(f"{utc_datetime!r} is out of range in {zone}") from e

    @classmethod
    def wall_clock_to_utc(cls, wall_clock: datetime, tz: TzLike = None) -> datetime:
        """
        结果的本地字段 == 输入的 UTC 字段，
        比如 +08:00 下 2018-01-01 10:00:00 -> 2018-01-01 02:00:00 (+08:00)
        """
        zone = cls.local_zone(tz)
        fields = cls.local_to_utc(cls.to_local_datetime(wall_clock, zone), zone)
        return cls.from_local_datetime(fields, zone)

    @classmethod
    def utc_to_wall_clock(cls, wall_clock: datetime, tz: TzLike = None) -> datetime:
        """wall_clock_to_utc 的逆操作"""
        zone = cls.local_zone(tz)
        fields = cls.utc_to_local(cls.to_local_datetime(wall_clock, zone), zone)
        return cls.from_local_datetime(fields, zone)

    # ================================================================
    # 日 / 时 / 年 边界
    # ================================================================
    @classmethod
    def _on_fields(
        cls, value: datetime, tz: TzLike, fn: Callable[[datetime], datetime]
    ) -> datetime:
        """naive 直接计算；aware 先转本地字段，计算后按本地时区还原。"""
        if not cls._is_aware(value):
            return fn(value)

        zone = cls.local_zone(tz)
        return cls.from_local_datetime(fn(cls.to_local_datetime(value, zone)), zone)

    @classmethod
    def start_of_day(cls, value: datetime, tz: TzLike = None) -> datetime:
        """2018-01-01 10:00:00 -> 2018-01-01 00:00:00"""
        return cls._on_fields(value, tz, lambda d: datetime.combine(d.date(), time.min))

    @classmethod
    def start_of_hour(cls, value: datetime, tz: TzLike = None) -> datetime:
        """2018-01-01 10:20:00 -> 2018-01-01 10:00:00"""
        return cls._on_fields(
            value, tz, lambda d: d.replace(minute=0, second=0, microsecond=0)
        )

    @classmethod
    def end_of_day(cls, value: datetime, tz: TzLike = None) -> datetime:
        """2018-01-01 10:00:00 -> 2018-01-01 23:59:59.999999"""
        return cls._on_fields(value, tz, lambda d: datetime.combine(d.date(), time.max))

    @classmethod
    def start_of_year(cls, value: datetime, tz: TzLike = None) -> datetime:
        """2018-12-25 10:00:00 -> 2018-01-01 00:00:00，总是返回 calendar fields"""
        fields = cls.to_local_datetime(value, tz) if cls._is_aware(value) else value
        return datetime(fields.year, 1, 1)

    @classmethod
    def local_start_of_day(cls, wall_clock: datetime, tz: TzLike = None) -> datetime:
        """wall clock -> 当天开始的本地 calendar fields"""
        return datetime.combine(cls.to_local_datetime(wall_clock, tz).date(), time.min)

    @classmethod
    def local_end_of_day(cls, wall_clock: datetime, tz: TzLike = None) -> datetime:
        """wall clock -> 当天结束的本地 calendar fields"""
        return datetime.combine(cls.to_local_datetime(wall_clock, tz).date(), time.max)

    # ================================================================
    # 天数偏移 / 相差天数
    # ================================================================
    @classmethod
    def add_days(cls, value: datetime, offset_days: int, tz: TzLike = None) -> datetime:
        """
        向后偏移 offset_days 天（可为负）。
        aware 按日历计算：跨夏令时保持本地钟面时间不变，而不是加 24h 的整数倍。
        """
        if isinstance(offset_days, bool) or not isinstance(offset_days, int):
            raise TypeError(f"offset_days 必须是 int: {type(offset_days)}")

        def shift(d: datetime) -> datetime:
            try:
                return (d + timedelta(days=offset_days)).replace(fold=d.fold)
            except OverflowError as e:
                raise InvalidDateError(f"{d!r} + {offset_days} days is out of range") from e

        return cls._on_fields(value, tz, shift)

    @classmethod
    def diff_days(cls, start: datetime, end: datetime, tz: TzLike = None) -> int:
        """
        相差天数：先截断到日期再相减，end 在后为正。
        两个参数必须同为 naive 或同为 aware。
        """
        start_aware = cls._is_aware(start)
        if start_aware != cls._is_aware(end):
            raise TypeError("diff_days 的两个参数必须同为 naive 或同为 aware")

        if start_aware:
            zone = cls.local_zone(tz)
            start = cls.to_local_datetime(start, zone)
            end = cls.to_local_datetime(end, zone)

        return (end.date() - start.date()).days

    # ================================================================
    # 格式化 / 解析
    # ================================================================
    @classmethod
    def format(cls, local_datetime: datetime, pattern: str) -> str:
        cls._require_naive(local_datetime)
        return compile_pattern(pattern).format(local_datetime)

    @classmethod
    def parse(cls, text: str, pattern: str) -> datetime:
        """比如 parse("20220224", "yyyyMMdd") -> 2022-02-24 00:00:00"""
        return compile_pattern(pattern).parse(text)

    @classmethod
    def format_wall_clock(cls, wall_clock: datetime, pattern: str, tz: TzLike = None) -> str:
        return cls.format(cls.to_local_datetime(wall_clock, tz), pattern)

    @classmethod
    def parse_wall_clock(cls, text: str, pattern: str, tz: TzLike = None) -> datetime:
        return cls.from_local_datetime(cls.parse(text, pattern), tz)
