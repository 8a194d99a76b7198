# toolbox/utils/pattern.py
"""
日期格式模板编译
---------------------------------------
yyyy / yy / y   年
MM / M          月
dd / d          日
HH / H          时（24 小时制）
mm / m          分
ss / s          秒
S ... SSSSSS    秒的小数部分
'text'          引号内为字面量，'' 表示单引号
其它非字母字符    字面量
---------------------------------------
编译结果 DatePattern 不可变，经 lru_cache 缓存后可跨线程共享。
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Tuple

from toolbox.utils.errors import InvalidDateError, InvalidPatternError, ParseError
from toolbox.utils.logger import logs

LITERAL = "literal"

_FIELDS: Dict[str, str] = {
    "y": "year",
    "M": "month",
    "d": "day",
    "H": "hour",
    "m": "minute",
    "s": "second",
    "S": "fraction",
}

_ALLOWED_WIDTHS: Dict[str, Tuple[int, ...]] = {
    "year": (1, 2, 4),
    "month": (1, 2),
    "day": (1, 2),
    "hour": (1, 2),
    "minute": (1, 2),
    "second": (1, 2),
    "fraction": (1, 2, 3, 4, 5, 6),
}

# 解析时的取值范围（闭区间）
_RANGES: Dict[str, Tuple[int, int]] = {
    "year": (1, 9999),
    "month": (1, 12),
    "day": (1, 31),
    "hour": (0, 23),
    "minute": (0, 59),
    "second": (0, 59),
    "fraction": (0, 999_999),
}

_DEFAULTS: Dict[str, int] = {
    "year": 1970,
    "month": 1,
    "day": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "fraction": 0,
}


@dataclass(frozen=True)
class Token:
    kind: str
    width: int = 0
    text: str = ""

    @property
    def is_literal(self) -> bool:
        return self.kind == LITERAL

    def regex(self) -> str:
        if self.is_literal:
            return re.escape(self.text)
        if self.kind == "year" and self.width == 1:
            return r"(\d{1,4})"
        if self.kind == "fraction" or self.width >= 2:
            return rf"(\d{{{self.width}}})"
        return r"(\d{1,2})"

    def render(self, dt: datetime) -> str:
        if self.is_literal:
            return self.text
        if self.kind == "year":
            if self.width == 2:
                return f"{dt.year % 100:02d}"
            if self.width == 4:
                return f"{dt.year:04d}"
            return str(dt.year)
        if self.kind == "fraction":
            return f"{dt.microsecond:06d}"[: self.width]

        value = getattr(dt, self.kind)
        return f"{value:02d}" if self.width == 2 else str(value)

    def value_of(self, digits: str) -> int:
        if self.kind == "fraction":
            return int(digits.ljust(6, "0"))
        if self.kind == "year" and self.width == 2:
            return 2000 + int(digits)
        return int(digits)


@dataclass(frozen=True)
class DatePattern:
    pattern: str
    tokens: Tuple[Token, ...]
    matcher: "re.Pattern[str]"

    def format(self, dt: datetime) -> str:
        return "".join(token.render(dt) for token in self.tokens)

    def parse(self, text: str) -> datetime:
        """
        严格解析：整串必须匹配；同一字段出现多次时取值必须一致；
        缺失字段使用 1970-01-01 00:00:00。
        """
        if not isinstance(text, str):
            raise TypeError(f"不支持的文本类型: {type(text)}")

        match = self.matcher.fullmatch(text)
        if match is None:
            raise ParseError(text, self.pattern, "text does not match pattern")

        values: Dict[str, int] = {}
        field_tokens = [t for t in self.tokens if not t.is_literal]
        for token, digits in zip(field_tokens, match.groups()):
            value = token.value_of(digits)
            low, high = _RANGES[token.kind]
            if not low <= value <= high:
                raise ParseError(
                    text, self.pattern, f"{token.kind} {value} out of range [{low}, {high}]"
                )
            if values.get(token.kind, value) != value:
                raise ParseError(text, self.pattern, f"conflicting values for {token.kind}")
            values[token.kind] = value

        merged = {**_DEFAULTS, **values}
        try:
            return datetime(
                merged["year"],
                merged["month"],
                merged["day"],
                merged["hour"],
                merged["minute"],
                merged["second"],
                merged["fraction"],
            )
        except ValueError as e:
            raise InvalidDateError(f"{text!r} is not a valid date for {self.pattern!r}: {e}") from e


def tokenize(pattern: str) -> List[Token]:
    tokens: List[Token] = []
    literal: List[str] = []

    def flush() -> None:
        if literal:
            tokens.append(Token(LITERAL, text="".join(literal)))
            literal.clear()

    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]

        if c == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            j = i + 1
            while True:
                if j >= n:
                    raise InvalidPatternError(pattern, "unterminated quote", i)
                if pattern[j] == "'":
                    if j + 1 < n and pattern[j + 1] == "'":
                        literal.append("'")
                        j += 2
                        continue
                    break
                literal.append(pattern[j])
                j += 1
            i = j + 1
            continue

        if c.isascii() and c.isalpha():
            j = i
            while j < n and pattern[j] == c:
                j += 1
            width = j - i

            kind = _FIELDS.get(c)
            if kind is None:
                raise InvalidPatternError(pattern, f"unsupported token {pattern[i:j]!r}", i)
            if width not in _ALLOWED_WIDTHS[kind]:
                raise InvalidPatternError(pattern, f"unsupported width for {pattern[i:j]!r}", i)

            flush()
            tokens.append(Token(kind, width=width))
            i = j
            continue

        literal.append(c)
        i += 1

    flush()
    return tokens


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> DatePattern:
    if not isinstance(pattern, str):
        raise TypeError(f"不支持的 pattern 类型: {type(pattern)}")

    tokens = tuple(tokenize(pattern))
    matcher = re.compile("".join(t.regex() for t in tokens), re.ASCII)
    logs.debug(f"[pattern] compiled {pattern!r} -> {len(tokens)} tokens")
    return DatePattern(pattern=pattern, tokens=tokens, matcher=matcher)
