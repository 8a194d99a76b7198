# toolbox/utils/errors.py


class DateUtilError(ValueError):
    """
    DateUtil 所有异常的基类。
    继承 ValueError，调用方可以统一按 ValueError 处理。
    """


class InvalidPatternError(DateUtilError):
    """
    Raised when a pattern string contains tokens the formatter cannot interpret.
    """

    def __init__(self, pattern: str, reason: str, position: int | None = None):
        self.pattern = pattern
        self.reason = reason
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Invalid date pattern {pattern!r}{where}: {reason}")


class ParseError(DateUtilError):
    """
    Raised when text does not conform to a pattern
    (structural mismatch or out-of-range field value).
    """

    def __init__(self, text: str, pattern: str, reason: str):
        self.text = text
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Cannot parse {text!r} with pattern {pattern!r}: {reason}")


class InvalidDateError(DateUtilError):
    """
    Raised when calendar fields do not form a valid date (e.g. Feb 30),
    or an instant is outside the range of datetime.
    """


class InvalidTimezoneError(DateUtilError):
    """Raised when a timezone name cannot be resolved."""
