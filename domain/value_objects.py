"""Domain Value Objects"""
from contextlib import contextmanager
from pydantic import BaseModel, validator
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import ClassVar, Dict, Tuple, Union

from domain.errors import (
    InvalidAmountError, InvalidCurrencyError, CurrencyMismatchError,
    NegativeResultError, DivisionByZeroError,
    MissingDateError, InvalidDateError, InvertedRangeError, PastStartDateError,
)

Number = Union[int, float, Decimal]

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


def _to_decimal(value, message: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise InvalidAmountError(message)
    if isinstance(value, Decimal):
        return value
    try:
        # floats go through str() so 100.005 keeps its decimal meaning
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmountError(message)


class Money(BaseModel):
    """Value Object for monetary amounts

    Amounts are stored as Decimal rounded half-up to two places. Every
    arithmetic operation returns a new instance and requires both operands
    to share a currency.
    """
    amount: Decimal
    currency: str = "USD"

    SUPPORTED_CURRENCIES: ClassVar[Tuple[str, ...]] = ("USD", "EUR", "GBP", "JPY", "CAD", "AUD")
    ZERO_DECIMAL_CURRENCIES: ClassVar[Tuple[str, ...]] = ("JPY",)
    MAX_AMOUNT: ClassVar[Decimal] = Decimal("999999999")
    CURRENCY_SYMBOLS: ClassVar[Dict[str, str]] = {
        "USD": "$",
        "EUR": "€",
        "GBP": "£",
        "JPY": "¥",
        "CAD": "C$",
        "AUD": "A$",
    }

    class Config:
        frozen = True

    @validator("amount", pre=True)
    def amount_must_be_valid(cls, v):
        value = _to_decimal(v, "Amount must be a number")
        if not value.is_finite():
            raise InvalidAmountError("Amount must be a finite number")
        if value < 0:
            raise InvalidAmountError("Amount cannot be negative")
        if value > cls.MAX_AMOUNT:
            raise InvalidAmountError("Amount is too large")
        return value.quantize(_CENT, rounding=ROUND_HALF_UP)

    @validator("currency", pre=True)
    def currency_must_be_supported(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise InvalidCurrencyError("Invalid currency")
        code = v.strip().upper()
        if code not in cls.SUPPORTED_CURRENCIES:
            raise InvalidCurrencyError(f"Invalid currency: {v}")
        return code

    # ==================== FACTORY METHODS ====================
    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        return cls(amount=Decimal("0"), currency=currency)

    # ==================== ARITHMETIC ====================
    def add(self, other: "Money") -> "Money":
        self._check_operand(other, "Cannot perform operation with different currencies")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_operand(other, "Cannot perform operation with different currencies")
        result = self.amount - other.amount
        if result < 0:
            raise NegativeResultError("Result cannot be negative")
        return Money(amount=result, currency=self.currency)

    def multiply(self, factor: Number) -> "Money":
        value = _to_decimal(factor, "Factor must be a number")
        return Money(amount=self.amount * value, currency=self.currency)

    def divide(self, divisor: Number) -> "Money":
        value = _to_decimal(divisor, "Divisor must be a number")
        if value == 0:
            raise DivisionByZeroError("Cannot divide by zero")
        return Money(amount=self.amount / value, currency=self.currency)

    # ==================== COMPARISON ====================
    def greater_than(self, other: "Money") -> bool:
        self._check_operand(other, "Cannot compare different currencies")
        return self.amount > other.amount

    def less_than(self, other: "Money") -> bool:
        self._check_operand(other, "Cannot compare different currencies")
        return self.amount < other.amount

    def equals(self, other: object) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount and self.currency == other.currency

    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: Number) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number) -> "Money":
        return self.divide(divisor)

    def __gt__(self, other: "Money") -> bool:
        return self.greater_than(other)

    def __lt__(self, other: "Money") -> bool:
        return self.less_than(other)

    def __str__(self) -> str:
        symbol = self.CURRENCY_SYMBOLS.get(self.currency, self.currency)
        if self.currency in self.ZERO_DECIMAL_CURRENCIES:
            return f"{symbol}{self.amount.quantize(_UNIT, rounding=ROUND_HALF_UP)}"
        return f"{symbol}{self.amount:.2f}"

    def _check_operand(self, other: "Money", message: str) -> None:
        if not isinstance(other, Money):
            raise TypeError("Operand must be Money")
        if self.currency != other.currency:
            raise CurrencyMismatchError(message)


_MIXED_TZ_MESSAGE = "Start and end dates must both be timezone-aware or both naive"


@contextmanager
def _comparable():
    """Turn naive-vs-aware comparison failures into InvalidDateError"""
    try:
        yield
    except TypeError:
        raise InvalidDateError(_MIXED_TZ_MESSAGE)


def _to_timestamp(value, label: str) -> datetime:
    if value is None or value == "":
        raise MissingDateError(f"{label} date is required")
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateError(f"{label} date must be a valid date")
    raise InvalidDateError(f"{label} date must be a valid date")


class DateRange(BaseModel):
    """Value Object for a time-bounded interval

    Both ends are inclusive: a range ending at 12:00 overlaps one starting
    at 12:00.
    """
    start: datetime = None
    end: datetime = None

    class Config:
        frozen = True

    @validator("start", pre=True, always=True)
    def start_must_be_timestamp(cls, v):
        return _to_timestamp(v, "Start")

    @validator("end", pre=True, always=True)
    def end_must_be_timestamp(cls, v):
        return _to_timestamp(v, "End")

    @validator("end")
    def end_not_before_start(cls, v, values):
        start = values.get("start")
        if start is None:
            return v
        if (start.tzinfo is None) != (v.tzinfo is None):
            raise InvalidDateError(_MIXED_TZ_MESSAGE)
        if start > v:
            raise InvertedRangeError("Start date cannot be after end date")
        return v

    # ==================== FACTORY METHODS ====================
    @classmethod
    def create(cls, start, end, reject_past: bool = False) -> "DateRange":
        """Build a range, optionally refusing one that starts before today"""
        date_range = cls(start=start, end=end)
        if reject_past and date_range.start.date() < date.today():
            raise PastStartDateError("Start date cannot be in the past")
        return date_range

    @classmethod
    def from_today_to(cls, end) -> "DateRange":
        return cls(start=datetime.combine(date.today(), time.min), end=end)

    @classmethod
    def for_days(cls, start, days: int) -> "DateRange":
        start = _to_timestamp(start, "Start")
        return cls(start=start, end=start + timedelta(days=days))

    @classmethod
    def for_hours(cls, start, hours: int) -> "DateRange":
        start = _to_timestamp(start, "Start")
        return cls(start=start, end=start + timedelta(hours=hours))

    # ==================== DURATION ====================
    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_in_days(self) -> int:
        return self.duration() // timedelta(days=1)

    def duration_in_hours(self) -> int:
        return self.duration() // timedelta(hours=1)

    def duration_in_minutes(self) -> int:
        return self.duration() // timedelta(minutes=1)

    # ==================== QUERY METHODS ====================
    def contains(self, instant: datetime) -> bool:
        with _comparable():
            return self.start <= instant <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        """True when the ranges share an instant, touching endpoints included"""
        with _comparable():
            return self.start <= other.end and self.end >= other.start

    def is_before(self, other: "DateRange") -> bool:
        with _comparable():
            return self.end < other.start

    def is_after(self, other: "DateRange") -> bool:
        with _comparable():
            return self.start > other.end

    def equals(self, other: object) -> bool:
        if not isinstance(other, DateRange):
            return False
        return self.start == other.start and self.end == other.end

    # Classification hints, not business rules
    def is_hotel_stay(self) -> bool:
        days = self.duration_in_days()
        return days > 0 or (
            days == 0 and self.start.hour < self.end.hour and self.end.hour > 12
        )

    def is_restaurant_reservation(self) -> bool:
        return self.duration_in_days() == 0 and 1 <= self.duration_in_hours() <= 4

    def is_event(self) -> bool:
        days = self.duration_in_days()
        return days > 1 or (days == 1 and self.duration_in_hours() > 8)

    def __str__(self) -> str:
        start_str = self.start.date().isoformat()
        end_str = self.end.date().isoformat()
        if start_str == end_str:
            return start_str
        return f"{start_str} to {end_str}"
