"""
OT amount calculator.

    hourly_rate = base_salary / days_per_month / hours_per_day
    amount      = hours * hourly_rate * ot_rate_multiplier

Hours and amount are rounded half-up to 2 decimal places using Decimal
arithmetic. A missing or non-positive salary / work-time configuration yields
`amount=None` ("cannot price") while hours are still reported.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from app.core.clock import ensure_local
from app.core.exceptions import InvalidTimeRangeError

CENTS = Decimal("0.01")
SECONDS_PER_HOUR = Decimal(3600)

Number = Union[int, float, Decimal]


def round_half_up(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _dec(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class OTCalculation:
    hours: Decimal
    hourly_rate: Decimal
    amount: Optional[Decimal]

    @property
    def is_priced(self) -> bool:
        return self.amount is not None


def elapsed_hours(start_time: Union[str, datetime], end_time: Union[str, datetime]) -> Decimal:
    """Hours between two instants, rounded half-up to 2 dp. Rejects a negative window."""
    start = ensure_local(start_time)
    end = ensure_local(end_time)
    if end < start:
        raise InvalidTimeRangeError(f"End {end.isoformat()} is before start {start.isoformat()}")
    return round_half_up(_dec((end - start).total_seconds()) / SECONDS_PER_HOUR)


def calculate_ot(
    start_time: Union[str, datetime],
    end_time: Union[str, datetime],
    base_salary: Optional[Number],
    ot_rate_multiplier: Number,
    days_per_month: Number,
    hours_per_day: Number,
) -> OTCalculation:
    hours = elapsed_hours(start_time, end_time)

    if base_salary is None or base_salary <= 0 or days_per_month <= 0 or hours_per_day <= 0:
        return OTCalculation(hours=hours, hourly_rate=Decimal("0"), amount=None)

    hourly_rate = _dec(base_salary) / _dec(days_per_month) / _dec(hours_per_day)
    amount = round_half_up(hours * hourly_rate * _dec(ot_rate_multiplier))
    return OTCalculation(hours=hours, hourly_rate=hourly_rate, amount=amount)
