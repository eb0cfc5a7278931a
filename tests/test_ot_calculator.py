import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from app.core.clock import local_tz
from app.core.exceptions import InvalidTimeRangeError
from app.services.ot_calculator import calculate_ot, elapsed_hours, round_half_up

CONFIG = {"base_salary": 15000, "days_per_month": 30, "hours_per_day": 8}


def test_evening_ot_at_one_and_a_half():
    result = calculate_ot(
        start_time="2024-01-01T18:00:00+07:00",
        end_time="2024-01-01T20:30:00+07:00",
        ot_rate_multiplier=1.5,
        **CONFIG,
    )
    assert result.hours == Decimal("2.50")
    assert result.hourly_rate == Decimal("62.5")
    # 2.5 * 62.5 * 1.5 = 234.375, half-up
    assert result.amount == Decimal("234.38")
    assert result.is_priced

def test_zero_duration():
    start = datetime(2024, 1, 1, 18, 0, tzinfo=local_tz())
    result = calculate_ot(start_time=start, end_time=start, ot_rate_multiplier=1.5, **CONFIG)
    assert result.hours == 0
    assert result.amount == 0

@pytest.mark.parametrize("override", [
    {"base_salary": 0},
    {"base_salary": None},
    {"days_per_month": 0},
    {"hours_per_day": -8},
])
def test_unpriceable_config_keeps_hours(override):
    config = {**CONFIG, **override}
    result = calculate_ot(
        start_time="2024-01-01T18:00:00+07:00",
        end_time="2024-01-01T21:00:00+07:00",
        ot_rate_multiplier=1.5,
        **config,
    )
    assert result.amount is None
    assert result.hourly_rate == 0
    assert result.hours == Decimal("3.00")
    assert not result.is_priced

def test_double_rate_doubles_amount():
    window = {"start_time": "2024-03-02T09:00:00+07:00", "end_time": "2024-03-02T13:45:00+07:00"}
    single = calculate_ot(ot_rate_multiplier=1, **window, **CONFIG)
    double = calculate_ot(ot_rate_multiplier=2, **window, **CONFIG)
    assert abs(double.amount - single.amount * 2) <= Decimal("0.01")

def test_negative_window_is_rejected():
    with pytest.raises(InvalidTimeRangeError) as exc_info:
        calculate_ot(
            start_time="2024-01-01T20:00:00+07:00",
            end_time="2024-01-01T18:00:00+07:00",
            ot_rate_multiplier=1.5,
            **CONFIG,
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.error_code == "INVALID_TIME_RANGE"

def test_naive_and_utc_inputs_are_the_same_instant():
    # 18:00 Bangkok == 11:00 UTC
    naive = datetime(2024, 1, 1, 18, 0)
    utc = "2024-01-01T11:00:00Z"
    end = datetime(2024, 1, 1, 19, 0, tzinfo=local_tz())
    assert elapsed_hours(naive, end) == elapsed_hours(utc, end) == Decimal("1.00")

def test_hours_are_rounded_half_up():
    start = datetime(2024, 1, 1, 18, 0, tzinfo=local_tz())
    # 20 minutes = 0.3333 h
    assert elapsed_hours(start, start + timedelta(minutes=20)) == Decimal("0.33")
    # 0.125 h -> 0.13
    assert elapsed_hours(start, start + timedelta(seconds=450)) == Decimal("0.13")

def test_round_half_up_not_bankers():
    assert round_half_up(Decimal("0.125")) == Decimal("0.13")
    assert round_half_up(Decimal("234.375")) == Decimal("234.38")
    assert round_half_up(Decimal("2.345")) == Decimal("2.35")
