"""
OT rate resolution.

Tier selection:
- the date is an active holiday for the branch -> holiday rate, whatever OT type was requested
- ot_type "holiday"                              -> holiday rate
- ot_type "pre_shift"                            -> workday rate
- anything else ("normal")                       -> weekend / standard OT rate

Rates come from the employee's overrides, then the settings store, then 1.0 / 1.5 / 2.0.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.models.ot_request import OTType
from app.services.holiday_service import DayInfo, DayType, find_holiday
from app.services.settings_service import RateConfig, SystemSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateResolution:
    rate_multiplier: float
    is_holiday: bool
    holiday_name: Optional[str] = None
    ot_type: str = OTType.NORMAL.value
    # True when the holiday lookup failed and the date was assumed to be a normal day
    holiday_lookup_degraded: bool = False


@dataclass(frozen=True)
class DayRate:
    rate_multiplier: float
    day_type: DayType
    require_checkin: bool
    holiday_name: Optional[str] = None


def _override(value: Optional[float], fallback: float) -> float:
    return value if value is not None and value > 0 else fallback


def effective_rates(base: RateConfig, employee: Optional[Employee] = None) -> RateConfig:
    """Apply per-employee multipliers (1x -> workday, 1.5x -> weekend/normal, 2x -> holiday)."""
    if employee is None:
        return base
    return RateConfig(
        workday_rate=_override(employee.ot_rate_1x, base.workday_rate),
        weekend_rate=_override(employee.ot_rate_1_5x, base.weekend_rate),
        holiday_rate=_override(employee.ot_rate_2x, base.holiday_rate),
    )


def _normalize_ot_type(ot_type: Union[OTType, str, None]) -> str:
    if isinstance(ot_type, OTType):
        return ot_type.value
    return ot_type or OTType.NORMAL.value


def select_rate(
    ot_type: Union[OTType, str, None],
    rates: RateConfig,
    holiday_name: Optional[str] = None,
    is_holiday: bool = False,
) -> RateResolution:
    """Pure tier selection; a holiday always wins over the requested OT type."""
    tag = _normalize_ot_type(ot_type)
    if is_holiday:
        return RateResolution(rates.holiday_rate, True, holiday_name, tag)
    if tag == OTType.HOLIDAY.value:
        rate = rates.holiday_rate
    elif tag == OTType.PRE_SHIFT.value:
        rate = rates.workday_rate
    else:
        rate = rates.weekend_rate
    return RateResolution(rate, False, None, tag)


def resolve_rate(
    db: Session,
    day: date,
    branch_id: Optional[int] = None,
    employee_overrides: Optional[Employee] = None,
    ot_type: Union[OTType, str, None] = OTType.NORMAL,
    rates: Optional[RateConfig] = None,
) -> RateResolution:
    rates = effective_rates(rates or RateConfig(), employee_overrides)
    lookup = find_holiday(db, day, branch_id)
    holiday = lookup.value
    resolution = select_rate(
        ot_type,
        rates,
        holiday_name=holiday.name if holiday is not None else None,
        is_holiday=holiday is not None,
    )
    if lookup.defaulted:
        return RateResolution(
            resolution.rate_multiplier,
            resolution.is_holiday,
            resolution.holiday_name,
            resolution.ot_type,
            holiday_lookup_degraded=True,
        )
    return resolution


def rate_for_day_type(
    day_info: DayInfo,
    system_settings: SystemSettings,
    employee: Optional[Employee] = None,
    ot_type: Union[OTType, str, None] = None,
) -> DayRate:
    """
    Rate tier from the calendar, used when an OT session starts.

    Holidays and weekends take their own tier whatever the OT type. On a
    workday the tier follows `ot_type` when one is given (pre_shift -> workday
    rate, normal -> standard OT rate), otherwise the workday rate.
    Check-in before OT is required on workdays only unless configured otherwise.
    """
    rates = effective_rates(system_settings.rates, employee)
    if day_info.type == DayType.HOLIDAY:
        return DayRate(rates.holiday_rate, DayType.HOLIDAY, system_settings.require_checkin_holiday, day_info.holiday_name)
    if day_info.type == DayType.WEEKEND:
        return DayRate(rates.weekend_rate, DayType.WEEKEND, system_settings.require_checkin_weekend)
    workday_rate = select_rate(ot_type, rates).rate_multiplier if ot_type is not None else rates.workday_rate
    return DayRate(workday_rate, DayType.WORKDAY, system_settings.require_checkin_workday)
