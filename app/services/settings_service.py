"""
Settings Service Layer

Reads the generic `system_settings` key-value table and assembles it into a
typed `SystemSettings` snapshot. Request flows receive the snapshot as a
parameter instead of querying individual keys, so the pricing and gating
functions stay pure.

The snapshot is cached per process with an explicit TTL; writes through
`update_settings` invalidate it.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import parse_hhmm
from app.core.config import settings as app_config
from app.core.result import Lookup
from app.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)


class RateConfig(BaseModel):
    workday_rate: float = 1.0
    weekend_rate: float = 1.5
    holiday_rate: float = 2.0


class WorkTimeConfig(BaseModel):
    days_per_month: float = 26
    hours_per_day: float = 8


class SystemSettings(BaseModel):
    work_start_time: str = "08:30"
    work_end_time: str = "17:30"
    late_threshold_minutes: int = 15
    working_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # ISO weekdays, Mon=1

    work_time: WorkTimeConfig = Field(default_factory=WorkTimeConfig)
    rates: RateConfig = Field(default_factory=RateConfig)

    require_checkin_workday: bool = True
    require_checkin_weekend: bool = False
    require_checkin_holiday: bool = False
    require_gps: bool = True

    auto_checkout_enabled: bool = False
    auto_checkout_delay_hours: float = 4
    auto_checkout_time: str = "18:00"
    auto_checkout_skip_if_ot: bool = True

    auto_approve_ot: bool = False
    auto_approve_leave: bool = False
    auto_approve_wfh: bool = False
    auto_approve_field_work: bool = False
    auto_approve_late: bool = False


DEFAULT_SETTINGS = SystemSettings()


# Parsers raise ValueError on a bad raw value; the snapshot then keeps that field's default.
def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError("must be greater than zero")
    return value


def _non_negative_float(raw: str) -> float:
    value = float(raw)
    if value < 0:
        raise ValueError("must not be negative")
    return value


def _positive_int(raw: str) -> int:
    value = int(float(raw))
    if value <= 0:
        raise ValueError("must be greater than zero")
    return value


def _flag(raw: str) -> bool:
    if raw not in ("true", "false"):
        raise ValueError('must be "true" or "false"')
    return raw == "true"


def _working_days(raw: str) -> List[int]:
    days = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit() and 1 <= int(part) <= 7:
            days.append(int(part))
    if not days:
        raise ValueError("must list ISO weekdays 1-7, e.g. 1,2,3,4,5")
    return days


def _hhmm(raw: str) -> str:
    try:
        parse_hhmm(raw)
    except ValueError:
        raise ValueError("must be a time in HH:MM format")
    return raw.strip()


# setting_key -> (dotted field path on SystemSettings, parser)
_KEY_MAP: Dict[str, Tuple[str, Callable[[str], object]]] = {
    "work_start_time": ("work_start_time", _hhmm),
    "work_end_time": ("work_end_time", _hhmm),
    "late_threshold": ("late_threshold_minutes", _positive_int),
    "late_threshold_minutes": ("late_threshold_minutes", _positive_int),
    "working_days": ("working_days", _working_days),
    "days_per_month": ("work_time.days_per_month", _positive_float),
    "hours_per_day": ("work_time.hours_per_day", _positive_float),
    "ot_rate_workday": ("rates.workday_rate", _positive_float),
    "ot_rate_weekend": ("rates.weekend_rate", _positive_float),
    "ot_rate_holiday": ("rates.holiday_rate", _positive_float),
    "ot_require_checkin_workday": ("require_checkin_workday", _flag),
    "ot_require_checkin_weekend": ("require_checkin_weekend", _flag),
    "ot_require_checkin_holiday": ("require_checkin_holiday", _flag),
    "require_gps": ("require_gps", _flag),
    "auto_checkout_enabled": ("auto_checkout_enabled", _flag),
    "auto_checkout_delay_hours": ("auto_checkout_delay_hours", _non_negative_float),
    "auto_checkout_time": ("auto_checkout_time", _hhmm),
    "auto_checkout_skip_if_ot": ("auto_checkout_skip_if_ot", _flag),
    "auto_approve_ot": ("auto_approve_ot", _flag),
    "auto_approve_leave": ("auto_approve_leave", _flag),
    "auto_approve_wfh": ("auto_approve_wfh", _flag),
    "auto_approve_field_work": ("auto_approve_field_work", _flag),
    "auto_approve_late": ("auto_approve_late", _flag),
}

KNOWN_KEYS = frozenset(_KEY_MAP)

_cache: Optional[Tuple[float, SystemSettings]] = None


def build_settings(rows: Dict[str, Optional[str]]) -> SystemSettings:
    """Map raw key-value rows onto a typed snapshot. Unknown keys are ignored."""
    data = DEFAULT_SETTINGS.model_dump()
    for key, raw in rows.items():
        if key not in _KEY_MAP or raw is None:
            continue
        path, parse = _KEY_MAP[key]
        try:
            value = parse(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid value for setting {key}: {raw!r}")
            continue
        target = data
        *parents, leaf = path.split(".")
        for parent in parents:
            target = target[parent]
        target[leaf] = value
    return SystemSettings.model_validate(data)


def invalid_settings(values: Dict[str, str]) -> Dict[str, str]:
    """Known keys whose value would not parse, mapped to the reason."""
    errors = {}
    for key, raw in values.items():
        if key not in _KEY_MAP:
            continue
        try:
            _KEY_MAP[key][1](raw)
        except (TypeError, ValueError) as e:
            errors[key] = str(e)
    return errors


def load_system_settings(db: Session) -> Lookup[SystemSettings]:
    """
    Return the settings snapshot, served from cache while it is fresh.
    A read failure yields the defaults with `defaulted=True`; failures are not cached.
    """
    global _cache
    now = time.monotonic()
    if _cache and now - _cache[0] < app_config.settings_cache_seconds:
        return Lookup.found(_cache[1])

    try:
        rows = db.query(SystemSetting.setting_key, SystemSetting.setting_value).all()
    except SQLAlchemyError as e:
        logger.warning(f"Settings unavailable, using defaults: {e}")
        return Lookup.fallback(DEFAULT_SETTINGS, e)

    snapshot = build_settings({key: value for key, value in rows})
    _cache = (now, snapshot)
    return Lookup.found(snapshot)


def invalidate_settings_cache() -> None:
    global _cache
    _cache = None


def get_setting(db: Session, key: str) -> Lookup[Optional[str]]:
    """Single raw value; `None` when the row does not exist."""
    try:
        row = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
    except SQLAlchemyError as e:
        logger.warning(f"Error reading setting {key}: {e}")
        return Lookup.fallback(None, e)
    return Lookup.found(row.setting_value if row else None)


def update_settings(db: Session, values: Dict[str, str]) -> List[str]:
    """Upsert key-value pairs and drop the cached snapshot. Returns the keys written."""
    written = []
    for key, value in values.items():
        row = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
        if row is None:
            row = SystemSetting(setting_key=key, setting_value=value)
            db.add(row)
        else:
            row.setting_value = value
        written.append(key)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    invalidate_settings_cache()
    logger.info(f"Updated settings: {', '.join(written)}")
    return written
