"""
Holiday Service Layer

Holiday lookups and day-type classification (holiday / weekend / workday).

A branch holiday only applies to its own branch:
    type IN ('public', 'company') OR (type = 'branch' AND branch_id = :branch_id)
Without a branch id only public and company holidays match.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import today_local
from app.core.result import Lookup
from app.models.holiday import Holiday, HolidayType

logger = logging.getLogger(__name__)


class DayType(str, Enum):
    HOLIDAY = "holiday"
    WEEKEND = "weekend"
    WORKDAY = "workday"


class DayInfo(BaseModel):
    day: date
    type: DayType
    holiday_name: Optional[str] = None


def _applies_to(branch_id: Optional[int]):
    shared = Holiday.type.in_([HolidayType.PUBLIC.value, HolidayType.COMPANY.value])
    if branch_id is None:
        return shared
    return or_(
        shared,
        and_(Holiday.type == HolidayType.BRANCH.value, Holiday.branch_id == branch_id),
    )


def find_holiday(db: Session, day: date, branch_id: Optional[int] = None) -> Lookup[Optional[Holiday]]:
    """
    First active holiday on `day` for the branch.
    On a data-source error the day is treated as a normal day (fail-open) and the
    returned Lookup is flagged as defaulted.
    """
    try:
        holiday = (
            db.query(Holiday)
            .filter(Holiday.date == day, Holiday.is_active.is_(True), _applies_to(branch_id))
            .order_by(Holiday.id)
            .first()
        )
    except SQLAlchemyError as e:
        logger.warning(f"Holiday lookup failed for {day} (branch={branch_id}); treating as non-holiday: {e}")
        return Lookup.fallback(None, e)
    return Lookup.found(holiday)


def holidays_in_range(
    db: Session,
    start_date: date,
    end_date: date,
    branch_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Holiday]:
    query = (
        db.query(Holiday)
        .filter(
            Holiday.date >= start_date,
            Holiday.date <= end_date,
            Holiday.is_active.is_(True),
            _applies_to(branch_id),
        )
        .order_by(Holiday.date)
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def upcoming_holidays(db: Session, days: int = 30, limit: int = 5, branch_id: Optional[int] = None) -> List[Holiday]:
    start = today_local()
    return holidays_in_range(db, start, start + timedelta(days=days), branch_id, limit=limit)


def is_weekend(day: date, working_days: List[int]) -> bool:
    return day.isoweekday() not in working_days


def classify_day(day: date, holiday: Optional[Holiday], working_days: List[int]) -> DayInfo:
    if holiday is not None:
        return DayInfo(day=day, type=DayType.HOLIDAY, holiday_name=holiday.name)
    if is_weekend(day, working_days):
        return DayInfo(day=day, type=DayType.WEEKEND)
    return DayInfo(day=day, type=DayType.WORKDAY)


def get_day_info(db: Session, day: date, working_days: List[int], branch_id: Optional[int] = None) -> Lookup[DayInfo]:
    lookup = find_holiday(db, day, branch_id)
    info = classify_day(day, lookup.value, working_days)
    return Lookup(value=info, defaulted=lookup.defaulted, error=lookup.error)


def create_holiday(
    db: Session,
    day: date,
    name: str,
    holiday_type: HolidayType = HolidayType.PUBLIC,
    branch_id: Optional[int] = None,
) -> Holiday:
    if holiday_type != HolidayType.BRANCH:
        branch_id = None
    holiday = Holiday(date=day, name=name, type=holiday_type.value, branch_id=branch_id, is_active=True)
    db.add(holiday)
    db.commit()
    db.refresh(holiday)
    logger.info(f"Holiday added: {day} {name} ({holiday_type.value}, branch={branch_id})")
    return holiday
