"""
Auto-approval gate shared by OT, leave, WFH, field-work and late requests.

Every creation flow calls `gate_new_request` so "auto-approved" means the same
thing everywhere: status "approved", a timestamp, and attribution to the system
account when that account can be found.

Failure policy:
- settings row missing or unreadable -> manual approval ("pending")
- system account lookup fails        -> still approved, `approved_by` omitted
"""

import enum
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import now_local
from app.core.config import settings
from app.core.result import Lookup
from app.models.employee import Employee
from app.models.request_base import RequestStatus
from app.services.settings_service import get_setting

logger = logging.getLogger(__name__)


class AutoApproveKey(str, enum.Enum):
    OT = "OT"
    LEAVE = "LEAVE"
    WFH = "WFH"
    FIELD_WORK = "FIELD_WORK"
    LATE = "LATE"

    @property
    def setting_key(self) -> str:
        return f"auto_approve_{self.value.lower()}"


def auto_approve_lookup(db: Session, key: AutoApproveKey) -> Lookup[bool]:
    raw = get_setting(db, key.setting_key)
    if raw.defaulted:
        logger.warning(f"Auto-approve setting {key.setting_key} unreadable; requiring manual approval")
        return Lookup(value=False, defaulted=True, error=raw.error)
    return Lookup.found(raw.value == "true")


def should_auto_approve(db: Session, key: AutoApproveKey) -> bool:
    return auto_approve_lookup(db, key).value


def get_system_user_id(db: Session) -> Lookup[Optional[int]]:
    try:
        user_id = (
            db.query(Employee.id)
            .filter(Employee.email == settings.system_user_email)
            .scalar()
        )
    except SQLAlchemyError as e:
        logger.warning(f"System account lookup failed: {e}")
        return Lookup.fallback(None, e)
    if user_id is None:
        logger.warning(f"System account {settings.system_user_email} not found; auto-approval will be unattributed")
    return Lookup.found(user_id)


def apply_auto_approve_fields(
    data: Dict[str, Any],
    auto_approve: bool,
    approver_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Return a copy of `data` with the initial status and, when approved, the approval stamp."""
    result = dict(data)
    if not auto_approve:
        result["status"] = RequestStatus.PENDING.value
        return result

    result["status"] = RequestStatus.APPROVED.value
    result["approved_at"] = now or now_local()
    if approver_id is not None:
        result["approved_by"] = approver_id
    return result


def gate_new_request(db: Session, key: AutoApproveKey, data: Dict[str, Any]) -> Dict[str, Any]:
    auto_approve = should_auto_approve(db, key)
    approver_id = get_system_user_id(db).value if auto_approve else None
    gated = apply_auto_approve_fields(data, auto_approve, approver_id)
    logger.info(
        f"{key.value} request gated as {gated['status']}",
        extra={"request_type": key.value, "auto_approve": auto_approve, "approved_by": approver_id},
    )
    return gated
