"""
Settings Router

Administration of the key-value business settings (work hours, OT rates,
check-in requirements and auto-approval switches).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.exceptions import AppException
from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.settings import AutoApproveSettings, AutoApproveUpdate, SettingsUpdate
from app.services.auto_approve import AutoApproveKey
from app.services.settings_service import (
    KNOWN_KEYS,
    SystemSettings,
    invalid_settings,
    load_system_settings,
    update_settings,
)

router = APIRouter(prefix="/settings", tags=["settings"])

# AutoApproveSettings field -> gate key
_AUTO_APPROVE_FIELDS = {
    "ot": AutoApproveKey.OT,
    "leave": AutoApproveKey.LEAVE,
    "wfh": AutoApproveKey.WFH,
    "field_work": AutoApproveKey.FIELD_WORK,
    "late": AutoApproveKey.LATE,
}


def _snapshot_response(db: Session) -> ApiResponse[SystemSettings]:
    lookup = load_system_settings(db)
    return ApiResponse.ok(lookup.value, warnings=["settings_unavailable"] if lookup.defaulted else [])


def _auto_approve_view(snapshot: SystemSettings) -> AutoApproveSettings:
    return AutoApproveSettings(**{
        field: getattr(snapshot, key.setting_key) for field, key in _AUTO_APPROVE_FIELDS.items()
    })


@router.get("", response_model=ApiResponse[SystemSettings])
def get_settings(db: Session = Depends(get_db)):
    return _snapshot_response(db)


@router.put("", response_model=ApiResponse[SystemSettings])
def put_settings(payload: SettingsUpdate, db: Session = Depends(get_db)):
    unknown = sorted(set(payload.values) - KNOWN_KEYS)
    if unknown:
        raise AppException(
            f"Unknown setting keys: {', '.join(unknown)}",
            error_code="UNKNOWN_SETTING",
            details={"keys": unknown},
        )
    invalid = invalid_settings(payload.values)
    if invalid:
        raise AppException(
            f"Invalid setting values: {', '.join(sorted(invalid))}",
            error_code="INVALID_SETTING_VALUE",
            details=invalid,
        )
    update_settings(db, payload.values)
    return _snapshot_response(db)


@router.get("/auto-approve", response_model=AutoApproveSettings)
def get_auto_approve(db: Session = Depends(get_db)):
    return _auto_approve_view(load_system_settings(db).value)


@router.put("/auto-approve", response_model=AutoApproveSettings)
def put_auto_approve(payload: AutoApproveUpdate, db: Session = Depends(get_db)):
    values = {
        _AUTO_APPROVE_FIELDS[field].setting_key: "true" if enabled else "false"
        for field, enabled in payload.model_dump(exclude_none=True).items()
    }
    if values:
        update_settings(db, values)
    return _auto_approve_view(load_system_settings(db).value)
