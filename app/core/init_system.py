import logging
from app.core.config import settings
from app.database import SessionLocal
from app.models.employee import Employee
from app.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)

# setting_key -> (default value, description)
DEFAULT_SETTING_ROWS = {
    "work_start_time": ("08:30", "Start of the working day (HH:MM, local time)"),
    "work_end_time": ("17:30", "End of the working day (HH:MM, local time)"),
    "late_threshold": ("15", "Grace period in minutes before a check-in counts as late"),
    "working_days": ("1,2,3,4,5", "ISO weekdays that are workdays (Mon=1)"),
    "days_per_month": ("26", "Working days per month used for the hourly wage"),
    "hours_per_day": ("8", "Working hours per day used for the hourly wage"),
    "ot_rate_workday": ("1.0", "OT multiplier for pre-shift OT on workdays"),
    "ot_rate_weekend": ("1.5", "OT multiplier for normal OT and weekends"),
    "ot_rate_holiday": ("2.0", "OT multiplier on holidays"),
    "ot_require_checkin_workday": ("true", "Require a check-in before starting OT on workdays"),
    "ot_require_checkin_weekend": ("false", "Require a check-in before starting OT on weekends"),
    "ot_require_checkin_holiday": ("false", "Require a check-in before starting OT on holidays"),
    "require_gps": ("true", "Gate check-in / check-out with the branch geofence"),
    "auto_checkout_enabled": ("false", "Close open attendance logs left after the working day"),
    "auto_checkout_delay_hours": ("4", "Hours after work_end_time before an open log is closed"),
    "auto_checkout_time": ("18:00", "Check-out time recorded by auto checkout (HH:MM, local time)"),
    "auto_checkout_skip_if_ot": ("true", "Leave logs open when the employee has approved OT that day"),
    "auto_approve_ot": ("false", "Auto-approve OT requests"),
    "auto_approve_leave": ("false", "Auto-approve leave requests"),
    "auto_approve_wfh": ("false", "Auto-approve work-from-home requests"),
    "auto_approve_field_work": ("false", "Auto-approve field-work requests"),
    "auto_approve_late": ("false", "Auto-approve late requests"),
}


def ensure_default_settings(db) -> int:
    """Insert any missing settings rows. Existing values are never overwritten."""
    existing = {key for (key,) in db.query(SystemSetting.setting_key).all()}
    added = 0
    for key, (value, description) in DEFAULT_SETTING_ROWS.items():
        if key not in existing:
            db.add(SystemSetting(setting_key=key, setting_value=value, description=description))
            added += 1
    return added


def ensure_system_account(db) -> Employee:
    account = db.query(Employee).filter(Employee.email == settings.system_user_email).first()
    if account is None:
        account = Employee(
            name="System",
            email=settings.system_user_email,
            is_system_account=True,
            is_active=True,
        )
        db.add(account)
        logger.info(f"✓ Created system account {settings.system_user_email}")
    return account


def init_system_data():
    """
    Checks if the system needs initialization.
    Creates the system account that auto-approvals are attributed to and
    fills in any missing settings rows with their defaults.
    """
    db = SessionLocal()
    try:
        ensure_system_account(db)
        added = ensure_default_settings(db)
        db.commit()
        logger.info(f"System initialization check complete ({added} default setting(s) added)")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
