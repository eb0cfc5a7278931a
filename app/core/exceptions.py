from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "id": entity_id}
        )

class InvalidTimeRangeError(AppException):
    """End time earlier than start time. OT is never priced on a negative window."""
    def __init__(self, message: str = "End time must not be earlier than start time"):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_TIME_RANGE"
        )

class InvalidStateError(AppException):
    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="INVALID_STATE",
            details={"current_status": current_status} if current_status else None
        )

class DuplicateCheckInError(AppException):
    def __init__(self, message: str = "Already checked in today"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="ALREADY_CHECKED_IN"
        )

class OutsideGeofenceError(AppException):
    def __init__(self, distance_meters: int, radius_meters: float):
        super().__init__(
            message=f"Current location is {distance_meters} m from the branch (allowed {radius_meters:g} m)",
            status_code=403,
            error_code="OUTSIDE_GEOFENCE",
            details={"distance_meters": distance_meters, "radius_meters": radius_meters}
        )
