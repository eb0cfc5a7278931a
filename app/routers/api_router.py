from fastapi import APIRouter
from app.routers import attendance, holidays, organization, ot, requests, settings

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(organization.router, tags=["Organization"])
api_router.include_router(settings.router, tags=["Settings"])
api_router.include_router(holidays.router, tags=["Holidays"])
api_router.include_router(attendance.router, tags=["Attendance"])
api_router.include_router(ot.router, tags=["Overtime"])
api_router.include_router(requests.router, tags=["Requests"])
