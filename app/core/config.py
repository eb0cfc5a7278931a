import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "HR Attendance API"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./attendance.db")

    # Local business timezone; naive timestamps are read in this zone
    timezone: str = os.getenv("APP_TIMEZONE", "Asia/Bangkok")

    # Account that auto-approved requests are attributed to
    system_user_email: str = os.getenv("SYSTEM_USER_EMAIL", "system@hr-attendance.local")

    # TTL for the cached key-value settings snapshot
    settings_cache_seconds: int = int(os.getenv("SETTINGS_CACHE_SECONDS", "300"))

    # Startup retries while the database comes up
    db_connect_attempts: int = int(os.getenv("DB_CONNECT_ATTEMPTS", "5"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting for clock-in/clock-out
    rate_limit_checkin: str = os.getenv("RATE_LIMIT_CHECKIN", "30/minute")
    enable_rate_limit: bool = os.getenv("APP_ENV", "development") != "testing"

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("Running production with a SQLite database.")
