import logging
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from app.core.config import settings

logger = logging.getLogger(__name__)

# Support both PostgreSQL and SQLite via centralized settings
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL)
else:
    # SQLite configuration for local development/testing
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    Session Provider: Provides a database session per request.
    Transaction management is handled explicitly in the Service Layer.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@retry(
    stop=stop_after_attempt(settings.db_connect_attempts),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=lambda state: logger.warning(f"Database not reachable (attempt {state.attempt_number}), retrying"),
    reraise=True
)
def init_db():
    """
    Registers the attendance, request and settings tables and creates any that are missing.
    Called once from the application lifespan.
    """
    # Import all models to ensure they are registered with Base.metadata before create_all
    from app.models import (  # noqa: F401
        branch, employee, holiday, system_setting, attendance,
        ot_request, leave_request, wfh_request, field_work_request, late_request
    )
    Base.metadata.create_all(bind=engine)
