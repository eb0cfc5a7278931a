import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.database import Base, get_db
from app.main import app
from app.services.settings_service import invalidate_settings_cache
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """The settings snapshot is cached per process; never let it leak between tests."""
    invalidate_settings_cache()
    yield
    invalidate_settings_cache()

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def branch(db_session):
    """Head office at Bangkok city centre with a 100 m geofence."""
    from app.models.branch import Branch
    branch = Branch(name="Head Office", gps_lat=13.7563, gps_lng=100.5018, radius_meters=100)
    db_session.add(branch)
    db_session.commit()
    return branch

@pytest.fixture(scope="function")
def other_branch(db_session):
    from app.models.branch import Branch
    branch = Branch(name="Chiang Mai", gps_lat=18.7883, gps_lng=98.9853, radius_meters=200)
    db_session.add(branch)
    db_session.commit()
    return branch

@pytest.fixture(scope="function")
def employee(db_session, branch):
    """Employee on 15,000/month at the head office."""
    from app.models.employee import Employee
    employee = Employee(
        name="Somchai",
        email="somchai@example.com",
        base_salary=15000,
        branch_id=branch.id,
        is_active=True,
    )
    db_session.add(employee)
    db_session.commit()
    return employee

@pytest.fixture(scope="function")
def system_account(db_session):
    from app.core.config import settings
    from app.models.employee import Employee
    account = Employee(name="System", email=settings.system_user_email, is_system_account=True, is_active=True)
    db_session.add(account)
    db_session.commit()
    return account

@pytest.fixture(scope="function")
def set_settings(db_session):
    """Helper fixture to write key-value settings rows."""
    from app.services.settings_service import update_settings

    def _set(**values):
        update_settings(db_session, {k: str(v) for k, v in values.items()})
    return _set

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
