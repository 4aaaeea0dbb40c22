import os
import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine, event as sa_event
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["API_V1_STR"] = "/api/v1"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-0123456789"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.main import app
from app.database import get_db
from app.models import (
    Base,
    User,
    UserRole,
    Association,
    Application,
    ApplicationStatus,
    Event,
)
from app.utils.security import create_access_token

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="session")
def engine():
    """Create a test database engine for the entire test session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT to nest inside the test transaction
    @sa_event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @sa_event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine):
    """
    Create a new database session for each test.
    Automatically rolls back changes after each test.
    """
    connection = engine.connect()
    transaction = connection.begin()

    # Service-level commits and rollbacks only touch a savepoint
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=connection,
        join_transaction_mode="create_savepoint",
    )
    session = TestingSessionLocal()

    def override_get_db():
        try:
            yield session
        finally:
            pass  # Don't close here, we'll handle it after the test

    app.dependency_overrides[get_db] = override_get_db
    yield session

    # Cleanup
    session.close()
    transaction.rollback()
    connection.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Create a FastAPI TestClient with database session override."""
    with TestClient(app) as c:
        yield c


def make_user(db_session, email: str, role: UserRole = UserRole.USER, name: str = None) -> User:
    user = User(email=email, name=name, role=role, is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_association(db_session, owner: User, name: str = "London Central", admins=()) -> Association:
    association = Association(
        name=name,
        location="London",
        max_population=30,
        owner_id=owner.id,
        is_active=True
    )
    association.admins = [owner, *admins]
    db_session.add(association)
    db_session.commit()
    db_session.refresh(association)
    return association


def make_application(
    db_session,
    user: User,
    association: Association,
    status: ApplicationStatus = ApplicationStatus.NEW,
    approved_by: User = None,
) -> Application:
    application = Application(
        user_id=user.id,
        association_id=association.id,
        status=status,
        approved=status == ApplicationStatus.APPROVED,
        approved_by_id=approved_by.id if approved_by else None
    )
    db_session.add(application)
    db_session.commit()
    db_session.refresh(application)
    return application


def token_for(user: User) -> str:
    """Mint a token the way the identity layer does."""
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


@pytest.fixture
def headers_for():
    """Build bearer headers for a given user."""
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {token_for(user)}"}
    return _headers


@pytest.fixture
def platform_admin(db_session):
    return make_user(db_session, "platform-admin@example.com", UserRole.PLATFORM_ADMIN, "Platform Admin")


@pytest.fixture
def owner(db_session):
    return make_user(db_session, "owner@example.com", UserRole.ASSOCIATION_ADMIN, "Association Owner")


@pytest.fixture
def appointed_admin(db_session):
    return make_user(db_session, "association-admin@example.com", UserRole.ASSOCIATION_ADMIN, "Association Admin")


@pytest.fixture
def stranger(db_session):
    return make_user(db_session, "stranger@example.com", name="Stranger")


@pytest.fixture
def applicant(db_session):
    return make_user(db_session, "applicant@example.com", name="Applicant")


@pytest.fixture
def association(db_session, owner, appointed_admin):
    return make_association(db_session, owner, admins=[appointed_admin])


@pytest.fixture
def other_association(db_session):
    other_owner = make_user(db_session, "other-owner@example.com", UserRole.ASSOCIATION_ADMIN)
    return make_association(db_session, other_owner, name="Paris Nord")


@pytest.fixture
def member(db_session, association, owner):
    """Regular user holding an approved application to ``association``."""
    user = make_user(db_session, "member@example.com", name="Regular Member")
    make_application(db_session, user, association, ApplicationStatus.APPROVED, approved_by=owner)
    return user


@pytest.fixture
def event(db_session, association):
    starts = datetime.now(timezone.utc) + timedelta(days=7)
    event = Event(
        name="Monthly dinner",
        location="Soho",
        date=starts,
        arrival_time=starts - timedelta(minutes=30),
        association_id=association.id
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


@pytest.fixture
def user_factory(db_session):
    def _create(email: str, role: UserRole = UserRole.USER, name: str = None) -> User:
        return make_user(db_session, email, role, name)
    return _create


@pytest.fixture
def association_factory(db_session):
    def _create(owner: User, name: str = "Berlin Mitte", admins=()) -> Association:
        return make_association(db_session, owner, name, admins)
    return _create


@pytest.fixture
def application_factory(db_session):
    def _create(user, association, status=ApplicationStatus.NEW, approved_by=None) -> Application:
        return make_application(db_session, user, association, status, approved_by)
    return _create
