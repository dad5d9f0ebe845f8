from __future__ import annotations

from collections.abc import Generator
from datetime import date
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from registry.auth.deps import ADMIN_ROLE, USER_ROLE, get_current_user
from registry.core.db import Base, get_db
from registry.main import app
from registry.models.church import Church
from registry.models.member import Member
from registry.models.pastor import Pastor
from registry.models.user import Role, User

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(user: User):
        app.dependency_overrides[get_current_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_current_user, None)


def _ensure_role(session: Session, name: str) -> Role:
    role = session.query(Role).filter_by(name=name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.commit()
        session.refresh(role)
    return role


def _make_user(session: Session, email: str, full_name: str, role_name: str) -> User:
    role = _ensure_role(session, role_name)
    user = User(email=email, full_name=full_name, hashed_password="hash", is_active=True)
    user.roles.append(role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def registry_user(db_session: Session) -> User:
    return _make_user(db_session, "clerk@example.com", "Session Clerk", USER_ROLE)


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@example.com", "Presbytery Admin", ADMIN_ROLE)


@pytest.fixture()
def sample_pastor(db_session: Session) -> Pastor:
    pastor = Pastor(
        name="Rev. Samuel Alves",
        address="Rua das Flores, 100",
        neighborhood="Centro",
        city="Anápolis",
        state="GO",
        postal_code="75000-000",
        phone="6233330000",
        mobile="62999990000",
        email="samuel.alves@example.com",
        cpf="123.456.789-00",
        date_of_birth=date(1970, 5, 10),
        ordination_date=date(1998, 12, 6),
        presbytery="PANA",
    )
    db_session.add(pastor)
    db_session.commit()
    db_session.refresh(pastor)
    return pastor


_cnpj_counter = count(1)


def _church_values(name: str, **overrides) -> dict:
    """Column values for a valid church; ``overrides`` win."""

    serial = next(_cnpj_counter)
    values = {
        "type": "Church",
        "name": name,
        "address": "Av. Brasil, 500",
        "neighborhood": "Jundiaí",
        "city": "Anápolis",
        "state": "GO",
        "postal_code": "75110-000",
        "phone": "6233214567",
        "email": "secretaria@example.com",
        "cnpj": f"12.345.678/{serial:04d}-90",
        "organization_date": date(1965, 3, 21),
        "presbytery": "PANA",
    }
    values.update(overrides)
    return values


@pytest.fixture()
def make_church(db_session: Session):
    def _make(name: str, **overrides) -> Church:
        church = Church(**_church_values(name, **overrides))
        db_session.add(church)
        db_session.commit()
        db_session.refresh(church)
        return church

    return _make


@pytest.fixture()
def sample_church(make_church) -> Church:
    return make_church("Igreja Presbiteriana Central")


@pytest.fixture()
def make_member(db_session: Session, sample_church: Church):
    def _make(name: str, sex: str = "Male", **overrides) -> Member:
        values = {
            "name": name,
            "sex": sex,
            "church_id": sample_church.id,
            "admission_date": date(2024, 2, 4),
            "admission_method": "Profession of faith",
        }
        values.update(overrides)
        member = Member(**values)
        db_session.add(member)
        db_session.commit()
        db_session.refresh(member)
        return member

    return _make


@pytest.fixture()
def sample_member(make_member) -> Member:
    return make_member("Ana Beatriz Souza", sex="Female", membership_number="20240002")


@pytest.fixture()
def church_payload():
    """JSON body for ``POST /churches``."""

    def _payload(name: str, **overrides) -> dict:
        values = _church_values(name, **overrides)
        values["organization_date"] = values["organization_date"].isoformat()
        return values

    return _payload


@pytest.fixture()
def session_factory():
    """Open extra sessions on the test engine, closing them at teardown."""

    sessions: list[Session] = []

    def _open() -> Session:
        session = TestingSessionLocal()
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        session.rollback()
        session.close()
