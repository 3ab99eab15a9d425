import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusnet.auth import create_access_token, create_account, get_db
from campusnet.database import Base, make_engine
from campusnet.db.models import Device, NetworkUser, Zone
from campusnet.main import app


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers_for(db, email: str, role: str) -> dict:
    create_account(db, email=email, password="secret123", full_name=f"{role.title()} Tester", role=role)
    token = create_access_token({"sub": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(db):
    return _headers_for(db, "admin@test.edu", "admin")


@pytest.fixture
def user_headers(db):
    return _headers_for(db, "viewer@test.edu", "user")


@pytest.fixture
def zone(db):
    z = Zone(name="Library", location="Main Building, Floor 2")
    db.add(z)
    db.commit()
    db.refresh(z)
    return z


@pytest.fixture
def network_user(db, zone):
    u = NetworkUser(
        username="jdoe",
        full_name="Jane Doe",
        email="jdoe@campus.edu",
        department="Computer Science",
        default_zone_id=zone.id,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def device(db, network_user, zone):
    d = Device(
        mac_address="AA:BB:CC:DD:EE:01",
        ip_address="10.0.0.15",
        device_name="Jane's laptop",
        device_type="laptop",
        network_user_id=network_user.id,
        zone_id=zone.id,
    )
    db.add(d)
    db.commit()
    db.refresh(d)
    return d
