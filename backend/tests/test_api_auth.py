from campusnet.auth import create_access_token, create_default_admin, has_role
from campusnet.config import DEFAULT_ADMIN_EMAIL
from campusnet.db.models import User


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "ok"}


def test_signup_then_login_and_me(client):
    resp = client.post("/signup", json={
        "email": "staff@campus.edu",
        "password": "hunter22",
        "full_name": "Sam Staff",
        "department": "IT",
    })
    assert resp.status_code == 201

    resp = client.post("/login", json={"email": "staff@campus.edu", "password": "hunter22"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me == {"email": "staff@campus.edu", "full_name": "Sam Staff", "role": "user"}


def test_signup_rejects_duplicate_email(client, admin_headers):
    resp = client.post("/signup", json={
        "email": "admin@test.edu", "password": "whatever1", "full_name": "Dup",
    })
    assert resp.status_code == 400


def test_login_form_and_bad_credentials(client, admin_headers):
    ok = client.post("/login/form", data={"username": "admin@test.edu", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"

    bad = client.post("/login", json={"email": "admin@test.edu", "password": "nope"})
    assert bad.status_code == 401


def test_protected_routes_require_a_valid_token(client):
    assert client.get("/zones").status_code == 401
    assert client.get("/zones", headers={"Authorization": "Bearer garbage"}).status_code == 401

    token = create_access_token({"sub": "ghost@test.edu"})
    assert client.get("/zones", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_mutations_are_admin_only(client, user_headers):
    assert client.get("/zones", headers=user_headers).status_code == 200
    resp = client.post("/zones", json={"name": "Gym", "location": "Sports Hall"}, headers=user_headers)
    assert resp.status_code == 403


def test_default_admin_is_created_once(db):
    create_default_admin(db)
    create_default_admin(db)

    admins = db.query(User).filter(User.email == DEFAULT_ADMIN_EMAIL).all()
    assert len(admins) == 1
    assert has_role(db, admins[0].id, "admin")
