import datetime as dt
import jwt
from app.utils import create_access_token, create_refresh_token, decode_token, identity_from_token
from app.auth.identity import Elevated, Scoped
from conftest import make_account, auth_header


def test_access_token_round_trip(app):
    token = create_access_token(5, "member", "Europe")
    assert identity_from_token(token) == Scoped("5", "member", "Europe")
    assert identity_from_token(create_access_token(1, "admin")) == Elevated("1")


def test_refresh_token_rejected_as_access(client):
    account = make_account("x", "member", "India")
    refresh = create_refresh_token(account.id)
    resp = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {refresh}"})
    assert resp.status_code == 401
    assert decode_token(refresh, expected_type="refresh")["sub"] == str(account.id)


def test_expired_access_token_blocked(client, app):
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
    expired = jwt.encode(
        {"sub": "1", "role": "admin", "type": "access", "exp": past},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/v1/vendors", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "token expired"


def test_scoped_token_without_region_blocked(client, app):
    token = jwt.encode(
        {"sub": "1", "role": "manager", "region": None, "type": "access",
         "exp": dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=5)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/v1/vendors", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_logout_requires_valid_token(client):
    account = make_account("x", "member", "India")
    assert client.post("/api/v1/auth/logout").status_code == 401
    assert client.post("/api/v1/auth/logout", headers=auth_header(account)).status_code == 200
