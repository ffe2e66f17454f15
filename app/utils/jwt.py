import datetime as dt
from typing import Dict, Optional
import jwt
from flask import current_app
from app.auth.identity import Identity, identity_from_claims


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def _utcnow():
    return dt.datetime.now(dt.timezone.utc)


def _exp(minutes: int = None, days: int = None):
    now = _utcnow()
    if minutes:
        return now + dt.timedelta(minutes=minutes)
    if days:
        return now + dt.timedelta(days=days)
    raise ValueError("must supply minutes or days")


def create_access_token(subject_id, role: str, region: Optional[str] = None) -> str:
    cfg = current_app.config
    payload: Dict = {
        "sub": str(subject_id),
        "role": role,
        "region": region,
        "type": "access",
        "exp": _exp(minutes=cfg["ACCESS_TOKEN_LIFETIME_MIN"]),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


def create_refresh_token(subject_id) -> str:
    cfg = current_app.config
    payload = {
        "sub": str(subject_id),
        "type": "refresh",
        "exp": _exp(days=cfg["REFRESH_TOKEN_LIFETIME_DAYS"]),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


class TokenError(Exception):
    pass


def decode_token(token: str, expected_type: str = "access") -> Dict:
    try:
        data = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    return data


def identity_from_token(token: str) -> Identity:
    data = decode_token(token, expected_type="access")
    try:
        return identity_from_claims(data.get("sub"), data.get("role"), data.get("region"))
    except ValueError as e:
        raise TokenError(str(e))
