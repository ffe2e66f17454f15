from functools import wraps
from flask import request, g
from .responses import error
from .jwt import identity_from_token, TokenError
from app.auth.permissions import require_role
from app.telemetry import tag_identity


def _bearer_token():
    auth = request.headers.get("Authorization", "")
    if not auth:
        return None
    return auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return error("Auth header missing", status=401)
        try:
            identity = identity_from_token(token)
        except TokenError as e:
            return error(str(e), status=401)

        g.identity = identity
        request.identity = identity
        tag_identity(identity)
        return func(*args, **kwargs)

    return wrapper


def _to_set(obj):
    return set(obj) if isinstance(obj, (list, tuple, set)) else {obj}


def role_required(required, action="access this resource"):
    """Reject callers whose role is not in ``required`` before the view runs."""
    required_set = _to_set(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity = getattr(g, "identity", None)
            if identity is None:
                return error("Role missing", status=403)
            require_role(identity, required_set, action)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
