from flask import Blueprint, request, current_app
from flask_limiter.util import get_remote_address
from app.version import API_PREFIX
from extensions import limiter
from app import repositories as repo
from app.exceptions import NotFound
from app.schemas.auth import LoginRequest, RefreshRequest
from app.services.accounts import authenticate
from app.utils import (
    ok,
    error,
    validate_schema,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)
import logging

auth_bp = Blueprint("auth", __name__, url_prefix=API_PREFIX)

logger = logging.getLogger(__name__)


def _token_pair(account):
    return {
        "access_token": create_access_token(account.id, account.role, account.region),
        "refresh_token": create_refresh_token(account.id),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }


@auth_bp.route("/auth/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def login():
    data: LoginRequest = request.validated_data
    account = authenticate(data.username, data.password)
    if account is None:
        logger.warning("Failed login for %s", data.username)
        return error("Invalid username or password", status=401)
    logger.info("Tokens issued for account %s", account.id)
    return ok(_token_pair(account), message="Logged in")


@auth_bp.route("/auth/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    data: RefreshRequest = request.validated_data
    try:
        payload = decode_token(data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    # role and region are re-read so a changed account gets fresh claims
    try:
        account = repo.accounts.find_by_id(int(payload.get("sub")))
    except (TypeError, ValueError, NotFound):
        return error("Account no longer exists", status=401)
    return ok(_token_pair(account), message="Tokens refreshed")


@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return error("Token missing", status=401)
    try:
        decode_token(auth.split(" ", 1)[1])
    except TokenError as e:
        return error(str(e), status=401)
    return ok(message="Logged out")
