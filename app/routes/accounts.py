from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.auth.identity import ADMIN
from app.schemas.accounts import CreateAccountRequest, UpdateAccountRequest
from app.services import accounts as account_service
from app.utils import ok, auth_required, role_required, validate_schema

account_bp = Blueprint("accounts", __name__, url_prefix=f"{API_PREFIX}/users")


@account_bp.route("/me", methods=["GET"])
@auth_required
def me():
    return ok(account_service.get_me(g.identity).to_dict())


@account_bp.route("", methods=["GET"])
@auth_required
@role_required([ADMIN], action="list accounts")
def list_accounts():
    accounts = account_service.list_accounts(g.identity)
    return ok([a.to_dict() for a in accounts])


@account_bp.route("", methods=["POST"])
@auth_required
@role_required([ADMIN], action="create accounts")
@validate_schema(CreateAccountRequest)
def create_account():
    data: CreateAccountRequest = request.validated_data
    account = account_service.create_account(g.identity, data.model_dump())
    return ok(account.to_dict(), message="Account created", status=201)


@account_bp.route("/<int:account_id>", methods=["GET"])
@auth_required
def get_account(account_id):
    return ok(account_service.get_account(g.identity, account_id).to_dict())


@account_bp.route("/<int:account_id>", methods=["PUT"])
@auth_required
@validate_schema(UpdateAccountRequest)
def update_account(account_id):
    data: UpdateAccountRequest = request.validated_data
    account = account_service.update_account(g.identity, account_id, data.model_dump(exclude_unset=True))
    return ok(account.to_dict(), message="Account updated")


@account_bp.route("/<int:account_id>", methods=["DELETE"])
@auth_required
def delete_account(account_id):
    account_service.delete_account(g.identity, account_id)
    return ok(message="Account deleted")
