import logging
from typing import Dict, List, Optional
from models import Account
from app import repositories as repo
from app.auth.identity import Identity, ADMIN, ROLES
from app.auth.permissions import require_role
from app.exceptions import FieldError, NotFound, ValidationFailed
from app.utils.db import transactional
from app.utils.regions import region_error

logger = logging.getLogger(__name__)


def _role_error(role) -> Optional[FieldError]:
    if role not in ROLES:
        return FieldError("role", f"Role must be one of: {', '.join(ROLES)}")
    return None


def authenticate(username: str, password: str) -> Optional[Account]:
    """Return the account for valid credentials, otherwise None."""
    matches = repo.accounts.find(username=username)
    if not matches or not matches[0].check_password(password):
        return None
    return matches[0]


def get_me(identity: Identity) -> Account:
    try:
        account_id = int(identity.subject_id)
    except (TypeError, ValueError):
        raise NotFound("Account", identity.subject_id)
    return repo.accounts.find_by_id(account_id)


def list_accounts(identity: Identity) -> List[Account]:
    require_role(identity, {ADMIN}, "list accounts")
    return repo.accounts.find()


def get_account(identity: Identity, account_id: int) -> Account:
    require_role(identity, {ADMIN}, "read accounts")
    return repo.accounts.find_by_id(account_id)


def create_account(identity: Identity, fields: Dict) -> Account:
    require_role(identity, {ADMIN}, "create accounts")
    role = fields.get("role")
    problems = []
    if not fields.get("username"):
        problems.append(FieldError("username", "Username is required"))
    elif repo.accounts.find(username=fields["username"]):
        problems.append(FieldError("username", "User already exists"))
    if not fields.get("password"):
        problems.append(FieldError("password", "Password is required"))
    role_problem = _role_error(role)
    if role_problem:
        problems.append(role_problem)
    elif role != ADMIN:
        bad_region = region_error(fields.get("region"))
        if bad_region:
            problems.append(bad_region)
    if problems:
        raise ValidationFailed(problems)

    account = Account(
        username=fields["username"],
        role=role,
        region=None if role == ADMIN else fields["region"],
    )
    account.set_password(fields["password"])
    with transactional("Failed to create account"):
        repo.accounts.insert(account)
    logger.info("Account %s created with role %s", account.id, account.role)
    return account


def update_account(identity: Identity, account_id: int, fields: Dict) -> Account:
    """Update an account keeping ``region is None`` exactly when role is admin."""
    require_role(identity, {ADMIN}, "update accounts")
    account = repo.accounts.find_by_id(account_id)

    new_role = fields.get("role") or account.role
    requested_region = fields.get("region")
    problems = []
    if fields.get("role"):
        role_problem = _role_error(fields["role"])
        if role_problem:
            raise ValidationFailed([role_problem])
    if fields.get("username") and fields["username"] != account.username:
        if repo.accounts.find(username=fields["username"]):
            problems.append(FieldError("username", "User already exists"))

    if new_role == ADMIN:
        new_region = None
    else:
        new_region = requested_region or account.region
        if not new_region:
            problems.append(FieldError("region", "Region is required for non-admin roles"))
        else:
            bad_region = region_error(new_region)
            if bad_region:
                problems.append(bad_region)
    if problems:
        raise ValidationFailed(problems)

    if fields.get("username"):
        account.username = fields["username"]
    if fields.get("password"):
        account.set_password(fields["password"])
    account.role = new_role
    account.region = new_region
    with transactional("Failed to update account"):
        repo.accounts.update(account)
    return account


def delete_account(identity: Identity, account_id: int) -> None:
    require_role(identity, {ADMIN}, "delete accounts")
    with transactional("Failed to delete account"):
        repo.accounts.delete(account_id)
    logger.info("Account %s deleted", account_id)
