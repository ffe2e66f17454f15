"""
Scope policy: who may touch which region.

The first three functions are pure decisions. ``require_role`` and
``require_region`` turn a negative decision into ``Forbidden`` naming the
check that failed.
"""
from typing import Iterable, Optional
from app.auth.identity import Identity, is_elevated
from app.exceptions import Forbidden
from app.repositories import RegionFilter, ALL_REGIONS

ROLE_CHECK = "role"
REGION_CHECK = "region"


def can_access_region(identity: Identity, target_region: Optional[str]) -> bool:
    if is_elevated(identity):
        return True
    return identity.region == target_region


def list_filter(identity: Identity) -> RegionFilter:
    if is_elevated(identity):
        return ALL_REGIONS
    return RegionFilter.equals(identity.region)


def has_role(identity: Identity, allowed_roles: Iterable[str]) -> bool:
    return identity.role in set(allowed_roles)


def require_role(identity: Identity, allowed_roles: Iterable[str], action: str) -> None:
    if not has_role(identity, allowed_roles):
        raise Forbidden(
            f"Access denied: role '{identity.role}' may not {action}",
            check=ROLE_CHECK,
        )


def require_region(identity: Identity, target_region: Optional[str], subject: str) -> None:
    if not can_access_region(identity, target_region):
        raise Forbidden(
            f"Access denied: {subject} is outside your region",
            check=REGION_CHECK,
        )
