"""
Caller identity as decoded from an access token.

An identity is either ``Elevated`` (the admin role, no region) or ``Scoped``
(manager or member, always bound to one region). Code that needs the region
of a scoped caller never has to check the role first.
"""
from dataclasses import dataclass
from typing import Optional, Union

ADMIN = "admin"
MANAGER = "manager"
MEMBER = "member"

ROLES = (ADMIN, MANAGER, MEMBER)
SCOPED_ROLES = (MANAGER, MEMBER)


@dataclass(frozen=True)
class Elevated:
    subject_id: str

    @property
    def role(self) -> str:
        return ADMIN

    @property
    def region(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Scoped:
    subject_id: str
    role: str
    region: str


Identity = Union[Elevated, Scoped]


def identity_from_claims(subject_id, role: str, region: Optional[str]) -> Identity:
    """Build an identity from the token triple; raise ValueError if malformed."""
    if role == ADMIN:
        return Elevated(str(subject_id))
    if role not in SCOPED_ROLES:
        raise ValueError(f"unknown role {role!r}")
    if not region:
        raise ValueError(f"role {role} requires a region")
    return Scoped(str(subject_id), role, region)


def is_elevated(identity: Identity) -> bool:
    return isinstance(identity, Elevated)
