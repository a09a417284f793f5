from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Unauthorized
from app.models.role_grant import RoleGrant

OWNER = "owner"
MINT_BURN = "mint_burn"

ROLES = (OWNER, MINT_BURN)


class Authorizer(Protocol):
    def require(self, caller: str, role: str) -> None: ...


class RoleAuthorizer:
    """Capability checks backed by the role_grants table."""

    def __init__(self, s: Session):
        self.s = s

    def has_role(self, identity: str, role: str) -> bool:
        row = self.s.execute(
            select(RoleGrant.id).where(RoleGrant.identity == identity, RoleGrant.role == role)
        ).scalar_one_or_none()
        return row is not None

    def require(self, caller: str, role: str) -> None:
        if not caller or not self.has_role(caller, role):
            raise Unauthorized(f"{caller or 'anonymous'} lacks role {role}")

    def roles_of(self, identity: str) -> list[str]:
        return list(
            self.s.execute(
                select(RoleGrant.role).where(RoleGrant.identity == identity).order_by(RoleGrant.role.asc())
            )
            .scalars()
            .all()
        )

    def grant(self, identity: str, role: str) -> bool:
        if role not in ROLES:
            raise ValueError(f"unknown role {role!r}")
        if self.has_role(identity, role):
            return False
        self.s.add(RoleGrant(identity=identity, role=role))
        self.s.flush()
        return True

    def revoke(self, identity: str, role: str) -> bool:
        row = self.s.execute(
            select(RoleGrant).where(RoleGrant.identity == identity, RoleGrant.role == role)
        ).scalar_one_or_none()
        if row is None:
            return False
        self.s.delete(row)
        self.s.flush()
        return True
