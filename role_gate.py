"""
Role Gate: one authorization decision for every guarded route.

Roles are disjoint. An admin does not pass a manager check and a manager does
not pass an admin check. Decisions read the account on every call.
"""
import logging
from dataclasses import dataclass
from typing import Annotated, Union

from fastapi import Depends, Request

from dependencies import Accounts
from errors import Forbidden
from identity import Claims, bearer_claims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminOnly:
    role = "admin"


@dataclass(frozen=True)
class ManagerOnly:
    role = "manager"


@dataclass(frozen=True)
class SelfOnly:
    email: str


Capability = Union[AdminOnly, ManagerOnly, SelfOnly]


class RoleGate:
    def __init__(self, accounts):
        self.accounts = accounts

    def authorize(self, claims: Claims, capability: Capability) -> None:
        """Return None when allowed, raise Forbidden otherwise."""
        if isinstance(capability, SelfOnly):
            # No directory lookup for identity checks
            if claims.email != capability.email:
                logger.info(f"Forbidden: {claims.email} acting on {capability.email}")
                raise Forbidden()
            return

        account = self.accounts.find_by_email(claims.email)
        role = account.get("role") if account else None
        if role != capability.role:
            logger.info(f"Forbidden: {claims.email} has role {role!r}, needs {capability.role!r}")
            raise Forbidden()

    def is_allowed(self, claims: Claims, capability: Capability) -> bool:
        try:
            self.authorize(claims, capability)
        except Forbidden:
            return False
        return True


CurrentClaims = Annotated[Claims, Depends(bearer_claims)]


def admin_only(claims: CurrentClaims, accounts: Accounts) -> Claims:
    RoleGate(accounts).authorize(claims, AdminOnly())
    return claims


def manager_only(claims: CurrentClaims, accounts: Accounts) -> Claims:
    RoleGate(accounts).authorize(claims, ManagerOnly())
    return claims


def self_only(request: Request, claims: CurrentClaims) -> Claims:
    """Requires the `email` path parameter to match the caller."""
    RoleGate(accounts=None).authorize(claims, SelfOnly(request.path_params.get("email")))
    return claims


AdminClaims = Annotated[Claims, Depends(admin_only)]
ManagerClaims = Annotated[Claims, Depends(manager_only)]
SelfClaims = Annotated[Claims, Depends(self_only)]
