"""Caller identity for dashboard routes.

Authentication happens upstream; the gateway forwards the verified account
id and role as headers. These dependencies only read and check them.
"""

from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from fastapi import Header

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.features.dashboard.schemas import DashboardRole


@dataclass(frozen=True)
class CurrentAccount:
    """Authenticated caller."""

    id: int
    role: DashboardRole


async def get_current_account(
    x_account_id: str | None = Header(None, alias="X-Account-ID"),
    x_account_role: str | None = Header(None, alias="X-Account-Role"),
) -> CurrentAccount:
    """Read the caller from gateway headers.

    Raises:
        UnauthorizedError: If either header is missing or malformed.
    """
    if not x_account_id or not x_account_role:
        raise UnauthorizedError()
    try:
        account_id = int(x_account_id)
        role = DashboardRole(x_account_role.strip().lower())
    except ValueError as e:
        raise UnauthorizedError(
            "Invalid account headers",
            details={"account_id": x_account_id, "role": x_account_role},
        ) from e
    return CurrentAccount(id=account_id, role=role)


def require_role(
    *roles: DashboardRole,
) -> Callable[..., Coroutine[Any, Any, CurrentAccount]]:
    """Dependency factory allowing only the given roles."""
    allowed = frozenset(roles)

    async def dependency(
        x_account_id: str | None = Header(None, alias="X-Account-ID"),
        x_account_role: str | None = Header(None, alias="X-Account-Role"),
    ) -> CurrentAccount:
        account = await get_current_account(x_account_id, x_account_role)
        if account.role not in allowed:
            raise ForbiddenError(
                f"Role '{account.role.value}' cannot access this dashboard",
                details={"allowed_roles": sorted(r.value for r in allowed)},
            )
        return account

    return dependency
