from dataclasses import dataclass
from urllib.parse import unquote
from uuid import UUID

from fastapi import Depends, Header

from app.errors import UnauthorizedError
from app.guards import Role


@dataclass
class CurrentUser:
    id: UUID
    username: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_username: str = Header(default=""),
    x_user_role: str = Header(default=Role.USER.value),
) -> CurrentUser:
    """
    Reads the identity headers injected by the gateway after it has verified
    the caller's token. A request without a usable X-User-Id is anonymous and
    is rejected with 401.
    """
    if not x_user_id:
        raise UnauthorizedError("Authentication required")
    try:
        user_id = UUID(x_user_id)
    except (ValueError, TypeError):
        raise UnauthorizedError("Invalid user identity from gateway") from None

    try:
        role = Role(x_user_role.lower())
    except ValueError:
        raise UnauthorizedError(f"Unknown role '{x_user_role}'") from None

    return CurrentUser(id=user_id, username=unquote(x_username), role=role)


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Shorthand for admin-only endpoints."""
    if not current_user.is_admin:
        raise UnauthorizedError("Admin privileges required")
    return current_user
