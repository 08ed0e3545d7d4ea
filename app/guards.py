from enum import StrEnum
from uuid import UUID

from app.errors import UnauthorizedError


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"


class BookingAction(StrEnum):
    READ = "read"
    UPDATE = "update"
    CANCEL = "cancel"
    DELETE = "delete"


# Actions that even the owner may not perform
_ADMIN_ONLY_ACTIONS = {BookingAction.DELETE}


def authorize(
    resource_owner_id: UUID,
    caller_id: UUID,
    caller_role: Role | str,
    action: BookingAction,
) -> None:
    """
    Raise UnauthorizedError unless the caller may perform `action`.

    Rules:
      read / update / cancel : the owning user, OR admin
      delete                 : admin only (hard delete, not reversible)
    """
    if caller_role == Role.ADMIN:
        return
    if action in _ADMIN_ONLY_ACTIONS:
        raise UnauthorizedError(f"Not authorized to {action} bookings")
    if caller_id != resource_owner_id:
        raise UnauthorizedError(f"Not authorized to {action} this booking")
