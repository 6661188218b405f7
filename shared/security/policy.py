"""
Role-based authorization for account and order operations.

Every operation asks the same question (can this actor's role perform this
action?) through authorize(), so the answer lives in one table instead of
an inline role check per endpoint.
"""
from dataclasses import dataclass
from enum import Enum

from shared.errors import Forbidden


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Action(str, Enum):
    PLACE_ORDER = "place_order"
    LIST_ORDERS = "list_orders"
    LIST_ALL_ORDERS = "list_all_orders"
    VIEW_ORDER = "view_order"
    CANCEL_ORDER = "cancel_order"
    UPDATE_ORDER_STATUS = "update_order_status"
    UPDATE_PAYMENT_STATUS = "update_payment_status"
    DELETE_ORDER = "delete_order"


_EVERYONE = frozenset(Role)
_ADMIN_ONLY = frozenset({Role.ADMIN})

POLICY: dict[Action, frozenset[Role]] = {
    Action.PLACE_ORDER: _EVERYONE,
    Action.LIST_ORDERS: _EVERYONE,
    Action.LIST_ALL_ORDERS: _ADMIN_ONLY,
    Action.VIEW_ORDER: _ADMIN_ONLY,
    Action.CANCEL_ORDER: _EVERYONE,
    Action.UPDATE_ORDER_STATUS: _ADMIN_ONLY,
    Action.UPDATE_PAYMENT_STATUS: _ADMIN_ONLY,
    Action.DELETE_ORDER: _ADMIN_ONLY,
}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as read from the access token."""
    id: int
    role: Role


def is_allowed(role: Role, action: Action) -> bool:
    return role in POLICY.get(action, frozenset())


def authorize(actor: Actor, action: Action, message: str | None = None) -> None:
    """Raise Forbidden unless the actor's role may perform the action."""
    if not is_allowed(actor.role, action):
        raise Forbidden(message or f"Unauthorized: {action.value} is not permitted")
