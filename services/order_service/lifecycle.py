"""
Order status rules.

Two modes share one table. Permissive mode (the default) accepts any
status after any other; the only enforced edge is that an order cannot be
moved to PAYMENT_CONFIRMED before its payment is PAID. Strict mode, turned
on with STRICT_ORDER_TRANSITIONS, additionally rejects every edge missing
from ALLOWED_TRANSITIONS.
"""
from shared.config import settings
from shared.errors import InvalidInput, InvalidState

from .models import CASH_ON_DELIVERY, Order, OrderStatus, PaymentStatus

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.ORDER_RECEIVED: frozenset({OrderStatus.PAYMENT_CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.PAYMENT_CONFIRMED: frozenset(
        {OrderStatus.PREPARING, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.PREPARING: frozenset(
        {OrderStatus.READY_FOR_PICKUP, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.READY_FOR_PICKUP: frozenset(
        {OrderStatus.PICKED_UP, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.COMPLETED, OrderStatus.REFUNDED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.REFUNDED: frozenset(),
}

# Legacy shipping statuses. Neither is an OrderStatus, so only rows written
# outside this service can carry them.
NON_CANCELLABLE_STATUSES = frozenset({"SHIPPED", "DELIVERED"})

SETTABLE_PAYMENT_STATUSES = frozenset({PaymentStatus.PENDING, PaymentStatus.PAID})


def initial_payment_status(payment_method: str) -> PaymentStatus:
    if payment_method == CASH_ON_DELIVERY:
        return PaymentStatus.PENDING
    return PaymentStatus.UNPAID


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidInput("Invalid order status") from None


def parse_payment_update(value) -> PaymentStatus:
    try:
        payment = PaymentStatus(value)
    except ValueError:
        raise InvalidInput("Invalid payment status") from None
    if payment not in SETTABLE_PAYMENT_STATUSES:
        raise InvalidInput("Invalid payment status")
    return payment


def check_transition(order: Order, target: OrderStatus, strict: bool | None = None) -> None:
    """Raise InvalidState if the order may not move to target."""
    if target is OrderStatus.PAYMENT_CONFIRMED and order.payment != PaymentStatus.PAID.value:
        raise InvalidState("Payment must be PAID before confirming order")

    if strict is None:
        strict = settings.STRICT_ORDER_TRANSITIONS
    if not strict:
        return

    try:
        current = OrderStatus(order.status)
    except ValueError:
        allowed = frozenset()
    else:
        allowed = ALLOWED_TRANSITIONS[current]
    if target not in allowed:
        raise InvalidState(f"Cannot move order from {order.status} to {target.value}")


def ensure_cancellable(order: Order) -> None:
    if order.status in NON_CANCELLABLE_STATUSES:
        raise InvalidState("Order cannot be canceled after it has been shipped")
