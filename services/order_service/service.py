"""
Order lifecycle: placement, listing, status and payment transitions,
cancellation, deletion and library grants.

The order row and the account's order summary are separate writes with
separate commits. A failure between them leaves the two out of step; the
next read shows whichever write landed.
"""
import math
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import InvalidInput, NotFound, ServiceError
from shared.observability import (
    ecomm_library_grants_total,
    ecomm_order_placement_duration_seconds,
    ecomm_order_rejections_total,
    ecomm_order_status_transitions_total,
    ecomm_orders_placed_total,
)
from shared.security.policy import Action, Actor, authorize, is_allowed
from services.account_service.models import LibraryEntry, OrderSummary
from services.account_service.repository import (
    LibraryRepository, OrderSummaryRepository, UserRepository,
)
from services.catalog_service.repository import BookRepository

from .lifecycle import (
    check_transition, ensure_cancellable, initial_payment_status, parse_payment_update, parse_status,
)
from .models import CASH_ON_DELIVERY, Order, OrderItem, OrderStatus, StatusHistoryEntry
from .repository import OrderRepository
from .schemas import OrderCreate, PaymentUpdate, StatusUpdate

logger = structlog.get_logger(__name__)


def _reject(reason: str, error: ServiceError) -> ServiceError:
    ecomm_order_rejections_total.labels(reason=reason).inc()
    logger.info("order_rejected", reason=reason, message=error.message)
    return error


class OrderService:

    @staticmethod
    async def place_order(db: AsyncSession, actor: Actor, data: OrderCreate) -> Order:
        authorize(actor, Action.PLACE_ORDER)

        with ecomm_order_placement_duration_seconds.time():
            if not data.items:
                raise _reject("empty_cart", InvalidInput("Cart is empty"))

            if not data.shipping_address or not data.shipping_fee or not data.payment_method or not data.total_amount:
                raise _reject("missing_field", InvalidInput(
                    "Shipping address, shipping fee, payment method, and total amount are required"
                ))

            # Prices come from the catalog, never from the client
            subtotal = 0.0
            items = []
            for line in data.items:
                book = await BookRepository.get_book_by_id(db, line.book_id)
                if not book:
                    raise _reject("book_not_found", NotFound(f"Book {line.book_id} not found"))
                subtotal += book.price * line.quantity
                items.append(OrderItem(book_id=book.id, book=book, quantity=line.quantity, price=book.price))

            try:
                shipping_fee = float(data.shipping_fee)
            except (TypeError, ValueError):
                raise _reject("invalid_shipping_fee", InvalidInput("Shipping fee must be a number")) from None
            if not math.isfinite(shipping_fee):
                raise _reject("invalid_shipping_fee", InvalidInput("Shipping fee must be a number"))

            # Exact comparison: a total off by any amount is rejected
            if subtotal + shipping_fee != data.total_amount:
                raise _reject("total_mismatch", InvalidInput(
                    "Calculated total amount doesn't match provided amount"
                ))

            now = datetime.now(timezone.utc)
            order = Order(
                user_id=actor.id,
                items=items,
                shipping_address=data.shipping_address,
                shipping_fee=str(data.shipping_fee),
                payment_method=data.payment_method,
                total_amount=data.total_amount,
                status=OrderStatus.ORDER_RECEIVED.value,
                payment=initial_payment_status(data.payment_method).value,
                status_history=[
                    StatusHistoryEntry(
                        status=OrderStatus.ORDER_RECEIVED.value, changed_by=actor.id, changed_at=now
                    )
                ],
            )
            order = await OrderRepository.create_order(db, order)

        ecomm_orders_placed_total.labels(
            payment_method="COD" if data.payment_method == CASH_ON_DELIVERY else "other"
        ).inc()
        logger.info(
            "order_placed", order_id=order.id, user_id=actor.id,
            total_amount=order.total_amount, payment=order.payment,
        )

        # Second write; not rolled back with the order if it fails
        await OrderSummaryRepository.add(
            db, OrderSummary(user_id=actor.id, order_id=order.id, status=order.status, placed_at=now)
        )
        return order

    @staticmethod
    async def list_orders(db: AsyncSession, actor: Actor) -> list[Order]:
        authorize(actor, Action.LIST_ORDERS)
        if is_allowed(actor.role, Action.LIST_ALL_ORDERS):
            return list(await OrderRepository.get_all_orders(db))

        # Ordinary accounts only see what their own summaries point at
        summaries = await OrderSummaryRepository.list_for_user(db, actor.id)
        orders = await OrderRepository.get_orders_by_ids(db, [s.order_id for s in summaries])
        by_id = {order.id: order for order in orders}
        return [by_id[s.order_id] for s in summaries if s.order_id in by_id]

    @staticmethod
    async def get_order(db: AsyncSession, actor: Actor, order_id: int) -> Order:
        authorize(actor, Action.VIEW_ORDER, "Unauthorized: Only admins can view orders")
        return await OrderService._get_order_or_404(db, order_id)

    @staticmethod
    async def update_status(db: AsyncSession, actor: Actor, order_id: int, data: StatusUpdate) -> Order:
        authorize(actor, Action.UPDATE_ORDER_STATUS, "Only admins can update order status")
        order = await OrderService._get_order_or_404(db, order_id)
        target = parse_status(data.status)
        check_transition(order, target)

        previous = order.status
        now = datetime.now(timezone.utc)
        order.status = target.value
        order.status_history.append(
            StatusHistoryEntry(status=target.value, changed_by=actor.id, changed_at=now)
        )
        order = await OrderRepository.save_order(db, order)

        ecomm_order_status_transitions_total.labels(status=target.value).inc()
        logger.info(
            "order_status_updated", order_id=order.id, previous=previous,
            status=order.status, actor_id=actor.id,
        )

        if not await OrderSummaryRepository.set_status(db, order.user_id, order.id, order.status):
            logger.warning("order_summary_missing", order_id=order.id, user_id=order.user_id)

        if target is OrderStatus.PAYMENT_CONFIRMED:
            await OrderService._grant_library(db, order, now)

        return order

    @staticmethod
    async def update_payment(db: AsyncSession, actor: Actor, order_id: int, data: PaymentUpdate) -> Order:
        authorize(actor, Action.UPDATE_PAYMENT_STATUS, "Only admins can update payment status")
        order = await OrderService._get_order_or_404(db, order_id)
        payment = parse_payment_update(data.payment)

        previous = order.payment
        order.payment = payment.value
        order = await OrderRepository.save_order(db, order)
        logger.info(
            "order_payment_updated", order_id=order.id, previous=previous,
            payment=order.payment, actor_id=actor.id,
        )
        return order

    @staticmethod
    async def cancel_order(db: AsyncSession, actor: Actor, order_id: int) -> Order:
        authorize(actor, Action.CANCEL_ORDER)
        user = await UserRepository.get_by_id(db, actor.id)
        if not user:
            raise NotFound("User not found")

        order = await OrderService._get_order_or_404(db, order_id)
        ensure_cancellable(order)

        previous = order.status
        order.status = OrderStatus.CANCELLED.value
        order = await OrderRepository.save_order(db, order)
        ecomm_order_status_transitions_total.labels(status=order.status).inc()
        logger.info("order_cancelled", order_id=order.id, previous=previous, actor_id=actor.id)

        # Best effort: only the caller's own summary is touched
        await OrderSummaryRepository.set_status(db, user.id, order.id, order.status)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, actor: Actor, order_id: int) -> None:
        authorize(actor, Action.DELETE_ORDER, "Unauthorized - Only admins can delete orders")
        order = await OrderService._get_order_or_404(db, order_id)
        owner_id = order.user_id

        await OrderRepository.delete_order(db, order)
        await OrderSummaryRepository.remove(db, owner_id, order_id)
        logger.info("order_deleted", order_id=order_id, user_id=owner_id, actor_id=actor.id)

    @staticmethod
    async def _get_order_or_404(db: AsyncSession, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    @staticmethod
    async def _grant_library(db: AsyncSession, order: Order, now: datetime) -> None:
        """Add every purchased downloadable book the owner does not hold yet."""
        user = await UserRepository.get_by_id(db, order.user_id)
        if not user:
            raise NotFound("User not found")

        owned = {entry.book_id for entry in user.library}
        entries = []
        for item in order.items:
            if item.book_id in owned:
                continue
            book = await BookRepository.get_book_by_id(db, item.book_id)
            if not book or not book.book_file:
                continue
            entries.append(LibraryEntry(book_id=book.id, book=book, book_file=book.book_file, purchased_at=now))
            owned.add(book.id)

        if entries:
            await LibraryRepository.add_entries(db, user, entries)
            ecomm_library_grants_total.inc(len(entries))
            logger.info(
                "library_granted", order_id=order.id, user_id=user.id,
                book_ids=[entry.book_id for entry in entries],
            )
