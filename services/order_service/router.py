from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import get_db
from shared.config.settings import ORDER_RATE_LIMIT
from shared.security import Actor, get_current_actor, limiter
from .schemas import MessageResponse, OrderCreate, OrderEnvelope, OrderListEnvelope, PaymentUpdate, StatusUpdate
from .service import OrderService

router = APIRouter(tags=["Orders"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
@limiter.limit(ORDER_RATE_LIMIT)
async def place_order(
    request: Request,                          # REQUIRED: slowapi needs this to check IP/Headers
    payload: OrderCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.place_order(db, actor, payload)
    return OrderEnvelope(message="Order placed successfully. Please complete payment.", order=order)


@router.get("/", response_model=OrderListEnvelope)
async def list_orders(actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    orders = await OrderService.list_orders(db, actor)
    return OrderListEnvelope(orders=orders)


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(order_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    order = await OrderService.get_order(db, actor, order_id)
    return OrderEnvelope(order=order)


@router.patch("/{order_id}/cancel", response_model=OrderEnvelope)
async def cancel_order(order_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    order = await OrderService.cancel_order(db, actor, order_id)
    return OrderEnvelope(message="Order canceled successfully", order=order)


@router.patch("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.update_status(db, actor, order_id, payload)
    return OrderEnvelope(message="Order status updated successfully", order=order)


@router.patch("/{order_id}/payment", response_model=OrderEnvelope)
async def update_payment_status(
    order_id: int,
    payload: PaymentUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.update_payment(db, actor, order_id, payload)
    return OrderEnvelope(message="Payment status updated", order=order)


@router.delete("/{order_id}", response_model=MessageResponse)
async def delete_order(order_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    await OrderService.delete_order(db, actor, order_id)
    return MessageResponse(message="Order deleted successfully")
