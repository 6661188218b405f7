from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from services.account_service.schemas import UserResponse
from services.catalog_service.schemas import BookResponse


class OrderItemCreate(BaseModel):
    book_id: int
    quantity: int = Field(default=1, ge=1)


class OrderCreate(BaseModel):
    # Presence is checked by the service so that an empty cart is reported first
    items: List[OrderItemCreate] = []
    shipping_address: Optional[str] = None
    shipping_fee: Optional[Union[float, str]] = None
    payment_method: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, allow_inf_nan=False)


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class PaymentUpdate(BaseModel):
    payment: Optional[str] = None


class OrderItemResponse(BaseModel):
    book_id: int
    quantity: int
    price: float
    book: Optional[BookResponse] = None

    class Config:
        from_attributes = True


class StatusHistoryResponse(BaseModel):
    status: str
    changed_by: Optional[int] = None
    changed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    user: Optional[UserResponse] = None
    items: List[OrderItemResponse]
    shipping_address: str
    shipping_fee: str
    payment_method: str
    total_amount: float
    status: str
    payment: str
    status_history: List[StatusHistoryResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    order: OrderResponse


class OrderListEnvelope(BaseModel):
    success: bool = True
    orders: List[OrderResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
