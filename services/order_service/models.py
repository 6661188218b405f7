import enum
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shared.config.database import Base
from services.account_service.models import User  # noqa: F401 — relationship target
from services.catalog_service.models import Book  # noqa: F401 — relationship target


def _utcnow():
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    ORDER_RECEIVED = "ORDER_RECEIVED" # placed, payment not confirmed yet
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PREPARING = "PREPARING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    PICKED_UP = "PICKED_UP"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(str, enum.Enum):
    UNPAID = "UNPAID"
    PENDING = "PENDING"
    PAID = "PAID"


CASH_ON_DELIVERY = "COD"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    shipping_address = Column(String, nullable=False)
    shipping_fee = Column(String(32), nullable=False) # kept as submitted
    payment_method = Column(String(32), nullable=False)
    total_amount = Column(Float, nullable=False) # verified once, at placement
    status = Column(String(32), nullable=False, default=OrderStatus.ORDER_RECEIVED.value)
    payment = Column(String(16), nullable=False, default=PaymentStatus.UNPAID.value)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", lazy="selectin")
    items = relationship(
        "OrderItem", back_populates="order", lazy="selectin",
        cascade="all, delete-orphan", order_by="OrderItem.id",
    )
    status_history = relationship(
        "StatusHistoryEntry", back_populates="order", lazy="selectin",
        cascade="all, delete-orphan", order_by="StatusHistoryEntry.id",
    )

    def __repr__(self):
        return f"<Order(id={self.id}, status={self.status}, payment={self.payment})>"


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False) # catalog unit price at placement

    order = relationship("Order", back_populates="items")
    book = relationship("Book", lazy="selectin")


class StatusHistoryEntry(Base):
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(32), nullable=False)
    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    changed_at = Column(DateTime(timezone=True), default=_utcnow)

    order = relationship("Order", back_populates="status_history")
