from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from shared.config.database import Base
from shared.security.policy import Role
from services.catalog_service.models import Book  # noqa: F401 — relationship target


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=Role.USER.value)
    address = Column(String, nullable=True)
    phone = Column(String(32), nullable=True)
    profile_picture = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    cart = relationship("CartItem", back_populates="user", lazy="selectin", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="user", lazy="selectin", cascade="all, delete-orphan")
    orders = relationship(
        "OrderSummary", back_populates="user", lazy="selectin",
        cascade="all, delete-orphan", order_by="OrderSummary.placed_at",
    )
    library = relationship(
        "LibraryEntry", back_populates="user", lazy="selectin",
        cascade="all, delete-orphan", order_by="LibraryEntry.purchased_at",
    )


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_cart_items_user_book"),
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Float, nullable=False)
    price = Column(Float, nullable=False) # unit_price * quantity

    user = relationship("User", back_populates="cart")
    book = relationship("Book", lazy="selectin")


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_favorites_user_book"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)

    user = relationship("User", back_populates="favorites")
    book = relationship("Book", lazy="selectin")


class OrderSummary(Base):
    """Denormalized copy of an order's status kept on the account for fast listing."""
    __tablename__ = "order_summaries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain reference: the order store and this copy are written independently
    order_id = Column(Integer, nullable=False, index=True)
    status = Column(String(32), nullable=False)
    placed_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="orders")


class LibraryEntry(Base):
    __tablename__ = "library_entries"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_library_entries_user_book"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    book_file = Column(String, nullable=False)
    purchased_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="library")
    book = relationship("Book", lazy="selectin")
