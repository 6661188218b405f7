import os
import tempfile
import uuid

# Configuration is read at import time, so it has to be in place first
_DB_PATH = os.path.join(tempfile.gettempdir(), f"book_heaven_test_{uuid.uuid4().hex}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STRICT_ORDER_TRANSITIONS"] = "false"
os.environ["ADMIN_EMAILS"] = "boss@bookheaven.com"
os.environ.pop("OTLP_ENDPOINT", None)

import httpx
import pytest

from main import app
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.security import Role, create_access_token
from services.account_service.models import User
from services.catalog_service.models import Book
from services.catalog_service.repository import BookRepository


@pytest.fixture(scope="session", autouse=True)
def _remove_database_file():
    yield
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


@pytest.fixture(autouse=True)
async def reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    async def _make(role: Role = Role.USER, email: str | None = None) -> User:
        user = User(
            user_name="reader" if role is Role.USER else "boss",
            email=email or f"{uuid.uuid4().hex[:10]}@bookheaven.com",
            hashed_password="not-used-in-tests",
            role=role.value,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_book(db):
    async def _make(price: float = 10.0, book_file: str | None = None, title: str = "A Book") -> Book:
        return await BookRepository.create_book(
            db, Book(title=title, author="Anon", price=price, book_file=book_file)
        )
    return _make


@pytest.fixture
async def customer(make_user):
    return await make_user()


@pytest.fixture
async def admin(make_user):
    return await make_user(role=Role.ADMIN)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def place_order(client):
    """Places an order for the given (book, quantity) lines with a correct total."""
    async def _place(headers, lines, shipping_fee=5.0, payment_method="CARD", total_amount=None):
        if total_amount is None:
            total_amount = sum(book.price * qty for book, qty in lines) + float(shipping_fee)
        payload = {
            "items": [{"book_id": book.id, "quantity": qty} for book, qty in lines],
            "shipping_address": "12 Library Lane",
            "shipping_fee": shipping_fee,
            "payment_method": payment_method,
            "total_amount": total_amount,
        }
        return await client.post("/orders/", json=payload, headers=headers)
    return _place
