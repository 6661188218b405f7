from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import LibraryEntry, OrderSummary, User


class UserRepository:

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        # populate_existing reloads collections already held by this session
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    @staticmethod
    async def save(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        return await UserRepository.get_by_id(db, user.id)


class OrderSummaryRepository:

    @staticmethod
    async def add(db: AsyncSession, summary: OrderSummary) -> OrderSummary:
        db.add(summary)
        await db.commit()
        return summary

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> list[OrderSummary]:
        result = await db.execute(
            select(OrderSummary)
            .where(OrderSummary.user_id == user_id)
            .order_by(OrderSummary.placed_at, OrderSummary.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def set_status(db: AsyncSession, user_id: int, order_id: int, status: str) -> bool:
        """Mirror an order's status onto the account's summary. False if no summary matched."""
        result = await db.execute(
            update(OrderSummary)
            .where(OrderSummary.user_id == user_id, OrderSummary.order_id == order_id)
            .values(status=status)
        )
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def remove(db: AsyncSession, user_id: int, order_id: int) -> None:
        await db.execute(
            delete(OrderSummary).where(
                OrderSummary.user_id == user_id, OrderSummary.order_id == order_id
            )
        )
        await db.commit()


class LibraryRepository:

    @staticmethod
    async def add_entries(db: AsyncSession, user: User, entries: list[LibraryEntry]) -> User:
        user.library.extend(entries)
        await db.commit()
        return user
