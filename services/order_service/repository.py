from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Order

class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order):
        db.add(order)
        await db.commit()
        return await OrderRepository.get_order(db, order.id)

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        result = await db.execute(
            select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def get_all_orders(db: AsyncSession):
        result = await db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()))
        return result.scalars().all()

    @staticmethod
    async def get_orders_by_ids(db: AsyncSession, order_ids: list[int]):
        if not order_ids:
            return []
        result = await db.execute(select(Order).where(Order.id.in_(order_ids)))
        return result.scalars().all()

    @staticmethod
    async def save_order(db: AsyncSession, order: Order):
        db.add(order)
        await db.commit()
        return await OrderRepository.get_order(db, order.id)

    @staticmethod
    async def delete_order(db: AsyncSession, order: Order):
        await db.delete(order)
        await db.commit()
