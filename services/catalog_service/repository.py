from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Book

class BookRepository:

    @staticmethod
    async def create_book(db: AsyncSession, book: Book):
        db.add(book)
        await db.commit()
        await db.refresh(book)
        return book

    @staticmethod
    async def get_all_books(db: AsyncSession):
        result = await db.execute(select(Book).order_by(Book.created_at.desc(), Book.id.desc()))
        return result.scalars().all()

    @staticmethod
    async def get_book_by_id(db: AsyncSession, book_id: int):
        result = await db.execute(select(Book).where(Book.id == book_id))
        return result.scalars().first()
