from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound
from .repository import BookRepository

class CatalogService:

    @staticmethod
    async def list_books(db: AsyncSession):
        return await BookRepository.get_all_books(db)

    @staticmethod
    async def get_book(db: AsyncSession, book_id: int):
        book = await BookRepository.get_book_by_id(db, book_id)
        if not book:
            raise NotFound(f"Book {book_id} not found")
        return book
