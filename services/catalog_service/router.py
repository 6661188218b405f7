from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import get_db
from .schemas import BookEnvelope, BookListEnvelope
from .service import CatalogService

router = APIRouter(tags=["Catalog"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "catalog", "status": "running"}


@router.get("/", response_model=BookListEnvelope)
async def list_books(db: AsyncSession = Depends(get_db)):
    books = await CatalogService.list_books(db)
    return BookListEnvelope(books=books)


@router.get("/{book_id}", response_model=BookEnvelope)
async def get_book(book_id: int, db: AsyncSession = Depends(get_db)):
    book = await CatalogService.get_book(db, book_id)
    return BookEnvelope(book=book)
