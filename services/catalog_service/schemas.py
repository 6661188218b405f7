from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class BookResponse(BaseModel):
    id: int
    title: str
    author: Optional[str] = None
    price: float
    genre: Optional[str] = None
    book_image: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookEnvelope(BaseModel):
    success: bool = True
    book: BookResponse


class BookListEnvelope(BaseModel):
    success: bool = True
    books: List[BookResponse]
