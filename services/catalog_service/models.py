from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String
from shared.config.database import Base

class Book(Base):
    __tablename__ = "books"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_books_price_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=True)
    price = Column(Float, nullable=False)
    genre = Column(String(255), nullable=True)
    book_image = Column(String, nullable=True)
    book_file = Column(String, nullable=True) # downloadable content, granted to the library once paid
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
