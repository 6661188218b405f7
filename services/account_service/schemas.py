from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from services.catalog_service.schemas import BookResponse


class UserCreate(BaseModel):
    user_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)
    address: Optional[str] = None
    phone: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: int
    user_name: str
    email: str
    role: str
    address: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CartItemCreate(BaseModel):
    book_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemResponse(BaseModel):
    book_id: int
    quantity: int
    unit_price: float
    price: float
    book: Optional[BookResponse] = None

    class Config:
        from_attributes = True


class FavoriteResponse(BaseModel):
    book_id: int
    book: Optional[BookResponse] = None

    class Config:
        from_attributes = True


class OrderSummaryResponse(BaseModel):
    order_id: int
    status: str
    placed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LibraryEntryResponse(BaseModel):
    book_id: int
    book_file: str
    purchased_at: Optional[datetime] = None
    book: Optional[BookResponse] = None

    class Config:
        from_attributes = True


class ProfileResponse(UserResponse):
    cart: List[CartItemResponse] = []
    favorites: List[FavoriteResponse] = []
    orders: List[OrderSummaryResponse] = []


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse


class ProfileEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: ProfileResponse


class LibraryEnvelope(BaseModel):
    success: bool = True
    library: List[LibraryEntryResponse]
