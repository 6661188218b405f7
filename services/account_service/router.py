from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Actor, get_current_actor

from .schemas import (
    CartItemCreate, LibraryEnvelope, ProfileEnvelope, TokenResponse, UserCreate, UserEnvelope, UserLogin,
)
from .service import AccountService

router = APIRouter(tags=["Accounts"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "account", "status": "running"}


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await AccountService.register(db, payload)
    return UserEnvelope(message="Account created", user=user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and receive a JWT access token",
)
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)):
    return await AccountService.login(db, payload)


@router.get("/me", response_model=ProfileEnvelope, summary="Get the current user's profile")
async def get_me(actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    user = await AccountService.get_profile(db, actor)
    return ProfileEnvelope(user=user)


@router.get("/me/library", response_model=LibraryEnvelope, summary="Books the current user owns")
async def get_library(actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    user = await AccountService.get_profile(db, actor)
    return LibraryEnvelope(library=user.library)


@router.post("/me/cart", response_model=ProfileEnvelope)
async def add_to_cart(
    payload: CartItemCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    user = await AccountService.add_to_cart(db, actor, payload)
    return ProfileEnvelope(message="Book added to cart", user=user)


@router.delete("/me/cart/{book_id}", response_model=ProfileEnvelope)
async def remove_from_cart(
    book_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)
):
    user = await AccountService.remove_from_cart(db, actor, book_id)
    return ProfileEnvelope(message="Book removed from cart", user=user)


@router.post("/me/favorites/{book_id}", response_model=ProfileEnvelope)
async def add_favorite(
    book_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)
):
    user = await AccountService.add_favorite(db, actor, book_id)
    return ProfileEnvelope(message="Book added to favorites", user=user)


@router.delete("/me/favorites/{book_id}", response_model=ProfileEnvelope)
async def remove_favorite(
    book_id: int, actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)
):
    user = await AccountService.remove_favorite(db, actor, book_id)
    return ProfileEnvelope(message="Book removed from favorites", user=user)
