import structlog
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.settings import ADMIN_EMAILS
from shared.errors import Conflict, Forbidden, NotFound, Unauthorized
from shared.security.jwt_handler import create_access_token
from shared.security.policy import Actor, Role
from services.catalog_service.repository import BookRepository

from .models import CartItem, Favorite, User
from .repository import UserRepository
from .schemas import CartItemCreate, TokenResponse, UserCreate, UserLogin

logger = structlog.get_logger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AccountService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    async def register(db: AsyncSession, data: UserCreate) -> User:
        email = data.email.lower()
        existing = await UserRepository.get_by_email(db, email)
        if existing:
            raise Conflict("Email already registered")

        role = Role.ADMIN if email in ADMIN_EMAILS else Role.USER
        user = User(
            user_name=data.user_name,
            email=email,
            hashed_password=AccountService._hash_password(data.password),
            role=role.value,
            address=data.address,
            phone=data.phone,
        )
        user = await UserRepository.create(db, user)
        logger.info("account_registered", user_id=user.id, role=user.role)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> TokenResponse:
        user = await UserRepository.get_by_email(db, data.email.lower())
        if not user or not AccountService._verify_password(data.password, user.hashed_password):
            raise Unauthorized("Incorrect email or password")
        if not user.is_active:
            raise Forbidden("Account is disabled")
        token = create_access_token(data={"sub": str(user.id), "role": user.role})
        return TokenResponse(access_token=token)

    @staticmethod
    async def get_profile(db: AsyncSession, actor: Actor) -> User:
        user = await UserRepository.get_by_id(db, actor.id)
        if not user:
            raise NotFound("User not found")
        return user

    @staticmethod
    async def add_to_cart(db: AsyncSession, actor: Actor, data: CartItemCreate) -> User:
        user = await AccountService.get_profile(db, actor)
        book = await BookRepository.get_book_by_id(db, data.book_id)
        if not book:
            raise NotFound(f"Book {data.book_id} not found")

        line = next((item for item in user.cart if item.book_id == book.id), None)
        if line:
            line.quantity += data.quantity
        else:
            line = CartItem(book_id=book.id, book=book, quantity=data.quantity, unit_price=book.price)
            user.cart.append(line)
        line.price = line.unit_price * line.quantity
        return await UserRepository.save(db, user)

    @staticmethod
    async def remove_from_cart(db: AsyncSession, actor: Actor, book_id: int) -> User:
        user = await AccountService.get_profile(db, actor)
        line = next((item for item in user.cart if item.book_id == book_id), None)
        if not line:
            raise NotFound(f"Book {book_id} is not in the cart")
        user.cart.remove(line)
        return await UserRepository.save(db, user)

    @staticmethod
    async def add_favorite(db: AsyncSession, actor: Actor, book_id: int) -> User:
        user = await AccountService.get_profile(db, actor)
        if any(fav.book_id == book_id for fav in user.favorites):
            return user
        book = await BookRepository.get_book_by_id(db, book_id)
        if not book:
            raise NotFound(f"Book {book_id} not found")
        user.favorites.append(Favorite(book_id=book.id, book=book))
        return await UserRepository.save(db, user)

    @staticmethod
    async def remove_favorite(db: AsyncSession, actor: Actor, book_id: int) -> User:
        user = await AccountService.get_profile(db, actor)
        favorite = next((fav for fav in user.favorites if fav.book_id == book_id), None)
        if not favorite:
            raise NotFound(f"Book {book_id} is not a favorite")
        user.favorites.remove(favorite)
        return await UserRepository.save(db, user)
