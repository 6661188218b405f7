from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_error_handlers
from shared.observability.setup import setup_observability

from .models import User  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

account_app = FastAPI(
    title="Account Service",
    version="1.0.0",
    description="Registration, JWT login, profile, cart, favorites and library.",
)

setup_observability(account_app, "account_service")
register_error_handlers(account_app)

account_app.include_router(router)
account_app.include_router(public_router)

@account_app.on_event("startup")
async def startup_event() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
