from fastapi import FastAPI
from shared.config.database import engine, Base
from shared.errors import register_error_handlers
from shared.observability import setup_observability
from .router import router, public_router
from .models import Book  # noqa: F401 — registers model with SQLAlchemy Base

catalog_app = FastAPI(
    title="Catalog Service",
    version="1.0.0",
    description="Read-only book lookup used by ordering and accounts.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(catalog_app, "catalog_service")
register_error_handlers(catalog_app)

catalog_app.include_router(public_router)
catalog_app.include_router(router)

@catalog_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
